"""Approval queue transitions against a real SQLite store."""
import threading

from courseqa.domain.common.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError

from conftest import AI, OTHER_PROFESSOR, OUTSIDER, PROFESSOR, STUDENT


def _status_of(questions, question_id):
    return questions.get_question(STUDENT, question_id).unwrap().status


# ------------------------------------------------------------------
# Entity store
# ------------------------------------------------------------------
def test_new_question_is_unanswered(questions, question):
    stored = questions.get_question(STUDENT, question.id).unwrap()
    assert stored.status == "unanswered"
    assert stored.response_count == 0
    assert stored.tags == ["Control Theory", "Eigenvalues"]


def test_new_response_is_pending_and_marks_question_pending(questions, question, pending_response):
    assert pending_response.review_status == "pending"
    assert pending_response.original_body == pending_response.body
    assert _status_of(questions, question.id) == "pending"


def test_response_for_missing_question(questions):
    result = questions.create_response(AI, "no-such-question", "ai-generated", "text")
    assert isinstance(result.error, NotFoundError)


def test_question_in_unknown_course(questions):
    result = questions.create_question(STUDENT, "no-such-course", {"title": "t", "body": "b"})
    assert isinstance(result.error, NotFoundError)


def test_outsider_cannot_ask(questions, course):
    result = questions.create_question(OUTSIDER, course.id, {"title": "t", "body": "b"})
    assert isinstance(result.error, AuthorizationError)


def test_ai_cannot_pose_as_professor(questions, question):
    result = questions.create_response(AI, question.id, "professor", "text")
    assert isinstance(result.error, AuthorizationError)


# ------------------------------------------------------------------
# Decisions
# ------------------------------------------------------------------
def test_approve_answers_the_question(reviews, questions, question, pending_response):
    outcome = reviews.approve(PROFESSOR, pending_response.id).unwrap()
    assert outcome.response.review_status == "approved"
    assert outcome.response.reviewed_by == PROFESSOR.id
    assert outcome.response.reviewed_at
    assert outcome.question.status == "answered"
    assert _status_of(questions, question.id) == "answered"


def test_approve_twice_conflicts_and_changes_nothing(reviews, pending_response):
    first = reviews.approve(PROFESSOR, pending_response.id).unwrap()
    second = reviews.approve(PROFESSOR, pending_response.id)
    assert isinstance(second.error, ConflictError)
    current = reviews.get_response(PROFESSOR, pending_response.id).unwrap()
    assert current.review_status == "approved"
    assert current.reviewed_at == first.response.reviewed_at


def test_reject_keeps_response_but_question_reads_unanswered(reviews, questions, question, pending_response):
    rejected = reviews.reject(PROFESSOR, pending_response.id).unwrap()
    assert rejected.response.review_status == "rejected"
    stored = questions.get_question(STUDENT, question.id).unwrap()
    assert stored.status == "unanswered"
    assert stored.response_count == 1


def test_approved_answer_outranks_other_pending_candidates(reviews, questions, question, pending_response):
    questions.create_response(AI, question.id, "ai-generated", "A second draft.").unwrap()
    questions.create_response(AI, question.id, "ai-generated", "A third draft.").unwrap()
    reviews.approve(PROFESSOR, pending_response.id).unwrap()
    assert _status_of(questions, question.id) == "answered"


def test_edit_and_approve_publishes_new_text_with_audit(reviews, pending_response):
    outcome = reviews.edit_and_approve(PROFESSOR, pending_response.id, "new text").unwrap()
    stored = reviews.get_response(PROFESSOR, pending_response.id).unwrap()
    assert outcome.question.status == "answered"
    assert stored.review_status == "approved"
    assert stored.body == "new text"
    assert stored.original_body == pending_response.body
    assert stored.edited


def test_edit_and_approve_after_reject_conflicts(reviews, pending_response):
    reviews.reject(PROFESSOR, pending_response.id).unwrap()
    result = reviews.edit_and_approve(PROFESSOR, pending_response.id, "new text")
    assert isinstance(result.error, ConflictError)
    assert reviews.get_response(PROFESSOR, pending_response.id).unwrap().body == pending_response.body


def test_edit_and_approve_needs_text(reviews, pending_response):
    result = reviews.edit_and_approve(PROFESSOR, pending_response.id, "")
    assert isinstance(result.error, ValidationError)
    assert reviews.get_response(PROFESSOR, pending_response.id).unwrap().review_status == "pending"


def test_update_content_keeps_status_and_audit(reviews, questions, question, pending_response):
    revised = reviews.update_response_content(PROFESSOR, pending_response.id, "Clearer draft.").unwrap()
    assert revised.review_status == "pending"
    stored = reviews.get_response(PROFESSOR, pending_response.id).unwrap()
    assert stored.body == "Clearer draft."
    assert stored.original_body == pending_response.body
    assert _status_of(questions, question.id) == "pending"

    reviews.approve(PROFESSOR, pending_response.id).unwrap()
    result = reviews.update_response_content(PROFESSOR, pending_response.id, "After the fact.")
    assert isinstance(result.error, ConflictError)


def test_only_owning_professor_decides(reviews, pending_response):
    for actor in (STUDENT, OTHER_PROFESSOR, AI):
        result = reviews.approve(actor, pending_response.id)
        assert isinstance(result.error, AuthorizationError)
    assert reviews.get_response(PROFESSOR, pending_response.id).unwrap().review_status == "pending"


def test_unknown_response(reviews):
    assert isinstance(reviews.reject(PROFESSOR, "missing").error, NotFoundError)


# ------------------------------------------------------------------
# Concurrency
# ------------------------------------------------------------------
def test_concurrent_approve_and_reject_exactly_one_wins(reviews, questions, question):
    for attempt in range(5):
        response = questions.create_response(AI, question.id, "ai-generated", f"draft {attempt}").unwrap()
        barrier = threading.Barrier(2)
        results = {}

        def decide(name, action):
            barrier.wait()
            results[name] = action(PROFESSOR, response.id)

        threads = [
            threading.Thread(target=decide, args=("approved", reviews.approve)),
            threading.Thread(target=decide, args=("rejected", reviews.reject)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [name for name, result in results.items() if result.is_success]
        losers = [result for result in results.values() if not result.is_success]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0].error, ConflictError)
        final = reviews.get_response(PROFESSOR, response.id).unwrap()
        assert final.review_status == winners[0]


def test_concurrent_edit_approve_and_approve_exactly_one_wins(reviews, questions, question):
    for attempt in range(5):
        response = questions.create_response(AI, question.id, "ai-generated", f"draft {attempt}").unwrap()
        barrier = threading.Barrier(2)
        results = {}

        def decide(name, action):
            barrier.wait()
            results[name] = action()

        threads = [
            threading.Thread(target=decide, args=("approve", lambda: reviews.approve(PROFESSOR, response.id))),
            threading.Thread(target=decide, args=(
                "edit", lambda: reviews.edit_and_approve(PROFESSOR, response.id, f"corrected {attempt}"),
            )),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [name for name, result in results.items() if result.is_success]
        losers = [result for result in results.values() if not result.is_success]
        assert len(winners) == 1
        assert isinstance(losers[0].error, ConflictError)
        final = reviews.get_response(PROFESSOR, response.id).unwrap()
        assert final.review_status == "approved"
        expected_body = f"corrected {attempt}" if winners == ["edit"] else f"draft {attempt}"
        assert final.body == expected_body
        assert final.original_body == f"draft {attempt}"


def test_approve_keeps_a_revision_committed_after_it_loaded(reviews, question_repo, pending_response):
    # Reviewer A has the response open; reviewer B revises it before A approves.
    stale = question_repo.get_response(pending_response.id)
    reviews.update_response_content(PROFESSOR, pending_response.id, "B's revision").unwrap()

    stale.review_status = "approved"
    stale.reviewed_by = PROFESSOR.id
    assert question_repo.commit_review(stale, expected_status="pending")

    stored = question_repo.get_response(pending_response.id)
    assert stored.review_status == "approved"
    assert stored.body == "B's revision"
    assert stored.original_body == pending_response.body


def test_approve_publishes_the_latest_revision(reviews, pending_response):
    reviews.update_response_content(PROFESSOR, pending_response.id, "Revised text.").unwrap()
    outcome = reviews.approve(PROFESSOR, pending_response.id).unwrap()
    assert outcome.response.body == "Revised text."
    assert outcome.response.edited
    assert reviews.get_response(PROFESSOR, pending_response.id).unwrap().body == "Revised text."


def test_reject_keeps_a_revision_committed_after_it_loaded(reviews, question_repo, pending_response):
    stale = question_repo.get_response(pending_response.id)
    reviews.update_response_content(PROFESSOR, pending_response.id, "B's revision").unwrap()

    stale.review_status = "rejected"
    assert question_repo.commit_review(stale, expected_status="pending")
    assert question_repo.get_response(pending_response.id).body == "B's revision"


# ------------------------------------------------------------------
# Review queue
# ------------------------------------------------------------------
def test_queue_reflects_decisions_without_extra_steps(reviews, questions, course, question, pending_response):
    second = questions.create_response(AI, question.id, "ai-generated", "Another draft.").unwrap()
    reviews.approve(PROFESSOR, pending_response.id).unwrap()

    pending = reviews.review_queue(PROFESSOR, course.id, tab="pending").unwrap()
    assert [i.response.id for i in pending] == [second.id]
    assert pending[0].question.title == question.title
    assert pending[0].question.status == "answered"

    everything = reviews.review_queue(PROFESSOR, course.id, tab="all", q="EIGENVALUES").unwrap()
    assert [i.response.id for i in everything] == [pending_response.id, second.id]


def test_students_cannot_see_the_queue(reviews, course):
    assert isinstance(reviews.review_queue(STUDENT, course.id).error, AuthorizationError)


def test_students_only_see_published_answers(reviews, questions, question, pending_response):
    questions.create_response(AI, question.id, "ai-generated", "Unreviewed draft.").unwrap()
    reviews.approve(PROFESSOR, pending_response.id).unwrap()

    _, visible = questions.get_question_detail(STUDENT, question.id).unwrap()
    assert [r.id for r in visible] == [pending_response.id]
    _, everything = questions.get_question_detail(PROFESSOR, question.id).unwrap()
    assert len(everything) == 2


# ------------------------------------------------------------------
# Votes and browse
# ------------------------------------------------------------------
def test_one_vote_per_member(questions, question):
    assert questions.vote(STUDENT, question.id).unwrap().votes == 1
    assert isinstance(questions.vote(STUDENT, question.id).error, ConflictError)
    assert questions.vote(PROFESSOR, question.id).unwrap().votes == 2


def test_browse_filters_by_derived_status(reviews, questions, course, question, pending_response):
    lonely = questions.create_question(STUDENT, course.id, {
        "title": "PID tuning in Python", "body": "How do I pick the gains?", "format": "code",
    }).unwrap()
    unanswered = questions.browse(STUDENT, course.id, status="unanswered").unwrap()
    assert [q.id for q in unanswered] == [lonely.id]

    reviews.approve(PROFESSOR, pending_response.id).unwrap()
    answered = questions.browse(STUDENT, course.id, status="answered").unwrap()
    assert [q.id for q in answered] == [question.id]
