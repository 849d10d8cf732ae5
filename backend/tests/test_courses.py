"""Course creation, join codes, membership and lifecycle."""
import string

from courseqa.domain.common.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from courseqa.domain.qa import service as domain_service

from conftest import OUTSIDER, PROFESSOR, STUDENT


def test_create_course_issues_a_join_code(courses):
    course = courses.create_course(PROFESSOR, {"title": "Signals & Systems"}).unwrap()
    assert course.state == "active"
    assert course.professor_id == PROFESSOR.id
    assert len(course.join_code) == 6
    assert set(course.join_code) <= set(string.ascii_uppercase + string.digits)


def test_students_cannot_create_courses(courses):
    result = courses.create_course(STUDENT, {"title": "Shadow course"})
    assert isinstance(result.error, AuthorizationError)


def test_course_needs_a_title(courses):
    result = courses.create_course(PROFESSOR, {"title": "  "})
    assert isinstance(result.error, ValidationError)
    assert result.error.field == "title"


def test_join_code_collision_is_regenerated(courses, monkeypatch):
    codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    monkeypatch.setattr(
        "courseqa.application.course_app_service.generate_join_code",
        lambda length: next(codes),
    )
    first = courses.create_course(PROFESSOR, {"title": "First"}).unwrap()
    second = courses.create_course(PROFESSOR, {"title": "Second"}).unwrap()
    assert first.join_code == "AAAAAA"
    assert second.join_code == "BBBBBB"


def test_generate_join_code_length():
    assert len(domain_service.generate_join_code(8)) == 8


def test_join_by_code(courses):
    course = courses.create_course(PROFESSOR, {"title": "Statistics"}).unwrap()
    enrollment = courses.join_course(OUTSIDER, course.join_code).unwrap()
    assert enrollment.course_id == course.id
    assert courses.get_course(OUTSIDER, course.id).unwrap().id == course.id
    assert [c.id for c in courses.list_courses(OUTSIDER)] == [course.id]


def test_join_twice_conflicts(courses, course):
    assert isinstance(courses.join_course(STUDENT, course.join_code).error, ConflictError)


def test_join_unknown_code(courses):
    assert isinstance(courses.join_course(STUDENT, "NOPE00").error, NotFoundError)


def test_non_members_cannot_view(courses, course):
    assert isinstance(courses.get_course(OUTSIDER, course.id).error, AuthorizationError)


def test_draft_course_cannot_be_joined_until_active(courses):
    course = courses.create_course(PROFESSOR, {"title": "Next term", "state": "draft"}).unwrap()
    assert isinstance(courses.join_course(STUDENT, course.join_code).error, ConflictError)

    courses.change_state(PROFESSOR, course.id, "active").unwrap()
    assert courses.join_course(STUDENT, course.join_code).is_success


def test_archiving_is_final_and_owner_only(courses, course):
    assert isinstance(courses.change_state(STUDENT, course.id, "archived").error, AuthorizationError)
    archived = courses.change_state(PROFESSOR, course.id, "archived").unwrap()
    assert archived.state == "archived"
    assert isinstance(courses.change_state(PROFESSOR, course.id, "active").error, ConflictError)


def test_archived_course_refuses_questions(courses, questions, course):
    courses.change_state(PROFESSOR, course.id, "archived").unwrap()
    result = questions.create_question(STUDENT, course.id, {"title": "Late", "body": "Question"})
    assert isinstance(result.error, ValidationError)
    assert result.error.field == "course_id"
