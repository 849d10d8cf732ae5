"""SQLite implementation of QuestionRepository."""
from __future__ import annotations
import json
import sqlite3
from collections import defaultdict
from typing import Dict, List, Optional

from courseqa.domain.qa.models import Question, QueueItem, Response
from courseqa.domain.qa.status import derive_question_status
from courseqa.persistence.db import get_connection
from courseqa.persistence.interfaces.question_repository import QuestionRepository


def _row_to_question(row, review_statuses: List[str]) -> Question:
    return Question(
        id=row["id"],
        course_id=row["course_id"],
        author_id=row["author_id"],
        title=row["title"],
        body=row["body"],
        format=row["format"],
        tags=json.loads(row["tags"] or "[]"),
        created_at=row["created_at"],
        votes=row["votes"],
        status=derive_question_status(review_statuses),
        response_count=len(review_statuses),
    )


def _row_to_response(row) -> Response:
    return Response(
        id=row["id"],
        question_id=row["question_id"],
        author_kind=row["author_kind"],
        author_id=row["author_id"],
        body=row["body"],
        original_body=row["original_body"],
        review_status=row["review_status"],
        reviewed_by=row["reviewed_by"],
        reviewed_at=row["reviewed_at"],
        created_at=row["created_at"],
    )


def _statuses_by_question(conn: sqlite3.Connection, course_id: str) -> Dict[str, List[str]]:
    rows = conn.execute(
        """
        SELECT r.question_id, r.review_status FROM responses r
        JOIN questions q ON q.id = r.question_id
        WHERE q.course_id = ?
        ORDER BY r.rowid ASC
        """,
        (course_id,),
    ).fetchall()
    grouped: Dict[str, List[str]] = defaultdict(list)
    for r in rows:
        grouped[r["question_id"]].append(r["review_status"])
    return grouped


class SqliteQuestionRepository(QuestionRepository):
    """
    Questions never store their status. Every read recomputes it from the
    response rows visible to the same connection, so a committed review
    decision is reflected by the very next read.
    """

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def save_question(self, question: Question) -> None:
        conn = get_connection(self._db_path)
        conn.execute(
            """
            INSERT INTO questions (id, course_id, author_id, title, body, format, tags, votes, created_at)
            VALUES (:id, :course_id, :author_id, :title, :body, :format, :tags, :votes, :created_at)
            """,
            {
                "id": question.id,
                "course_id": question.course_id,
                "author_id": question.author_id,
                "title": question.title,
                "body": question.body,
                "format": question.format,
                "tags": json.dumps(question.tags),
                "votes": question.votes,
                "created_at": question.created_at,
            },
        )
        conn.commit()
        conn.close()

    def get_question(self, question_id: str) -> Optional[Question]:
        conn = get_connection(self._db_path)
        row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
        if not row:
            conn.close()
            return None
        statuses = [
            r["review_status"]
            for r in conn.execute(
                "SELECT review_status FROM responses WHERE question_id = ? ORDER BY rowid ASC",
                (question_id,),
            ).fetchall()
        ]
        conn.close()
        return _row_to_question(row, statuses)

    def list_questions(self, course_id: str) -> List[Question]:
        conn = get_connection(self._db_path)
        # One read transaction so questions and statuses come from the same snapshot
        conn.execute("BEGIN")
        rows = conn.execute(
            "SELECT * FROM questions WHERE course_id = ? ORDER BY rowid ASC",
            (course_id,),
        ).fetchall()
        statuses = _statuses_by_question(conn, course_id)
        conn.rollback()
        conn.close()
        return [_row_to_question(r, statuses.get(r["id"], [])) for r in rows]

    def add_vote(self, question_id: str, voter_id: str, voted_at: str) -> bool:
        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    "INSERT INTO question_votes (question_id, voter_id, created_at) VALUES (?, ?, ?)",
                    (question_id, voter_id, voted_at),
                )
                conn.execute("UPDATE questions SET votes = votes + 1 WHERE id = ?", (question_id,))
        except sqlite3.IntegrityError:
            return False
        finally:
            conn.close()
        return True

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------
    def save_response(self, response: Response) -> None:
        conn = get_connection(self._db_path)
        conn.execute(
            """
            INSERT INTO responses (
                id, question_id, author_kind, author_id, body, original_body,
                review_status, reviewed_by, reviewed_at, created_at
            ) VALUES (
                :id, :question_id, :author_kind, :author_id, :body, :original_body,
                :review_status, :reviewed_by, :reviewed_at, :created_at
            )
            """,
            {
                "id": response.id,
                "question_id": response.question_id,
                "author_kind": response.author_kind,
                "author_id": response.author_id,
                "body": response.body,
                "original_body": response.original_body,
                "review_status": response.review_status,
                "reviewed_by": response.reviewed_by,
                "reviewed_at": response.reviewed_at,
                "created_at": response.created_at,
            },
        )
        conn.commit()
        conn.close()

    def get_response(self, response_id: str) -> Optional[Response]:
        conn = get_connection(self._db_path)
        row = conn.execute("SELECT * FROM responses WHERE id = ?", (response_id,)).fetchone()
        conn.close()
        return _row_to_response(row) if row else None

    def list_responses(self, question_id: str) -> List[Response]:
        conn = get_connection(self._db_path)
        rows = conn.execute(
            "SELECT * FROM responses WHERE question_id = ? ORDER BY rowid ASC",
            (question_id,),
        ).fetchall()
        conn.close()
        return [_row_to_response(r) for r in rows]

    def list_queue(self, course_id: str) -> List[QueueItem]:
        conn = get_connection(self._db_path)
        conn.execute("BEGIN")
        question_rows = {
            r["id"]: r
            for r in conn.execute("SELECT * FROM questions WHERE course_id = ?", (course_id,)).fetchall()
        }
        response_rows = conn.execute(
            """
            SELECT r.* FROM responses r
            JOIN questions q ON q.id = r.question_id
            WHERE q.course_id = ?
            ORDER BY r.rowid ASC
            """,
            (course_id,),
        ).fetchall()
        statuses = _statuses_by_question(conn, course_id)
        conn.rollback()
        conn.close()

        questions = {
            question_id: _row_to_question(row, statuses.get(question_id, []))
            for question_id, row in question_rows.items()
        }
        return [QueueItem(response=_row_to_response(r), question=questions[r["question_id"]]) for r in response_rows]

    def commit_review(self, response: Response, expected_status: str, new_body: Optional[str] = None) -> bool:
        conn = get_connection(self._db_path)
        cur = conn.execute(
            """
            UPDATE responses
               SET review_status = :review_status,
                   body          = COALESCE(:new_body, body),
                   reviewed_by   = :reviewed_by,
                   reviewed_at   = :reviewed_at
             WHERE id = :id AND review_status = :expected_status
            """,
            {
                "id": response.id,
                "review_status": response.review_status,
                "new_body": new_body,
                "reviewed_by": response.reviewed_by,
                "reviewed_at": response.reviewed_at,
                "expected_status": expected_status,
            },
        )
        conn.commit()
        conn.close()
        return cur.rowcount == 1

    def update_body(self, response: Response, expected_status: str) -> bool:
        conn = get_connection(self._db_path)
        cur = conn.execute(
            "UPDATE responses SET body = ? WHERE id = ? AND review_status = ?",
            (response.body, response.id, expected_status),
        )
        conn.commit()
        conn.close()
        return cur.rowcount == 1
