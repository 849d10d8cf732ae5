"""SQLite implementation of CourseRepository."""
from __future__ import annotations
import sqlite3
from typing import List, Optional

from courseqa.domain.qa.models import Course, Enrollment
from courseqa.persistence.db import get_connection
from courseqa.persistence.interfaces.course_repository import CourseRepository


def _row_to_course(row) -> Course:
    return Course(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        professor_id=row["professor_id"],
        join_code=row["join_code"],
        state=row["state"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SqliteCourseRepository(CourseRepository):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def insert_course(self, course: Course) -> bool:
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                """
                INSERT INTO courses (id, title, description, professor_id, join_code, state, created_at, updated_at)
                VALUES (:id, :title, :description, :professor_id, :join_code, :state, :created_at, :updated_at)
                """,
                {
                    "id": course.id,
                    "title": course.title,
                    "description": course.description,
                    "professor_id": course.professor_id,
                    "join_code": course.join_code,
                    "state": course.state,
                    "created_at": course.created_at,
                    "updated_at": course.updated_at,
                },
            )
            conn.commit()
        except sqlite3.IntegrityError:
            return False
        finally:
            conn.close()
        return True

    def update_state(self, course: Course, expected_state: str) -> bool:
        conn = get_connection(self._db_path)
        cur = conn.execute(
            "UPDATE courses SET state = ?, updated_at = ? WHERE id = ? AND state = ?",
            (course.state, course.updated_at, course.id, expected_state),
        )
        conn.commit()
        conn.close()
        return cur.rowcount == 1

    def get_by_id(self, course_id: str) -> Optional[Course]:
        conn = get_connection(self._db_path)
        row = conn.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()
        conn.close()
        return _row_to_course(row) if row else None

    def get_by_join_code(self, join_code: str) -> Optional[Course]:
        conn = get_connection(self._db_path)
        row = conn.execute("SELECT * FROM courses WHERE join_code = ?", (join_code,)).fetchone()
        conn.close()
        return _row_to_course(row) if row else None

    def list_for_member(self, user_id: str) -> List[Course]:
        conn = get_connection(self._db_path)
        rows = conn.execute(
            """
            SELECT * FROM courses
            WHERE professor_id = :user_id
               OR id IN (SELECT course_id FROM enrollments WHERE student_id = :user_id)
            ORDER BY created_at ASC, rowid ASC
            """,
            {"user_id": user_id},
        ).fetchall()
        conn.close()
        return [_row_to_course(r) for r in rows]

    def add_enrollment(self, enrollment: Enrollment) -> bool:
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                "INSERT INTO enrollments (course_id, student_id, joined_at) VALUES (?, ?, ?)",
                (enrollment.course_id, enrollment.student_id, enrollment.joined_at),
            )
            conn.commit()
        except sqlite3.IntegrityError:
            return False
        finally:
            conn.close()
        return True

    def is_enrolled(self, course_id: str, student_id: str) -> bool:
        conn = get_connection(self._db_path)
        row = conn.execute(
            "SELECT 1 FROM enrollments WHERE course_id = ? AND student_id = ?",
            (course_id, student_id),
        ).fetchone()
        conn.close()
        return row is not None
