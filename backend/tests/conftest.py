"""Shared fixtures: a fresh SQLite file per test, wired services and a TestClient."""
import pytest
from fastapi.testclient import TestClient

from courseqa import container
from courseqa.api.auth import create_access_token
from courseqa.application.course_app_service import CourseAppService
from courseqa.application.question_app_service import QuestionAppService
from courseqa.application.review_app_service import ReviewAppService
from courseqa.core import config
from courseqa.domain.qa.models import Actor
from courseqa.persistence.db import init_db
from courseqa.persistence.repositories.sqlite.sqlite_course_repository import SqliteCourseRepository
from courseqa.persistence.repositories.sqlite.sqlite_question_repository import SqliteQuestionRepository

PROFESSOR = Actor(id="prof-ada", role="professor", username="ada")
OTHER_PROFESSOR = Actor(id="prof-grace", role="professor", username="grace")
STUDENT = Actor(id="stu-alex", role="student", username="alex")
OUTSIDER = Actor(id="stu-maria", role="student", username="maria")
AI = Actor(id="ai-drafter", role="ai", username="drafter")


def auth_headers(actor: Actor) -> dict:
    token = create_access_token(actor.id, actor.role, actor.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "courseqa.db")
    monkeypatch.setattr(config, "DATABASE_PATH", path)
    init_db()
    container.clear_caches()
    yield path
    container.clear_caches()


@pytest.fixture
def courses(db_path):
    return CourseAppService(repo=SqliteCourseRepository(db_path))


@pytest.fixture
def question_repo(db_path):
    return SqliteQuestionRepository(db_path)


@pytest.fixture
def questions(question_repo, courses):
    return QuestionAppService(repo=question_repo, courses=courses)


@pytest.fixture
def reviews(question_repo, courses):
    return ReviewAppService(repo=question_repo, courses=courses)


@pytest.fixture
def course(courses):
    created = courses.create_course(PROFESSOR, {"title": "Control Systems", "description": "EE 341"}).unwrap()
    courses.join_course(STUDENT, created.join_code).unwrap()
    return created


@pytest.fixture
def question(questions, course):
    return questions.create_question(STUDENT, course.id, {
        "title": "How do eigenvalues relate to stability?",
        "body": "Why do negative real parts of eigenvalues guarantee stability?",
        "format": "plain-text",
        "tags": ["Control Theory", "Eigenvalues"],
    }).unwrap()


@pytest.fixture
def pending_response(questions, question):
    return questions.create_response(
        AI, question.id, "ai-generated",
        "Negative real parts make the e^(λt) terms decay, so the system returns to equilibrium.",
    ).unwrap()


@pytest.fixture
def client(db_path):
    from courseqa.main import app
    return TestClient(app)
