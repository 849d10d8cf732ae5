"""Dependency injection container — wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from courseqa.application.course_app_service import CourseAppService
from courseqa.application.generation_app_service import AnswerGenerator, GenerationAppService
from courseqa.application.question_app_service import QuestionAppService
from courseqa.application.review_app_service import ReviewAppService
from courseqa.persistence.repositories.sqlite.sqlite_course_repository import SqliteCourseRepository
from courseqa.persistence.repositories.sqlite.sqlite_question_repository import SqliteQuestionRepository


@lru_cache(maxsize=1)
def get_course_repo() -> SqliteCourseRepository:
    return SqliteCourseRepository()


@lru_cache(maxsize=1)
def get_question_repo() -> SqliteQuestionRepository:
    return SqliteQuestionRepository()


@lru_cache(maxsize=1)
def get_course_app_service() -> CourseAppService:
    return CourseAppService(repo=get_course_repo())


@lru_cache(maxsize=1)
def get_question_app_service() -> QuestionAppService:
    return QuestionAppService(repo=get_question_repo(), courses=get_course_app_service())


@lru_cache(maxsize=1)
def get_review_app_service() -> ReviewAppService:
    return ReviewAppService(repo=get_question_repo(), courses=get_course_app_service())


@lru_cache(maxsize=1)
def get_answer_generator() -> AnswerGenerator:
    return AnswerGenerator()


@lru_cache(maxsize=1)
def get_generation_app_service() -> GenerationAppService:
    return GenerationAppService(questions=get_question_app_service(), generator=get_answer_generator())


def clear_caches() -> None:
    for provider in (
        get_course_repo,
        get_question_repo,
        get_course_app_service,
        get_question_app_service,
        get_review_app_service,
        get_answer_generator,
        get_generation_app_service,
    ):
        provider.cache_clear()
