"""Answer drafting via an LLM, and queuing of its output as pending responses."""
from __future__ import annotations
import asyncio
from typing import Optional

import requests

from courseqa.application.question_app_service import QuestionAppService
from courseqa.core import config
from courseqa.core.logging import get_logger
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Actor, Question, Response

logger = get_logger(__name__)

_FORMAT_HINTS = {
    "plain-text": "The question is plain text.",
    "math-markup": "The question uses LaTeX math markup; answer with LaTeX where helpful.",
    "code": "The question contains source code; use fenced code blocks in the answer.",
}


class AnswerGenerator:
    """OpenRouter-compatible chat completion client producing one answer draft per question."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else config.OPENROUTER_API_KEY
        self.url = url or config.OPENROUTER_URL
        self.model = model or config.OPENROUTER_MODEL
        self.request_timeout = request_timeout or config.GENERATION_TIMEOUT_SECONDS

    def build_payload(self, question: Question) -> dict:
        prompt = (
            f"Title: {question.title}\n"
            f"Tags: {', '.join(question.tags) or 'none'}\n"
            f"{_FORMAT_HINTS.get(question.format, '')}\n\n"
            f"{question.body}"
        )
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": "You are a teaching assistant answering a student's course question. "
                               "Be accurate and concise; a professor reviews every answer before students see it.",
                },
                {"role": "user", "content": prompt},
            ],
        }

    def generate(self, question: Question) -> Optional[str]:
        """Return the drafted answer text, or None if the model produced nothing usable."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        response = requests.post(
            self.url,
            headers=headers,
            json=self.build_payload(question),
            timeout=self.request_timeout,
        )
        response.raise_for_status()
        content = response.json()["choices"][0]["message"]["content"]
        if not isinstance(content, str):
            logger.warning("Generator returned non-text content of type %s", type(content).__name__)
            return None
        return content.strip() or None


class GenerationAppService:
    """
    Ask the generator for a candidate and queue it as a pending ai-generated
    response. A timeout, a failed call or a cancellation queues nothing:
    the response row is only written after a complete candidate arrives.
    """

    def __init__(self, questions: QuestionAppService, generator: AnswerGenerator, timeout: Optional[float] = None):
        self._questions = questions
        self._generator = generator
        self._timeout = timeout or config.GENERATION_TIMEOUT_SECONDS

    async def generate(self, actor: Actor, question_id: str) -> Result[Optional[Response]]:
        # Store calls are blocking sqlite3, so they run off the event loop too
        allowed = await asyncio.to_thread(self._questions.check_can_generate, actor, question_id)
        if not allowed.is_success:
            return Result.fail(allowed.error)

        question = allowed.value
        try:
            body = await asyncio.wait_for(
                asyncio.to_thread(self._generator.generate, question),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Answer generation for question %s timed out after %ss", question_id, self._timeout)
            return Result.ok(None)
        except (requests.RequestException, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Answer generation for question %s failed: %s", question_id, e)
            return Result.ok(None)

        body = (body or "").strip()
        if not body:
            logger.info("Generator returned no candidate for question %s", question_id)
            return Result.ok(None)

        return await asyncio.to_thread(
            self._questions.create_response,
            actor,
            question_id,
            "ai-generated",
            body,
            action="response:generate",
        )
