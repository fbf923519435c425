from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings, load_settings
from .extractor import extract_question_records
from .lesson_plans import parse_lesson_plan, parse_objectives
from .models import LessonPlanParseResult, ObjectivesParseResult, Question
from .normalizer import normalize_questions
from .sanitizer import sanitize_json_text

logger = logging.getLogger(__name__)


class QuestionRecovery:
    """
    raw model text -> sanitize -> extract -> normalize -> list[Question]

    Holds only immutable settings; one instance can serve concurrent requests.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or load_settings()

    def _bounded(self, text: str) -> str:
        limit = self.settings.max_input_chars
        if limit and len(text) > limit:
            logger.warning("Model output truncated from %d to %d chars", len(text), limit)
            return text[:limit]
        return text

    def recover(self, text: str) -> list[Question]:
        if not isinstance(text, str):
            raise TypeError(f"recover() expects str, got {type(text).__name__}")
        sanitized = sanitize_json_text(self._bounded(text))
        records = extract_question_records(sanitized)
        questions = normalize_questions(
            records,
            mcq_type=self.settings.mcq_type,
            protect=self.settings.protect_display_text,
        )
        if not questions:
            logger.info("No usable questions recovered from %d chars of model output", len(text))
        else:
            logger.debug("Recovered %d question(s) from %d record(s)", len(questions), len(records))
        return questions

    def recover_lesson_plan(self, text: str, expected_duration: Optional[int] = None) -> LessonPlanParseResult:
        if not isinstance(text, str):
            raise TypeError(f"recover_lesson_plan() expects str, got {type(text).__name__}")
        return parse_lesson_plan(
            self._bounded(text),
            expected_duration,
            protect=self.settings.protect_display_text,
        )

    def recover_objectives(self, text: str) -> ObjectivesParseResult:
        if not isinstance(text, str):
            raise TypeError(f"recover_objectives() expects str, got {type(text).__name__}")
        return parse_objectives(self._bounded(text))


def recover_questions(text: str, settings: Optional[Settings] = None) -> list[Question]:
    return QuestionRecovery(settings).recover(text)
