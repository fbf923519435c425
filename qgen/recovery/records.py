from __future__ import annotations

from typing import Any

from .models import Question, QuestionRecord


def to_question_record(question: Question, **metadata: Any) -> QuestionRecord:
    """
    Map a normalized Question onto the row shape the question store keeps.

    `metadata` fills the descriptive columns (subject, grade, difficulty,
    topic, blooms_level, ...); unknown column names are rejected.
    """
    return QuestionRecord(
        question=question.question,
        question_type=question.type,
        options=list(question.options) or None,
        correct_answer=question.correct_answer,
        explanation=question.explanation,
        **metadata,
    )
