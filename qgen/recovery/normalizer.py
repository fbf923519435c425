from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Optional

from .display_text import protect_display_text
from .images import collect_image_prompts, has_image_placeholder
from .models import Question
from .text_utils import as_text, compact_json, has_value

logger = logging.getLogger(__name__)

DEFAULT_MCQ_TYPE = "multiple-choice"

_CONTENT_KEYS = ("question", "prompt", "correctAnswer", "answer")
_LEADING_LETTER_RE = re.compile(r"^[A-Za-z]")


def _option_text(opt: Any) -> str:
    if isinstance(opt, str):
        return opt
    if isinstance(opt, bool) or opt is None:
        return compact_json(opt)
    if isinstance(opt, float) and opt.is_integer():
        return str(int(opt))
    if isinstance(opt, (int, float)):
        return str(opt)
    if isinstance(opt, dict) and "text" in opt:
        return as_text(opt["text"])
    return compact_json(opt)


def _normalize_options(record: dict[str, Any]) -> list[str]:
    raw = record.get("options")
    if not has_value(raw):
        raw = record.get("choices")
    if isinstance(raw, dict):
        # {"B": "London", "A": "Paris"} -> ["Paris", "London"]
        raw = [raw[k] for k in sorted(raw, key=str)]
    if not isinstance(raw, list):
        return []
    return [_option_text(opt) for opt in raw]


def _leading_letter(answer: str) -> Optional[str]:
    m = _LEADING_LETTER_RE.match(answer)
    return m.group(0).upper() if m else None


def _normalize_answer(record: dict[str, Any]) -> tuple[str, Optional[str]]:
    raw = record.get("correctAnswer")
    if isinstance(raw, list):
        return "\n".join(item.strip() for item in raw if isinstance(item, str) and item), None
    if isinstance(raw, str):
        answer = raw.strip()
        return answer, _leading_letter(answer)
    fallback = record.get("answer")
    if isinstance(fallback, str):
        answer = fallback.strip()
        return answer, _leading_letter(answer)
    if raw is not None:
        return compact_json(raw), None
    return "", None


def _normalize_record(
    record: dict[str, Any],
    mcq_type: str,
    fmt: Callable[[str], str],
) -> Question:
    qtype = as_text(record.get("type")).strip() or "unknown"
    question = as_text(record.get("question") or record.get("prompt"))
    explanation = as_text(record.get("explanation"))
    options = _normalize_options(record) if qtype == mcq_type else []
    answer, letter = _normalize_answer(record)

    prompts = collect_image_prompts(record, question, explanation, options)
    for p in prompts:
        p.prompt = fmt(p.prompt)
    has_images = (
        bool(prompts)
        or has_image_placeholder([question, explanation, *options])
        or record.get("hasImages") is True
    )

    return Question(
        type=qtype,
        question=fmt(question),
        options=[fmt(o) for o in options],
        correct_answer=fmt(answer),
        correct_answer_letter=letter,
        explanation=fmt(explanation),
        image_prompts=prompts,
        has_images=has_images,
    )


def _identity(text: str) -> str:
    return text


def normalize_questions(
    records: Optional[Iterable[Any]],
    *,
    mcq_type: str = DEFAULT_MCQ_TYPE,
    protect: bool = True,
) -> list[Question]:
    """
    Reshape raw decoded records into canonical Questions.

    Records without any of question/prompt/correctAnswer/answer are dropped,
    as are non-dict entries. Options are kept only for `mcq_type` questions.
    With `protect` every text field goes through protect_display_text().
    """
    if records is None:
        return []
    fmt = protect_display_text if protect else _identity
    out: list[Question] = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            logger.debug("Skipping record %d: not an object (%s)", idx, type(record).__name__)
            continue
        if not any(has_value(record.get(k)) for k in _CONTENT_KEYS):
            logger.debug("Skipping record %d: no question or answer text", idx)
            continue
        try:
            out.append(_normalize_record(record, mcq_type, fmt))
        except Exception:
            logger.warning("Dropping record %d: normalization failed", idx, exc_info=True)
    return out
