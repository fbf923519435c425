from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Optional

from .display_text import protect_display_text
from .extractor import extract_json_object
from .models import LessonPlanParseResult, LessonPlanSection, ObjectivesParseResult
from .sanitizer import sanitize_json_text
from .text_utils import as_text, has_value

logger = logging.getLogger(__name__)

LESSON_PLAN_SECTIONS = MappingProxyType({
    "teacherPreparation": "Teacher Preparation",
    "iDo": "I Do (Teacher Demonstration)",
    "weDo": "We Do (Guided Practice)",
    "youDo": "You Do (Independent Practice)",
    "conclusion": "Conclusion",
    "homework": "Homework",
})
ALLOWED_DURATIONS = frozenset({30, 45, 60})

# Objectives matching these say nothing about the chapter they came from.
GENERIC_OBJECTIVE_PATTERNS = (
    "main concepts presented",
    "apply acquired knowledge",
    "solve relevant problems",
    "analyze relationships between concepts",
    "understand the chapter",
    "learn about topics",
    "comprehend the material",
)

# Preparation happens before class and never counts toward the duration.
_PREP_KEY = "teacherPreparation"


def _minutes(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _section_text(content: Any) -> str:
    if isinstance(content, list):
        return "\n".join(as_text(item) for item in content if item is not None)
    return as_text(content)


def _ordered_keys(sections: dict[str, Any]) -> list[str]:
    known = [k for k in LESSON_PLAN_SECTIONS if k in sections]
    return known + [k for k in sections if k not in LESSON_PLAN_SECTIONS]


def _invalid(error: str) -> LessonPlanParseResult:
    logger.info("Lesson plan rejected: %s", error)
    return LessonPlanParseResult(valid=False, error=error)


def parse_lesson_plan(
    text: str,
    expected_duration: Optional[int] = None,
    *,
    protect: bool = True,
) -> LessonPlanParseResult:
    """
    Recover a `{"sections": {...}}` lesson plan from raw model output.

    Never raises for string input: problems come back as `valid=False` with
    an `error` message the caller can show next to a "regenerate" action.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_lesson_plan() expects str, got {type(text).__name__}")

    parsed = extract_json_object(sanitize_json_text(text))
    if parsed is None:
        return _invalid("Invalid JSON response: no JSON object found")

    sections = parsed.get("sections")
    if not isinstance(sections, dict) or not sections:
        return _invalid("Invalid or missing sections")

    for key, section in sections.items():
        if not isinstance(section, dict) or not section:
            return _invalid(f"Invalid section: {key}")
        if not _has_content(section.get("content")):
            return _invalid(f"Missing content in section: {key}")

    warning: Optional[str] = None
    if expected_duration is not None:
        if expected_duration not in ALLOWED_DURATIONS:
            warning = f"Unusual lesson duration: {expected_duration} minutes"
            logger.warning("%s", warning)

        prep = sections.get(_PREP_KEY)
        if prep is not None and _minutes(prep.get("timeAllocation")) != 0:
            return _invalid("Teacher Preparation must have timeAllocation set to 0 (pre-class preparation)")

        total = sum(
            _minutes(section.get("timeAllocation")) or 0
            for key, section in sections.items()
            if key != _PREP_KEY
        )
        if total != expected_duration:
            return _invalid(
                f"Duration mismatch: sections total {total} minutes "
                f"but expected {expected_duration} minutes exactly"
            )

    fmt = protect_display_text if protect else as_text
    out: dict[str, LessonPlanSection] = {}
    for key in _ordered_keys(sections):
        section = sections[key]
        out[key] = LessonPlanSection(
            content=fmt(_section_text(section.get("content"))),
            time_allocation=_minutes(section.get("timeAllocation")),
        )
    logger.debug("Lesson plan recovered with sections: %s", ", ".join(out))
    return LessonPlanParseResult(valid=True, sections=out, warning=warning)


def _has_content(content: Any) -> bool:
    if content is None:
        return False
    if isinstance(content, str):
        return bool(content.strip())
    if isinstance(content, (list, dict)):
        return bool(content)
    return True


def _as_objective(value: Any) -> str:
    text = as_text(value).strip()
    if text.lower().startswith("to "):
        return text
    return f"To {text[:1].lower()}{text[1:]}"


def _count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_objectives(text: str) -> ObjectivesParseResult:
    """
    Recover an `{"objectives": [...], "totalFound": n, "filtered": bool}`
    response.

    Objectives not phrased as "To ..." get the prefix added. Generic
    objectives are reported through `warning` and do not fail the result.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_objectives() expects str, got {type(text).__name__}")

    parsed = extract_json_object(sanitize_json_text(text))
    if parsed is None:
        logger.info("Objectives rejected: no JSON object found")
        return ObjectivesParseResult(error="Invalid JSON response: no JSON object found")

    raw = parsed.get("objectives")
    if not isinstance(raw, list):
        return ObjectivesParseResult(error="Invalid objectives array")
    objectives = [_as_objective(item) for item in raw if has_value(item)]
    if not objectives:
        return ObjectivesParseResult(error="No objectives found")

    total_found = _count(parsed.get("totalFound"))
    filtered = parsed.get("filtered")
    if total_found is None or not isinstance(filtered, bool):
        logger.info(
            "Objectives rejected: bad metadata totalFound=%r filtered=%r",
            parsed.get("totalFound"), filtered,
        )
        return ObjectivesParseResult(error="Invalid metadata format")

    generic = [
        obj for obj in objectives
        if any(pattern in obj.lower() for pattern in GENERIC_OBJECTIVE_PATTERNS)
    ]
    warning: Optional[str] = None
    if generic:
        warning = f"Generic objectives: {'; '.join(generic)}"
        logger.warning("%s", warning)

    return ObjectivesParseResult(
        valid=True,
        objectives=objectives,
        total_found=total_found,
        filtered=filtered,
        warning=warning,
    )
