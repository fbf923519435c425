from .display_text import protect_display_text
from .extractor import extract_json_object, extract_question_records
from .images import extract_image_placeholders, replace_image_placeholders, validate_image_prompts
from .lesson_plans import parse_lesson_plan, parse_objectives
from .models import (
    ImagePrompt,
    ImagePromptCheck,
    LessonPlanParseResult,
    LessonPlanSection,
    ObjectivesParseResult,
    Question,
    QuestionRecord,
)
from .normalizer import normalize_questions
from .pipeline import QuestionRecovery, recover_questions
from .records import to_question_record
from .sanitizer import sanitize_json_text

__all__ = [
    "sanitize_json_text",
    "extract_question_records",
    "extract_json_object",
    "normalize_questions",
    "protect_display_text",
    "extract_image_placeholders",
    "replace_image_placeholders",
    "validate_image_prompts",
    "parse_lesson_plan",
    "parse_objectives",
    "to_question_record",
    "QuestionRecovery",
    "recover_questions",
    "Question",
    "ImagePrompt",
    "LessonPlanSection",
    "LessonPlanParseResult",
    "ObjectivesParseResult",
    "ImagePromptCheck",
    "QuestionRecord",
]
