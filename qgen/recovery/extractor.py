from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_BRACKET_SPAN_RE = re.compile(r"(\[.*\]|\{.*\})", re.DOTALL)

# A backslash pair as JSON reads it: valid escapes are kept, the rest doubled.
_ESCAPE_PAIR_RE = re.compile(r'\\(u[0-9a-fA-F]{4}|["\\/bfnrt]|.?)', re.DOTALL)

# LaTeX commands whose first letter JSON already consumed as an escape:
# "\frac" decodes to FORM FEED + "rac", "\times" to TAB + "imes", "\neq" to a
# line feed + "eq". Single-letter tails (\ne, \nu, \ni) need math right after
# them; a line that merely starts with "e) " stays a line break.
_SWALLOWED_LATEX_RE = re.compile(
    r"\x09(?=ext|imes|heta|ilde|riangle|an\b|au\b|o\b)"
    r"|\x0d(?=ight|ho\b|angle|floor|ceil)"
    r"|\x08(?=eta|ar\b|inom|egin|oxed|ullet|mod\b|f\b)"
    r"|\x0c(?=rac|orall|lat\b)"
    r"|\x0a(?=eq\b|abla\b|ot\b|ewline\b|eg\b|(?:e|u|i)(?=[_^{\\$]|[ \t]*[\d=<>+\-(\\$]))"
)
_CONTROL_TO_ESCAPE = {"\x0a": "\\n", "\x09": "\\t", "\x0d": "\\r", "\x08": "\\b", "\x0c": "\\f"}


def _double_unknown_escapes(text: str) -> str:
    def _repl(m: re.Match) -> str:
        tail = m.group(1)
        if tail and (len(tail) == 5 or tail[0] in '"\\/bfnrt'):
            return m.group(0)
        return "\\\\" + tail

    return _ESCAPE_PAIR_RE.sub(_repl, text)


def _restore_swallowed_latex(value: Any) -> Any:
    if isinstance(value, str):
        if not _SWALLOWED_LATEX_RE.search(value):
            return value
        return _SWALLOWED_LATEX_RE.sub(lambda m: _CONTROL_TO_ESCAPE[m.group(0)], value)
    if isinstance(value, list):
        return [_restore_swallowed_latex(v) for v in value]
    if isinstance(value, dict):
        return {k: _restore_swallowed_latex(v) for k, v in value.items()}
    return value


def _whole_text(text: str) -> Optional[str]:
    return text


def _first_bracket_span(text: str) -> Optional[str]:
    m = _BRACKET_SPAN_RE.search(text)
    return m.group(1) if m else None


def _strict_loads(candidate: str) -> Any:
    return json.loads(candidate)


def _lenient_loads(candidate: str) -> Any:
    relaxed = _double_unknown_escapes(candidate)
    if relaxed == candidate:
        raise ValueError("no unknown escapes to relax")
    return json.loads(relaxed)


_CANDIDATES: tuple[Callable[[str], Optional[str]], ...] = (_whole_text, _first_bracket_span)
_DECODERS: tuple[Callable[[str], Any], ...] = (_strict_loads, _lenient_loads)


def _as_question_list(value: Any) -> Optional[list]:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        questions = value.get("questions")
        if isinstance(questions, list):
            return questions
        if value.get("type") and value.get("question"):
            return [value]
    return None


def _as_object(value: Any) -> Optional[dict]:
    return value if isinstance(value, dict) else None


def _first_match(text: str, shape: Callable[[Any], Any]) -> Any:
    """
    Walk the candidate/decoder cascade in order and return the first decoded
    value `shape` accepts, or None.
    """
    tried: set[str] = set()
    for pick in _CANDIDATES:
        try:
            candidate = pick(text)
        except Exception:
            logger.debug("Candidate %s failed", pick.__name__, exc_info=True)
            continue
        if not candidate or candidate in tried:
            continue
        tried.add(candidate)
        for decode in _DECODERS:
            try:
                value = decode(candidate)
            except (ValueError, RecursionError):
                continue
            shaped = shape(value)
            if shaped is not None:
                logger.debug("Recovered JSON via %s/%s", pick.__name__, decode.__name__)
                return _restore_swallowed_latex(shaped)
    return None


def extract_question_records(text: str) -> list:
    """
    Decode sanitized model output into raw question records.

    Returns an empty list when nothing usable is found; never raises for
    string input.
    """
    if not isinstance(text, str):
        raise TypeError(f"extract_question_records() expects str, got {type(text).__name__}")
    if not text.strip():
        return []
    records = _first_match(text, _as_question_list)
    if records is None:
        logger.debug("No question records recovered from %d chars", len(text))
        return []
    return records


def extract_json_object(text: str) -> Optional[dict]:
    if not isinstance(text, str):
        raise TypeError(f"extract_json_object() expects str, got {type(text).__name__}")
    if not text.strip():
        return None
    return _first_match(text, _as_object)
