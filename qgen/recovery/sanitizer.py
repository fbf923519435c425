from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)

# Private-use code points never produced by the models we talk to.
_TOKEN_OPEN = "\ue000"
_TOKEN_CLOSE = "\ue001"
_TOKEN_RE = re.compile(_TOKEN_OPEN + r"(\d+)" + _TOKEN_CLOSE)

_FENCE_OPEN_RE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```\s*$")
_WRAP_QUOTES_RE = re.compile(r"^[\"'`]+|[\"'`]+$")

_CONTINUATION_RE = re.compile(r"\\\r?\n")
_TRAILING_BACKSLASH_RE = re.compile(r"\\+$", re.MULTILINE)

# JSON escapes, the escaped dollar, LaTeX commands (\frac, \text{...}).
_VALID_ESCAPE_RE = re.compile(r"""\\(?:["\\/bfnrtu]|\$|[a-zA-Z]+(?:\{[^}]*\})?)""")
_BACKSLASHES_BEFORE_DOLLAR_RE = re.compile(r"\\+\$")
_TRAILING_COMMA_RE = re.compile(r",(?:\s*,)*(\s*[}\]])")

_QUOTED_PAIR_LINE_RE = re.compile(r'^(\s*"[^"\\\n]+"\s*:\s*")(.*)("\s*,?\s*)$', re.MULTILINE)
_NEXT_PAIR_RE = re.compile(r'"\s*:\s*["\d\[{tfn-]|"\s*,\s*"')
_UNESCAPED_QUOTE_RE = re.compile(r'(?<!\\)"')


def _stash(regions: list[tuple[str, str]], original: str) -> str:
    token = f"{_TOKEN_OPEN}{len(regions)}{_TOKEN_CLOSE}"
    regions.append((token, original))
    return token


def _restore(text: str, regions: list[tuple[str, str]]) -> str:
    if not regions:
        return text

    def _repl(m: re.Match) -> str:
        idx = int(m.group(1))
        if idx < len(regions):
            return regions[idx][1]
        return m.group(0)

    return _TOKEN_RE.sub(_repl, text)


def _decodes(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _strip_wrappers(text: str) -> str:
    prev = None
    while text != prev:
        prev = text
        text = text.strip()
        text = _FENCE_OPEN_RE.sub("", text, count=1)
        text = _FENCE_CLOSE_RE.sub("", text, count=1)
        text = _WRAP_QUOTES_RE.sub("", text)
    return text


def _drop_line_continuations(text: str) -> str:
    out = _CONTINUATION_RE.sub("", text)
    out = _TRAILING_BACKSLASH_RE.sub("", out)
    if out != text:
        out = _strip_wrappers(out)
    return out


def _repair_escapes(text: str) -> str:
    if "\\" not in text:
        return text
    regions: list[tuple[str, str]] = []
    out = _VALID_ESCAPE_RE.sub(lambda m: _stash(regions, m.group(0)), text)
    out = out.replace("\\", "\\\\")
    return _restore(out, regions)


def _canonicalize_escaped_dollars(text: str) -> str:
    # JSON has no \$ escape; \\$ decodes to a literal backslash-dollar.
    return _BACKSLASHES_BEFORE_DOLLAR_RE.sub(lambda m: "\\\\$", text)


def _drop_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def _repair_interior_quotes(text: str) -> str:
    """
    Escape stray quotes inside a one-per-line `"key": "value",` pair, e.g.
      "question": "What does "photosynthesis" produce?",
    Only attempted when the text does not decode as-is. Pretty-printed
    output only: a line holding several pairs (compact single-line JSON) is
    left untouched.
    """
    if '"' not in text or _decodes(text):
        return text

    def _repl(m: re.Match) -> str:
        head, value, tail = m.group(1), m.group(2), m.group(3)
        if not _UNESCAPED_QUOTE_RE.search(value):
            return m.group(0)
        # Several pairs on one line: too ambiguous to touch.
        if _NEXT_PAIR_RE.search(value):
            return m.group(0)
        return head + _UNESCAPED_QUOTE_RE.sub(r'\\"', value) + tail

    return _QUOTED_PAIR_LINE_RE.sub(_repl, text)


_STEPS = (
    _strip_wrappers,
    _drop_line_continuations,
    _repair_escapes,
    _canonicalize_escaped_dollars,
    _drop_trailing_commas,
    _repair_interior_quotes,
)
_MAX_PASSES = 8


def sanitize_json_text(text: str) -> str:
    """
    Best-effort repair of raw model output toward parseable JSON.

    Never raises for string input; a step that fails is skipped. Running the
    function on its own output returns it unchanged.
    """
    if not isinstance(text, str):
        raise TypeError(f"sanitize_json_text() expects str, got {type(text).__name__}")
    out = text
    # A later step can expose work for an earlier one (a dropped comma leaves
    # a trailing backslash); repeat until a pass changes nothing.
    for _ in range(_MAX_PASSES):
        before = out
        out = _run_steps(out)
        if out == before:
            return out
    logger.debug("Sanitizer did not settle after %d passes", _MAX_PASSES)
    return out


def _run_steps(text: str) -> str:
    out = text
    for step in _STEPS:
        try:
            out = step(out)
        except Exception:
            logger.debug("Sanitize step %s skipped", step.__name__, exc_info=True)
    return out
