"""
Render-safe cleanup for a single display field (question, option, answer,
explanation, lesson-plan section).

Math spans and markdown tables are swapped for opaque tokens before any
global rewrite, then restored verbatim:
- `$$...$$` display math, `$103$` numeric spans and `$x+5=45$`-style inline math
- blocks of two or more consecutive lines that contain a pipe
Outside those spans a digit-led `$` becomes `&#36;` so renderers cannot mistake
currency for a math delimiter, and line breaks are normalized to paragraph
breaks.
"""

from __future__ import annotations

import re
from typing import Any

DOLLAR_ENTITY = "&#36;"

_MATH_TOKEN_OPEN = "\ue010"
_TABLE_TOKEN_OPEN = "\ue011"
_TOKEN_CLOSE = "\ue012"

_DISPLAY_MATH_RE = re.compile(r"(?<!\\)\$\$[\s\S]+?\$\$")
_NUMERIC_MATH_RE = re.compile(r"(?<![\\$])\$\d+(?:[.,]\d+)*\$(?![\d$])")
# Pandoc-style inline span: no whitespace just inside the delimiters, no
# digit right after the closing `$`. A wrapped equation may cross one line
# break, never a blank line.
_INLINE_MATH_RE = re.compile(
    r"(?<![\\$])\$(?=[^$\s])((?:[^$\n]|\n(?![ \t]*\n))*?[^$\s])\$(?![\d$])"
)
_MATH_CONTENT_RE = re.compile(
    r"[A-Za-z]|\\[A-Za-z]+|[\dA-Za-z)]\s*[=+\-*/^<>]|[=+\-*/^<>]\s*[\dA-Za-z(]"
)

_TABLE_BLOCK_RE = re.compile(r"^[^\n]*\|[^\n]*(?:\n[^\n]*\|[^\n]*)+", re.MULTILINE)

_CURRENCY_RE = re.compile(r"\\{0,2}\$(?=\d)")
_BARE_AMOUNT_RE = re.compile(r"\b(cost|costs|price|spent|total|bill|pay|paid)\s+(\d+\.\d{2})\b", re.IGNORECASE)

_LITERAL_NEWLINE_RE = re.compile(r"\\n")
_BULLET_RE = re.compile(r"^[ \t]*[-*][ \t]+", re.MULTILINE)
_SPACE_RUN_RE = re.compile(r"[ \t]{3,}")
_NEWLINE_RUN_RE = re.compile(r"\n(?:[ \t]*\n)*")


class _Regions:
    """Ordered (token, original) pairs for one protect_display_text() call."""

    def __init__(self, opener: str) -> None:
        self._opener = opener
        self._pairs: list[tuple[str, str]] = []
        self._token_re = re.compile(re.escape(opener) + r"(\d+)" + _TOKEN_CLOSE)

    def stash(self, original: str) -> str:
        token = f"{self._opener}{len(self._pairs)}{_TOKEN_CLOSE}"
        self._pairs.append((token, original))
        return token

    def restore(self, text: str) -> str:
        if not self._pairs:
            return text

        def _repl(m: re.Match) -> str:
            idx = int(m.group(1))
            return self._pairs[idx][1] if idx < len(self._pairs) else m.group(0)

        return self._token_re.sub(_repl, text)


def _protect_math(text: str, regions: _Regions) -> str:
    out = _DISPLAY_MATH_RE.sub(lambda m: regions.stash(m.group(0)), text)
    out = _NUMERIC_MATH_RE.sub(lambda m: regions.stash(m.group(0)), out)

    def _inline(m: re.Match) -> str:
        if _MATH_CONTENT_RE.search(m.group(1)):
            return regions.stash(m.group(0))
        return m.group(0)

    return _INLINE_MATH_RE.sub(_inline, out)


def _protect_tables(text: str, tables: _Regions, math: _Regions) -> str:
    # Keep the real math text inside the recorded table so that restoring
    # math first, then tables, leaves no token behind.
    return _TABLE_BLOCK_RE.sub(lambda m: tables.stash(math.restore(m.group(0))), text)


def _convert_currency(text: str) -> str:
    out = _CURRENCY_RE.sub(DOLLAR_ENTITY, text)
    return _BARE_AMOUNT_RE.sub(lambda m: f"{m.group(1)} {DOLLAR_ENTITY}{m.group(2)}", out)


def _normalize_breaks(text: str) -> str:
    out = _BULLET_RE.sub("\u2022 ", text)
    out = _SPACE_RUN_RE.sub(" ", out)
    out = out.strip()
    return _NEWLINE_RUN_RE.sub("\n\n", out)


def protect_display_text(text: Any) -> Any:
    if not isinstance(text, str) or not text:
        return text

    math = _Regions(_MATH_TOKEN_OPEN)
    tables = _Regions(_TABLE_TOKEN_OPEN)

    out = _protect_math(text, math)
    # Escaped newlines are unfolded before table detection so that a table
    # sent as "| a | b |\n|---|---|" is still seen as one block.
    out = _LITERAL_NEWLINE_RE.sub("\n", out)
    out = _protect_tables(out, tables, math)

    out = out.replace("\r\n", "\n")
    out = _convert_currency(out)
    out = _normalize_breaks(out)

    out = math.restore(out)
    return tables.restore(out)
