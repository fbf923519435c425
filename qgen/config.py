from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    mcq_type: str
    log_level: str
    max_input_chars: int
    protect_display_text: bool


def _env_flag(name: str, default: str) -> bool:
    raw = (os.environ.get(name) or default).strip().lower()
    return raw not in ("0", "false", "no", "off", "")


def load_settings() -> Settings:
    mcq_type = (os.environ.get("QGEN_MCQ_TYPE") or "multiple-choice").strip()
    # Users often set env vars with quotes (e.g. cmd.exe: set QGEN_MCQ_TYPE="mcq").
    if len(mcq_type) >= 2 and mcq_type[0] == mcq_type[-1] and mcq_type[0] in ("'", '"'):
        mcq_type = mcq_type[1:-1].strip()
    mcq_type = mcq_type or "multiple-choice"

    log_level = (os.environ.get("QGEN_LOG_LEVEL") or "WARNING").strip().upper()

    try:
        max_input_chars = int(os.environ.get("QGEN_MAX_INPUT_CHARS", "0"))
    except ValueError:
        max_input_chars = 0
    max_input_chars = max(0, max_input_chars)

    return Settings(
        mcq_type=mcq_type,
        log_level=log_level,
        max_input_chars=max_input_chars,
        protect_display_text=_env_flag("QGEN_PROTECT_DISPLAY_TEXT", "1"),
    )
