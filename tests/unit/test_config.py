import dataclasses

import pytest

from qgen.config import load_settings

_VARS = ("QGEN_MCQ_TYPE", "QGEN_LOG_LEVEL", "QGEN_MAX_INPUT_CHARS", "QGEN_PROTECT_DISPLAY_TEXT")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s.mcq_type == "multiple-choice"
    assert s.log_level == "WARNING"
    assert s.max_input_chars == 0
    assert s.protect_display_text is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QGEN_MCQ_TYPE", ' "mcq" ')
    monkeypatch.setenv("QGEN_LOG_LEVEL", "debug")
    monkeypatch.setenv("QGEN_MAX_INPUT_CHARS", "5000")
    monkeypatch.setenv("QGEN_PROTECT_DISPLAY_TEXT", "off")
    s = load_settings()
    assert s.mcq_type == "mcq"
    assert s.log_level == "DEBUG"
    assert s.max_input_chars == 5000
    assert s.protect_display_text is False


@pytest.mark.parametrize("raw", ["abc", "-5"])
def test_bad_max_input_chars_means_unlimited(monkeypatch, raw):
    monkeypatch.setenv("QGEN_MAX_INPUT_CHARS", raw)
    assert load_settings().max_input_chars == 0


def test_settings_are_frozen():
    s = load_settings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.mcq_type = "other"
