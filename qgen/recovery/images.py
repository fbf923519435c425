from __future__ import annotations

import re
from typing import Any, Iterable

from .models import ImagePrompt, ImagePromptCheck, Question

DEFAULT_IMAGE_STYLE = "educational_diagram"
MIN_IMAGE_PROMPT_CHARS = 20

# Preferred [IMG: ...], older [IMAGE: ...], legacy [IMAGE_PLACEHOLDER_3].
_IMG_RE = re.compile(r"\[IMG:\s*([^\]]+)\]", re.IGNORECASE)
_IMAGE_RE = re.compile(r"\[IMAGE:\s*([^\]]+)\]", re.IGNORECASE)
_LEGACY_RE = re.compile(r"\[IMAGE_PLACEHOLDER_(\d+)\]", re.IGNORECASE)
_ANY_DESCRIBED_RE = re.compile(r"\[(?:IMG|IMAGE):\s*[^\]]+\]", re.IGNORECASE)


def extract_image_placeholders(text: str) -> list[dict[str, str]]:
    """
    Return placeholders in `text` as dicts with `placeholder`, `description`
    and `full_match`, numbered in discovery order across all three formats.
    """
    if not text:
        return []
    found: list[dict[str, str]] = []
    for m in _IMG_RE.finditer(text):
        found.append({
            "placeholder": f"IMG_{len(found) + 1}",
            "description": m.group(1).strip(),
            "full_match": m.group(0),
        })
    for m in _IMAGE_RE.finditer(text):
        found.append({
            "placeholder": f"IMAGE_{len(found) + 1}",
            "description": m.group(1).strip(),
            "full_match": m.group(0),
        })
    for m in _LEGACY_RE.finditer(text):
        found.append({
            "placeholder": f"IMAGE_PLACEHOLDER_{m.group(1)}",
            "description": f"Image placeholder {m.group(1)}",
            "full_match": m.group(0),
        })
    return found


def replace_image_placeholders(text: str, replacement: str = "[Image Placeholder]") -> str:
    if not text:
        return text
    out = _IMG_RE.sub(lambda m: replacement, text)
    out = _IMAGE_RE.sub(lambda m: replacement, out)
    return _LEGACY_RE.sub(lambda m: replacement, out)


def has_image_placeholder(texts: Iterable[str]) -> bool:
    return any(t and _ANY_DESCRIBED_RE.search(t) for t in texts)


def _placement_fields(question: str, explanation: str, options: list[str]) -> list[tuple[str, str]]:
    fields = [("question", question), ("explanation", explanation)]
    for i, opt in enumerate(options):
        fields.append((f"option_{chr(ord('a') + i)}", opt))
    return fields


def collect_image_prompts(
    record: dict[str, Any],
    question: str,
    explanation: str,
    options: list[str],
) -> list[ImagePrompt]:
    """
    Image prompts for one question: auto-extracted from inline placeholders
    when there are any, else the record's own `imagePrompts` list.
    """
    prompts: list[ImagePrompt] = []
    for placement, content in _placement_fields(question, explanation, options):
        for i, ph in enumerate(extract_image_placeholders(content)):
            prompts.append(ImagePrompt(
                placeholder=f"{placement}_img_{i + 1}",
                prompt=ph["description"],
                purpose=f"Educational image for {placement}",
                placement=placement,
                style=DEFAULT_IMAGE_STYLE,
            ))
    if prompts:
        return prompts

    explicit = record.get("imagePrompts")
    if not isinstance(explicit, list):
        return []
    for item in explicit:
        if not isinstance(item, dict):
            continue
        placeholder = str(item.get("placeholder") or "")
        prompt = str(item.get("prompt") or "")
        if not placeholder or not prompt:
            continue
        prompts.append(ImagePrompt(
            placeholder=placeholder,
            prompt=prompt,
            purpose=str(item.get("purpose") or ""),
            placement=str(item["placement"]) if item.get("placement") else None,
            accuracy=str(item["accuracy"]) if item.get("accuracy") else None,
            style=str(item["style"]) if item.get("style") else None,
        ))
    return prompts


def validate_image_prompts(question: Question) -> ImagePromptCheck:
    """
    Check that every inline placeholder of `question` has a usable prompt.

    A placeholder is covered by a prompt named after its placement
    (`question_img_1`), its discovery name (`IMG_1`) or its position
    (`IMAGE_1`). Prompts shorter than MIN_IMAGE_PROMPT_CHARS or without a
    purpose are reported too.
    """
    prompts = question.image_prompts
    if not question.has_images and not prompts:
        return ImagePromptCheck()

    issues: list[str] = []
    suggestions: list[str] = []
    names = {p.placeholder for p in prompts}

    placeholders: list[tuple[str, dict[str, str], int]] = []
    for placement, content in _placement_fields(question.question, question.explanation, question.options):
        for i, ph in enumerate(extract_image_placeholders(content)):
            placeholders.append((placement, ph, i + 1))

    if len(placeholders) != len(prompts):
        issues.append(f"Mismatch: {len(placeholders)} placeholders in text, {len(prompts)} image prompts provided")
        if len(placeholders) > len(prompts):
            suggestions.append("Generate more image prompts to match placeholders in question text")
        else:
            suggestions.append("Reduce number of image prompts or add more placeholders to question text")

    for position, (placement, ph, n) in enumerate(placeholders, start=1):
        accepted = {f"{placement}_img_{n}", ph["placeholder"], f"IMAGE_{position}"}
        if not accepted & names:
            issues.append(f"No image prompt found for placeholder: {ph['full_match']}")
            suggestions.append(f"Add image prompt for: {ph['description']}")

    for p in prompts:
        if len(p.prompt) < MIN_IMAGE_PROMPT_CHARS:
            issues.append(f'Image prompt too short: "{p.prompt}"')
            suggestions.append("Expand image prompts with more descriptive details")
        if not p.purpose:
            issues.append(f"Missing purpose for image prompt: {p.placeholder}")
            suggestions.append("Add purpose description for all image prompts")

    return ImagePromptCheck(is_valid=not issues, issues=issues, suggestions=suggestions)
