from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImagePrompt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    placeholder: str
    prompt: str
    purpose: str = ""
    placement: Optional[str] = None
    accuracy: Optional[str] = None
    style: Optional[str] = None


class Question(BaseModel):
    """
    Canonical, render-safe question.

    Field names are snake_case in Python; `to_dict()` emits the camelCase
    shape (`correctAnswer`, `correctAnswerLetter`, ...) the renderers expect.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = "unknown"
    question: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: str = Field(default="", alias="correctAnswer")
    correct_answer_letter: Optional[str] = Field(default=None, alias="correctAnswerLetter")
    explanation: str = ""
    image_prompts: list[ImagePrompt] = Field(default_factory=list, alias="imagePrompts")
    has_images: bool = Field(default=False, alias="hasImages")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LessonPlanSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    time_allocation: Optional[int] = Field(default=None, alias="timeAllocation")


class LessonPlanParseResult(BaseModel):
    valid: bool = False
    sections: dict[str, LessonPlanSection] = Field(default_factory=dict)
    error: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class QuestionRecord(BaseModel):
    # Row shape stored by the persistence layer.
    model_config = ConfigDict(extra="forbid")

    question: str
    question_type: str
    options: Optional[list[str]] = None
    correct_answer: str
    explanation: str = ""
    subject: Optional[str] = None
    sub_subject: Optional[str] = None
    topic: Optional[str] = None
    sub_topic: Optional[str] = None
    grade: Optional[str] = None
    difficulty: Optional[str] = None
    blooms_level: Optional[str] = None
    additional_notes: Optional[str] = None
    user_id: Optional[str] = None


class ObjectivesParseResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valid: bool = False
    objectives: list[str] = Field(default_factory=list)
    total_found: Optional[int] = Field(default=None, alias="totalFound")
    filtered: Optional[bool] = None
    error: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ImagePromptCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(default=True, alias="isValid")
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
