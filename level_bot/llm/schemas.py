"""Schemas for payloads returned by the content generator."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from level_bot.models import OPTIONS_PER_QUESTION, Difficulty


class GeneratedQuestion(BaseModel):
    """One level-test question as the model is asked to produce it."""

    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correctAnswer: int = Field(ge=0, lt=OPTIONS_PER_QUESTION)
    explanation: str = ""
    difficulty: Difficulty
    topic: str = Field(min_length=1)
    expectedTime: Optional[float] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value):
        if isinstance(value, str):
            return Difficulty.from_label(value)
        return value

    @field_validator("options")
    @classmethod
    def options_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [str(option).strip() for option in value]
        if not all(cleaned):
            raise ValueError("options must not be blank")
        return cleaned


class InterviewQuestion(BaseModel):
    id: str
    question: str = Field(min_length=1)


class InterviewQuestionSet(BaseModel):
    technical: list[InterviewQuestion] = Field(min_length=1)
    behavioral: list[InterviewQuestion] = Field(min_length=1)
