# src/profiles/form_content.py - v1
"""Render questionnaire answers into profile content.

Each answer becomes one sentence ``"<label>: <value>."`` on its own line,
so the sentence chunker yields one chunk per answer. List answers
(checkbox questions) are joined with ", ". Answer order is preserved.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


class FormAnswer(BaseModel):
    """One questionnaire answer."""

    key: str
    question: str | None = None
    value: str | list[str]

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            raise ValueError("answer key must not be blank")
        return v.strip()

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str | list[str]) -> str | list[str]:  # noqa: N805
        if isinstance(v, list):
            items = [item.strip() for item in v if item.strip()]
            if not items:
                raise ValueError("answer must have at least one non-blank value")
            return items
        if not v.strip():
            raise ValueError("answer must not be blank")
        return v.strip()

    @property
    def label(self) -> str:
        return (self.question or self.key).strip().strip("¿?:").strip()

    def to_sentence(self) -> str:
        value = ", ".join(self.value) if isinstance(self.value, list) else self.value
        # Inner periods would split the answer into several chunks.
        value = value.replace(".", ",").rstrip(",").strip()
        return f"{self.label}: {value}."


class ProfileForm(BaseModel):
    """Ordered set of answers submitted by one member."""

    answers: list[FormAnswer] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique_keys(self) -> ProfileForm:
        keys = [a.key for a in self.answers]
        if len(keys) != len(set(keys)):
            raise ValueError("answer keys must be unique")
        return self

    def to_content(self) -> str:
        return "\n".join(answer.to_sentence() for answer in self.answers)
