from typing import Any

from pydantic import BaseModel, field_validator


class ModelSuggestion(BaseModel):
    """Одно замечание модели к строке кода. Номер строки не проверен."""

    lineNumber: int | float | str | None = None
    reviewComment: str

    @field_validator("lineNumber", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("lineNumber must not be a boolean")
        return value


class ReviewPayload(BaseModel):
    """Ответ модели: {"reviews": [...]}."""

    reviews: list[Any] = []

    @field_validator("reviews", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value
