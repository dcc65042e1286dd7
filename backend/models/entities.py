"""Typed, positioned entity spans produced by the multilingual NER pipeline."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator


class EntityType(str, Enum):
    PERSON = "PERSON"
    LOCATION = "LOCATION"
    ORGANIZATION = "ORGANIZATION"
    SKILL = "SKILL"
    EDUCATION = "EDUCATION"
    DATE = "DATE"
    CONTACT = "CONTACT"


EntitySubtype = Literal["email", "phone", "degree", "institution", "field"]


class Entity(BaseModel):
    """A span of source text carrying one semantic role.

    Offsets are absolute character positions, ``end_pos`` exclusive.
    """
    model_config = {"frozen": True}

    text: str
    type: EntityType
    subtype: EntitySubtype | None = None
    start_pos: int = Field(ge=0)
    end_pos: int
    confidence: float = Field(ge=0.0, le=1.0)
    language: str = "unknown"

    @model_validator(mode="after")
    def _check_span(self) -> "Entity":
        if self.end_pos <= self.start_pos:
            raise ValueError(
                f"end_pos ({self.end_pos}) must be greater than start_pos ({self.start_pos})"
            )
        return self

    def overlaps(self, other: "Entity") -> bool:
        return self.start_pos < other.end_pos and other.start_pos < self.end_pos
