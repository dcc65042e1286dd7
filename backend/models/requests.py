from pydantic import BaseModel, Field

from config import settings
from models.entities import Entity


class ExtractRequest(BaseModel):
    text: str = Field(..., max_length=settings.max_text_length, description="Transcribed text to analyze")
    language: str = Field("auto", max_length=10, description="Language code, or 'auto' to detect from script")


class EntitiesRequest(ExtractRequest):
    pass


class CVRequest(BaseModel):
    entities: list[Entity] = Field(..., description="Validated (possibly user-edited) entities")
    raw_text: str = Field(..., max_length=settings.max_text_length)
