from pydantic import BaseModel

from models.cv_document import CVDocument
from models.entities import Entity


class ExtractionResponse(BaseModel):
    cv: CVDocument
    method: str  # "ai" | "ner"


class EntitiesResponse(BaseModel):
    entities: list[Entity] = []
    language: str = "unknown"
    count: int = 0


class ExtractionStats(BaseModel):
    attempts: int = 0
    ai_successes: int = 0
    ner_fallbacks: int = 0
    failures: int = 0
    ai_success_rate: str = "0.0%"
    ner_usage_rate: str = "0.0%"


class HealthResponse(BaseModel):
    status: str = "ok"
    ai_available: bool = False
    ner_available: bool = False
    recommended_method: str = "none"
    stats: ExtractionStats = ExtractionStats()
