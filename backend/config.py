import os
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings

_DATA_DIR = Path(__file__).resolve().parent / "services" / "ner" / "data"


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class ConfidenceSettings(BaseModel):
    """Hand-tuned confidence per extraction pattern (0.0-1.0)."""
    email: float = 0.98
    phone: float = 0.95
    person_title: float = 0.95
    person_surname: float = 0.85
    company: float = 0.95
    organization: float = 0.80
    organization_suffix: float = 0.75
    city: float = 0.90
    state: float = 0.85
    location_context: float = 0.60
    skill: float = 0.80
    education: float = 0.75
    date_word: float = 0.85
    date_pattern: float = 0.90


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Extraction strategies
    ai_enabled: bool = True
    ner_fallback_enabled: bool = True  # independent of ai_enabled
    ai_timeout_s: float = 30.0

    # Local NER pipeline
    gazetteer_path: str = str(_DATA_DIR / "gazetteer.json")
    default_language: str = "hi"
    max_text_length: int = 50000
    confidence: ConfidenceSettings = ConfidenceSettings()

    # Streaming transcripts
    stream_debounce_ms: int = 500
    stream_confidence_threshold: float = 0.5
    stream_min_text_length: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
