"""Remote strategy: Gemini extracts the CV, the reply is normalized to a CVDocument."""

import logging
from datetime import datetime, timezone

from models.cv_document import Contact, CVDocument, CVMetadata, Education, Experience, Skills
from services import gemini_client
from services.cv_mapper import is_language_name
from services.errors import ExtractionError
from services.pipeline.base import BaseExtractionStrategy
from services.prompt_builder import build_cv_extraction_prompt

logger = logging.getLogger(__name__)

AI_CONFIDENCE = 0.9


def _s(value) -> str:
    """Stringify a JSON scalar; null and the literal string "null" become ""."""
    if value is None:
        return ""
    text = str(value).strip()
    return "" if text.lower() == "null" else text


def _dicts(value) -> list[dict]:
    return [item for item in value if isinstance(item, dict)] if isinstance(value, list) else []


def _strings(value) -> list[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        text = _s(item.get("name")) if isinstance(item, dict) else _s(item)
        if text:
            items.append(text)
    return items


def _skills(raw) -> Skills:
    if isinstance(raw, dict):
        return Skills(
            technical=_strings(raw.get("technical")),
            soft=_strings(raw.get("soft")),
            languages=_strings(raw.get("languages")),
        )
    technical, languages = [], []
    for skill in _strings(raw):
        (languages if is_language_name(skill) else technical).append(skill)
    return Skills(technical=technical, languages=languages)


def normalize_ai_payload(data: dict, language: str, timestamp: str | None = None) -> CVDocument:
    """Convert the model's JSON reply into a CVDocument."""
    personal = data.get("personal_info") if isinstance(data.get("personal_info"), dict) else {}
    contact = Contact(
        name=_s(personal.get("name")),
        email=_s(personal.get("email")),
        phone=_s(personal.get("phone")),
        location=_s(personal.get("location")),
        linkedin=_s(personal.get("linkedin")),
        github=_s(personal.get("github")),
    )

    experience = [
        Experience(
            company=_s(item.get("company")),
            position=_s(item.get("job_title") or item.get("position")),
            location=_s(item.get("location")),
            start_date=_s(item.get("start_date")),
            end_date=_s(item.get("end_date")),
            description="; ".join(_strings(item.get("responsibilities"))) or _s(item.get("description")),
            confidence=AI_CONFIDENCE,
        )
        for item in _dicts(data.get("work_experience"))
    ]
    education = [
        Education(
            degree=_s(item.get("degree")),
            institution=_s(item.get("institution")),
            field=_s(item.get("field_of_study") or item.get("field")),
            start_date=_s(item.get("start_date")),
            end_date=_s(item.get("end_date")),
            gpa=_s(item.get("gpa")),
        )
        for item in _dicts(data.get("education"))
    ]

    return CVDocument(
        contact=contact,
        summary=_s(data.get("summary")),
        experience=[e for e in experience if e.company or e.position],
        education=[e for e in education if e.degree or e.institution],
        skills=_skills(data.get("skills")),
        certifications=_strings(data.get("certifications")),
        metadata=CVMetadata(
            confidence=AI_CONFIDENCE,
            language=language,
            timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
            needs_review=not contact.name or not (contact.email or contact.phone),
        ),
    )


class AIStrategy(BaseExtractionStrategy):
    strategy_name = "ai"

    def load(self) -> None:
        # Client creation is deferred to the first call; only the key is checked here
        if not gemini_client.is_configured():
            logger.warning("GEMINI_API_KEY not set - AI strategy unavailable")

    def is_available(self) -> bool:
        return gemini_client.is_configured()

    async def extract(self, text: str, language: str) -> CVDocument:
        prompt = build_cv_extraction_prompt(text, language)
        data = await gemini_client.generate_json(prompt)
        if data is None:
            raise ExtractionError("AI returned no usable JSON")
        cv = normalize_ai_payload(data, language)
        logger.info(
            "AI extraction: name=%s, %d skills, %d education, %d experience",
            "yes" if cv.contact.name else "no",
            len(cv.skills.technical), len(cv.education), len(cv.experience),
        )
        return cv
