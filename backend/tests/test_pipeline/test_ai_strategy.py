"""Tests for the Gemini-backed strategy and its reply normalization."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from config import settings
from services.errors import ExtractionError
from services.gemini_client import parse_json_response
from services.pipeline.ai_strategy import AIStrategy, normalize_ai_payload
from services.pipeline.registry import get_strategy
from services.prompt_builder import build_cv_extraction_prompt

PAYLOAD = {
    "personal_info": {
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": None,
        "location": "Mumbai",
        "linkedin": "null",
    },
    "summary": "Backend developer",
    "work_experience": [
        {"company": "TCS", "job_title": "Developer", "start_date": "2018", "end_date": "2021",
         "responsibilities": ["Built APIs", "Wrote tests"]},
        {"company": "", "job_title": ""},
        "not a dict",
    ],
    "education": [{"degree": "BTech", "institution": "IIT Bombay", "field_of_study": "Computer Science"}],
    "skills": ["Python", "Django", "Hindi"],
    "certifications": [{"name": "AWS Certified"}, "Scrum Master"],
}


class TestNormalize:
    def test_contact_and_nulls(self):
        cv = normalize_ai_payload(PAYLOAD, "en", timestamp="t")
        assert cv.contact.name == "Priya Sharma"
        assert cv.contact.phone == ""
        assert cv.contact.linkedin == ""
        assert cv.metadata.timestamp == "t"
        assert cv.metadata.language == "en"

    def test_experience_filters_empty_entries(self):
        cv = normalize_ai_payload(PAYLOAD, "en")
        assert len(cv.experience) == 1
        job = cv.experience[0]
        assert job.company == "TCS"
        assert job.position == "Developer"
        assert job.description == "Built APIs; Wrote tests"

    def test_education_and_skills(self):
        cv = normalize_ai_payload(PAYLOAD, "en")
        assert cv.education[0].field == "Computer Science"
        assert cv.skills.technical == ["Python", "Django"]
        assert cv.skills.languages == ["Hindi"]
        assert cv.certifications == ["AWS Certified", "Scrum Master"]

    def test_review_flag(self):
        assert normalize_ai_payload(PAYLOAD, "en").metadata.needs_review is False
        assert normalize_ai_payload({"personal_info": {"name": "X"}}, "en").metadata.needs_review is True
        assert normalize_ai_payload({}, "en").metadata.needs_review is True

    def test_structured_skills(self):
        cv = normalize_ai_payload(
            {"skills": {"technical": ["Go"], "soft": ["Teamwork"], "languages": ["Tamil"]}}, "ta",
        )
        assert cv.skills.technical == ["Go"]
        assert cv.skills.soft == ["Teamwork"]
        assert cv.skills.languages == ["Tamil"]


class TestParseJsonResponse:
    def test_plain(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_prose(self):
        assert parse_json_response('Here you go: {"a": {"b": 2}} Thanks!') == {"a": {"b": 2}}

    def test_invalid(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_response("no json here")
        with pytest.raises(json.JSONDecodeError):
            parse_json_response("[1, 2]")


class TestAIStrategy:
    @pytest.mark.asyncio
    async def test_extract(self):
        with patch("services.gemini_client.generate_json", new=AsyncMock(return_value=PAYLOAD)) as mock:
            cv = await AIStrategy().extract("some text", "en")
        assert cv.contact.email == "priya@example.com"
        prompt = mock.await_args.args[0]
        assert "some text" in prompt

    @pytest.mark.asyncio
    async def test_unusable_reply(self):
        with patch("services.gemini_client.generate_json", new=AsyncMock(return_value=None)):
            with pytest.raises(ExtractionError):
                await AIStrategy().extract("some text", "en")

    def test_availability_follows_api_key(self):
        with patch("services.gemini_client.settings") as mock_settings:
            mock_settings.gemini_api_key = ""
            assert AIStrategy().is_available() is False
            mock_settings.gemini_api_key = "key"
            assert AIStrategy().is_available() is True


class TestRegistry:
    def test_strategies_are_loaded_singletons(self):
        ner = get_strategy("ner")
        assert ner.is_loaded
        assert get_strategy("ner") is ner

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            get_strategy("ocr")


def test_prompt_mentions_language():
    prompt = build_cv_extraction_prompt("मेरा नाम राहुल है", "hi")
    assert "मेरा नाम राहुल है" in prompt
    assert "personal_info" in prompt


@pytest.mark.integration
@pytest.mark.skipif(not settings.gemini_api_key, reason="GEMINI_API_KEY not set")
@pytest.mark.asyncio
async def test_live_gemini_extraction():
    text = "My name is Anita Desai. I am a Python developer at Wipro in Bangalore. Email anita@example.com."
    cv = await AIStrategy().extract(text, "en")
    assert cv.contact.email == "anita@example.com"
    assert "Anita" in cv.contact.name
