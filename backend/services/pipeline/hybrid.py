"""Hybrid CV extraction: remote AI first, local NER pipeline as fallback.

Flow:
    text
      ├─ AI strategy (Gemini), bounded by ai_timeout_s
      │       ↓ fails / times out
      └─ NER strategy (tokenize → extractors → resolve → map)   if enabled
                       ↓
         CVDocument with extraction metadata
"""

import asyncio
import logging

from config import settings
from models.cv_document import CVDocument
from services.errors import AITimeoutError, ConfigurationError, ExtractionError, InputError
from services.ner.engine import resolve_language
from services.pipeline.base import BaseExtractionStrategy
from services.pipeline.registry import get_strategy
from services.pipeline.streaming import ResultCallback, StreamingSession

logger = logging.getLogger(__name__)


class HybridCVExtractor:
    def __init__(
        self,
        ai: BaseExtractionStrategy | None = None,
        ner: BaseExtractionStrategy | None = None,
        *,
        ai_enabled: bool | None = None,
        ner_fallback_enabled: bool | None = None,
        ai_timeout_s: float | None = None,
    ) -> None:
        self.ai = ai if ai is not None else get_strategy("ai")
        self.ner = ner if ner is not None else get_strategy("ner")
        self.ai_enabled = settings.ai_enabled if ai_enabled is None else ai_enabled
        self.ner_fallback_enabled = (
            settings.ner_fallback_enabled if ner_fallback_enabled is None else ner_fallback_enabled
        )
        self.ai_timeout_s = settings.ai_timeout_s if ai_timeout_s is None else ai_timeout_s
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {"attempts": 0, "ai_successes": 0, "ner_fallbacks": 0, "failures": 0}

    @property
    def ai_available(self) -> bool:
        return self.ai_enabled and self.ai.is_available()

    @property
    def ner_available(self) -> bool:
        return self.ner_fallback_enabled and self.ner.is_available()

    # ------------------------------------------------------------------

    async def extract_cv(self, text: str, language: str = "auto") -> CVDocument:
        """Extract a CV, preferring the AI strategy.

        Raises InputError for blank text, ConfigurationError when no strategy
        is available and ExtractionError when every enabled strategy failed.
        """
        self.stats["attempts"] += 1

        if not text or not text.strip():
            self.stats["failures"] += 1
            raise InputError("Text is required for extraction")

        if not self.ai_available and not self.ner_available:
            self.stats["failures"] += 1
            raise ConfigurationError(
                "No extraction strategy available: set GEMINI_API_KEY or enable the NER fallback"
            )

        language = resolve_language(text, language)
        logger.info(
            "Hybrid extraction: %d chars, language=%s, ai=%s, ner=%s",
            len(text), language, self.ai_available, self.ner_available,
        )

        ai_error: Exception | None = None
        if self.ai_available:
            try:
                cv = await self._extract_with_ai(text, language)
                self.stats["ai_successes"] += 1
                return self._finalize(cv, "ai", text, ai_attempted=True, ai_error=None)
            except Exception as e:
                ai_error = e
                if not self.ner_available:
                    self.stats["failures"] += 1
                    logger.error("AI extraction failed and NER fallback is disabled: %s", e)
                    raise ExtractionError("AI extraction failed", e) from e
                logger.warning("AI extraction failed, falling back to local NER: %s", e)

        try:
            cv = await self.ner.extract(text, language)
        except Exception as e:
            self.stats["failures"] += 1
            logger.error("Local NER extraction failed: %s", e)
            message = "All extraction strategies failed" if ai_error else "Local NER extraction failed"
            raise ExtractionError(message, e) from e

        self.stats["ner_fallbacks"] += 1
        return self._finalize(cv, "ner", text, ai_attempted=ai_error is not None, ai_error=ai_error)

    async def _extract_with_ai(self, text: str, language: str) -> CVDocument:
        try:
            return await asyncio.wait_for(self.ai.extract(text, language), timeout=self.ai_timeout_s)
        except asyncio.TimeoutError as e:
            raise AITimeoutError(f"AI extraction timed out after {self.ai_timeout_s:g}s") from e

    @staticmethod
    def _finalize(
        cv: CVDocument,
        method: str,
        text: str,
        ai_attempted: bool,
        ai_error: Exception | None,
    ) -> CVDocument:
        metadata = cv.metadata.model_copy(update={
            "extraction_method": method,
            "ai_attempted": ai_attempted,
            "ai_error": str(ai_error) if ai_error is not None else None,
            "text_length": len(text),
        })
        logger.info(
            "Extraction complete: method=%s, confidence=%.2f, needs_review=%s",
            method, metadata.confidence, metadata.needs_review,
        )
        return cv.model_copy(update={"metadata": metadata})

    # ------------------------------------------------------------------

    def check_readiness(self) -> dict:
        ai, ner = self.ai_available, self.ner_available
        if ai:
            method = "ai"
            message = "AI extraction ready" + (" with NER fallback" if ner else "")
        elif ner:
            method = "ner"
            message = "AI extraction unavailable - using local NER"
        else:
            method = "none"
            message = "No extraction strategy available"
        return {
            "ready": ai or ner,
            "ai_available": ai,
            "ner_available": ner,
            "recommended_method": method,
            "message": message,
        }

    def get_stats(self) -> dict:
        attempts = self.stats["attempts"]

        def rate(count: int) -> str:
            return f"{(count / attempts * 100) if attempts else 0.0:.1f}%"

        return {
            **self.stats,
            "ai_success_rate": rate(self.stats["ai_successes"]),
            "ner_usage_rate": rate(self.stats["ner_fallbacks"]),
        }

    def reset_stats(self) -> None:
        self.stats = self._empty_stats()

    def stream_session(
        self,
        language: str = "auto",
        on_result: ResultCallback | None = None,
        **kwargs,
    ) -> StreamingSession:
        """Debounced local-pipeline session for a growing transcript."""
        return StreamingSession(
            self.ner.extract_entities,
            language=language,
            on_result=on_result,
            **kwargs,
        )


_extractor: HybridCVExtractor | None = None


def get_extractor() -> HybridCVExtractor:
    global _extractor
    if _extractor is None:
        _extractor = HybridCVExtractor()
    return _extractor


def reset_extractor() -> None:
    """Drop the shared extractor. Useful for testing."""
    global _extractor
    _extractor = None
