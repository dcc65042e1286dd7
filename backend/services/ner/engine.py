"""Rule-based multilingual entity extraction.

Tokenizes the text, runs the category extractors in priority order over a
fresh claim set, and resolves overlaps. The result depends only on the text,
the language and the (read-only) gazetteer.
"""

import logging

from config import ConfidenceSettings, settings
from models.entities import Entity
from services.errors import ExtractorFailure, InputError
from services.ner.extractors import EXTRACTORS, ExtractionContext
from services.ner.gazetteer import Lexicon, get_lexicon
from services.ner.ranges import ProcessedRanges
from services.ner.resolver import resolve_overlaps
from services.ner.scripts import detect_language
from services.ner.tokenizer import tokenize

logger = logging.getLogger(__name__)


def resolve_language(text: str, language: str | None) -> str:
    """Map ``None``/``"auto"`` to the language detected from the text's script."""
    if not language or language == "auto":
        return detect_language(text, default=settings.default_language)
    return language


def extract_entities(
    text: str,
    language: str | None = None,
    gazetteer: dict[str, Lexicon] | None = None,
    confidence: ConfidenceSettings | None = None,
) -> list[Entity]:
    """Extract a non-overlapping, position-sorted entity list from ``text``.

    Raises InputError for empty or whitespace-only text. A failing category
    extractor contributes no entities and releases any spans it had claimed.
    """
    if not text or not text.strip():
        raise InputError("Text is empty")

    language = resolve_language(text, language)
    lexicon = get_lexicon(language, gazetteer)
    ctx = ExtractionContext(
        text=text,
        tokens=tokenize(text),
        lexicon=lexicon,
        ranges=ProcessedRanges(),
        language=language,
        confidence=confidence or settings.confidence,
    )

    candidates: list[Entity] = []
    for category, extractor in EXTRACTORS:
        checkpoint = ctx.ranges.snapshot()
        try:
            candidates.extend(extractor(ctx))
        except Exception as e:
            ctx.ranges.restore(checkpoint)
            logger.warning("%s - continuing without %s entities", ExtractorFailure(category, e), category)

    entities = resolve_overlaps(candidates)
    logger.debug(
        "Extracted %d entities (%d candidates, %d tokens, language=%s)",
        len(entities), len(candidates), len(ctx.tokens), language,
    )
    return entities
