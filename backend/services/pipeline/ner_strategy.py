"""Local strategy: rule-based NER followed by the CV field mapper."""

import logging

from models.cv_document import CVDocument
from models.entities import Entity
from services.cv_mapper import create_cv_structure
from services.ner.engine import extract_entities
from services.ner.gazetteer import Lexicon, get_gazetteer
from services.pipeline.base import BaseExtractionStrategy

logger = logging.getLogger(__name__)


class NERStrategy(BaseExtractionStrategy):
    strategy_name = "ner"

    def __init__(self) -> None:
        self._gazetteer: dict[str, Lexicon] | None = None

    def load(self) -> None:
        self._gazetteer = get_gazetteer()

    def is_available(self) -> bool:
        # The built-in lexicon stands in for a missing gazetteer file
        return True

    def extract_entities(self, text: str, language: str) -> list[Entity]:
        self.ensure_loaded()
        return extract_entities(text, language, self._gazetteer)

    async def extract(self, text: str, language: str) -> CVDocument:
        entities = self.extract_entities(text, language)
        return create_cv_structure(entities, text)
