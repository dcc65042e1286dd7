"""Abstract base class for CV extraction strategies."""

from abc import ABC, abstractmethod
import logging

from models.cv_document import CVDocument

logger = logging.getLogger(__name__)


class BaseExtractionStrategy(ABC):
    """Base class for the strategies the hybrid extractor arbitrates between.

    Subclasses must implement:
        - strategy_name: identifier used in the registry and in result metadata
        - load(): prepare shared resources (client, gazetteer)
        - is_available(): whether the strategy can run with the current config
        - extract(text, language): produce a CVDocument or raise
    """

    strategy_name: str = ""
    _loaded: bool = False

    @abstractmethod
    def load(self) -> None:
        """Prepare resources. Called once by the registry."""

    @abstractmethod
    def is_available(self) -> bool:
        """True if the strategy is configured and can be used."""

    @abstractmethod
    async def extract(self, text: str, language: str) -> CVDocument:
        """Extract a CV from ``text``."""

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        """Load resources if not already loaded."""
        if not self._loaded:
            logger.info("Loading strategy: %s", self.strategy_name)
            self.load()
            self._loaded = True
            logger.info("Strategy loaded: %s", self.strategy_name)
