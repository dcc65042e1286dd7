"""Debounced re-extraction of a growing streamed transcript.

Every update cancels the pending timer and arms a new one (trailing
debounce), so the local pipeline runs at most once per quiet period and only
on the text present when the last timer fires. Extraction runs synchronously
inside the timer callback on the event loop, so two extractions of one
session can never interleave.
"""

import asyncio
import logging
from typing import Callable

from config import settings
from models.cv_document import CVDocument
from models.entities import Entity
from services.cv_mapper import create_cv_structure
from services.errors import CVExtractionError

logger = logging.getLogger(__name__)

EntityExtractor = Callable[[str, str], list[Entity]]
ResultCallback = Callable[[list[Entity], CVDocument], None]


class StreamingSession:
    def __init__(
        self,
        extract: EntityExtractor,
        *,
        language: str = "auto",
        debounce_ms: int | None = None,
        confidence_threshold: float | None = None,
        min_text_length: int | None = None,
        on_result: ResultCallback | None = None,
    ) -> None:
        self._extract = extract
        self.language = language
        self.debounce_ms = settings.stream_debounce_ms if debounce_ms is None else debounce_ms
        self.confidence_threshold = (
            settings.stream_confidence_threshold if confidence_threshold is None else confidence_threshold
        )
        self.min_text_length = settings.stream_min_text_length if min_text_length is None else min_text_length
        self.on_result = on_result

        self._segments: list[str] = []
        self._handle: asyncio.TimerHandle | None = None
        self._closed = False

        self.entities: list[Entity] = []
        self.cv: CVDocument | None = None
        self.runs = 0
        self.last_error: CVExtractionError | None = None

    @property
    def text(self) -> str:
        return " ".join(self._segments)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    # -- updates -------------------------------------------------------------

    def add_segment(self, segment: str, is_final: bool = True) -> None:
        """Append a final transcript segment and reschedule. Interim segments are ignored."""
        self._check_open()
        if not is_final:
            return
        segment = segment.strip()
        if segment:
            self._segments.append(segment)
            self._schedule()

    def update(self, text: str) -> None:
        """Replace the whole transcript and reschedule."""
        self._check_open()
        self._segments = [text.strip()] if text.strip() else []
        self._schedule()

    # -- control -------------------------------------------------------------

    def flush(self) -> CVDocument | None:
        """Cancel the pending timer and process the current text now."""
        self._cancel()
        return self._process()

    def clear(self) -> None:
        self._cancel()
        self._segments = []
        self.entities = []
        self.cv = None

    def close(self) -> None:
        self._cancel()
        self._closed = True

    # -- internals -----------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Streaming session is closed")

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.debounce_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._process()

    def _process(self) -> CVDocument | None:
        text = self.text
        if len(text) < self.min_text_length:
            logger.debug("Skipping extraction: %d chars < %d", len(text), self.min_text_length)
            return None

        self.runs += 1
        try:
            entities = self._extract(text, self.language)
            kept = [e for e in entities if e.confidence >= self.confidence_threshold]
            cv = create_cv_structure(kept, text)
        except CVExtractionError as e:
            self.last_error = e
            logger.warning("Streaming extraction failed: %s", e)
            return None

        self.entities, self.cv, self.last_error = kept, cv, None
        logger.debug("Streaming extraction #%d: %d entities", self.runs, len(kept))
        if self.on_result is not None:
            self.on_result(kept, cv)
        return cv
