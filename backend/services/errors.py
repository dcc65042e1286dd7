"""Exception taxonomy for CV extraction.

Only InputError, ConfigurationError, ExtractionError and CVMappingError ever
reach callers. GazetteerMissing and ExtractorFailure are raised and handled
inside the NER pipeline; AITimeoutError is handled by the hybrid orchestrator.
"""


class CVExtractionError(Exception):
    """Base class for all extraction errors."""


class InputError(CVExtractionError, ValueError):
    """Text was empty or whitespace-only."""


class ConfigurationError(CVExtractionError):
    """Neither the AI strategy nor the local NER strategy is available."""


class GazetteerMissing(CVExtractionError):
    """Gazetteer file could not be read; the built-in lexicon is used instead."""


class ExtractorFailure(CVExtractionError):
    """A single category extractor raised."""

    def __init__(self, category: str, cause: BaseException) -> None:
        super().__init__(f"{category} extractor failed: {cause}")
        self.category = category
        self.cause = cause


class AITimeoutError(CVExtractionError, TimeoutError):
    """The remote AI call did not finish within the configured timeout."""


class ExtractionError(CVExtractionError):
    """Every enabled strategy failed. ``cause`` holds the last underlying error."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class CVMappingError(CVExtractionError, ValueError):
    """Entities handed to the field mapper do not fit the raw text."""
