"""Shared dependencies for API routes."""

from services.pipeline.hybrid import HybridCVExtractor, get_extractor


def get_hybrid_extractor() -> HybridCVExtractor:
    return get_extractor()
