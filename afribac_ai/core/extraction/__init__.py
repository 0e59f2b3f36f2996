"""Page image extraction to HTML."""

from afribac_ai.core.extraction.extraction_service import ExtractionService

__all__ = ["ExtractionService"]
