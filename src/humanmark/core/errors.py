"""HumanMark - Analysis error taxonomy.

Only these reach callers of the orchestrator. Malformed containers and short
inputs never raise; they degrade to neutral signal values instead.
"""

from __future__ import annotations

from humanmark.models.enums import ContentCategory


class AnalysisError(Exception):
    """Base class for failures surfaced by DetectionOrchestrator.analyze()."""

    code = "analysis_error"


class NoContentError(AnalysisError):
    code = "no_content"

    def __init__(self, message: str = "no content to analyze") -> None:
        super().__init__(message)


class UnsupportedContentTypeError(AnalysisError):
    code = "unsupported_content_type"

    def __init__(self, category: ContentCategory | str = ContentCategory.UNKNOWN) -> None:
        self.category = ContentCategory(category)
        super().__init__(f"unsupported content type: {self.category.value}")


class ExternalDetectorError(Exception):
    """Raised inside an external detector when the remote reply is unusable."""


class ContentFetchError(Exception):
    """Raised when URL content cannot be downloaded within its size limit."""
