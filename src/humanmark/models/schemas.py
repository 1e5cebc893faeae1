"""HumanMark - Pydantic models passed across the core boundary."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from humanmark.models.enums import ContentCategory


class AnalysisInput(BaseModel):
    """One piece of content to analyze.

    Carries text, raw bytes, or both; `url` and `filename` are references
    already resolved by the caller and only feed classification and hashing.
    """

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    data: bytes | None = None
    url: str | None = None
    filename: str | None = None
    mime_type: str | None = None
    content_type: str | None = Field(None, description="Explicit category name or MIME hint")

    @classmethod
    def from_text(cls, text: str, content_type: str | None = None) -> AnalysisInput:
        return cls(text=text, content_type=content_type)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        filename: str | None = None,
        mime_type: str | None = None,
        content_type: str | None = None,
    ) -> AnalysisInput:
        return cls(data=data, filename=filename, mime_type=mime_type, content_type=content_type)

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.data and not self.url


class DetectionVerdict(BaseModel):
    """Final, immutable outcome of one analysis."""

    model_config = ConfigDict(frozen=True)

    id: str
    human: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    ai_score: float = Field(..., ge=0.0, le=1.0)
    content_type: ContentCategory
    detectors: list[str]
    content_hash: str
    processing_time_ms: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    detector_scores: dict[str, float] = Field(default_factory=dict)
    analysis: dict[str, Any] = Field(default_factory=dict)

    def to_response(self, detailed: bool = False) -> dict[str, Any]:
        body: dict[str, Any] = {
            "id": self.id,
            "human": self.human,
            "confidence": round(self.confidence, 4),
            "content_type": self.content_type.value,
            "ai_score": round(self.ai_score, 4),
            "detectors": list(self.detectors),
            "content_hash": self.content_hash,
            "processing_time_ms": round(self.processing_time_ms, 2),
        }
        if detailed:
            body["details"] = {
                "detectors": {k: round(v, 4) for k, v in self.detector_scores.items()},
                **self.analysis,
            }
        return body
