"""HumanMark - Abstract modality analyzer.

Each modality (text, image, audio, video) has one concrete analyzer that turns
a payload into a fixed set of named [0,1] signals and a weighted AI score.
Analyzers are pure: no I/O, no shared mutable state, no exceptions on
malformed input.
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from humanmark.core.forensics.byte_stats import clamp
from humanmark.core.fusion.score_aggregator import ScoreAggregator
from humanmark.core.fusion.weights import WeightTable
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", str, bytes)


@dataclass(frozen=True)
class AnalysisResult:
    """Standardised output every modality analyzer returns."""

    category: ContentCategory
    ai_score: float
    signals: dict[str, float]
    metadata: Any = None
    stats: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_type": self.category.value,
            "ai_score": round(self.ai_score, 4),
            "signals": {k: round(v, 4) for k, v in self.signals.items()},
            "metadata": _as_dict(self.metadata),
            "stats": _as_dict(self.stats),
            **self.details,
        }


def _as_dict(obj: Any) -> dict[str, Any]:
    if obj is None:
        return {}
    if dataclasses.is_dataclass(obj):
        return {k: (v.value if hasattr(v, "value") else v) for k, v in dataclasses.asdict(obj).items()}
    return dict(obj)


class BaseAnalyzer(ABC, Generic[PayloadT]):
    """Base class for the four modality engines.

    Subclasses implement _run(), returning the raw signals together with
    the metadata, stats and extra details to attach to the result.
    """

    category: ContentCategory = ContentCategory.UNKNOWN

    def __init__(self, weights: WeightTable) -> None:
        self.weights = weights

    @property
    def name(self) -> str:
        return f"{self.category.value}_analyzer"

    def analyze(self, payload: PayloadT) -> AnalysisResult:
        signals, metadata, stats, details = self._run(payload)
        signals = {k: clamp(v) for k, v in signals.items()}
        return AnalysisResult(
            category=self.category,
            ai_score=ScoreAggregator.aggregate(signals, self.weights),
            signals=signals,
            metadata=metadata,
            stats=stats,
            details=details,
        )

    @abstractmethod
    def _run(self, payload: PayloadT) -> tuple[dict[str, float], Any, Any, dict[str, Any]]:
        """Return (signals, metadata, stats, details) for one payload."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} category={self.category.value} signals={list(self.weights)}>"
