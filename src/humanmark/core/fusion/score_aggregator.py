"""HumanMark - Score aggregation.

Weighted mean of named [0,1] signals, and weighted fusion of per-detector
opinions. Both fall back to a neutral 0.5 when nothing carries weight.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from humanmark.core.forensics.byte_stats import clamp
from humanmark.core.fusion.weights import DEFAULT_DETECTOR_WEIGHT

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5


class ScoreAggregator:
    @staticmethod
    def aggregate(signals: Mapping[str, float], weights: Mapping[str, float]) -> float:
        """Combine signals with their declared weights. Signals without a weight are ignored."""
        weighted_sum = 0.0
        total_weight = 0.0
        for name, value in signals.items():
            w = weights.get(name)
            if w is None:
                continue
            weighted_sum += clamp(value) * w
            total_weight += w
        if total_weight == 0:
            return NEUTRAL_SCORE
        return clamp(weighted_sum / total_weight)

    @staticmethod
    def fuse(opinions: Mapping[str, float], detector_weights: Mapping[str, float]) -> float:
        """Fuse per-detector AI probabilities; unlisted detectors weigh DEFAULT_DETECTOR_WEIGHT."""
        if not opinions:
            return NEUTRAL_SCORE
        weighted_sum = 0.0
        total_weight = 0.0
        for name, score in opinions.items():
            w = detector_weights.get(name, DEFAULT_DETECTOR_WEIGHT)
            weighted_sum += clamp(score) * w
            total_weight += w
        if total_weight == 0:
            return NEUTRAL_SCORE
        return clamp(weighted_sum / total_weight)

    @staticmethod
    def verdict(ai_score: float) -> dict[str, Any]:
        """Binary call plus distance-from-neutral confidence."""
        return {
            "human": ai_score < NEUTRAL_SCORE,
            "confidence": abs(ai_score - NEUTRAL_SCORE) * 2,
        }
