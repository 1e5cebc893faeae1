"""HumanMark - Fixed weight tables.

Signal weights per modality and reliability weights per detector. Tables are
read-only after import; validate_weight_tables() is called once at startup.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from humanmark.models.enums import ContentCategory

WEIGHT_SUM_TOLERANCE = 0.01
DEFAULT_DETECTOR_WEIGHT = 1.0
INTERNAL_DETECTOR = "humanmark"


class WeightTable(Mapping[str, float]):
    """Immutable signal-name -> positive weight mapping."""

    __slots__ = ("name", "_weights")

    def __init__(self, name: str, weights: Mapping[str, float]) -> None:
        for key, w in weights.items():
            if w <= 0:
                raise ValueError(f"weight for {name}.{key} must be positive, got {w}")
        self.name = name
        self._weights = MappingProxyType(dict(weights))

    def __getitem__(self, key: str) -> float:
        return self._weights[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    @property
    def total(self) -> float:
        return sum(self._weights.values())

    def is_normalized(self, tolerance: float = WEIGHT_SUM_TOLERANCE) -> bool:
        return abs(self.total - 1.0) <= tolerance

    def __repr__(self) -> str:
        return f"<WeightTable {self.name} {dict(self._weights)!r}>"


TEXT_WEIGHTS = WeightTable(
    "text",
    {
        "sentence_variance": 0.15,
        "vocabulary_richness": 0.20,
        "burstiness": 0.10,
        "punctuation_variety": 0.10,
        "ai_phrases": 0.20,
        "word_length_variance": 0.05,
        "contractions": 0.10,
        "repetition": 0.10,
    },
)

IMAGE_WEIGHTS = WeightTable(
    "image",
    {
        "metadata": 0.25,
        "color_distribution": 0.20,
        "edge_consistency": 0.15,
        "noise_pattern": 0.15,
        "compression": 0.15,
        "symmetry": 0.10,
    },
)

AUDIO_WEIGHTS = WeightTable(
    "audio",
    {
        "metadata": 0.25,
        "format": 0.15,
        "pattern": 0.20,
        "quality": 0.15,
        "ai_signatures": 0.15,
        "noise": 0.10,
    },
)

VIDEO_WEIGHTS = WeightTable(
    "video",
    {
        "metadata": 0.25,
        "container": 0.20,
        "audio_presence": 0.15,
        "temporal_pattern": 0.15,
        "encoding": 0.15,
        "bitrate_consistency": 0.10,
    },
)

SIGNAL_WEIGHTS: Mapping[ContentCategory, WeightTable] = MappingProxyType(
    {
        ContentCategory.TEXT: TEXT_WEIGHTS,
        ContentCategory.IMAGE: IMAGE_WEIGHTS,
        ContentCategory.AUDIO: AUDIO_WEIGHTS,
        ContentCategory.VIDEO: VIDEO_WEIGHTS,
    }
)

# Empirical reliability of each detector; the internal engine is the 1.0 baseline.
DETECTOR_WEIGHTS: Mapping[ContentCategory, WeightTable] = MappingProxyType(
    {
        ContentCategory.TEXT: WeightTable(
            "text_detectors", {INTERNAL_DETECTOR: 1.0, "hive": 1.2, "gptzero": 1.1, "openai": 0.9}
        ),
        ContentCategory.IMAGE: WeightTable("image_detectors", {INTERNAL_DETECTOR: 1.0, "hive": 1.3}),
        ContentCategory.AUDIO: WeightTable("audio_detectors", {INTERNAL_DETECTOR: 1.0, "hive": 1.3}),
        ContentCategory.VIDEO: WeightTable("video_detectors", {INTERNAL_DETECTOR: 1.0, "hive": 1.4}),
    }
)


def validate_weight_tables(tolerance: float = WEIGHT_SUM_TOLERANCE) -> None:
    """Raise ValueError if any signal weight table does not sum to ~1.0."""
    for category, table in SIGNAL_WEIGHTS.items():
        if not table.is_normalized(tolerance):
            raise ValueError(f"{category.value} signal weights sum to {table.total:.4f}, expected 1.0")
