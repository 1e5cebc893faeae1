"""HumanMark - Image forensic analyzer."""

from __future__ import annotations

import logging
import math
from itertools import combinations
from typing import Any

from humanmark.core.base_analyzer import BaseAnalyzer
from humanmark.core.forensics.byte_stats import (
    byte_similarity,
    clamp,
    population_variance,
    shannon_entropy,
)
from humanmark.core.fusion.weights import IMAGE_WEIGHTS, WeightTable
from humanmark.core.image.image_parser import (
    AI_GENERATOR_LABEL,
    ImageMetadata,
    extract_metadata,
    extract_stats,
    sniff_image_format,
)
from humanmark.models.enums import ContentCategory, ImageFormat

logger = logging.getLogger(__name__)

NEUTRAL = 0.5


class ImageAnalyzer(BaseAnalyzer[bytes]):
    category = ContentCategory.IMAGE

    def __init__(self, weights: WeightTable = IMAGE_WEIGHTS) -> None:
        super().__init__(weights)

    def _run(self, data: bytes) -> tuple[dict[str, float], Any, Any, dict[str, Any]]:
        fmt = sniff_image_format(data)
        meta = extract_metadata(data, fmt)
        stats = extract_stats(data, fmt)
        signals = {
            "metadata": self.metadata_signal(meta),
            "color_distribution": self.color_distribution(data, fmt),
            "edge_consistency": self.edge_consistency(data),
            "noise_pattern": self.noise_pattern(data),
            "compression": self.compression(data, fmt),
            "symmetry": self.symmetry(data),
        }
        return signals, meta, stats, {"format": fmt.value}

    @staticmethod
    def metadata_signal(meta: ImageMetadata) -> float:
        score = 0.5
        score += -0.2 if meta.has_exif else 0.2
        if meta.camera_make:
            score -= 0.2
        if meta.has_gps:
            score -= 0.2
        if meta.software == AI_GENERATOR_LABEL:
            score += 0.4
        if meta.is_screenshot:
            score += 0.1
        return clamp(score)

    @staticmethod
    def color_distribution(data: bytes, fmt: ImageFormat) -> float:
        """Entropy of an early payload window; extremes on either side are suspicious."""
        if len(data) < 1000:
            return NEUTRAL
        start = 50 if fmt == ImageFormat.PNG else 100
        if len(data) < start + 1000:
            return NEUTRAL
        entropy = shannon_entropy(data[start : start + 1000])
        return 0.7 if entropy < 0.6 or entropy > 0.98 else 0.4

    @staticmethod
    def edge_consistency(data: bytes) -> float:
        """Near-identical 256-byte windows across the file suggest synthetic regularity."""
        if len(data) < 5000:
            return NEUTRAL
        step = len(data) // 12
        samples = []
        i = 1000
        while i < len(data) - 256 and len(samples) < 10:
            samples.append(data[i : i + 256])
            i += step
        if len(samples) < 3:
            return NEUTRAL

        similar = sum(1 for a, b in combinations(samples, 2) if byte_similarity(a, b) > 0.9)
        n = len(samples)
        ratio = similar / (n * (n - 1) // 2)
        return 0.7 if ratio > 0.3 else 0.4

    @staticmethod
    def noise_pattern(data: bytes) -> float:
        if len(data) < 2000:
            return NEUTRAL
        sample = data[500:1500]
        variances = [population_variance(sample[i : i + 16]) for i in range(0, len(sample) - 16, 16)]
        avg = sum(variances) / len(variances)
        cv = math.sqrt(population_variance(variances)) / (avg + 1)
        if avg < 10:
            return 0.7
        if cv > 2:
            return 0.6
        return 0.4

    @staticmethod
    def compression(data: bytes, fmt: ImageFormat) -> float:
        """Sum of the first quantisation table: unusually fine or coarse tables lean synthetic."""
        if fmt != ImageFormat.JPEG:
            return NEUTRAL
        dqt = data.find(b"\xff\xdb", 0, max(0, len(data) - 99))
        if dqt >= 0 and dqt + 69 < len(data):
            total = sum(data[dqt + 5 : dqt + 69])
            if total < 200:
                return 0.7
            if total > 3000:
                return 0.6
            return 0.4
        return NEUTRAL

    @staticmethod
    def symmetry(data: bytes) -> float:
        if len(data) < 2000:
            return NEUTRAL
        mid = len(data) // 2
        if mid + 500 > len(data):
            return NEUTRAL
        return 0.7 if byte_similarity(data[100:600], data[mid : mid + 500]) > 0.7 else 0.4
