"""HumanMark - Audio forensic analyzer."""

from __future__ import annotations

import logging
from typing import Any

from humanmark.core.audio.audio_parser import AudioMetadata, extract_metadata, sniff_audio_format
from humanmark.core.base_analyzer import BaseAnalyzer
from humanmark.core.forensics.byte_stats import (
    byte_similarity,
    clamp,
    find_token,
    population_variance,
    shannon_entropy,
)
from humanmark.core.fusion.weights import AUDIO_WEIGHTS, WeightTable
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

NEUTRAL = 0.5

AI_TOOLS = (
    "elevenlabs", "eleven labs", "murf", "play.ht", "resemble",
    "descript", "synthesia", "wellsaid", "amazon polly", "google tts",
    "azure speech", "suno", "udio", "musicgen", "riffusion",
)  # fmt: skip

AI_SIGNATURES = (
    "elevenlabs", "murf.ai", "play.ht", "resemble.ai", "suno", "udio",
    "generated", "synthetic", "ai voice", "text-to-speech", "tts", "voice clone",
)  # fmt: skip

STANDARD_SAMPLE_RATES = frozenset({44100, 48000, 96000, 22050, 16000})


class AudioAnalyzer(BaseAnalyzer[bytes]):
    category = ContentCategory.AUDIO

    def __init__(self, weights: WeightTable = AUDIO_WEIGHTS) -> None:
        super().__init__(weights)

    def _run(self, data: bytes) -> tuple[dict[str, float], Any, Any, dict[str, Any]]:
        fmt = sniff_audio_format(data)
        meta = extract_metadata(data, fmt)
        signals = {
            "metadata": self.metadata_signal(meta),
            "format": self.format_signal(meta),
            "pattern": self.pattern(data),
            "quality": self.quality(meta),
            "ai_signatures": self.ai_signatures(data, meta),
            "noise": self.noise(data),
        }
        stats = {
            "sample_rate": meta.sample_rate,
            "channels": meta.channels,
            "bit_depth": meta.bit_depth,
            "bitrate": meta.bitrate,
            "file_size": meta.file_size,
        }
        return signals, meta, stats, {"format": meta.format}

    @staticmethod
    def metadata_signal(meta: AudioMetadata) -> float:
        score = 0.5
        if meta.is_ai_marked:
            score += 0.35
        if meta.has_recording_marker:
            score -= 0.2
        if meta.has_id3:
            score -= 0.1
        if find_token(meta.encoder.encode(), AI_TOOLS):
            score += 0.3
        return clamp(score)

    @staticmethod
    def format_signal(meta: AudioMetadata) -> float:
        score = 0.5
        if meta.sample_rate > 0 and meta.sample_rate not in STANDARD_SAMPLE_RATES:
            score += 0.1
        # Hi-res output is common for synthesis pipelines.
        if meta.sample_rate >= 96000 and meta.bit_depth >= 24:
            score += 0.1
        if meta.channels == 1:
            score += 0.1
        return clamp(score)

    @staticmethod
    def pattern(data: bytes) -> float:
        """Entropy spread across four regions of the file."""
        if len(data) < 5000:
            return NEUTRAL
        region = len(data) // 5
        entropies = []
        for i in range(1, 5):
            start = i * region
            end = start + min(2000, len(data) - start)
            if end > start:
                entropies.append(shannon_entropy(data[start:end]))
        if len(entropies) < 2:
            return NEUTRAL
        return 0.6 if population_variance(entropies) > 0.05 else 0.4

    @staticmethod
    def quality(meta: AudioMetadata) -> float:
        score = 0.5
        if 0 < meta.bitrate < 64:
            score += 0.1
        if meta.bitrate > 320:
            score += 0.1
        if 0 < meta.file_size < 10000:
            score += 0.2
        return clamp(score)

    @staticmethod
    def ai_signatures(data: bytes, meta: AudioMetadata) -> float:
        score = 0.0
        if find_token(data[:50000], AI_SIGNATURES):
            score += 0.3
        if meta.is_ai_marked:
            score += 0.4
        return min(1.0, score)

    @staticmethod
    def noise(data: bytes) -> float:
        """Adjacent 100-byte windows that repeat suggest a generated noise floor."""
        if len(data) < 10000:
            return NEUTRAL
        start = len(data) // 3
        sample = data[start : start + min(5000, len(data) - start)]
        repeats = 0
        for i in range(0, len(sample) - 200, 100):
            if byte_similarity(sample[i : i + 100], sample[i + 100 : i + 200]) > 0.9:
                repeats += 1
        return 0.7 if repeats > 5 else 0.4
