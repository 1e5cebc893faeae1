"""HumanMark - Video forensic analyzer."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Any

from humanmark.core.base_analyzer import BaseAnalyzer
from humanmark.core.forensics.byte_stats import (
    byte_similarity,
    clamp,
    find_token,
    population_variance,
    shannon_entropy,
)
from humanmark.core.fusion.weights import VIDEO_WEIGHTS, WeightTable
from humanmark.core.video.video_parser import VideoMetadata, VideoStats, extract, sniff_video_format
from humanmark.models.enums import ContentCategory, VideoFormat

logger = logging.getLogger(__name__)

NEUTRAL = 0.5

AI_ENCODERS = (
    "runway", "pika", "sora", "gen-2", "gen2",
    "stable video", "stablevideo", "modelscope",
    "deforum", "animatediff", "zeroscope",
)  # fmt: skip

PRO_ENCODERS = ("premiere", "final cut", "davinci", "avid", "ffmpeg", "handbrake", "x264", "x265")

CODEC_TAGS = (b"avc1", b"h264", b"hvc1", b"hevc", b"vp09", b"av01")
EBML_SEGMENT_ID = b"\x18\x53\x80\x67"


class VideoAnalyzer(BaseAnalyzer[bytes]):
    category = ContentCategory.VIDEO

    def __init__(self, weights: WeightTable = VIDEO_WEIGHTS) -> None:
        super().__init__(weights)

    def _run(self, data: bytes) -> tuple[dict[str, float], Any, Any, dict[str, Any]]:
        fmt = sniff_video_format(data)
        meta, stats = extract(data, fmt)
        signals = {
            "metadata": self.metadata_signal(meta),
            "container": self.container(data, fmt),
            "audio_presence": self.audio_presence(meta),
            "temporal_pattern": self.temporal_pattern(data),
            "encoding": self.encoding(data, fmt),
            "bitrate_consistency": self.bitrate_consistency(data, stats),
        }
        return signals, meta, stats, {"format": fmt.value}

    @staticmethod
    def metadata_signal(meta: VideoMetadata) -> float:
        score = 0.5
        if meta.is_ai_marked:
            score += 0.4
        if not meta.has_audio:
            score += 0.15
        encoder = meta.encoder.encode()
        if find_token(encoder, AI_ENCODERS):
            score += 0.3
        if find_token(encoder, PRO_ENCODERS):
            score -= 0.1
        return clamp(score)

    @staticmethod
    def container(data: bytes, fmt: VideoFormat) -> float:
        """Missing structural atoms/elements a real muxer always writes."""
        if len(data) < 1000:
            return NEUTRAL
        score = 0.5
        if fmt in (VideoFormat.MP4, VideoFormat.MOV):
            if b"moov" not in data[:100000]:
                score += 0.2
            if b"mdat" not in data:
                score += 0.2
        elif fmt == VideoFormat.WEBM:
            if EBML_SEGMENT_ID not in data[:1000]:
                score += 0.2
        return score

    @staticmethod
    def audio_presence(meta: VideoMetadata) -> float:
        return 0.3 if meta.has_audio else 0.7

    @staticmethod
    def temporal_pattern(data: bytes) -> float:
        """Average similarity of five evenly spaced 1 KB windows."""
        if len(data) < 10000:
            return NEUTRAL
        region = len(data) // 6
        samples = []
        for i in range(5):
            start = (i + 1) * region
            samples.append(data[start : start + min(1000, len(data) - start)])

        repetition = 0.0
        comparisons = 0
        for a, b in combinations(samples, 2):
            sim = byte_similarity(a, b)
            if sim > 0.5:
                repetition += sim
            comparisons += 1
        if comparisons == 0:
            return NEUTRAL
        return 0.7 if repetition / comparisons > 0.3 else 0.4

    @staticmethod
    def encoding(data: bytes, fmt: VideoFormat) -> float:
        if any(tag in data for tag in CODEC_TAGS):
            return 0.45
        if fmt in (VideoFormat.MP4, VideoFormat.MOV, VideoFormat.WEBM):
            return 0.6
        return NEUTRAL

    @staticmethod
    def bitrate_consistency(data: bytes, stats: VideoStats) -> float:
        if stats.file_size < 100000:
            return 0.6
        if len(data) < 10000:
            return NEUTRAL
        chunk = len(data) // 5
        entropies = []
        for i in range(5):
            start = i * chunk
            entropies.append(shannon_entropy(data[start : start + min(chunk, len(data) - start)]))
        return 0.6 if population_variance(entropies) > 0.1 else 0.4
