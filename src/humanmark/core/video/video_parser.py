"""HumanMark - Video container sniffing and metadata extraction.

MP4/MOV is walked as an atom tree (4-byte big-endian size + FourCC). Atoms
that overrun the buffer are clamped, atoms smaller than their own header end
the walk. EBML, AVI and FLV containers are inspected by marker search only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from humanmark.core.forensics.byte_stats import be32, be64, find_mapped_token, find_token
from humanmark.models.enums import VideoFormat

logger = logging.getLogger(__name__)

ATOM_HEADER = 8
EBML_MAGIC = b"\x1a\x45\xdf\xa3"
# TrackType element (0x83), one-byte size, value 2 = audio
EBML_AUDIO_TRACK = b"\x83\x81\x02"
TS_PACKET = 188

QUICKTIME_BRAND = b"qt  "

AI_VIDEO_MARKERS = (
    "runway", "pika", "sora", "gen-2", "gen2",
    "stable video", "stablevideo", "modelscope",
    "deforum", "animatediff", "zeroscope",
    "ai generated", "ai-generated", "synthetic",
    "dall-e", "midjourney",
)  # fmt: skip

VIDEO_ENCODERS = (
    ("lavf", "ffmpeg"),
    ("ffmpeg", "ffmpeg"),
    ("handbrake", "HandBrake"),
    ("premiere", "Adobe Premiere"),
    ("final cut", "Final Cut Pro"),
    ("davinci", "DaVinci Resolve"),
    ("x264", "x264"),
    ("x265", "x265"),
    ("runway", "Runway"),
    ("pika", "Pika Labs"),
    ("sora", "OpenAI Sora"),
    ("modelscope", "ModelScope"),
)


@dataclass
class VideoMetadata:
    format: str = VideoFormat.UNKNOWN.value
    has_audio: bool = False
    has_video: bool = False
    encoder: str = ""
    is_ai_marked: bool = False


@dataclass
class VideoStats:
    file_size: int = 0
    duration: float = 0.0
    width: int = 0
    height: int = 0
    chunk_count: int = 0


def contains_ai_marker(chunk: bytes) -> bool:
    return find_token(chunk, AI_VIDEO_MARKERS) is not None


def extract_encoder(chunk: bytes) -> str:
    return find_mapped_token(chunk, VIDEO_ENCODERS)


def sniff_video_format(data: bytes) -> VideoFormat:
    if len(data) < 4:
        return VideoFormat.UNKNOWN
    if len(data) >= 8 and data[4:8] == b"ftyp":
        return VideoFormat.MOV if data[8:12] == QUICKTIME_BRAND else VideoFormat.MP4
    if data[:4] == EBML_MAGIC:
        return VideoFormat.WEBM if b"webm" in data[:100] else VideoFormat.MKV
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"AVI ":
        return VideoFormat.AVI
    if data[:3] == b"FLV":
        return VideoFormat.FLV
    if data[0] == 0x47 and len(data) > 2 * TS_PACKET and data[TS_PACKET] == 0x47 and data[2 * TS_PACKET] == 0x47:
        return VideoFormat.TS
    return VideoFormat.UNKNOWN


def extract(data: bytes, fmt: VideoFormat) -> tuple[VideoMetadata, VideoStats]:
    meta = VideoMetadata(format=fmt.value)
    stats = VideoStats(file_size=len(data))
    if fmt in (VideoFormat.MP4, VideoFormat.MOV):
        _parse_mp4(data, meta, stats)
    elif fmt in (VideoFormat.WEBM, VideoFormat.MKV):
        _parse_ebml(data, meta)
    elif fmt == VideoFormat.AVI:
        _parse_avi(data, meta)
    elif fmt == VideoFormat.FLV:
        _parse_flv(data, meta)
    return meta, stats


# --- MP4 / MOV ---


def iter_atoms(data: bytes, start: int, end: int) -> Iterator[tuple[bytes, int, int]]:
    """Yield (fourcc, atom_start, atom_end) for sibling atoms inside data[start:end]."""
    offset = start
    while offset < end - ATOM_HEADER:
        size = be32(data, offset)
        if size < ATOM_HEADER:
            return
        atom_end = min(offset + size, end)
        yield data[offset + 4 : offset + 8], offset, atom_end
        offset = atom_end


def _scan_tags(chunk: bytes, meta: VideoMetadata) -> None:
    if contains_ai_marker(chunk):
        meta.is_ai_marked = True
    encoder = extract_encoder(chunk)
    if encoder:
        meta.encoder = encoder


def _parse_mp4(data: bytes, meta: VideoMetadata, stats: VideoStats) -> None:
    meta.has_video = True
    for kind, start, end in iter_atoms(data, 0, len(data)):
        if kind == b"moov":
            _parse_moov(data, start, end, meta, stats)
        elif kind == b"mdat":
            stats.chunk_count += 1
        elif kind == b"ftyp":
            if contains_ai_marker(data[start + ATOM_HEADER : min(end, start + 100)]):
                meta.is_ai_marked = True
        elif kind == b"udta":
            _parse_udta(data, start, end, meta)


def _parse_moov(data: bytes, start: int, end: int, meta: VideoMetadata, stats: VideoStats) -> None:
    for kind, child, child_end in iter_atoms(data, start + ATOM_HEADER, end):
        if kind == b"mvhd":
            _parse_mvhd(data, child + ATOM_HEADER, child_end, stats)
        elif kind == b"trak":
            track = data[child:child_end]
            if b"soun" in track:
                meta.has_audio = True
            if b"vide" in track:
                meta.has_video = True
            _parse_trak(data, child, child_end, stats)
        elif kind == b"udta":
            _parse_udta(data, child, child_end, meta)
        elif kind == b"meta":
            _scan_tags(data[child + ATOM_HEADER : min(child_end, child + 1000)], meta)


def _parse_udta(data: bytes, start: int, end: int, meta: VideoMetadata) -> None:
    _scan_tags(data[start + ATOM_HEADER : min(end, start + 500)], meta)
    for kind, child, child_end in iter_atoms(data, start + ATOM_HEADER, end):
        if kind == b"meta":
            _scan_tags(data[child + ATOM_HEADER : min(child_end, child + 1000)], meta)


def _parse_mvhd(data: bytes, payload: int, end: int, stats: VideoStats) -> None:
    if payload >= end:
        return
    if data[payload] == 1:
        if payload + 32 > end:
            return
        timescale, duration = be32(data, payload + 20), be64(data, payload + 24)
    else:
        if payload + 20 > end:
            return
        timescale, duration = be32(data, payload + 12), be32(data, payload + 16)
    if timescale:
        stats.duration = duration / timescale


def _parse_trak(data: bytes, start: int, end: int, stats: VideoStats) -> None:
    for kind, child, child_end in iter_atoms(data, start + ATOM_HEADER, end):
        if kind != b"tkhd" or stats.width:
            continue
        payload = child + ATOM_HEADER
        if payload >= child_end:
            continue
        # width/height are 16.16 fixed point at the end of the header
        dims_at = payload + (88 if data[payload] == 1 else 76)
        if dims_at + 8 <= child_end:
            stats.width = be32(data, dims_at) >> 16
            stats.height = be32(data, dims_at + 4) >> 16


# --- other containers ---


def _parse_ebml(data: bytes, meta: VideoMetadata) -> None:
    meta.has_video = True
    meta.has_audio = EBML_AUDIO_TRACK in data
    _scan_tags(data[:2000], meta)


def _parse_avi(data: bytes, meta: VideoMetadata) -> None:
    meta.has_video = True
    meta.has_audio = b"auds" in data
    if len(data) > 500:
        _scan_tags(data[:500], meta)


def _parse_flv(data: bytes, meta: VideoMetadata) -> None:
    if len(data) < 5:
        return
    flags = data[4]
    meta.has_audio = bool(flags & 0x04)
    meta.has_video = bool(flags & 0x01)
    _scan_tags(data[:1000], meta)
