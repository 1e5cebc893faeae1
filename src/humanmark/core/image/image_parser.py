"""HumanMark - Image container sniffing and metadata extraction.

Works on raw bytes only: no pixel decoding. Every reader bounds-checks
against the buffer and leaves fields at their zero values when a
structure is truncated.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from humanmark.core.forensics.byte_stats import be16, be32, find_token, le16, le32
from humanmark.models.enums import ImageFormat

logger = logging.getLogger(__name__)

MIN_SNIFF_LEN = 8

CAMERA_MAKES = ("Apple", "Canon", "Nikon", "Sony", "Samsung", "Google")
EDITING_SOFTWARE = ("Photoshop", "GIMP", "Lightroom")
AI_GENERATORS = ("DALL-E", "Midjourney", "Stable Diffusion")
PNG_AI_GENERATORS = AI_GENERATORS + ("ComfyUI",)
AI_GENERATOR_LABEL = "AI Generator"

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
# Baseline (C0) or progressive (C2) start-of-frame.
JPEG_SOF_RE = re.compile(rb"\xff[\xc0\xc2]")


@dataclass
class ImageMetadata:
    file_format: str = ImageFormat.UNKNOWN.value
    has_exif: bool = False
    camera_make: str = ""
    software: str = ""
    has_gps: bool = False
    is_screenshot: bool = False


@dataclass
class ImageStats:
    width: int = 0
    height: int = 0
    bit_depth: int = 0
    color_channels: int = 0
    file_size: int = 0


def sniff_image_format(data: bytes) -> ImageFormat:
    if len(data) < MIN_SNIFF_LEN:
        return ImageFormat.UNKNOWN
    if data[:3] == b"\xff\xd8\xff":
        return ImageFormat.JPEG
    if data[:4] == b"\x89PNG":
        return ImageFormat.PNG
    if data[:4] == b"GIF8":
        return ImageFormat.GIF
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ImageFormat.WEBP
    if data[:2] == b"BM":
        return ImageFormat.BMP
    return ImageFormat.UNKNOWN


def extract_metadata(data: bytes, fmt: ImageFormat) -> ImageMetadata:
    if fmt == ImageFormat.JPEG:
        return _jpeg_metadata(data)
    if fmt == ImageFormat.PNG:
        return _png_metadata(data)
    return ImageMetadata(file_format=fmt.value)


def extract_stats(data: bytes, fmt: ImageFormat) -> ImageStats:
    stats = ImageStats(file_size=len(data))
    if fmt == ImageFormat.JPEG:
        _jpeg_stats(data, stats)
    elif fmt == ImageFormat.PNG:
        _png_stats(data, stats)
    elif fmt == ImageFormat.GIF:
        if len(data) >= 10:
            stats.width = le16(data, 6)
            stats.height = le16(data, 8)
    elif fmt == ImageFormat.BMP:
        if len(data) >= 30:
            stats.width = le32(data, 18)
            stats.height = abs(int.from_bytes(data[22:26], "little", signed=True))
            stats.bit_depth = le16(data, 28)
    return stats


# --- JPEG ---


def _jpeg_metadata(data: bytes) -> ImageMetadata:
    meta = ImageMetadata(file_format=ImageFormat.JPEG.value)

    # Only the first APP1 segment is inspected.
    app1 = data.find(b"\xff\xe1", 0, max(0, len(data) - 9))
    if app1 >= 0:
        segment = data[app1 + 4 :]
        if segment[:4] == b"Exif":
            meta.has_exif = True
            meta.camera_make = find_token(segment, CAMERA_MAKES, lowercase=False) or ""
            software = find_token(segment, EDITING_SOFTWARE, lowercase=False)
            if software:
                meta.software = software
            elif find_token(segment, AI_GENERATORS, lowercase=False):
                meta.software = AI_GENERATOR_LABEL
            meta.has_gps = b"GPS" in segment

    meta.is_screenshot = not meta.software and not meta.has_exif
    return meta


def _jpeg_stats(data: bytes, stats: ImageStats) -> None:
    sof = JPEG_SOF_RE.search(data, 0, max(0, len(data) - 9))
    if sof:
        i = sof.start()
        stats.bit_depth = data[i + 4]
        stats.height = be16(data, i + 5)
        stats.width = be16(data, i + 7)
        stats.color_channels = data[i + 9]


# --- PNG ---


def _png_metadata(data: bytes) -> ImageMetadata:
    meta = ImageMetadata(file_format=ImageFormat.PNG.value)
    i = len(PNG_SIGNATURE)
    while i < len(data) - 8:
        length = be32(data, i)
        chunk_type = data[i + 4 : i + 8]
        if chunk_type in (b"tEXt", b"iTXt"):
            meta.has_exif = True
            end = i + 8 + length
            if length > 0 and end < len(data):
                if find_token(data[i + 8 : end], PNG_AI_GENERATORS, lowercase=False):
                    meta.software = AI_GENERATOR_LABEL
        i += 12 + length
    return meta


def _png_stats(data: bytes, stats: ImageStats) -> None:
    if len(data) >= 24:
        stats.width = be32(data, 16)
        stats.height = be32(data, 20)
    if len(data) >= 25:
        stats.bit_depth = data[24]
