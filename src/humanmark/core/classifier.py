"""HumanMark - Content classifier.

Decides which modality engine handles an input. Priority:
explicit hint > text present > filename > URL > declared MIME > magic bytes.
Each step that yields UNKNOWN falls through to the next one.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

EXTENSION_MAP: dict[str, ContentCategory] = {
    # text
    ".txt": ContentCategory.TEXT,
    ".md": ContentCategory.TEXT,
    ".html": ContentCategory.TEXT,
    ".htm": ContentCategory.TEXT,
    ".json": ContentCategory.TEXT,
    ".xml": ContentCategory.TEXT,
    ".csv": ContentCategory.TEXT,
    # image
    ".jpg": ContentCategory.IMAGE,
    ".jpeg": ContentCategory.IMAGE,
    ".png": ContentCategory.IMAGE,
    ".gif": ContentCategory.IMAGE,
    ".webp": ContentCategory.IMAGE,
    ".bmp": ContentCategory.IMAGE,
    ".svg": ContentCategory.IMAGE,
    # audio
    ".mp3": ContentCategory.AUDIO,
    ".wav": ContentCategory.AUDIO,
    ".flac": ContentCategory.AUDIO,
    ".ogg": ContentCategory.AUDIO,
    ".m4a": ContentCategory.AUDIO,
    ".aac": ContentCategory.AUDIO,
    # video
    ".mp4": ContentCategory.VIDEO,
    ".mov": ContentCategory.VIDEO,
    ".avi": ContentCategory.VIDEO,
    ".webm": ContentCategory.VIDEO,
    ".mkv": ContentCategory.VIDEO,
    ".wmv": ContentCategory.VIDEO,
}

MIME_PREFIXES = (
    ("text/", ContentCategory.TEXT),
    ("image/", ContentCategory.IMAGE),
    ("audio/", ContentCategory.AUDIO),
    ("video/", ContentCategory.VIDEO),
)

TEXTUAL_APPLICATION_TYPES = frozenset({"application/json", "application/xml"})


def from_filename(filename: str) -> ContentCategory:
    dot = filename.rfind(".")
    if dot < 0:
        return ContentCategory.UNKNOWN
    return EXTENSION_MAP.get(filename[dot:].lower(), ContentCategory.UNKNOWN)


def from_url(url: str) -> ContentCategory:
    path = urlsplit(url).path
    return from_filename(path.rsplit("/", 1)[-1])


def from_mime(mime: str) -> ContentCategory:
    mime = mime.split(";", 1)[0].strip().lower()
    for prefix, category in MIME_PREFIXES:
        if mime.startswith(prefix):
            return category
    if mime in TEXTUAL_APPLICATION_TYPES:
        return ContentCategory.TEXT
    return ContentCategory.UNKNOWN


def from_magic_bytes(data: bytes) -> ContentCategory:
    if len(data) < 4:
        return ContentCategory.UNKNOWN
    if data[:3] == b"\xff\xd8\xff" or data[:4] in (b"\x89PNG", b"GIF8"):
        return ContentCategory.IMAGE
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ContentCategory.IMAGE
    if (data[0] == 0xFF and (data[1] & 0xE0) == 0xE0) or data[:3] == b"ID3":
        return ContentCategory.AUDIO
    if data[4:8] == b"ftyp":
        return ContentCategory.VIDEO
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return ContentCategory.AUDIO
    return ContentCategory.UNKNOWN


def from_hint(hint: str) -> ContentCategory:
    """Accept either a category name ("image") or a MIME type ("image/png")."""
    hint = hint.strip().lower()
    if not hint:
        return ContentCategory.UNKNOWN
    try:
        return ContentCategory(hint)
    except ValueError:
        return from_mime(hint)


class ContentClassifier:
    def classify(
        self,
        *,
        hint: str | None = None,
        text: str | None = None,
        filename: str | None = None,
        url: str | None = None,
        mime_type: str | None = None,
        data: bytes | None = None,
    ) -> ContentCategory:
        if hint:
            category = from_hint(hint)
            if category != ContentCategory.UNKNOWN:
                return category
        if text:
            return ContentCategory.TEXT
        for value, resolve in ((filename, from_filename), (url, from_url), (mime_type, from_mime)):
            if value:
                category = resolve(value)
                if category != ContentCategory.UNKNOWN:
                    return category
        if data:
            return from_magic_bytes(data)
        return ContentCategory.UNKNOWN
