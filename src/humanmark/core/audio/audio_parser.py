"""HumanMark - Audio container sniffing and metadata extraction.

Header-level parsing only (ID3, RIFF/WAVE, FLAC STREAMINFO and Vorbis
comments, Ogg and MP4 markers); no sample decoding.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from humanmark.core.forensics.byte_stats import be24, be32, find_mapped_token, find_token, le16, le32
from humanmark.models.enums import AudioFormat

logger = logging.getLogger(__name__)

MIN_SNIFF_LEN = 12

MPEG_SYNC_RE = re.compile(rb"\xff[\xe0-\xff]")

AI_AUDIO_MARKERS = (
    "elevenlabs", "eleven labs", "murf", "play.ht",
    "resemble", "descript", "synthesia", "wellsaid",
    "suno", "udio", "musicgen", "riffusion",
    "ai generated", "ai-generated", "synthetic voice",
    "text to speech", "text-to-speech", "tts",
    "voice clone", "cloned voice",
)  # fmt: skip

RECORDING_MARKERS = (
    "recorded", "recording", "studio", "microphone",
    "live", "concert", "session", "interview",
    "iphone", "android", "voice memo",
)  # fmt: skip

AUDIO_ENCODERS = (
    ("lame", "LAME"),
    ("ffmpeg", "ffmpeg"),
    ("audacity", "Audacity"),
    ("adobe", "Adobe Audition"),
    ("logic", "Logic Pro"),
    ("pro tools", "Pro Tools"),
    ("ableton", "Ableton Live"),
    ("fl studio", "FL Studio"),
    ("elevenlabs", "ElevenLabs"),
    ("suno", "Suno AI"),
    ("udio", "Udio"),
)

# MPEG-1 Layer III only; other versions/layers decode with these same tables.
MP3_SAMPLE_RATES = (44100, 48000, 32000)
MP3_BITRATES_KBPS = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320)

FLAC_VORBIS_COMMENT = 4
FLAC_BLOCK_SCAN_LIMIT = 10000


@dataclass
class AudioMetadata:
    format: str = AudioFormat.UNKNOWN.value
    sample_rate: int = 0
    channels: int = 0
    bit_depth: int = 0
    bitrate: int = 0
    has_id3: bool = False
    encoder: str = ""
    is_ai_marked: bool = False
    has_recording_marker: bool = False
    file_size: int = 0


def contains_ai_marker(chunk: bytes) -> bool:
    return find_token(chunk, AI_AUDIO_MARKERS) is not None


def contains_recording_marker(chunk: bytes) -> bool:
    return find_token(chunk, RECORDING_MARKERS) is not None


def extract_encoder(chunk: bytes) -> str:
    return find_mapped_token(chunk, AUDIO_ENCODERS)


def _apply_tags(meta: AudioMetadata, chunk: bytes, encoder: bool = True, recording: bool = False) -> None:
    """Merge one tag block into meta. Flags only ever turn on; a found encoder wins."""
    if contains_ai_marker(chunk):
        meta.is_ai_marked = True
    if recording and contains_recording_marker(chunk):
        meta.has_recording_marker = True
    if encoder:
        name = extract_encoder(chunk)
        if name:
            meta.encoder = name


def sniff_audio_format(data: bytes) -> AudioFormat:
    if len(data) < MIN_SNIFF_LEN:
        return AudioFormat.UNKNOWN
    # ADTS uses layer bits 00, which MPEG audio frames never do.
    if data[0] == 0xFF and (data[1] & 0xF6) == 0xF0:
        return AudioFormat.AAC
    if (data[0] == 0xFF and (data[1] & 0xE0) == 0xE0) or data[:3] == b"ID3":
        return AudioFormat.MP3
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return AudioFormat.WAV
    if data[:4] == b"fLaC":
        return AudioFormat.FLAC
    if data[:4] == b"OggS":
        return AudioFormat.OPUS if b"OpusHead" in data[:1000] else AudioFormat.OGG
    if data[4:8] == b"ftyp":
        return AudioFormat.M4A
    return AudioFormat.UNKNOWN


def extract_metadata(data: bytes, fmt: AudioFormat) -> AudioMetadata:
    meta = AudioMetadata(format=fmt.value, file_size=len(data))
    if fmt == AudioFormat.MP3:
        _parse_mp3(data, meta)
    elif fmt == AudioFormat.WAV:
        _parse_wav(data, meta)
    elif fmt == AudioFormat.FLAC:
        _parse_flac(data, meta)
    elif fmt in (AudioFormat.OGG, AudioFormat.OPUS):
        _parse_ogg(data, meta)
    elif fmt in (AudioFormat.M4A, AudioFormat.AAC):
        _apply_tags(meta, data[:10000])
    return meta


# --- MP3 ---


def syncsafe_size(raw: bytes) -> int | None:
    """Decode a 4-byte ID3v2 syncsafe integer; None if any byte uses its high bit."""
    if len(raw) != 4 or any(b & 0x80 for b in raw):
        return None
    return (raw[0] << 21) | (raw[1] << 14) | (raw[2] << 7) | raw[3]


def _parse_mp3(data: bytes, meta: AudioMetadata) -> None:
    frame_start = 0
    if len(data) > 10 and data[:3] == b"ID3":
        meta.has_id3 = True
        size = syncsafe_size(data[6:10])
        if size and size + 10 < len(data):
            tag = data[10 : 10 + size]
            _apply_tags(meta, tag, recording=True)
            frame_start = 10 + size

    # First frame sync whose 4-byte header fits in the buffer.
    sync = MPEG_SYNC_RE.search(data, frame_start, max(0, len(data) - 3))
    if sync:
        header = be32(data, sync.start())
        sr_index = (header >> 10) & 0x3
        if sr_index < len(MP3_SAMPLE_RATES):
            meta.sample_rate = MP3_SAMPLE_RATES[sr_index]
        meta.channels = 1 if (header >> 6) & 0x3 == 3 else 2
        br_index = (header >> 12) & 0xF
        if br_index < len(MP3_BITRATES_KBPS):
            meta.bitrate = MP3_BITRATES_KBPS[br_index]

    # ID3v1 trailer
    if len(data) >= 128 and data[-128:-125] == b"TAG":
        meta.has_id3 = True


# --- WAV ---


def _parse_wav(data: bytes, meta: AudioMetadata) -> None:
    if len(data) < 44:
        return
    if data[12:16] == b"fmt ":
        if le16(data, 20) == 1:
            meta.encoder = "PCM"
        meta.channels = le16(data, 22)
        meta.sample_rate = le32(data, 24)
        meta.bit_depth = le16(data, 34)

    list_at = data.find(b"LIST", 36, max(36, len(data) - 5))
    if list_at >= 0:
        size = le32(data, list_at + 4)
        if list_at + 8 + size <= len(data):
            info = data[list_at + 8 : list_at + 8 + size]
            _apply_tags(meta, info, encoder=False, recording=True)


# --- FLAC ---


def _parse_flac(data: bytes, meta: AudioMetadata) -> None:
    if len(data) < 42:
        return
    # STREAMINFO: 20-bit sample rate, 3-bit channels-1, 5-bit bits-per-sample-1.
    meta.sample_rate = (data[18] << 12) | (data[19] << 4) | (data[20] >> 4)
    meta.channels = ((data[20] >> 1) & 0x7) + 1
    meta.bit_depth = (((data[20] & 0x1) << 4) | (data[21] >> 4)) + 1

    i = 4
    while i < len(data) - 4 and i < FLAC_BLOCK_SCAN_LIMIT:
        block_type = data[i] & 0x7F
        is_last = bool(data[i] & 0x80)
        size = be24(data, i + 1)
        if block_type == FLAC_VORBIS_COMMENT and i + 4 + size <= len(data):
            _apply_tags(meta, data[i + 4 : i + 4 + size])
        i += 4 + size
        if is_last:
            break


# --- Ogg ---


def _parse_ogg(data: bytes, meta: AudioMetadata) -> None:
    head = data[:1000]
    if b"vorbis" in head:
        meta.encoder = "Vorbis"
    if b"OpusHead" in head:
        meta.format = AudioFormat.OPUS.value
        meta.encoder = "Opus"
    if len(data) > 500:
        _apply_tags(meta, data[:5000], encoder=False)
