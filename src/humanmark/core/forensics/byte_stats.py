"""HumanMark - Byte-level statistics shared by the media analyzers.

Entropy, window similarity and variance are computed the same way for every
modality so that thresholds stay comparable across image, audio and video.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def shannon_entropy(data: bytes) -> float:
    """Shannon entropy of a byte window in bits, normalised to [0, 1] by dividing by 8."""
    if not data:
        return 0.0
    counts = np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=256)
    probs = counts[counts > 0] / len(data)
    return float(-np.sum(probs * np.log2(probs))) / 8.0


def byte_similarity(a: bytes, b: bytes) -> float:
    """Fraction of equal bytes at equal offsets. Windows of different length score 0."""
    if len(a) != len(b) or not a:
        return 0.0
    x = np.frombuffer(a, dtype=np.uint8)
    y = np.frombuffer(b, dtype=np.uint8)
    return int(np.count_nonzero(x == y)) / len(a)


def _as_array(values: Sequence[float] | bytes) -> np.ndarray:
    if isinstance(values, (bytes, bytearray, memoryview)):
        return np.frombuffer(values, dtype=np.uint8).astype(np.float64)
    return np.asarray(values, dtype=np.float64)


def population_variance(values: Sequence[float] | bytes) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.var(_as_array(values)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population stddev / mean; 0 when the mean is 0."""
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    mean = float(np.mean(arr))
    if mean == 0:
        return 0.0
    return float(np.std(arr)) / mean


# --- fixed-width integer readers ---
# Callers bounds-check before reading; these never pad short slices.


def be16(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "big")


def be24(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 3], "big")


def be32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "big")


def be64(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 8], "big")


def le16(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "little")


def le32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "little")


# --- token search ---


def find_token(haystack: bytes, tokens: Iterable[str], lowercase: bool = True) -> str | None:
    """Return the first token (in table order) that occurs in the haystack."""
    if lowercase:
        haystack = haystack.lower()
    for token in tokens:
        if token.encode() in haystack:
            return token
    return None


def find_mapped_token(haystack: bytes, table: Sequence[tuple[str, str]]) -> str:
    """Look up the first matching (token, name) pair, case-insensitively. '' when none match."""
    lowered = haystack.lower()
    for token, name in table:
        if token.encode() in lowered:
            return name
    return ""
