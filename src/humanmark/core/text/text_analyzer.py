"""HumanMark - Statistical text analyzer.

Eight stylometric signals, each in [0,1] where 1.0 leans synthetic:
sentence-length variance, vocabulary richness, burstiness, punctuation
variety, AI-phrase hits, word-length variance, contraction rate and
repeated sentence openings.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from humanmark.core.base_analyzer import BaseAnalyzer
from humanmark.core.forensics.byte_stats import clamp, coefficient_of_variation
from humanmark.core.fusion.weights import TEXT_WEIGHTS, WeightTable
from humanmark.core.text.lexicon import (
    AI_PHRASES,
    CONTRACTIONS,
    EXPRESSIVE_PUNCTUATION,
    is_common_word,
)
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

WORD_RE = re.compile(r"[a-zA-Z']+")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+\s+")

NEUTRAL = 0.5


@dataclass
class TextStats:
    char_count: int = 0
    word_count: int = 0
    sentence_count: int = 0
    avg_sentence_len: float = 0.0
    avg_word_len: float = 0.0
    unique_words: int = 0
    unique_ratio: float = 0.0
    punctuation_count: int = 0


@dataclass
class PhraseMatch:
    score: float = 0.0
    phrases: list[str] = field(default_factory=list)


def tokenize(text: str) -> list[str]:
    return WORD_RE.findall(text)


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]


def is_punctuation(ch: str) -> bool:
    return unicodedata.category(ch).startswith("P")


class TextAnalyzer(BaseAnalyzer[str]):
    category = ContentCategory.TEXT

    def __init__(self, weights: WeightTable = TEXT_WEIGHTS) -> None:
        super().__init__(weights)

    def _run(self, text: str) -> tuple[dict[str, float], Any, Any, dict[str, Any]]:
        phrases = self.detect_ai_phrases(text)
        signals = {
            "sentence_variance": self.sentence_variance(text),
            "vocabulary_richness": self.vocabulary_richness(text),
            "burstiness": self.burstiness(text),
            "punctuation_variety": self.punctuation_variety(text),
            "ai_phrases": phrases.score,
            "word_length_variance": self.word_length_variance(text),
            "contractions": self.contractions(text),
            "repetition": self.repetition(text),
        }
        return signals, None, self.compute_stats(text), {"detected_phrases": phrases.phrases}

    # --- stats ---

    @staticmethod
    def compute_stats(text: str) -> TextStats:
        words = tokenize(text)
        sentences = split_sentences(text)
        stats = TextStats(char_count=len(text), word_count=len(words), sentence_count=len(sentences))
        if sentences:
            stats.avg_sentence_len = sum(len(tokenize(s)) for s in sentences) / len(sentences)
        if words:
            stats.avg_word_len = sum(len(w) for w in words) / len(words)
            stats.unique_words = len({w.lower() for w in words})
            stats.unique_ratio = stats.unique_words / len(words)
        stats.punctuation_count = sum(1 for ch in text if is_punctuation(ch))
        return stats

    # --- signals ---

    @staticmethod
    def sentence_variance(text: str) -> float:
        """Uniform sentence lengths are typical of generated prose."""
        sentences = split_sentences(text)
        if len(sentences) < 3:
            return NEUTRAL
        cv = coefficient_of_variation([len(tokenize(s)) for s in sentences])
        return 1.0 - min(cv / 0.8, 1.0)

    @staticmethod
    def vocabulary_richness(text: str) -> float:
        words = tokenize(text)
        if len(words) < 10:
            return NEUTRAL
        unique = {w.lower() for w in words}
        ttr = len(unique) / len(words)
        uncommon = sum(1 for w in unique if len(w) > 3 and not is_common_word(w))
        uncommon_ratio = uncommon / len(unique)
        return clamp(0.6 * (1.0 - min(ttr / 0.6, 1.0)) + 0.4 * (1.0 - uncommon_ratio))

    @staticmethod
    def burstiness(text: str) -> float:
        """Humans repeat content words in clusters; models spread them evenly."""
        words = tokenize(text)
        if len(words) < 20:
            return NEUTRAL

        positions: dict[str, list[int]] = {}
        for i, w in enumerate(words):
            w = w.lower()
            if len(w) > 4 and not is_common_word(w):
                positions.setdefault(w, []).append(i)

        total = 0.0
        count = 0
        for pos in positions.values():
            if len(pos) < 2:
                continue
            gaps = np.diff(pos).astype(np.float64)
            mean = float(np.mean(gaps))
            if mean > 0:
                total += float(np.std(gaps)) / mean
            count += 1

        if count == 0:
            return NEUTRAL
        return 1.0 - min((total / count) / 1.5, 1.0)

    @staticmethod
    def punctuation_variety(text: str) -> float:
        marks = Counter(ch for ch in text if is_punctuation(ch))
        if sum(marks.values()) < 5:
            return NEUTRAL
        expressive = sum(1 for p in EXPRESSIVE_PUNCTUATION if marks[p] > 0)
        return clamp(1.0 - (len(marks) / 8.0 * 0.5 + expressive / 5.0 * 0.5))

    @staticmethod
    def detect_ai_phrases(text: str) -> PhraseMatch:
        lowered = text.lower()
        found = [(phrase, weight) for phrase, weight in AI_PHRASES if phrase in lowered]
        if not found:
            return PhraseMatch()
        per_hundred = len(tokenize(text)) / 100.0
        total = sum(w for _, w in found)
        score = 1.0 if per_hundred == 0 else min(total / per_hundred, 1.0)
        return PhraseMatch(score=score, phrases=[p for p, _ in found])

    @staticmethod
    def word_length_variance(text: str) -> float:
        words = tokenize(text)
        if len(words) < 10:
            return NEUTRAL
        cv = coefficient_of_variation([len(w) for w in words])
        return 1.0 - min(cv / 0.6, 1.0)

    @staticmethod
    def contractions(text: str) -> float:
        """Formal register without contractions leans synthetic."""
        words = tokenize(text)
        if len(words) < 20:
            return NEUTRAL
        lowered = text.lower()
        count = sum(lowered.count(c) for c in CONTRACTIONS)
        rate = count / (len(words) / 100.0)
        return 1.0 - min(rate / 3.0, 1.0)

    @staticmethod
    def repetition(text: str) -> float:
        sentences = split_sentences(text)
        if len(sentences) < 3:
            return NEUTRAL
        openings: Counter[str] = Counter()
        for s in sentences:
            tokens = tokenize(s)
            if len(tokens) >= 2:
                openings[f"{tokens[0]} {tokens[1]}".lower()] += 1
        repeats = sum(c - 1 for c in openings.values() if c > 1)
        return min(repeats / len(sentences) * 2, 1.0)
