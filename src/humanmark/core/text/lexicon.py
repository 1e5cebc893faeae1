"""HumanMark - Word and phrase tables for text analysis."""

from __future__ import annotations

COMMON_WORDS = frozenset(
    """
    a an the
    i you he she it we they me him her us them my your his its our their this that
    in on at to for of with by from about into through during before after
    and or but so yet if when while because although
    is are was were be been being have has had do does did will would could should
    may might must can get got make made
    not no yes just only also very more most some any all many much other such
    than then now here there where what which who how why
    each every both few new old good bad first last long little own same big high
    small large next early young important public able
    man woman time year people way day thing world life hand part place case week
    work fact group number night point home water room mother area money story
    month lot right study book eye job word business issue side kind head house
    service friend father power hour game line end member law car city community name
    """.split()
)

# Phrase -> weight. Order matters only for the reported match list.
AI_PHRASES: tuple[tuple[str, float], ...] = (
    # Self-reference
    ("as an ai", 1.0),
    ("as a language model", 1.0),
    ("i don't have personal", 0.9),
    ("i cannot provide", 0.8),
    ("i'm unable to", 0.7),
    # Hedging
    ("it's important to note", 0.8),
    ("it is important to", 0.7),
    ("it's worth noting", 0.7),
    ("it should be noted", 0.7),
    ("keep in mind that", 0.6),
    # Transitions
    ("furthermore", 0.4),
    ("moreover", 0.4),
    ("additionally", 0.4),
    ("in conclusion", 0.5),
    ("to summarize", 0.5),
    ("in summary", 0.5),
    ("overall", 0.3),
    # Assistant sign-offs
    ("i hope this helps", 0.7),
    ("feel free to", 0.5),
    ("don't hesitate to", 0.5),
    ("let me know if", 0.4),
    # Inflated vocabulary
    ("utilize", 0.3),
    ("facilitate", 0.3),
    ("leverage", 0.3),
    ("delve into", 0.6),
    ("dive into", 0.4),
    ("explore the", 0.3),
    # List framing
    ("here are some", 0.5),
    ("here's a list", 0.5),
    ("the following", 0.4),
)

CONTRACTIONS: tuple[str, ...] = (
    "i'm", "i'll", "i've", "i'd",
    "you're", "you'll", "you've", "you'd",
    "he's", "she's", "it's", "we're", "they're",
    "don't", "doesn't", "didn't", "won't", "wouldn't",
    "can't", "couldn't", "shouldn't", "isn't", "aren't",
    "wasn't", "weren't", "haven't", "hasn't", "hadn't",
    "let's", "that's", "there's", "here's", "what's",
    "who's", "how's", "where's", "when's",
)  # fmt: skip

# Punctuation a careful human writer reaches for beyond . and ,
EXPRESSIVE_PUNCTUATION = frozenset("!?;:-—()\"'")


def is_common_word(word: str) -> bool:
    return word.lower() in COMMON_WORDS
