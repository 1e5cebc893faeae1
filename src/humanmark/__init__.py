"""HumanMark - forensic human-vs-AI content detection."""

__version__ = "1.0.0"
