"""Shared test setup."""

import os

import pytest

os.environ["HUMANMARK_ENV"] = "test"

_EXTERNAL_ENV = (
    "REDIS_URL",
    "HIVE_API_KEY",
    "GPTZERO_API_KEY",
    "OPENAI_API_KEY",
    "HUMANMARK_REDIS_URL",
    "HUMANMARK_HIVE_API_KEY",
    "HUMANMARK_GPTZERO_API_KEY",
    "HUMANMARK_OPENAI_API_KEY",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    from humanmark.config import get_settings

    for name in _EXTERNAL_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
