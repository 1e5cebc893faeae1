"""HumanMark - Abstract external detector.

Third-party AI-detection APIs inherit from BaseDetector. Provides a shared
HTTP client, timing and error handling; a failing detector yields an ERROR
result instead of raising so the orchestrator can simply leave it out.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from humanmark.models.enums import ContentCategory, DetectorStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class DetectorResult:
    """Standardised output every external detector returns."""

    __slots__ = ("detector_name", "score", "status", "details", "processing_time_ms")

    def __init__(
        self,
        *,
        detector_name: str,
        score: float,
        status: DetectorStatus = DetectorStatus.PASS,
        details: dict[str, Any] | None = None,
        processing_time_ms: float = 0.0,
    ) -> None:
        self.detector_name = detector_name
        self.score = max(0.0, min(1.0, score))
        self.status = status
        self.details = details or {}
        self.processing_time_ms = processing_time_ms

    @property
    def ok(self) -> bool:
        return self.status == DetectorStatus.PASS

    def to_dict(self) -> dict[str, Any]:
        return {
            "detector_name": self.detector_name,
            "score": round(self.score, 4),
            "status": self.status.value,
            "details": self.details,
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


class DetectorInput:
    """Payload handed to external detectors. Each picks the fields it needs."""

    __slots__ = ("category", "text", "data", "url")

    def __init__(
        self,
        *,
        category: ContentCategory,
        text: str | None = None,
        data: bytes | None = None,
        url: str | None = None,
    ) -> None:
        self.category = category
        self.text = text
        self.data = data
        self.url = url


class BaseDetector(ABC):
    """Base class for remote AI-detection services.

    Subclasses MUST implement:
      - name, categories (properties)
      - _run_detection()  - one remote call returning an AI probability
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    # --- abstract properties ---

    @property
    @abstractmethod
    def name(self) -> str:
        """Detector identifier, also the key into the detector weight table."""
        ...

    @property
    @abstractmethod
    def categories(self) -> set[ContentCategory]: ...

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def supports(self, inp: DetectorInput) -> bool:
        return inp.category in self.categories

    # --- lifecycle ---

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- detection ---

    @abstractmethod
    async def _run_detection(self, inp: DetectorInput) -> float:
        """Return an AI probability in [0, 1]. Raise on any failure."""
        ...

    async def detect(self, inp: DetectorInput) -> DetectorResult:
        """Public entry-point: wraps the remote call with timing and error handling."""
        start = time.perf_counter()
        try:
            score = await self._run_detection(inp)
        except httpx.HTTPStatusError as exc:
            elapsed = (time.perf_counter() - start) * 1000
            logger.warning("Detector %s returned HTTP %d", self.name, exc.response.status_code)
            return self._error(f"http {exc.response.status_code}", elapsed)
        except Exception as exc:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error("Detector %s failed: %s", self.name, exc, exc_info=True)
            return self._error(str(exc), elapsed)
        return DetectorResult(
            detector_name=self.name,
            score=score,
            processing_time_ms=(time.perf_counter() - start) * 1000,
        )

    def _error(self, message: str, elapsed: float) -> DetectorResult:
        return DetectorResult(
            detector_name=self.name,
            score=0.5,
            status=DetectorStatus.ERROR,
            details={"error": message},
            processing_time_ms=elapsed,
        )

    def __repr__(self) -> str:
        cats = ", ".join(sorted(c.value for c in self.categories))
        return f"<{self.__class__.__name__} name={self.name!r} categories=[{cats}] enabled={self.enabled}>"
