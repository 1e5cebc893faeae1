"""HumanMark - GPTZero text detector."""

from __future__ import annotations

import logging

from humanmark.core.errors import ExternalDetectorError
from humanmark.core.external.base_detector import BaseDetector, DetectorInput
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

GPTZERO_ENDPOINT = "https://api.gptzero.me/v2/predict/text"


class GPTZeroDetector(BaseDetector):
    @property
    def name(self) -> str:
        return "gptzero"

    @property
    def categories(self) -> set[ContentCategory]:
        return {ContentCategory.TEXT}

    async def _run_detection(self, inp: DetectorInput) -> float:
        resp = await self._get_client().post(
            GPTZERO_ENDPOINT,
            json={"document": inp.text or ""},
            headers={"x-api-key": self.api_key},
        )
        resp.raise_for_status()
        documents = resp.json().get("documents") or []
        if not documents:
            raise ExternalDetectorError("no result from GPTZero API")
        try:
            return float(documents[0]["completely_generated_prob"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalDetectorError(f"unexpected GPTZero response: {exc}") from exc
