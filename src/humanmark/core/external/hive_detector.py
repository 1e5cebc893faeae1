"""HumanMark - Hive AI-generated content detector."""

from __future__ import annotations

import base64
import logging
from typing import Any

from humanmark.core.errors import ExternalDetectorError
from humanmark.core.external.base_detector import BaseDetector, DetectorInput
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

HIVE_ENDPOINT = "https://api.thehive.ai/api/v2/task/sync"


class HiveDetector(BaseDetector):
    @property
    def name(self) -> str:
        return "hive"

    @property
    def categories(self) -> set[ContentCategory]:
        return {ContentCategory.TEXT, ContentCategory.IMAGE, ContentCategory.AUDIO, ContentCategory.VIDEO}

    def supports(self, inp: DetectorInput) -> bool:
        # Video is only submitted by reference; uploads are too large to inline.
        if inp.category == ContentCategory.VIDEO:
            return bool(inp.url)
        return super().supports(inp)

    @staticmethod
    def build_payload(inp: DetectorInput) -> dict[str, Any]:
        if inp.category == ContentCategory.TEXT:
            return {"text_data": inp.text or ""}
        if inp.category == ContentCategory.VIDEO:
            return {"url": inp.url}
        key = "image" if inp.category == ContentCategory.IMAGE else "audio"
        return {key: base64.b64encode(inp.data or b"").decode("ascii")}

    async def _run_detection(self, inp: DetectorInput) -> float:
        resp = await self._get_client().post(
            HIVE_ENDPOINT,
            json=self.build_payload(inp),
            headers={"Authorization": f"Token {self.api_key}"},
        )
        resp.raise_for_status()
        body = resp.json()
        status = body.get("status") or []
        if not status:
            raise ExternalDetectorError("no result from Hive API")
        try:
            return float(status[0]["response"]["ai_generated"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalDetectorError(f"unexpected Hive response: {exc}") from exc
