"""HumanMark - LLM-judged text detector (OpenAI chat completions)."""

from __future__ import annotations

import json
import logging

from humanmark.core.errors import ExternalDetectorError
from humanmark.core.external.base_detector import BaseDetector, DetectorInput
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-4o-mini"
MAX_PROMPT_CHARS = 4000

SYSTEM_PROMPT = """You are an AI content detector. Analyze the text and determine if it was written by an AI or a human.

Respond with ONLY a JSON object:
{"ai_probability": 0.0-1.0, "reasoning": "brief explanation"}

ai_probability should be:
- 0.0-0.3: Clearly human-written
- 0.3-0.5: Probably human-written
- 0.5-0.7: Uncertain
- 0.7-0.9: Probably AI-generated
- 0.9-1.0: Clearly AI-generated"""


class OpenAIDetector(BaseDetector):
    @property
    def name(self) -> str:
        return "openai"

    @property
    def categories(self) -> set[ContentCategory]:
        return {ContentCategory.TEXT}

    async def _run_detection(self, inp: DetectorInput) -> float:
        text = (inp.text or "")[:MAX_PROMPT_CHARS]
        resp = await self._get_client().post(
            OPENAI_ENDPOINT,
            json={
                "model": OPENAI_MODEL,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                "response_format": {"type": "json_object"},
                "temperature": 0.1,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        resp.raise_for_status()
        choices = resp.json().get("choices") or []
        if not choices:
            raise ExternalDetectorError("no result from OpenAI API")
        try:
            verdict = json.loads(choices[0]["message"]["content"])
            probability = float(verdict["ai_probability"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalDetectorError(f"unexpected OpenAI response: {exc}") from exc
        logger.debug("OpenAI reasoning: %s", verdict.get("reasoning", ""))
        return max(0.0, min(1.0, probability))
