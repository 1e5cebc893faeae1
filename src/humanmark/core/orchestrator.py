"""HumanMark - Detection orchestrator.

1. Classify        → content category (hint / text / filename / URL / MIME / magic)
2. Payload         → text or raw bytes for the category's engine
3. Hash / cache    → SHA-256 content hash, optional stored-result lookup
4. Local analysis  → modality engine signals + weighted AI score
5. External        → optional third-party detectors, concurrent, per-detector timeout
6. Fusion          → reliability-weighted mean of all successful opinions
7. Report          → DetectionVerdict (stored when a result store is configured)
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time

from humanmark.config import Settings
from humanmark.core.audio.audio_analyzer import AudioAnalyzer
from humanmark.core.base_analyzer import AnalysisResult, BaseAnalyzer
from humanmark.core.classifier import ContentClassifier
from humanmark.core.errors import NoContentError, UnsupportedContentTypeError
from humanmark.core.external.base_detector import BaseDetector, DetectorInput, DetectorResult
from humanmark.core.external.gptzero_detector import GPTZeroDetector
from humanmark.core.external.hive_detector import HiveDetector
from humanmark.core.external.openai_detector import OpenAIDetector
from humanmark.core.fusion.score_aggregator import ScoreAggregator
from humanmark.core.fusion.weights import (
    DETECTOR_WEIGHTS,
    INTERNAL_DETECTOR,
    SIGNAL_WEIGHTS,
    validate_weight_tables,
)
from humanmark.core.image.image_analyzer import ImageAnalyzer
from humanmark.core.store.result_store import ResultStore, generate_id
from humanmark.core.text.text_analyzer import TextAnalyzer
from humanmark.core.video.video_analyzer import VideoAnalyzer
from humanmark.models.enums import ContentCategory, DetectorStatus
from humanmark.models.schemas import AnalysisInput, DetectionVerdict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds per external detector


class DetectionOrchestrator:
    """Main analysis pipeline."""

    def __init__(
        self,
        detectors: list[BaseDetector] | None = None,
        detector_timeout: float = DEFAULT_TIMEOUT,
        store: ResultStore | None = None,
    ) -> None:
        validate_weight_tables()
        self.classifier = ContentClassifier()
        self.analyzers: dict[ContentCategory, BaseAnalyzer] = {
            ContentCategory.TEXT: TextAnalyzer(SIGNAL_WEIGHTS[ContentCategory.TEXT]),
            ContentCategory.IMAGE: ImageAnalyzer(SIGNAL_WEIGHTS[ContentCategory.IMAGE]),
            ContentCategory.AUDIO: AudioAnalyzer(SIGNAL_WEIGHTS[ContentCategory.AUDIO]),
            ContentCategory.VIDEO: VideoAnalyzer(SIGNAL_WEIGHTS[ContentCategory.VIDEO]),
        }
        self.detectors = [d for d in detectors or [] if d.enabled]
        self.detector_timeout = detector_timeout
        self.store = store

    @classmethod
    def from_settings(cls, settings: Settings, store: ResultStore | None = None) -> DetectionOrchestrator:
        timeout = float(settings.detector_timeout)
        detectors: list[BaseDetector] = [
            HiveDetector(settings.hive_api_key, timeout=timeout),
            GPTZeroDetector(settings.gptzero_api_key, timeout=timeout),
            OpenAIDetector(settings.openai_api_key, timeout=timeout),
        ]
        orchestrator = cls(detectors=detectors, detector_timeout=timeout, store=store)
        if not settings.external_detectors_enabled:
            logger.info("No external detector keys configured, using local analysis only")
            return orchestrator
        logger.info(
            "Orchestrator ready: external detectors=%s",
            [d.name for d in orchestrator.detectors] or "none",
        )
        return orchestrator

    async def analyze(self, inp: AnalysisInput) -> DetectionVerdict:
        """Run the full pipeline. Raises NoContentError or UnsupportedContentTypeError."""
        start = time.perf_counter()
        if inp.is_empty:
            raise NoContentError()

        # === Step 1: Classify ===
        category = self.classifier.classify(
            hint=inp.content_type,
            text=inp.text,
            filename=inp.filename,
            url=inp.url,
            mime_type=inp.mime_type,
            data=inp.data,
        )
        if category == ContentCategory.UNKNOWN:
            raise UnsupportedContentTypeError(category)
        logger.debug("Content classified as %s", category.value)

        # === Step 2: Payload ===
        payload = self._payload(inp, category)

        # === Step 3: Hash / cache ===
        content_hash = self.content_hash(inp)
        if self.store is not None:
            cached = await self.store.find_by_hash(content_hash, category.value)
            if cached and cached.get("content_type") == category.value:
                logger.info("[%s] Cache HIT for %s", cached["id"], content_hash[:12])
                return DetectionVerdict.model_validate(cached)

        verdict_id = generate_id()
        logger.info("[%s] Analysis started: %s, %d bytes", verdict_id, category.value, len(payload))

        # === Step 4: Local analysis ===
        analyzer = self.analyzers[category]
        result: AnalysisResult = await asyncio.to_thread(analyzer.analyze, payload)

        # === Step 5: External detectors ===
        external = await self._run_external(
            DetectorInput(
                category=category,
                text=payload if isinstance(payload, str) else None,
                data=payload if isinstance(payload, bytes) else None,
                url=inp.url,
            )
        )

        # === Step 6: Fusion ===
        opinions = {INTERNAL_DETECTOR: result.ai_score}
        opinions.update({r.detector_name: r.score for r in external})
        ai_score = ScoreAggregator.fuse(opinions, DETECTOR_WEIGHTS[category])
        call = ScoreAggregator.verdict(ai_score)

        # === Step 7: Report ===
        elapsed = (time.perf_counter() - start) * 1000
        verdict = DetectionVerdict(
            id=verdict_id,
            human=call["human"],
            confidence=call["confidence"],
            ai_score=ai_score,
            content_type=category,
            detectors=list(opinions),
            content_hash=content_hash,
            processing_time_ms=elapsed,
            detector_scores=opinions,
            analysis=result.to_dict(),
        )
        if self.store is not None:
            await self.store.save(verdict.model_dump(mode="json"))

        logger.info(
            "[%s] Analysis complete: ai_score=%.3f human=%s detectors=%s (%.0fms)",
            verdict_id,
            ai_score,
            verdict.human,
            verdict.detectors,
            elapsed,
        )
        return verdict

    @staticmethod
    def _payload(inp: AnalysisInput, category: ContentCategory) -> str | bytes:
        if category == ContentCategory.TEXT:
            text = inp.text
            if not text and inp.data:
                text = inp.data.decode("utf-8", errors="replace")
            if not text:
                raise NoContentError("no text content to analyze")
            return text
        if not inp.data:
            raise NoContentError(f"no {category.value} content to analyze")
        return inp.data

    @staticmethod
    def content_hash(inp: AnalysisInput) -> str:
        """SHA-256 over the text if present, else the bytes, else the URL string."""
        if inp.text:
            material = inp.text.encode("utf-8")
        elif inp.data:
            material = inp.data
        else:
            material = (inp.url or "").encode("utf-8")
        return hashlib.sha256(material).hexdigest()

    async def _run_external(self, inp: DetectorInput) -> list[DetectorResult]:
        """Query every applicable external detector concurrently; return the ones that succeeded."""
        active = [d for d in self.detectors if d.supports(inp)]
        if not active:
            return []

        async def _run_one(det: BaseDetector) -> DetectorResult:
            try:
                return await asyncio.wait_for(det.detect(inp), timeout=self.detector_timeout)
            except asyncio.TimeoutError:
                return DetectorResult(
                    detector_name=det.name,
                    score=0.5,
                    status=DetectorStatus.TIMEOUT,
                    details={"error": "timeout"},
                )

        results = await asyncio.gather(*(_run_one(d) for d in active))
        succeeded = []
        for r in results:
            if r.ok:
                succeeded.append(r)
            else:
                logger.warning(
                    "Detector %s excluded (%s): %s", r.detector_name, r.status.value, r.details.get("error", "")
                )
        return succeeded

    async def shutdown(self) -> None:
        for det in self.detectors:
            await det.shutdown()
