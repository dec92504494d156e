"""Detection orchestrator.

Runs the four construction detectors over one segment sequence and merges
their output. The detectors share no state and do not depend on each other,
so they can run one after another or on a thread pool; the merged list is
always assembled in the fixed order of DETECTORS, making the result
independent of which detector finishes first.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from nahw.services.constructions import (
    CONSTRUCTION_TYPES,
    FIL_FAIL,
    HARF_NASB_ISMUHA,
    IDAFA,
    JAR_MAJRUR,
    Construction,
)
from nahw.services.fil_fail_detector import detect_fil_fail
from nahw.services.harf_nasb_detector import detect_harf_nasb_ismuha
from nahw.services.idafa_detector import detect_idafa
from nahw.services.jar_majrur_detector import detect_jar_majrur
from nahw.services.segments import SegmentSequence, as_sequence

logger = logging.getLogger(__name__)

Detector = Callable[[SegmentSequence], list[Construction]]

DETECTORS: dict[str, Detector] = {
    IDAFA: detect_idafa,
    JAR_MAJRUR: detect_jar_majrur,
    FIL_FAIL: detect_fil_fail,
    HARF_NASB_ISMUHA: detect_harf_nasb_ismuha,
}


@dataclass(frozen=True)
class VerseContext:
    """Source metadata passed through for log lines only."""
    surah_id: Optional[int] = None
    verse_id: Optional[int] = None
    arabic_text: Optional[str] = None

    def label(self) -> str:
        if self.surah_id is None or self.verse_id is None:
            return "unknown verse"
        return f"{self.surah_id}:{self.verse_id}"


class DetectionService:
    """Explicitly constructed, stateless detection service.

    With `parallel=True` the detectors are dispatched on a thread pool
    created per call; otherwise they run sequentially on the calling thread.
    """

    def __init__(self, parallel: bool = False, max_workers: int = 4):
        self.parallel = parallel
        self.max_workers = max_workers

    def detect_types(
        self,
        segments,
        types: Iterable[str],
        context: Optional[VerseContext] = None,
    ) -> list[Construction]:
        """Run only the requested detectors (selective detection)."""
        sequence = as_sequence(segments)
        wanted = set(types)
        unknown = wanted - set(CONSTRUCTION_TYPES)
        if unknown:
            raise ValueError(f"Unknown construction types: {sorted(unknown)}")
        selected = [t for t in CONSTRUCTION_TYPES if t in wanted]

        if context is not None:
            logger.info(f"Detecting {', '.join(selected)} in {context.label()}")

        if self.parallel and len(selected) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {t: executor.submit(DETECTORS[t], sequence) for t in selected}
                results = {t: fut.result() for t, fut in futures.items()}
        else:
            results = {t: DETECTORS[t](sequence) for t in selected}

        constructions: list[Construction] = []
        for t in selected:
            constructions.extend(results[t])

        logger.info(f"Total constructions detected: {len(constructions)} over {len(sequence)} segments")
        return constructions

    def detect_all(self, segments, context: Optional[VerseContext] = None) -> list[Construction]:
        return self.detect_types(segments, CONSTRUCTION_TYPES, context=context)


def detect_all(segments, context: Optional[VerseContext] = None) -> list[Construction]:
    """Detect every supported construction type with a sequential service."""
    return DetectionService().detect_all(segments, context=context)


def build_detection_service() -> DetectionService:
    """Service configured from settings, used by the HTTP layer."""
    from nahw.config import settings

    return DetectionService(
        parallel=settings.parallel_detection,
        max_workers=settings.detection_workers,
    )
