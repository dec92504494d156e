from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from nahw.schemas import (
    ChainOut,
    ChainsOut,
    DetectIn,
    DetectOut,
    IdafaStatisticsOut,
    RelationshipOut,
    RelationshipsOut,
)
from nahw.services.detection import VerseContext, build_detection_service
from nahw.services.idafa_detector import analyze_idafa
from nahw.services.relationships import build_relationship_index
from nahw.services.segments import Segment, SegmentSequence

router = APIRouter(prefix="/api/constructions", tags=["constructions"])


def _sequence(body: DetectIn) -> SegmentSequence:
    return SegmentSequence(Segment(**s.model_dump()) for s in body.segments)


@router.post("/detect", response_model=DetectOut)
def detect(body: DetectIn):
    """Detect all (or the requested) construction types in a verse."""
    service = build_detection_service()
    context = VerseContext(body.surah_id, body.verse_id, body.arabic_text)
    try:
        if body.types:
            constructions = service.detect_types(_sequence(body), body.types, context=context)
        else:
            constructions = service.detect_all(_sequence(body), context=context)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "constructions": [c.to_dict() for c in constructions],
        "count": len(constructions),
    }


@router.post("/chains", response_model=ChainsOut)
def chains(body: DetectIn):
    """Iḍāfa pairs grouped into multi-level possessive chains."""
    result = analyze_idafa(_sequence(body))
    return ChainsOut(
        constructions=[c.to_dict() for c in result.constructions],
        chains=[
            ChainOut(
                construction_ids=[c.id for c in chain.constructions],
                span_path=list(chain.span_path),
            )
            for chain in result.chains
        ],
        statistics=IdafaStatisticsOut(**asdict(result.statistics)),
    )


@router.post("/relationships", response_model=RelationshipsOut)
def relationships(body: DetectIn):
    """Per-segment relationship records for every detected construction."""
    sequence = _sequence(body)
    constructions = build_detection_service().detect_all(sequence)
    index = build_relationship_index(sequence, constructions)
    return RelationshipsOut(relationships={
        seg_id: [RelationshipOut(**asdict(r)) for r in records]
        for seg_id, records in index.items()
    })
