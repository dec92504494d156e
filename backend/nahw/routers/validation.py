from fastapi import APIRouter, HTTPException

from nahw.schemas import (
    QuestionIn,
    RoleValidateIn,
    SimpleValidateIn,
    ValidationOut,
)
from nahw.services.answer_validator import (
    EmptyConstructionSetError,
    GrammarQuestion,
    ValidationResult,
    validate_role_based,
    validate_simple,
)
from nahw.services.constructions import (
    InvalidConstructionError,
    RoleBasedRelationship,
    make_construction,
)
from nahw.services.interaction_logger import log_validation
from nahw.services.role_selection import RoleSelection, RoleSelectionError
from nahw.services.segments import Segment, SegmentSequence

router = APIRouter(prefix="/api/validate", tags=["validate"])


def _to_question(body: QuestionIn) -> GrammarQuestion:
    """Build a question, checking each construction against the verse."""
    segments = SegmentSequence(Segment(**s.model_dump()) for s in body.segments)

    constructions = []
    for c in body.constructions:
        role_based = None
        if c.role_based is not None:
            role_based = RoleBasedRelationship(
                type=c.type,
                primary_indices=tuple(c.role_based.primary_indices),
                secondary_indices=tuple(c.role_based.secondary_indices),
                certainty=c.certainty,
            )
        constructions.append(make_construction(
            segments,
            c.type,
            spans=tuple(c.spans),
            roles=tuple(c.roles),
            certainty=c.certainty,
            explanation=c.explanation,
            role_based=role_based,
            construction_id=c.id,
        ))

    return GrammarQuestion(
        construction_type=body.construction_type,
        constructions=constructions,
        segments=segments,
        question_id=body.question_id,
    )


def _to_out(result: ValidationResult) -> ValidationOut:
    return ValidationOut(
        is_correct=result.is_correct,
        partial=result.partial,
        score=result.score,
        feedback_tier=result.feedback_tier,
        feedback={
            "kind": result.feedback.kind,
            "level": result.feedback.level,
            "message": result.feedback.message,
            "construction_type": result.feedback.construction_type,
            "tips": list(result.feedback.tips),
        },
        matched=[c.id for c in result.matched],
        missed=[c.id for c in result.missed],
        partially_missed=[c.id for c in result.partially_missed],
        extra_spans=result.extra_spans,
        selected_spans=result.selected_spans,
        best_match_id=result.best_match.id if result.best_match else None,
    )


@router.post("/simple", response_model=ValidationOut)
def validate_simple_endpoint(body: SimpleValidateIn):
    """Score a span selection for Iḍāfa / Jar-Majrūr questions."""
    try:
        question = _to_question(body.question)
        result = validate_simple(question, body.user_spans, body.prior_submissions)
    except (EmptyConstructionSetError, InvalidConstructionError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    log_validation("validate_simple", question, result, body.session_id)
    return _to_out(result)


@router.post("/roles", response_model=ValidationOut)
def validate_roles_endpoint(body: RoleValidateIn):
    """Score a primary/secondary role assignment for role-based questions."""
    try:
        question = _to_question(body.question)
        selection = None
        if body.role_selection is not None:
            selection = RoleSelection(
                step=body.role_selection.step,
                primary_indices=tuple(body.role_selection.primary_indices or ()),
                secondary_indices=tuple(body.role_selection.secondary_indices or ()),
            )
        result = validate_role_based(question, selection)
    except (EmptyConstructionSetError, InvalidConstructionError, RoleSelectionError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    log_validation("validate_roles", question, result, body.session_id)
    return _to_out(result)
