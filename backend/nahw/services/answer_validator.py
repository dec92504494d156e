"""Grammar quiz answer validation.

Scores a learner's selection against the constructions detected for the
active question. Two algorithms:

- Span-set (Iḍāfa, Jar-Majrūr): the selection is a flat set of segment
  positions, accumulated over earlier attempts. A construction counts as
  matched when all of its positions are selected; every selected position
  outside the target constructions costs 0.1.
- Dual-role (Fiʿl-Fāʿil, Harf Naṣb-Ismuha): the learner names the primary
  and the secondary element separately; the best candidate is picked by a
  weighted Jaccard score that counts the primary role for 60 and the
  secondary for 40.

Wrong or empty answers are ordinary results. Malformed selections come
back as `invalid_input` feedback. Only a question without any constructions
raises, because the caller promised at least one.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from nahw.services.constructions import (
    Construction,
    construction_name,
    is_role_based,
)
from nahw.services.role_selection import RoleSelection
from nahw.services.segments import SegmentSequence, as_sequence
from nahw.services.span_utils import clamp, difference, jaccard, same_members, union_ordered

logger = logging.getLogger(__name__)

EXTRA_SPAN_PENALTY = 0.1

# Span-set feedback bands, on the 0..1 fraction.
CLOSE_THRESHOLD = 0.7
PARTIAL_THRESHOLD = 0.4

# Dual-role weights and bands, on the 0..100 score.
PRIMARY_WEIGHT = 60
SECONDARY_WEIGHT = 40
ROLE_EXACT_THRESHOLD = 95
ROLE_CLOSE_THRESHOLD = 70
ROLE_PARTIAL_THRESHOLD = 40

# Feedback kinds
EXACT = "exact"
CLOSE = "close"
PARTIAL = "partial"
MINIMAL = "minimal"
INCORRECT = "incorrect"
NO_MATCH = "no_match"
INVALID_INPUT = "invalid_input"


class EmptyConstructionSetError(ValueError):
    pass


@dataclass(frozen=True)
class GrammarQuestion:
    construction_type: str
    constructions: Optional[Sequence[Construction]]
    segments: SegmentSequence
    question_id: Optional[str] = None

    def __post_init__(self):
        # Lists and id-keyed mappings are accepted like detector input.
        object.__setattr__(self, "segments", as_sequence(self.segments))


@dataclass(frozen=True)
class Feedback:
    kind: str
    level: str  # "success", "info", "warning", "error"
    message: str
    construction_type: str
    tips: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    is_correct: bool
    partial: bool
    score: float
    feedback: Feedback
    matched: list[Construction] = field(default_factory=list)
    missed: list[Construction] = field(default_factory=list)
    partially_missed: list[Construction] = field(default_factory=list)
    extra_spans: list[int] = field(default_factory=list)
    selected_spans: list[int] = field(default_factory=list)
    best_match: Optional[Construction] = None

    @property
    def feedback_tier(self) -> str:
        return self.feedback.kind


def _require_constructions(question: GrammarQuestion) -> list[Construction]:
    if not question.constructions:
        raise EmptyConstructionSetError(
            f"Question {question.question_id or '?'} has no constructions to validate against"
        )
    return list(question.constructions)


def _invalid_input(message: str, construction_type: str) -> ValidationResult:
    return ValidationResult(
        is_correct=False,
        partial=False,
        score=0.0,
        feedback=Feedback(
            kind=INVALID_INPUT,
            level="error",
            message=message,
            construction_type=construction_type,
            tips=("Try again looking for words that connect grammatically.",),
        ),
    )


def _no_match(construction_type: str) -> ValidationResult:
    name = construction_name(construction_type)
    return ValidationResult(
        is_correct=False,
        partial=False,
        score=0.0,
        feedback=Feedback(
            kind=NO_MATCH,
            level="error",
            message=f"No {name} constructions found in this verse.",
            construction_type=construction_type,
            tips=("Try again looking for words that connect grammatically.",),
        ),
    )


def _out_of_range(indices: Iterable[int], segments: SegmentSequence) -> list[int]:
    return [
        i for i in indices
        if isinstance(i, bool) or not segments.is_valid_index(i)
    ]


def _targets(question: GrammarQuestion, constructions: list[Construction]) -> list[Construction]:
    return [c for c in constructions if c.type == question.construction_type]


# --- span-set validation ---------------------------------------------------

def _span_set_feedback(construction_type: str, is_correct: bool, fraction: float) -> Feedback:
    name = construction_name(construction_type)
    if is_correct:
        return Feedback(EXACT, "success", f"Perfect! You correctly identified all {name} constructions.", construction_type, (
            "Excellent job identifying the grammatical pattern.",
            "Continue practicing with more examples to reinforce your learning.",
        ))
    if fraction >= CLOSE_THRESHOLD:
        return Feedback(CLOSE, "info", f"Very good! You identified most of the {name} constructions.", construction_type, (
            "You have a good understanding of this construction.",
            "Pay closer attention to including all relevant words in each construction.",
        ))
    if fraction >= PARTIAL_THRESHOLD:
        return Feedback(PARTIAL, "warning", f"You're on the right track! You found some {name} constructions.", construction_type, (
            "Remember that a complete construction includes all related words.",
            f"For {name}, make sure you identify all parts of the relationship.",
        ))
    if fraction > 0:
        return Feedback(MINIMAL, "error", f"Keep practicing. You found a few parts of the {name} constructions.", construction_type, (
            f"Study the structure of {name} more carefully.",
            "Try to identify how words relate to each other grammatically.",
        ))
    return Feedback(INCORRECT, "error", f"Let's try again. Look for {name} patterns in this verse.", construction_type, (
        f"A {name} construction consists of specific related words.",
        "Review the grammatical rules and try again.",
    ))


def validate_simple(
    question: GrammarQuestion,
    user_spans: Iterable[int],
    prior_submissions: Iterable[Iterable[int]] = (),
) -> ValidationResult:
    """Score a flat span selection, accumulated with earlier attempts."""
    constructions = _require_constructions(question)
    construction_type = question.construction_type

    current = list(user_spans) if user_spans is not None else []
    if not current:
        return _invalid_input("Please select at least one word.", construction_type)

    selected = union_ordered(current, *(list(p) for p in prior_submissions if p))
    bad = _out_of_range(selected, question.segments)
    if bad:
        return _invalid_input(f"Selection contains invalid word positions: {bad}", construction_type)

    targets = _targets(question, constructions)
    if not targets:
        return _no_match(construction_type)

    selected_set = set(selected)
    matched: list[Construction] = []
    missed: list[Construction] = []
    partially_missed: list[Construction] = []
    for construction in targets:
        spans = construction.span_set
        if spans <= selected_set:
            matched.append(construction)
        else:
            missed.append(construction)
            if spans & selected_set:
                partially_missed.append(construction)

    correct_positions = union_ordered(*(c.spans for c in targets))
    extra = difference(selected, correct_positions)

    # Rounded so 1 - 3 * 0.1 lands on the 0.7 band boundary.
    fraction = round(clamp(len(matched) / len(targets) - EXTRA_SPAN_PENALTY * len(extra)), 10)
    is_correct = len(matched) == len(targets) and not extra
    partial = not is_correct and (bool(matched) or bool(partially_missed))

    logger.debug(
        f"Span-set validation ({construction_type}): matched={len(matched)}/{len(targets)}, "
        f"extra={len(extra)}, fraction={fraction:.2f}"
    )

    return ValidationResult(
        is_correct=is_correct,
        partial=partial,
        score=round(fraction * 100, 2),
        feedback=_span_set_feedback(construction_type, is_correct, fraction),
        matched=matched,
        missed=missed,
        partially_missed=partially_missed,
        extra_spans=extra,
        selected_spans=selected,
    )


# --- dual-role validation --------------------------------------------------

def role_match_score(construction: Construction, primary: Iterable[int], secondary: Iterable[int]) -> float:
    """100 on an exact role match, otherwise 60 * J(primary) + 40 * J(secondary)."""
    relationship = construction.role_based
    if relationship is None:
        return 0.0
    primary, secondary = list(primary), list(secondary)
    if same_members(primary, relationship.primary_indices) and same_members(
        secondary, relationship.secondary_indices
    ):
        return 100.0
    return (
        PRIMARY_WEIGHT * jaccard(primary, relationship.primary_indices)
        + SECONDARY_WEIGHT * jaccard(secondary, relationship.secondary_indices)
    )


def find_best_role_match(
    candidates: list[Construction], primary: Iterable[int], secondary: Iterable[int]
) -> tuple[Construction, float]:
    """Highest-scoring candidate; the first one wins ties."""
    primary, secondary = list(primary), list(secondary)
    best, best_score = candidates[0], -1.0
    for candidate in candidates:
        score = role_match_score(candidate, primary, secondary)
        if score > best_score:
            best, best_score = candidate, score
    return best, best_score


def _role_feedback(construction_type: str, score: float) -> Feedback:
    name = construction_name(construction_type)
    if score >= ROLE_EXACT_THRESHOLD:
        return Feedback(EXACT, "success", f"Perfect! You correctly identified the {name} construction.", construction_type, (
            "You have a good understanding of this grammar pattern.",
            "Keep practicing to reinforce your knowledge.",
        ))
    if score >= ROLE_CLOSE_THRESHOLD:
        return Feedback(CLOSE, "info", f"Almost perfect! Your identification of the {name} is nearly correct.", construction_type, (
            "You identified most of the correct words.",
            "Make sure to include all words that are part of the relationship.",
        ))
    if score >= ROLE_PARTIAL_THRESHOLD:
        return Feedback(PARTIAL, "warning", f"You're on the right track with this {name} construction.", construction_type, (
            "You identified some of the correct words.",
            "Pay closer attention to the specific roles of words in this relationship.",
        ))
    return Feedback(INCORRECT, "error", f"Your identification of the {name} needs improvement.", construction_type, (
        "Study the pattern of this construction type more carefully.",
        "Look for the specific grammatical markers that indicate this relationship.",
    ))


def validate_role_based(
    question: GrammarQuestion,
    role_selection: Optional[RoleSelection],
) -> ValidationResult:
    """Score a completed primary/secondary role assignment."""
    constructions = _require_constructions(question)
    construction_type = question.construction_type

    if role_selection is None:
        return _invalid_input("Please provide role selections for this construction.", construction_type)
    if not role_selection.is_complete:
        return _invalid_input(
            f"Role selection is not complete (current step: {role_selection.step}).",
            construction_type,
        )
    primary = list(role_selection.primary_indices)
    secondary = list(role_selection.secondary_indices)
    if not primary or not secondary:
        return _invalid_input("Both the primary and the secondary role must be selected.", construction_type)
    bad = _out_of_range(primary + secondary, question.segments)
    if bad:
        return _invalid_input(f"Selection contains invalid word positions: {bad}", construction_type)

    targets = _targets(question, constructions)
    if not targets:
        return _no_match(construction_type)

    best, score = find_best_role_match(targets, primary, secondary)
    feedback = _role_feedback(construction_type, score)
    is_correct = feedback.kind == EXACT

    logger.debug(f"Role validation ({construction_type}): best={best.id}, score={score:.1f}")

    return ValidationResult(
        is_correct=is_correct,
        partial=feedback.kind in (CLOSE, PARTIAL),
        score=round(score, 2),
        feedback=feedback,
        matched=[best] if is_correct else [],
        missed=[] if is_correct else [best],
        selected_spans=union_ordered(primary, secondary),
        best_match=best,
    )


def validate_answer(
    question: GrammarQuestion,
    selection,
    prior_submissions: Iterable[Iterable[int]] = (),
) -> ValidationResult:
    """Route to the dual-role validator for role-based types, span-set otherwise."""
    if is_role_based(question.construction_type):
        if selection is not None and not isinstance(selection, RoleSelection):
            _require_constructions(question)
            return _invalid_input(
                "Please provide role selections for this construction.",
                question.construction_type,
            )
        return validate_role_based(question, selection)
    if isinstance(selection, RoleSelection):
        selection = union_ordered(selection.primary_indices, selection.secondary_indices)
    return validate_simple(question, selection or [], prior_submissions)
