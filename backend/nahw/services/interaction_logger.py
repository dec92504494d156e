"""Append-only JSONL log of learner answers, one file per UTC day.

Each line records one validation: the construction type asked about, the
score and feedback tier, and whatever question/session ids the client sent.
Turned off with NAHW_LOG_INTERACTIONS=0.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from nahw.config import settings


def _get_log_path() -> Path:
    log_dir = settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    return log_dir / f"interactions_{today}.jsonl"


def log_interaction(
    event: str,
    construction_type: str | None = None,
    score: float | None = None,
    feedback_kind: str | None = None,
    question_id: str | None = None,
    session_id: str | None = None,
    **extra,
) -> None:
    if not settings.log_interactions:
        return

    entry = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "construction_type": construction_type,
        "score": score,
        "feedback_kind": feedback_kind,
        "question_id": question_id,
        "session_id": session_id,
        **extra,
    }
    entry = {k: v for k, v in entry.items() if v is not None}

    with open(_get_log_path(), "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, ensure_ascii=False) + "\n")


def log_validation(event: str, question, result, session_id: str | None = None) -> None:
    """Record a GrammarQuestion / ValidationResult pair."""
    log_interaction(
        event=event,
        construction_type=question.construction_type,
        score=result.score,
        feedback_kind=result.feedback_tier,
        question_id=question.question_id,
        session_id=session_id,
        is_correct=result.is_correct,
        selected=list(result.selected_spans),
        best_match=result.best_match.id if result.best_match else None,
    )
