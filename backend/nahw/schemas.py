from typing import Optional
from pydantic import BaseModel


class SegmentIn(BaseModel):
    id: str
    text: str
    morphology: str
    position_type: str = "root"
    case: Optional[str] = None
    number: Optional[str] = None
    gender: Optional[str] = None
    person: Optional[str] = None
    tense: Optional[str] = None
    voice: Optional[str] = None
    mood: Optional[str] = None
    grammatical_role: Optional[str] = None
    is_definite: Optional[bool] = None


class DetectIn(BaseModel):
    segments: list[SegmentIn]
    types: Optional[list[str]] = None
    surah_id: Optional[int] = None
    verse_id: Optional[int] = None
    arabic_text: Optional[str] = None


class RoleBasedOut(BaseModel):
    primary_indices: list[int]
    secondary_indices: list[int]
    primary_role: str
    secondary_role: str
    certainty: str
    explanation: str


class ConstructionOut(BaseModel):
    id: str
    type: str
    spans: list[int]
    roles: list[str]
    certainty: str
    explanation: str
    role_based: Optional[RoleBasedOut] = None


class DetectOut(BaseModel):
    constructions: list[ConstructionOut]
    count: int


class ChainOut(BaseModel):
    construction_ids: list[str]
    span_path: list[int]


class IdafaStatisticsOut(BaseModel):
    total: int
    definite: int
    probable: int
    inferred: int
    in_chains: int
    chains: int


class ChainsOut(BaseModel):
    constructions: list[ConstructionOut]
    chains: list[ChainOut]
    statistics: IdafaStatisticsOut


class RelationshipOut(BaseModel):
    construction_id: str
    type: str
    role: str
    related_segment_id: str
    description: str


class RelationshipsOut(BaseModel):
    relationships: dict[str, list[RelationshipOut]]


class RoleBasedIn(BaseModel):
    primary_indices: list[int]
    secondary_indices: list[int]


class ConstructionIn(BaseModel):
    id: Optional[str] = None
    type: str
    spans: list[int]
    roles: list[str] = []
    certainty: str = "definite"
    explanation: str = ""
    role_based: Optional[RoleBasedIn] = None


class QuestionIn(BaseModel):
    construction_type: str
    constructions: list[ConstructionIn]
    segments: list[SegmentIn]
    question_id: Optional[str] = None


class SimpleValidateIn(BaseModel):
    question: QuestionIn
    user_spans: list[int]
    prior_submissions: list[list[int]] = []
    session_id: Optional[str] = None


class RoleSelectionIn(BaseModel):
    step: str
    primary_indices: Optional[list[int]] = None
    secondary_indices: Optional[list[int]] = None


class RoleValidateIn(BaseModel):
    question: QuestionIn
    role_selection: Optional[RoleSelectionIn] = None
    session_id: Optional[str] = None


class FeedbackOut(BaseModel):
    kind: str
    level: str
    message: str
    construction_type: str
    tips: list[str]


class ValidationOut(BaseModel):
    is_correct: bool
    partial: bool
    score: float
    feedback_tier: str
    feedback: FeedbackOut
    matched: list[str]
    missed: list[str]
    partially_missed: list[str]
    extra_spans: list[int]
    selected_spans: list[int]
    best_match_id: Optional[str] = None
