"""Construction value objects shared by the detectors and validators.

A Construction is an immutable record of one detected grammatical
relationship over two segment positions. Its id is derived from the
construction type, spans and segment ids, so detecting the same sequence
twice yields identical objects.
"""

from dataclasses import dataclass, field
from hashlib import sha256
from typing import Optional

from nahw.services.segments import SegmentSequence

IDAFA = "idafa"
JAR_MAJRUR = "jar-majrur"
FIL_FAIL = "fil-fail"
HARF_NASB_ISMUHA = "harf-nasb-ismuha"

CONSTRUCTION_TYPES: tuple[str, ...] = (IDAFA, JAR_MAJRUR, FIL_FAIL, HARF_NASB_ISMUHA)
SIMPLE_TYPES: tuple[str, ...] = (IDAFA, JAR_MAJRUR)
ROLE_BASED_TYPES: tuple[str, ...] = (FIL_FAIL, HARF_NASB_ISMUHA)

DEFINITE = "definite"
PROBABLE = "probable"
INFERRED = "inferred"

# Higher rank is stronger evidence.
CERTAINTY_RANK: dict[str, int] = {DEFINITE: 3, PROBABLE: 2, INFERRED: 1}

REQUIRED_ARITY: dict[str, int] = {
    IDAFA: 2,
    JAR_MAJRUR: 2,
    FIL_FAIL: 2,
    HARF_NASB_ISMUHA: 2,
}

CONSTRUCTION_ROLES: dict[str, tuple[str, str]] = {
    IDAFA: ("mudaf", "mudaf-ilayh"),
    JAR_MAJRUR: ("jar", "majrur"),
    FIL_FAIL: ("fil", "fail"),
    HARF_NASB_ISMUHA: ("harf-nasb", "ismuha"),
}

ATTACHED_JAR_MAJRUR_ROLE = "jar-majrur-combined"

CONSTRUCTION_CONFIG: dict[str, dict[str, str]] = {
    IDAFA: {
        "english_name": "Iḍāfa",
        "arabic_name": "إضافة",
        "description": "Possessive construction (Mudaf-Mudaf Ilayh)",
    },
    JAR_MAJRUR: {
        "english_name": "Jar wa Majrūr",
        "arabic_name": "جار ومجرور",
        "description": "Prepositional phrase (Jar-Majrur)",
    },
    FIL_FAIL: {
        "english_name": "Fiʿl–Fāʿil",
        "arabic_name": "فعل وفاعل",
        "description": "Verb and subject construction (Fiʿl-Fāʿil)",
    },
    HARF_NASB_ISMUHA: {
        "english_name": "Harf Naṣb + Ismuha",
        "arabic_name": "حرف نصب واسمها",
        "description": "Accusative particle and its governed word (Harf Naṣb-Ismuha)",
    },
}

GRAMMATICAL_ROLES: dict[str, dict[str, dict[str, str]]] = {
    FIL_FAIL: {
        "primary": {
            "name": "fiʿl",
            "arabic_name": "فِعْل",
            "description": "Verb - the action or state",
        },
        "secondary": {
            "name": "fāʿil",
            "arabic_name": "فَاعِل",
            "description": "Doer - the one who performs the action",
        },
    },
    HARF_NASB_ISMUHA: {
        "primary": {
            "name": "harf-naṣb",
            "arabic_name": "حَرْف نَصْب",
            "description": "Accusative particle - governs the word after it",
        },
        "secondary": {
            "name": "ismuha",
            "arabic_name": "اسْمُهَا",
            "description": "The word governed by the accusative particle",
        },
    },
}


class InvalidConstructionError(ValueError):
    pass


def construction_name(construction_type: str) -> str:
    """User-facing English name for a construction type."""
    config = CONSTRUCTION_CONFIG.get(construction_type)
    return config["english_name"] if config else construction_type


def required_arity(construction_type: str) -> int:
    if construction_type not in REQUIRED_ARITY:
        raise InvalidConstructionError(f"Unknown construction type: {construction_type}")
    return REQUIRED_ARITY[construction_type]


def is_role_based(construction_type: Optional[str]) -> bool:
    return construction_type in ROLE_BASED_TYPES


def construction_key(
    construction_type: str,
    spans: tuple[int, ...],
    segment_ids: tuple[str, ...],
    roles: tuple[str, ...] = (),
) -> str:
    """Deterministic id from the construction's content.

    Roles are folded in so the attached-prefix jar-majrur reading of a
    segment never collides with another construction over the same spans.
    """
    payload = "|".join([
        construction_type,
        ",".join(str(s) for s in spans),
        ",".join(segment_ids),
        ",".join(roles),
    ])
    return f"{construction_type}-{sha256(payload.encode('utf-8')).hexdigest()[:16]}"


@dataclass(frozen=True)
class RoleBasedRelationship:
    type: str
    primary_indices: tuple[int, ...]
    secondary_indices: tuple[int, ...]
    certainty: str = DEFINITE
    explanation: str = ""

    def __post_init__(self):
        if set(self.primary_indices) & set(self.secondary_indices):
            raise InvalidConstructionError(
                "primary and secondary indices must be disjoint: "
                f"{self.primary_indices} / {self.secondary_indices}"
            )

    @property
    def primary_role(self) -> dict[str, str]:
        return GRAMMATICAL_ROLES[self.type]["primary"]

    @property
    def secondary_role(self) -> dict[str, str]:
        return GRAMMATICAL_ROLES[self.type]["secondary"]


@dataclass(frozen=True)
class Construction:
    id: str
    type: str
    spans: tuple[int, ...]
    roles: tuple[str, ...]
    certainty: str
    explanation: str
    role_based: Optional[RoleBasedRelationship] = field(default=None)

    @property
    def span_set(self) -> frozenset[int]:
        return frozenset(self.spans)

    @property
    def certainty_rank(self) -> int:
        return CERTAINTY_RANK[self.certainty]

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "spans": list(self.spans),
            "roles": list(self.roles),
            "certainty": self.certainty,
            "explanation": self.explanation,
            "role_based": None,
        }
        if self.role_based is not None:
            data["role_based"] = {
                "primary_indices": list(self.role_based.primary_indices),
                "secondary_indices": list(self.role_based.secondary_indices),
                "primary_role": self.role_based.primary_role["name"],
                "secondary_role": self.role_based.secondary_role["name"],
                "certainty": self.role_based.certainty,
                "explanation": self.role_based.explanation,
            }
        return data


def make_construction(
    sequence: SegmentSequence,
    construction_type: str,
    spans: tuple[int, ...],
    roles: tuple[str, ...],
    certainty: str,
    explanation: str,
    role_based: Optional[RoleBasedRelationship] = None,
    construction_id: Optional[str] = None,
) -> Construction:
    """Validate invariants and build a Construction.

    The id is derived from the content unless the caller supplies one.
    """
    if len(spans) != required_arity(construction_type):
        raise InvalidConstructionError(
            f"{construction_type} requires {required_arity(construction_type)} spans, got {len(spans)}"
        )
    if not all(sequence.is_valid_index(i) for i in spans):
        raise InvalidConstructionError(f"Span out of range for {len(sequence)} segments: {spans}")
    if certainty not in CERTAINTY_RANK:
        raise InvalidConstructionError(f"Unknown certainty: {certainty}")
    if role_based is not None:
        if not is_role_based(role_based.type):
            raise InvalidConstructionError(f"{role_based.type} has no primary/secondary roles")
        role_indices = role_based.primary_indices + role_based.secondary_indices
        if not all(sequence.is_valid_index(i) for i in role_indices):
            raise InvalidConstructionError(f"Role index out of range for {len(sequence)} segments: {role_indices}")

    segment_ids = tuple(sequence[i].id for i in spans)
    return Construction(
        id=construction_id or construction_key(construction_type, spans, segment_ids, roles),
        type=construction_type,
        spans=spans,
        roles=roles,
        certainty=certainty,
        explanation=explanation,
        role_based=role_based,
    )


def filter_by_certainty(
    constructions: list[Construction], minimum: str = DEFINITE
) -> list[Construction]:
    """Keep constructions at or above a certainty tier."""
    floor = CERTAINTY_RANK[minimum]
    return [c for c in constructions if c.certainty_rank >= floor]


def group_by_type(constructions: list[Construction]) -> dict[str, list[Construction]]:
    grouped: dict[str, list[Construction]] = {t: [] for t in CONSTRUCTION_TYPES}
    for c in constructions:
        if c.type in grouped:
            grouped[c.type].append(c)
    return grouped
