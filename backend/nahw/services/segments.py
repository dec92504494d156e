"""Tagged morphological segments and the canonical ordered sequence.

Segments are produced upstream by the annotator/dataset loader and are
read-only here. Callers may hand the engine either a list of segments (kept
in the given order) or an id-keyed mapping; both are normalized to one
`SegmentSequence` at the boundary so that detectors only ever see a single
shape.
"""

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from nahw.services.arabic_text import (
    has_definite_article_prefix,
    is_preposition_text,
    is_weak_preposition_text,
)

logger = logging.getLogger(__name__)

MORPHOLOGY_CLASSES = ("noun", "verb", "particle", "adjective")

_ID_PART_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class Segment:
    id: str
    text: str
    morphology: str  # "noun", "verb", "particle", "adjective"
    position_type: str = "root"  # "prefix", "root", "suffix"
    case: Optional[str] = None
    number: Optional[str] = None
    gender: Optional[str] = None
    person: Optional[str] = None
    tense: Optional[str] = None
    voice: Optional[str] = None
    mood: Optional[str] = None
    grammatical_role: Optional[str] = None
    is_definite: Optional[bool] = None

    @property
    def is_noun(self) -> bool:
        return self.morphology == "noun"

    @property
    def is_verb(self) -> bool:
        return self.morphology == "verb"

    @property
    def is_particle(self) -> bool:
        return self.morphology == "particle"

    @property
    def is_definite_article(self) -> bool:
        return self.is_particle and self.grammatical_role == "definite_article"

    @property
    def is_tagged_preposition(self) -> bool:
        return self.is_particle and self.grammatical_role == "preposition"

    @property
    def is_preposition(self) -> bool:
        """Tagged as a preposition, or textually one."""
        return self.is_tagged_preposition or is_preposition_text(self.text)

    @property
    def is_strong_preposition(self) -> bool:
        """A tagged preposition outside the weak, attachable set."""
        return self.is_tagged_preposition and not is_weak_preposition_text(self.text)

    @property
    def carries_definite_article(self) -> bool:
        return has_definite_article_prefix(self.text) or self.is_definite is True


def segment_sort_key(segment_id: str) -> tuple[int, ...]:
    """Numeric sort key for ids such as "surah-verse-word-segment".

    "2-10-1-1" sorts after "2-9-3-2". Ids without digits sort first.
    """
    return tuple(int(p) for p in _ID_PART_RE.findall(segment_id))


def segment_from_dict(data: Mapping[str, Any]) -> Segment:
    """Build a Segment from an annotator record.

    Accepts both snake_case keys and the camelCase keys used by the
    annotation export (``positionType``, ``grammaticalRole``, ``isDefinite``),
    and ``morphologyClass`` / ``type`` as aliases.
    """
    def pick(*keys: str) -> Any:
        for key in keys:
            if key in data and data[key] is not None:
                return data[key]
        return None

    segment_id = str(data["id"])
    morphology = pick("morphology", "morphology_class", "morphologyClass") or "particle"
    if morphology not in MORPHOLOGY_CLASSES:
        logger.warning(f"Segment {segment_id}: unknown morphology class {morphology!r}")

    return Segment(
        id=segment_id,
        text=data.get("text", ""),
        morphology=morphology,
        position_type=pick("position_type", "positionType", "type") or "root",
        case=pick("case"),
        number=pick("number"),
        gender=pick("gender"),
        person=pick("person"),
        tense=pick("tense"),
        voice=pick("voice"),
        mood=pick("mood"),
        grammatical_role=pick("grammatical_role", "grammaticalRole"),
        is_definite=pick("is_definite", "isDefinite"),
    )


class SegmentSequence:
    """Ordered, immutable view over tagged segments."""

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[Segment] = ()):
        self._segments: tuple[Segment, ...] = tuple(segments)

    @classmethod
    def from_mapping(cls, segments: Mapping[str, Segment]) -> "SegmentSequence":
        """Order an id-keyed mapping by the numeric parts of each id."""
        ordered = sorted(segments.values(), key=lambda s: segment_sort_key(s.id))
        return cls(ordered)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "SegmentSequence":
        return cls(segment_from_dict(r) for r in records)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentSequence):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"SegmentSequence({len(self._segments)} segments)"

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(s.id for s in self._segments)

    def is_valid_index(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self._segments)

    def texts(self, indices: Iterable[int]) -> list[str]:
        return [self._segments[i].text for i in indices]


def as_sequence(segments: Any) -> SegmentSequence:
    """Coerce caller input into the canonical SegmentSequence.

    Accepts a SegmentSequence, an id-keyed mapping of Segments, or any
    iterable of Segments / annotator dicts.
    """
    if isinstance(segments, SegmentSequence):
        return segments
    if isinstance(segments, Mapping):
        values = list(segments.values())
        if values and not all(isinstance(v, Segment) for v in values):
            values = [segment_from_dict(v) for v in values]
        return SegmentSequence.from_mapping({s.id: s for s in values})
    if isinstance(segments, (str, bytes)):
        raise TypeError("segments must be a sequence or mapping of segments, not a string")
    if isinstance(segments, Iterable):
        items = list(segments)
        if all(isinstance(s, Segment) for s in items):
            return SegmentSequence(items)
        if all(isinstance(s, Mapping) for s in items):
            return SegmentSequence.from_records(items)
        raise TypeError("segments must all be Segment instances or dicts")
    raise TypeError(f"Unsupported segments input: {type(segments).__name__}")
