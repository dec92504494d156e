"""Per-segment view of detected relationships.

Every two-segment construction links its segments both ways: the mudaf
points at its mudaf ilayh and the mudaf ilayh points back. A segment can
take part in several construction types at once (a noun can be majrur and
mudaf in the same verse), so the builder accumulates all records for a
segment in one list and freezes them once at the end.
"""

from collections import defaultdict
from dataclasses import dataclass

from nahw.services.constructions import Construction
from nahw.services.segments import as_sequence


@dataclass(frozen=True)
class SegmentRelationship:
    construction_id: str
    type: str
    role: str
    related_segment_id: str
    description: str


class RelationshipIndexBuilder:
    def __init__(self, segments):
        self._sequence = as_sequence(segments)
        self._records: dict[str, list[SegmentRelationship]] = defaultdict(list)

    def add(self, construction: Construction) -> None:
        first, second = construction.spans
        if first == second:
            # Attached-prefix readings relate a segment to itself.
            return
        a, b = self._sequence[first], self._sequence[second]
        role_a, role_b = construction.roles
        self._records[a.id].append(SegmentRelationship(
            construction_id=construction.id,
            type=construction.type,
            role=role_a,
            related_segment_id=b.id,
            description=f'"{a.text}" ({role_a}) with "{b.text}" ({role_b})',
        ))
        self._records[b.id].append(SegmentRelationship(
            construction_id=construction.id,
            type=construction.type,
            role=role_b,
            related_segment_id=a.id,
            description=f'"{b.text}" ({role_b}) with "{a.text}" ({role_a})',
        ))

    def build(self) -> dict[str, tuple[SegmentRelationship, ...]]:
        return {
            seg.id: tuple(self._records.get(seg.id, ()))
            for seg in self._sequence
        }


def build_relationship_index(segments, constructions: list[Construction]) -> dict[str, tuple[SegmentRelationship, ...]]:
    """Map every segment id to the relationships it takes part in."""
    builder = RelationshipIndexBuilder(segments)
    for construction in constructions:
        builder.add(construction)
    return builder.build()
