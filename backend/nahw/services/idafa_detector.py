"""Iḍāfa (إضافة) detection: possessive Mudaf / Mudaf Ilayh pairs and chains.

For every noun the detector looks ahead a short window for the noun that
completes the possessive. Definite-article particles are transparent and do
not use up the window; a strong preposition between the two nouns breaks the
reading. The first acceptable candidate wins.

Certainty is graded by the evidence that accepted the candidate:

- genitive case marking            -> definite
- definite article on / before it  -> probable
- no case annotation at all        -> inferred

Pairs that share a pivot noun (the mudaf ilayh of one pair is the mudaf of
the next) are grouped into chains, e.g. ذِكْرُ رَحْمَتِ رَبِّكَ
"mention of the mercy of your Lord".
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from nahw.services.constructions import (
    DEFINITE,
    IDAFA,
    INFERRED,
    PROBABLE,
    Construction,
    make_construction,
)
from nahw.services.segments import SegmentSequence, as_sequence

logger = logging.getLogger(__name__)

LOOKAHEAD_WINDOW = 3


@dataclass(frozen=True)
class Chain:
    constructions: tuple[Construction, ...]

    @property
    def span_path(self) -> tuple[int, ...]:
        """Segment positions along the chain: mudaf, pivot(s), last mudaf ilayh."""
        path = [self.constructions[0].spans[0]]
        path.extend(c.spans[1] for c in self.constructions)
        return tuple(path)

    def __len__(self) -> int:
        return len(self.constructions)


@dataclass(frozen=True)
class IdafaStatistics:
    total: int = 0
    definite: int = 0
    probable: int = 0
    inferred: int = 0
    in_chains: int = 0
    chains: int = 0


@dataclass(frozen=True)
class IdafaDetectionResult:
    constructions: list[Construction] = field(default_factory=list)
    chains: list[Chain] = field(default_factory=list)
    statistics: IdafaStatistics = field(default_factory=IdafaStatistics)


def _has_definite_article(sequence: SegmentSequence, index: int) -> bool:
    if sequence[index].carries_definite_article:
        return True
    return index > 0 and sequence[index - 1].is_definite_article


def _mudaf_ilayh_certainty(sequence: SegmentSequence, index: int) -> Optional[str]:
    """Certainty of reading segment `index` as a mudaf ilayh, or None to reject."""
    candidate = sequence[index]
    if not candidate.is_noun:
        return None
    if candidate.case == "genitive":
        return DEFINITE
    if _has_definite_article(sequence, index):
        return PROBABLE
    if candidate.case is None:
        # Annotation is incomplete; accept permissively.
        return INFERRED
    return None


def _strong_preposition_between(sequence: SegmentSequence, start: int, end: int) -> bool:
    return any(sequence[k].is_strong_preposition for k in range(start + 1, end))


def _explain(sequence: SegmentSequence, i: int, j: int, certainty: str) -> str:
    mudaf, ilayh = sequence[i].text, sequence[j].text
    reason = {
        DEFINITE: "which is marked genitive",
        PROBABLE: "which is made definite by the article",
        INFERRED: "inferred because no case marking is available",
    }[certainty]
    return f'"{mudaf}" (mudaf) is in a possessive relationship with "{ilayh}" (mudaf ilayh), {reason}.'


def _find_mudaf_ilayh(sequence: SegmentSequence, i: int) -> Optional[tuple[int, str]]:
    budget = LOOKAHEAD_WINDOW
    j = i + 1
    while j < len(sequence) and budget > 0:
        candidate = sequence[j]
        if candidate.is_definite_article:
            j += 1
            continue
        budget -= 1

        certainty = _mudaf_ilayh_certainty(sequence, j)
        if certainty is not None:
            if _strong_preposition_between(sequence, i, j):
                logger.debug(f"Idafa {sequence[i].text} + {candidate.text}: strong preposition between, rejected")
            else:
                return j, certainty
        j += 1
    return None


def detect_idafa(segments) -> list[Construction]:
    """Detect Mudaf / Mudaf Ilayh pairs. Returns constructions in scan order."""
    sequence = as_sequence(segments)
    constructions: list[Construction] = []

    for i in range(len(sequence) - 1):
        if not sequence[i].is_noun:
            continue
        match = _find_mudaf_ilayh(sequence, i)
        if match is None:
            continue
        j, certainty = match
        constructions.append(make_construction(
            sequence,
            IDAFA,
            spans=(i, j),
            roles=("mudaf", "mudaf-ilayh"),
            certainty=certainty,
            explanation=_explain(sequence, i, j, certainty),
        ))
        logger.debug(f"Idafa: {sequence[i].text} + {sequence[j].text} ({certainty})")

    logger.info(f"Idafa detection: {len(constructions)} constructions over {len(sequence)} segments")
    return constructions


def assemble_chains(constructions: list[Construction]) -> list[Chain]:
    """Link idafa pairs that share a pivot noun into multi-level chains.

    Chains start at pairs whose mudaf is not itself a mudaf ilayh of another
    pair, in encounter order. Only chains of two or more pairs are returned.
    """
    idafa = [c for c in constructions if c.type == IDAFA]
    by_mudaf: dict[int, Construction] = {}
    for c in idafa:
        by_mudaf.setdefault(c.spans[0], c)
    pivots = {c.spans[1] for c in idafa}

    chains: list[Chain] = []
    processed: set[str] = set()
    heads = [c for c in idafa if c.spans[0] not in pivots] + idafa
    for head in heads:
        if head.id in processed:
            continue
        links = [head]
        processed.add(head.id)
        nxt = by_mudaf.get(head.spans[1])
        while nxt is not None and nxt.id not in processed:
            links.append(nxt)
            processed.add(nxt.id)
            nxt = by_mudaf.get(nxt.spans[1])
        if len(links) > 1:
            chains.append(Chain(tuple(links)))
    return chains


def compute_statistics(constructions: list[Construction], chains: list[Chain]) -> IdafaStatistics:
    chained = {c.id for chain in chains for c in chain.constructions}
    return IdafaStatistics(
        total=len(constructions),
        definite=sum(1 for c in constructions if c.certainty == DEFINITE),
        probable=sum(1 for c in constructions if c.certainty == PROBABLE),
        inferred=sum(1 for c in constructions if c.certainty == INFERRED),
        in_chains=len(chained),
        chains=len(chains),
    )


def analyze_idafa(segments) -> IdafaDetectionResult:
    """Detect idafa pairs, assemble chains and summarize certainty."""
    constructions = detect_idafa(segments)
    chains = assemble_chains(constructions)
    for chain in chains:
        logger.debug(f"Idafa chain: {' -> '.join(str(p) for p in chain.span_path)}")
    return IdafaDetectionResult(
        constructions=constructions,
        chains=chains,
        statistics=compute_statistics(constructions, chains),
    )
