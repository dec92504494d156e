"""Jar-Majrūr (جار ومجرور) detection: prepositions and their objects.

Two passes contribute to one result list:

1. Separate tokens: a preposition (tagged, or found in the lexicon) followed
   by a noun, a genitive word, or a construct-state noun.
2. Attached prefix: a token that starts with a one-letter preposition
   (بِ لِ كِ) that the annotator did not split off. Both roles then sit on
   the same segment, so the construction spans (i, i) and is only
   `inferred`.

The passes may overlap. Nothing is de-duplicated; callers that need a clean
reading filter by certainty.
"""

import logging

from nahw.services.arabic_text import split_attached_preposition
from nahw.services.constructions import (
    ATTACHED_JAR_MAJRUR_ROLE,
    DEFINITE,
    INFERRED,
    JAR_MAJRUR,
    Construction,
    make_construction,
)
from nahw.services.segments import Segment, as_sequence

logger = logging.getLogger(__name__)


def _can_be_majrur(segment: Segment) -> bool:
    return (
        segment.is_noun
        or segment.case == "genitive"
        or segment.grammatical_role == "construct"
    )


def detect_jar_majrur(segments) -> list[Construction]:
    sequence = as_sequence(segments)
    constructions: list[Construction] = []

    for i in range(len(sequence) - 1):
        jar, nxt = sequence[i], sequence[i + 1]
        if not jar.is_preposition or not _can_be_majrur(nxt):
            continue
        constructions.append(make_construction(
            sequence,
            JAR_MAJRUR,
            spans=(i, i + 1),
            roles=("jar", "majrur"),
            certainty=DEFINITE,
            explanation=f'"{jar.text}" (preposition) governs "{nxt.text}" (object) in the genitive case.',
        ))
        logger.debug(f"Jar-majrur (separate): {jar.text} + {nxt.text}")

    for i, segment in enumerate(sequence):
        split = split_attached_preposition(segment.text)
        if split is None:
            continue
        prefix, remainder = split
        constructions.append(make_construction(
            sequence,
            JAR_MAJRUR,
            spans=(i, i),
            roles=(ATTACHED_JAR_MAJRUR_ROLE, ATTACHED_JAR_MAJRUR_ROLE),
            certainty=INFERRED,
            explanation=(
                f'"{segment.text}" contains the preposition "{prefix}" attached to '
                f'"{remainder}", forming a jar-majrur relationship.'
            ),
        ))
        logger.debug(f"Jar-majrur (attached): {prefix} + {remainder} in {segment.text}")

    logger.info(f"Jar-majrur detection: {len(constructions)} constructions over {len(sequence)} segments")
    return constructions
