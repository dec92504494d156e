"""Harf Naṣb + Ismuha (حرف نصب واسمها) detection.

An accusative particle from the closed lexicon (inna and her sisters, and
the subordinating an) directly followed by a noun or a verb. Like Fiʿl-Fāʿil
this is adjacency only and always definite.
"""

import logging

from nahw.services.arabic_text import is_accusative_particle_text
from nahw.services.constructions import (
    DEFINITE,
    HARF_NASB_ISMUHA,
    Construction,
    RoleBasedRelationship,
    make_construction,
)
from nahw.services.segments import Segment, as_sequence

logger = logging.getLogger(__name__)


def _is_accusative_particle(segment: Segment) -> bool:
    return (
        is_accusative_particle_text(segment.text)
        or segment.grammatical_role == "accusative_particle"
    )


def detect_harf_nasb_ismuha(segments) -> list[Construction]:
    sequence = as_sequence(segments)
    constructions: list[Construction] = []

    for i in range(len(sequence) - 1):
        particle, governed = sequence[i], sequence[i + 1]
        if not _is_accusative_particle(particle):
            continue
        if not (governed.is_noun or governed.is_verb):
            continue
        constructions.append(make_construction(
            sequence,
            HARF_NASB_ISMUHA,
            spans=(i, i + 1),
            roles=("harf-nasb", "ismuha"),
            certainty=DEFINITE,
            explanation=(
                f'"{particle.text}" is the accusative particle (harf naṣb) and '
                f'"{governed.text}" is the word it governs (ismuha).'
            ),
            role_based=RoleBasedRelationship(
                type=HARF_NASB_ISMUHA,
                primary_indices=(i,),
                secondary_indices=(i + 1,),
                certainty=DEFINITE,
                explanation=f'"{particle.text}" (accusative particle) governs "{governed.text}"',
            ),
        ))
        logger.debug(f"Harf nasb: {particle.text} + {governed.text}")

    logger.info(f"Harf nasb detection: {len(constructions)} constructions over {len(sequence)} segments")
    return constructions
