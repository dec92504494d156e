"""Fiʿl-Fāʿil (فعل وفاعل) detection: a verb immediately followed by a noun.

This is plain adjacency with no search window and no agreement check, and
every match is reported as definite. It misses non-adjacent subjects and
subjects carried by the verb's own inflection. The Iḍāfa detector grades its
certainty; this one does not, and the difference is kept as-is.
"""

import logging

from nahw.services.constructions import (
    DEFINITE,
    FIL_FAIL,
    Construction,
    RoleBasedRelationship,
    make_construction,
)
from nahw.services.segments import as_sequence

logger = logging.getLogger(__name__)


def detect_fil_fail(segments) -> list[Construction]:
    sequence = as_sequence(segments)
    constructions: list[Construction] = []

    for i in range(len(sequence) - 1):
        verb, subject = sequence[i], sequence[i + 1]
        if not (verb.is_verb and subject.is_noun):
            continue
        constructions.append(make_construction(
            sequence,
            FIL_FAIL,
            spans=(i, i + 1),
            roles=("fil", "fail"),
            certainty=DEFINITE,
            explanation=f'"{verb.text}" is the verb (fiʿl) and "{subject.text}" is the subject (fāʿil).',
            role_based=RoleBasedRelationship(
                type=FIL_FAIL,
                primary_indices=(i,),
                secondary_indices=(i + 1,),
                certainty=DEFINITE,
                explanation=f'"{verb.text}" (verb) is performed by "{subject.text}" (subject)',
            ),
        ))
        logger.debug(f"Fil-fail: {verb.text} + {subject.text}")

    logger.info(f"Fil-fail detection: {len(constructions)} constructions over {len(sequence)} segments")
    return constructions
