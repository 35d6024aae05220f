"""FSOS-2 functional symmetry scoring.

Only raw subtotals and percentages are reported; the scale has no
interpretation tiers here.
"""
from __future__ import annotations

import logging

from pedi_eval.models.assessment import FSOS2Result, FSOS2Section
from pedi_eval.models.snapshot import FSOS2Scores
from pedi_eval.reference.lookup import percent_of
from pedi_eval.reference.tables import (
    FSOS2_ITEM_MAX,
    FSOS2_ITEMS,
    FSOS2_POSTURES,
    FSOS2_SECTION_MAX,
    FSOS2_TOTAL_MAX,
)

logger = logging.getLogger(__name__)


def _clamp_item(item_id: str, score: int) -> int:
    clamped = min(max(int(score), 0), FSOS2_ITEM_MAX)
    if clamped != score:
        logger.debug("FSOS-2 item %s score %s clamped to %d", item_id, score, clamped)
    return clamped


def score_fsos2(scores: FSOS2Scores) -> FSOS2Result:
    sections: dict[str, FSOS2Section] = {}
    scored_items = 0

    for posture in FSOS2_POSTURES:
        values = {
            item_id: _clamp_item(item_id, score)
            for item_id, score in scores.section(posture).items()
            if item_id in FSOS2_ITEMS
        }
        subtotal = sum(values.values())
        scored_items += len(values)
        sections[posture] = FSOS2Section(
            posture=posture,
            subtotal=subtotal,
            max_score=FSOS2_SECTION_MAX,
            percent=percent_of(subtotal, FSOS2_SECTION_MAX),
            items_scored=len(values),
        )

    total = sum(section.subtotal for section in sections.values())
    return FSOS2Result(
        sections=sections,
        total_score=total,
        max_score=FSOS2_TOTAL_MAX,
        percent=percent_of(total, FSOS2_TOTAL_MAX),
        complete=scored_items == len(FSOS2_ITEMS) * len(FSOS2_POSTURES),
    )
