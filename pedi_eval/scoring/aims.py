"""Alberta Infant Motor Scale scoring."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from pedi_eval.models.assessment import AIMSResult
from pedi_eval.models.snapshot import AIMSChecklist
from pedi_eval.reference.lookup import lookup_percentile
from pedi_eval.reference.tables import AIMS_ITEMS, AIMS_ITEMS_BY_ID, AIMS_MAX_SCORE, AIMS_POSTURE_MAX

logger = logging.getLogger(__name__)


def posture_subtotals(checked_items: Mapping[str, bool]) -> tuple[dict[str, int], list[str]]:
    """Count checked items per posture.

    Returns:
        (subtotals keyed by posture, ids not present in the catalog)
    """
    subtotals = {posture: 0 for posture in AIMS_POSTURE_MAX}
    unknown: list[str] = []
    for item_id, checked in checked_items.items():
        item = AIMS_ITEMS_BY_ID.get(item_id)
        if item is None:
            unknown.append(item_id)
            continue
        if checked:
            subtotals[item.posture] += 1
    return subtotals, sorted(unknown)


def _clamped_raw_scores(raw_scores: Mapping[str, int]) -> dict[str, int]:
    return {
        posture: min(max(int(raw_scores.get(posture, 0)), 0), maximum)
        for posture, maximum in AIMS_POSTURE_MAX.items()
    }


def mark_items_below_age(checked_items: Mapping[str, bool], age_threshold: float) -> dict[str, bool]:
    """Return a copy of the checklist with every item typical before ``age_threshold`` checked.

    Existing entries are preserved; nothing is unchecked.
    """
    filled = dict(checked_items)
    for item in AIMS_ITEMS:
        if item.typical_age_months < age_threshold:
            filled[item.id] = True
    return filled


def score_aims(checklist: AIMSChecklist, age_months: Optional[float]) -> AIMSResult:
    """Score an AIMS checklist and place it on the percentile table.

    Item-level checks take precedence. Evaluations that only stored
    per-posture counts fall back to ``raw_scores``.
    """
    age = checklist.assessment_age_months if checklist.assessment_age_months is not None else age_months

    if checklist.checked_items or not checklist.raw_scores:
        subtotals, unknown = posture_subtotals(checklist.checked_items)
        source = "items"
    else:
        subtotals, unknown = _clamped_raw_scores(checklist.raw_scores), []
        source = "raw_scores"

    if unknown:
        logger.warning("Ignoring unknown AIMS items: %s", ", ".join(unknown))

    total = sum(subtotals.values())
    percentile = lookup_percentile(age, total) if age is not None else None

    missing: list[str] = []
    if age is not None and source == "items":
        missing = [
            item.id
            for item in AIMS_ITEMS
            if item.typical_age_months < age and not checklist.checked_items.get(item.id, False)
        ]

    return AIMSResult(
        posture_scores=subtotals,
        total_score=total,
        max_score=AIMS_MAX_SCORE,
        source=source,
        assessment_age_months=age,
        percentile=percentile,
        missing_expected_items=missing,
        unknown_items=unknown,
    )
