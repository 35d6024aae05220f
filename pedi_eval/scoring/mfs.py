"""Muscle Function Scale (lateral neck flexors) scoring."""
from __future__ import annotations

from typing import Optional

from pedi_eval.models.assessment import MFSResult
from pedi_eval.reference.lookup import interpolate_series
from pedi_eval.reference.tables import MFS_AGE_REFERENCE, MFS_MAX_SCORE


def _clamp(score: Optional[int]) -> Optional[int]:
    if score is None:
        return None
    return min(max(score, 0), MFS_MAX_SCORE)


def score_mfs(right: Optional[int], left: Optional[int], age_months: Optional[float] = None) -> MFSResult:
    """Compare right/left MFS scores.

    With one side missing only the raw values come back. The age
    reference is a loose mean and never a pass/fail threshold.
    """
    right, left = _clamp(right), _clamp(left)
    if right is None or left is None:
        return MFSResult(right=right, left=left)

    average = (right + left) / 2
    weaker = None
    if right != left:
        weaker = "right" if right < left else "left"

    reference_mean = None
    below_reference = None
    if age_months is not None:
        reference_mean, _ = interpolate_series(age_months, MFS_AGE_REFERENCE)
        below_reference = average < reference_mean

    return MFSResult(
        right=right,
        left=left,
        symmetric=right == left,
        difference=abs(right - left),
        average=average,
        weaker_side=weaker,
        age_reference_mean=reference_mean,
        below_age_reference=below_reference,
    )
