"""Cervical goniometry analysis.

Asymmetry is classified on passive values; active asymmetry is reported
alongside but never drives the grade. A missing side nulls every derived
metric for that axis, since zero would read as full restriction.
"""
from __future__ import annotations

from typing import Optional

from pedi_eval.models.assessment import AxisAnalysis, Classification, GoniometryAnalysis
from pedi_eval.models.snapshot import AxisReading, GoniometryReadings
from pedi_eval.reference.lookup import AgeNorm, classify_band, interpolate_age_norm, percent_of
from pedi_eval.reference.tables import BELOW_NORM_RATIO, ROM_ASYMMETRY_BANDS


def _difference(right: Optional[float], left: Optional[float]) -> Optional[float]:
    if right is None or left is None:
        return None
    return abs(left - right)


def restricted_side(right: float, left: float) -> str:
    """Side with the smaller passive range; ties are symmetric."""
    if left < right:
        return "left"
    if right < left:
        return "right"
    return "symmetric"


def analyze_axis(reading: AxisReading, norm_mean: Optional[float] = None) -> AxisAnalysis:
    """Derive asymmetry, restriction and norm comparison for one axis."""
    right, left = reading.passive_right, reading.passive_left
    active_asymmetry = _difference(reading.active_right, reading.active_left)

    if right is None or left is None:
        return AxisAnalysis(
            passive_right=right,
            passive_left=left,
            active_asymmetry=active_asymmetry,
            norm_mean=norm_mean,
        )

    asymmetry = abs(left - right)
    sides_below: list[str] = []
    if norm_mean is not None:
        threshold = norm_mean * BELOW_NORM_RATIO
        sides_below = [side for side, value in (("right", right), ("left", left)) if value < threshold]

    return AxisAnalysis(
        passive_right=right,
        passive_left=left,
        passive_asymmetry=asymmetry,
        active_asymmetry=active_asymmetry,
        restricted_side=restricted_side(right, left),
        passive_total_arc=right + left,
        norm_mean=norm_mean,
        percent_of_norm=percent_of(min(right, left), norm_mean) if norm_mean is not None else None,
        percent_of_norm_right=percent_of(right, norm_mean) if norm_mean is not None else None,
        percent_of_norm_left=percent_of(left, norm_mean) if norm_mean is not None else None,
        sides_below_norm=sides_below,
        classification=Classification.from_band(classify_band(asymmetry, ROM_ASYMMETRY_BANDS)),
    )


def analyze_goniometry(readings: GoniometryReadings, age_months: Optional[float]) -> GoniometryAnalysis:
    """Analyze rotation and inclination against the age norm.

    Args:
        readings: Passive/active ROM per side.
        age_months: Patient age; without it, norm comparisons are omitted
            but asymmetry is still classified.

    Returns:
        GoniometryAnalysis with one AxisAnalysis per axis.
    """
    norm: Optional[AgeNorm] = interpolate_age_norm(age_months) if age_months is not None else None

    return GoniometryAnalysis(
        rotation=analyze_axis(readings.rotation, norm.rotation_mean if norm else None),
        inclination=analyze_axis(readings.inclination, norm.inclination_mean if norm else None),
        norm=norm,
    )
