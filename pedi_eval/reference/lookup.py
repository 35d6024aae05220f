"""Lookup and interpolation over the clinical reference tables.

Every function here is total: out-of-domain inputs are clamped to the
nearest tabulated value and reported through an ``extrapolated`` flag
instead of raising.
"""
from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from pedi_eval.reference.tables import (
    AIMS_CLASSIFICATION_TIERS,
    AIMS_PERCENTILES,
    AIMS_TOP_PERCENTILE,
    CERVICAL_ROM_NORMS,
    AgeNormRow,
    BandTable,
    ClassificationBand,
    PercentileRow,
)

logger = logging.getLogger(__name__)


class AgeNorm(BaseModel):
    """Interpolated cervical ROM norm for one age."""

    model_config = ConfigDict(frozen=True)

    age_months: float
    rotation_mean: float
    inclination_mean: float
    extrapolated: bool = False


class PercentileResult(BaseModel):
    """AIMS percentile bracket and risk tier for a score at an age."""

    model_config = ConfigDict(frozen=True)

    percentile: int
    classification: str  # atypical | suspicious | normal
    reference_age_months: int
    extrapolated: bool = False


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves away from zero (builtin round() uses banker's rounding)."""
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-digits)
    try:
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # More digits than the decimal context holds; already integral at that scale
        return value


def percent_of(value: float, reference: float) -> Optional[int]:
    """``round(value / reference * 100)`` with round-half-up.

    None for a zero reference or a ratio too large to represent.
    """
    if not reference:
        return None
    ratio = value / reference * 100
    if not math.isfinite(ratio):
        return None
    return int(round_half_up(ratio))


def interpolate_age_norm(
    age_months: float,
    rows: Sequence[AgeNormRow] = CERVICAL_ROM_NORMS,
) -> AgeNorm:
    """Piecewise-linear cervical ROM norm for an age in months.

    Ages outside the tabulated breakpoints clamp to the first/last row and
    come back flagged as extrapolated.
    """
    first, last = rows[0], rows[-1]

    if age_months <= first.age_months or age_months >= last.age_months:
        row = first if age_months <= first.age_months else last
        extrapolated = age_months < first.age_months or age_months > last.age_months
        if extrapolated:
            logger.debug("Age %.1f months outside ROM norm table, clamped to %s", age_months, row.age_months)
        return AgeNorm(
            age_months=age_months,
            rotation_mean=row.rotation_mean,
            inclination_mean=row.inclination_mean,
            extrapolated=extrapolated,
        )

    for lower, upper in zip(rows, rows[1:]):
        if lower.age_months <= age_months < upper.age_months:
            ratio = (age_months - lower.age_months) / (upper.age_months - lower.age_months)
            return AgeNorm(
                age_months=age_months,
                rotation_mean=lower.rotation_mean + ratio * (upper.rotation_mean - lower.rotation_mean),
                inclination_mean=lower.inclination_mean
                + ratio * (upper.inclination_mean - lower.inclination_mean),
            )

    # Unreachable for a sorted table; keep the clamp semantics anyway
    return AgeNorm(
        age_months=age_months,
        rotation_mean=last.rotation_mean,
        inclination_mean=last.inclination_mean,
        extrapolated=True,
    )


def classify_band(value: float, table: BandTable) -> ClassificationBand:
    """Return the band whose [lower, upper) interval contains ``value``.

    Values below the first band fall into the first band; anything not
    matched otherwise (above every band, NaN) maps to the most severe band.
    """
    bands = table.bands
    if value < bands[0].lower:
        return bands[0]
    for band in bands:
        if band.contains(value):
            return band
    return table.most_severe


def validate_band_table(table: BandTable) -> list[str]:
    """Report gaps, overlaps and empty bands; an empty list means the table is consistent."""
    problems: list[str] = []
    for band in table.bands:
        if not band.lower < band.upper:
            problems.append(f"{table.name}: band '{band.code}' is empty ({band.lower}..{band.upper})")
    for current, following in zip(table.bands, table.bands[1:]):
        if current.upper < following.lower:
            problems.append(
                f"{table.name}: gap between '{current.code}' and '{following.code}' "
                f"({current.upper}..{following.lower})"
            )
        elif current.upper > following.lower:
            problems.append(
                f"{table.name}: '{current.code}' overlaps '{following.code}' "
                f"({following.lower}..{current.upper})"
            )
    if not math.isinf(table.bands[-1].upper):
        problems.append(f"{table.name}: last band '{table.bands[-1].code}' is not open-ended")
    return problems


def _percentile_row(age_months: float, rows: Sequence[PercentileRow]) -> tuple[PercentileRow, bool]:
    """Row for the completed month at or below the age, clamped to the table."""
    completed = math.floor(age_months)
    extrapolated = completed < rows[0].age_months or completed > rows[-1].age_months
    selected = rows[0]
    for row in rows:
        if row.age_months <= completed:
            selected = row
        else:
            break
    return selected, extrapolated


def classify_percentile(percentile: int) -> str:
    """Map a percentile bracket to the AIMS risk tier."""
    for ceiling, tier in AIMS_CLASSIFICATION_TIERS:
        if percentile <= ceiling:
            return tier
    return "normal"


def lookup_percentile(
    age_months: float,
    score: float,
    rows: Sequence[PercentileRow] = AIMS_PERCENTILES,
) -> PercentileResult:
    """Percentile bracket and classification of an AIMS total score."""
    row, extrapolated = _percentile_row(age_months, rows)

    percentile = AIMS_TOP_PERCENTILE
    for bracket, threshold in row.brackets():
        if score <= threshold:
            percentile = bracket
            break

    return PercentileResult(
        percentile=percentile,
        classification=classify_percentile(percentile),
        reference_age_months=row.age_months,
        extrapolated=extrapolated,
    )


def interpolate_series(age_months: float, points: Sequence[tuple[float, float]]) -> tuple[float, bool]:
    """Linear interpolation over (age, value) points with clamping at both ends."""
    if age_months <= points[0][0]:
        return points[0][1], age_months < points[0][0]
    if age_months >= points[-1][0]:
        return points[-1][1], age_months > points[-1][0]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if x0 <= age_months < x1:
            return y0 + (age_months - x0) / (x1 - x0) * (y1 - y0), False
    return points[-1][1], True
