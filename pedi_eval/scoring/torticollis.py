"""Congenital muscular torticollis severity grading (Cheng et al., grades 1-8).

The grade is picked from an ordered rule list; the first rule whose
predicate matches wins. Age is taken in completed months so 6.5 months
is still "early", but any age past 12 months is "very late".
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from pedi_eval.models.assessment import (
    GoniometryAnalysis,
    GradeCriteria,
    Prognosis,
    SeverityStatus,
    TorticollisSeverity,
)
from pedi_eval.models.snapshot import GoniometryReadings, PalpationFindings
from pedi_eval.reference.tables import AGE_GROUP_LABELS, PROGNOSIS_BY_GRADE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeInputs:
    """Normalized classifier inputs."""

    months: int  # completed months, >= 0
    deficit: float
    nodule: bool
    over_twelve: bool = False  # raw age > 12, e.g. 12.5

    @property
    def early(self) -> bool:
        return self.months <= 6

    @property
    def late_7_9(self) -> bool:
        return 7 <= self.months <= 9

    @property
    def late_10_12(self) -> bool:
        return 10 <= self.months <= 12 and not self.very_late

    @property
    def late(self) -> bool:
        return 7 <= self.months <= 12 and not self.very_late

    @property
    def very_late(self) -> bool:
        return self.over_twelve or self.months > 12


@dataclass(frozen=True)
class GradeRule:
    grade: int
    description: str
    predicate: Callable[[GradeInputs], bool]


# Evaluated top to bottom, first match wins
GRADE_RULES: tuple[GradeRule, ...] = (
    GradeRule(1, "early, deficit <15°, no nodule",
              lambda i: i.early and i.deficit < 15 and not i.nodule),
    GradeRule(2, "early, deficit 15-30°, no nodule",
              lambda i: i.early and 15 <= i.deficit <= 30 and not i.nodule),
    GradeRule(3, "early, deficit >30° or nodule",
              lambda i: i.early and (i.deficit > 30 or i.nodule)),
    GradeRule(4, "7-9 months, deficit <15°, no nodule",
              lambda i: i.late_7_9 and i.deficit < 15 and not i.nodule),
    GradeRule(5, "10-12 months, deficit <15°, no nodule",
              lambda i: i.late_10_12 and i.deficit < 15 and not i.nodule),
    GradeRule(6, "7-9 months, deficit >=15°, no nodule",
              lambda i: i.late_7_9 and i.deficit >= 15 and not i.nodule),
    GradeRule(6, "10-12 months, deficit 15-30°, no nodule",
              lambda i: i.late_10_12 and 15 <= i.deficit <= 30 and not i.nodule),
    GradeRule(7, "7-12 months with nodule",
              lambda i: i.late and i.nodule),
    GradeRule(7, "10-12 months, deficit >30°, no nodule",
              lambda i: i.late_10_12 and i.deficit > 30 and not i.nodule),
    GradeRule(8, "older than 12 months",
              lambda i: i.very_late),
)


def match_grade(inputs: GradeInputs, rules: tuple[GradeRule, ...] = GRADE_RULES) -> Optional[GradeRule]:
    """First rule matching the inputs, or None."""
    for rule in rules:
        if rule.predicate(inputs):
            return rule
    return None


def age_group(age_months: float) -> tuple[str, str]:
    """(group, bracket label) for an age in months."""
    if age_months > 12:
        return "very_late", AGE_GROUP_LABELS["very_late"]
    months = math.floor(age_months)
    if months <= 6:
        return "early", AGE_GROUP_LABELS["early"]
    if months <= 9:
        return "late", AGE_GROUP_LABELS["late_7_9"]
    return "late", AGE_GROUP_LABELS["late_10_12"]


def _alerts(inputs: GradeInputs) -> list[str]:
    alerts: list[str] = []
    if inputs.nodule and inputs.deficit > 30:
        alerts.append("Nodule with rotation deficit above 30°: monitor fibrosis closely.")
    if inputs.very_late:
        alerts.append("Diagnosis after 12 months of age: reduced response to conservative care.")
        if inputs.nodule:
            alerts.append("Persistent SCM nodule after 12 months: consider orthopedic referral.")
        if inputs.deficit > 15:
            alerts.append("Rotation deficit above 15° after 12 months: consider surgical evaluation.")
    return alerts


def classify_torticollis(
    age_months: Optional[float],
    goniometry: GoniometryAnalysis,
    palpation: PalpationFindings,
    readings: Optional[GoniometryReadings] = None,
) -> TorticollisSeverity:
    """Grade torticollis severity from age, passive rotation deficit and nodule.

    Args:
        age_months: Patient age in months.
        goniometry: Output of analyze_goniometry; its passive rotation
            asymmetry is the deficit.
        palpation: SCM findings and clinical type.
        readings: Raw goniometry, used only to tell "nothing recorded"
            apart from "rotation not recorded".

    Returns:
        A classified TorticollisSeverity, or one with status
        insufficient_data. Missing data is never graded as 1.
    """
    if readings is not None:
        has_goniometry = not readings.is_empty
    else:
        has_goniometry = goniometry.rotation.passive_asymmetry is not None

    if age_months is None:
        return TorticollisSeverity(
            status=SeverityStatus.INSUFFICIENT_DATA,
            reason="Patient age is unknown.",
        )
    if not has_goniometry and palpation.is_empty:
        return TorticollisSeverity(
            status=SeverityStatus.INSUFFICIENT_DATA,
            reason="No goniometry or palpation findings recorded.",
        )

    assumptions: list[str] = []
    months = math.floor(age_months)
    if months < 0:
        assumptions.append(f"Negative age ({age_months}) treated as 0 months.")
        months = 0

    deficit = goniometry.rotation.passive_asymmetry
    measured = deficit is not None
    if deficit is None:
        deficit = 0.0
        assumptions.append("Passive rotation not measured; rotation deficit assumed to be 0°.")

    inputs = GradeInputs(
        months=months,
        deficit=deficit,
        nodule=palpation.has_nodule,
        over_twelve=age_months > 12,
    )
    rule = match_grade(inputs)
    if rule is None:
        # Every non-negative month count falls in one group, so this is a table bug
        logger.error("No torticollis grade rule matched %s", inputs)
        return TorticollisSeverity(
            status=SeverityStatus.INSUFFICIENT_DATA,
            assumptions=assumptions,
            reason="No grading rule matched the findings.",
        )

    prog = PROGNOSIS_BY_GRADE[rule.grade]
    group, bracket = age_group(max(age_months, 0))
    logger.debug("Torticollis grade %d (%s)", rule.grade, rule.description)

    return TorticollisSeverity(
        status=SeverityStatus.CLASSIFIED,
        grade=rule.grade,
        title=prog.title,
        color=prog.color,
        prognosis=Prognosis(min_months=prog.min_months, max_months=prog.max_months, message=prog.message),
        criteria=GradeCriteria(
            age_group=group,
            age_bracket=bracket,
            deficit_degrees=deficit,
            deficit_measured=measured,
            nodule=inputs.nodule,
        ),
        affected_rotation_side=goniometry.rotation.restricted_side,
        assumptions=assumptions,
        alerts=_alerts(inputs),
    )
