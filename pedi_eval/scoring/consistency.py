"""Cross-checks between the recorded classification and the raw findings.

Warnings are advisory. Every rule runs; none short-circuits the others.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from pedi_eval.models.assessment import (
    AIMSResult,
    ConsistencyWarning,
    GoniometryAnalysis,
    WarningSeverity,
)
from pedi_eval.models.snapshot import (
    EvaluationSnapshot,
    HeadPosture,
    RestrictionQuality,
    Side,
    Tonus,
    TorticollisType,
)
from pedi_eval.reference.tables import POSTURAL_DEFICIT_WARNING_DEGREES


@dataclass(frozen=True)
class CheckContext:
    snapshot: EvaluationSnapshot
    goniometry: GoniometryAnalysis
    aims: Optional[AIMSResult] = None

    @property
    def clinical_type(self) -> Optional[TorticollisType]:
        return self.snapshot.palpation.clinical_type

    @property
    def deficit(self) -> Optional[float]:
        return self.goniometry.rotation.passive_asymmetry

    @property
    def has_nodule(self) -> bool:
        return self.snapshot.palpation.has_nodule


Rule = Callable[[CheckContext], Optional[ConsistencyWarning]]


def _postural_with_restriction(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    if ctx.clinical_type != TorticollisType.POSTURAL or ctx.deficit is None:
        return None
    if ctx.deficit < POSTURAL_DEFICIT_WARNING_DEGREES:
        return None
    return ConsistencyWarning(
        code="postural_with_restriction",
        severity=WarningSeverity.WARNING,
        message=(
            f"Classified as postural but goniometry shows a {ctx.deficit:g}° rotation deficit. "
            "Consider reclassifying as MT or SMT."
        ),
    )


def _postural_with_nodule(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    if ctx.clinical_type != TorticollisType.POSTURAL or not ctx.has_nodule:
        return None
    return ConsistencyWarning(
        code="postural_with_nodule",
        severity=WarningSeverity.CRITICAL,
        message="Classified as postural but a nodule was palpated. Should be classified as SMT.",
    )


def _muscular_with_nodule(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    if ctx.clinical_type != TorticollisType.MUSCULAR or not ctx.has_nodule:
        return None
    return ConsistencyWarning(
        code="muscular_with_nodule",
        severity=WarningSeverity.WARNING,
        message="Classified as muscular without mass but a nodule was palpated. Should be classified as SMT.",
    )


def _mass_without_nodule(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    if ctx.clinical_type != TorticollisType.STERNOMASTOID_MASS or ctx.has_nodule:
        return None
    return ConsistencyWarning(
        code="mass_without_nodule",
        severity=WarningSeverity.INFO,
        message="Classified as muscular with mass but no nodule was recorded on palpation.",
    )


def _involved_sides(ctx: CheckContext) -> set[Side]:
    palpation = ctx.snapshot.palpation
    sides: set[Side] = set()
    if palpation.right_has_nodule or palpation.right_tonus == Tonus.TAUT_BAND:
        sides.add(Side.RIGHT)
    if palpation.left_has_nodule or palpation.left_tonus == Tonus.TAUT_BAND:
        sides.add(Side.LEFT)
    return sides


def _side_findings_recorded(ctx: CheckContext) -> bool:
    palpation = ctx.snapshot.palpation
    return any(
        value is not None
        for value in (palpation.right_tonus, palpation.right_nodule, palpation.left_tonus, palpation.left_nodule)
    )


def _laterality_mismatch(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    affected = ctx.snapshot.palpation.affected_side
    one_sided = affected in (Side.RIGHT, Side.LEFT)
    unilateral_type = ctx.clinical_type in (TorticollisType.MUSCULAR, TorticollisType.STERNOMASTOID_MASS)
    if not one_sided and not unilateral_type:
        return None

    involved = _involved_sides(ctx)
    if not involved:
        if not _side_findings_recorded(ctx):
            return None
        detail = "palpation found no taut band or nodule on either side"
    elif len(involved) == 2:
        detail = "palpation findings are bilateral"
    elif one_sided and involved != {affected}:
        detail = f"palpation findings are only on the {next(iter(involved)).value} side"
    else:
        return None

    if one_sided:
        claim = f"Affected side recorded as {affected.value}"
    else:
        claim = f"Type {ctx.clinical_type.value} implies unilateral involvement"
    return ConsistencyWarning(
        code="laterality_mismatch",
        severity=WarningSeverity.WARNING,
        message=f"{claim} but {detail}.",
    )


def _atypical_posture(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    if ctx.snapshot.palpation.head_posture != HeadPosture.ATYPICAL:
        return None
    return ConsistencyWarning(
        code="atypical_head_posture",
        severity=WarningSeverity.WARNING,
        message=(
            "Head tilts and rotates to the same side. Rule out ocular, osseous or "
            "neurological causes before treating as muscular torticollis."
        ),
    )


def _quality_vs_measurement(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    quality = ctx.snapshot.goniometry.rotation_quality
    classification = ctx.goniometry.rotation.classification
    if quality != RestrictionQuality.NO_RESTRICTION or classification is None:
        return None
    if classification.level < 3:
        return None
    return ConsistencyWarning(
        code="quality_contradicts_goniometry",
        severity=WarningSeverity.WARNING,
        message=(
            f"Rotation recorded as unrestricted but measured asymmetry is "
            f"{classification.label.lower()} ({ctx.deficit:g}°)."
        ),
    )


def _reference_extrapolated(ctx: CheckContext) -> Optional[ConsistencyWarning]:
    sources: list[str] = []
    if ctx.goniometry.norm is not None and ctx.goniometry.norm.extrapolated:
        sources.append("cervical ROM norms")
    if ctx.aims is not None and ctx.aims.percentile is not None and ctx.aims.percentile.extrapolated:
        sources.append("AIMS percentiles")
    if not sources:
        return None
    return ConsistencyWarning(
        code="reference_extrapolated",
        severity=WarningSeverity.INFO,
        message=f"Age is outside the tabulated range for {' and '.join(sources)}; results are low confidence.",
    )


CONSISTENCY_RULES: tuple[Rule, ...] = (
    _postural_with_restriction,
    _muscular_with_nodule,
    _mass_without_nodule,
    _postural_with_nodule,
    _laterality_mismatch,
    _atypical_posture,
    _quality_vs_measurement,
    _reference_extrapolated,
)


def check_consistency(
    snapshot: EvaluationSnapshot,
    goniometry: GoniometryAnalysis,
    aims: Optional[AIMSResult] = None,
    rules: tuple[Rule, ...] = CONSISTENCY_RULES,
) -> list[ConsistencyWarning]:
    """Run every rule and collect all warnings, in rule order."""
    ctx = CheckContext(snapshot=snapshot, goniometry=goniometry, aims=aims)
    warnings: list[ConsistencyWarning] = []
    for rule in rules:
        warning = rule(ctx)
        if warning is not None:
            warnings.append(warning)
    return warnings
