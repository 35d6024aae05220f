"""Output models produced by the scoring engine.

All results are frozen: a ComputedAssessment is rebuilt from the snapshot
on every recalculation, never patched in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pedi_eval.reference.lookup import AgeNorm, PercentileResult
from pedi_eval.reference.tables import ClassificationBand


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class Classification(_Result):
    """Display-ready summary of the band a value fell into."""

    code: str
    label: str
    level: int
    color: str
    category: str

    @classmethod
    def from_band(cls, band: ClassificationBand) -> "Classification":
        return cls(
            code=band.code,
            label=band.label,
            level=band.level,
            color=band.color,
            category=band.category,
        )

    @property
    def is_normal(self) -> bool:
        return self.category == "normal"


# ── Goniometry ───────────────────────────────────────────────────────────────


class AxisAnalysis(_Result):
    """Derived metrics for one cervical axis (rotation or inclination)."""

    passive_right: Optional[float] = None
    passive_left: Optional[float] = None
    passive_asymmetry: Optional[float] = None
    active_asymmetry: Optional[float] = None
    restricted_side: Optional[str] = None  # left | right | symmetric
    passive_total_arc: Optional[float] = None
    norm_mean: Optional[float] = None
    percent_of_norm: Optional[int] = None
    percent_of_norm_right: Optional[int] = None
    percent_of_norm_left: Optional[int] = None
    sides_below_norm: list[str] = Field(default_factory=list)
    classification: Optional[Classification] = None


class GoniometryAnalysis(_Result):
    rotation: AxisAnalysis = Field(default_factory=AxisAnalysis)
    inclination: AxisAnalysis = Field(default_factory=AxisAnalysis)
    norm: Optional[AgeNorm] = None

    @property
    def rotation_deficit(self) -> Optional[float]:
        return self.rotation.passive_asymmetry


# ── Craniometry ──────────────────────────────────────────────────────────────


class CranialShape(str, Enum):
    NORMAL = "normal"
    PLAGIOCEPHALY = "plagiocephaly"
    BRACHYCEPHALY = "brachycephaly"
    SCAPHOCEPHALY = "scaphocephaly"
    MIXED = "mixed"


class CraniometricAnalysis(_Result):
    cva_mm: Optional[float] = None
    cvai_percent: Optional[float] = None
    ci_percent: Optional[float] = None
    plagiocephaly: Optional[Classification] = None
    cephalic_index: Optional[Classification] = None
    cranial_shape: Optional[CranialShape] = None
    alerts: list[str] = Field(default_factory=list)


# ── Torticollis ──────────────────────────────────────────────────────────────


class SeverityStatus(str, Enum):
    CLASSIFIED = "classified"
    INSUFFICIENT_DATA = "insufficient_data"


class Prognosis(_Result):
    min_months: float
    max_months: float
    message: str


class GradeCriteria(_Result):
    """The inputs that selected a grade, kept for transparent reporting."""

    age_group: str  # early | late | very_late
    age_bracket: str  # human label, e.g. "7-9 months"
    deficit_degrees: float
    deficit_measured: bool = True
    nodule: bool


class TorticollisSeverity(_Result):
    status: SeverityStatus
    grade: Optional[int] = None
    title: Optional[str] = None
    color: Optional[str] = None
    prognosis: Optional[Prognosis] = None
    criteria: Optional[GradeCriteria] = None
    affected_rotation_side: Optional[str] = None
    assumptions: list[str] = Field(default_factory=list)
    alerts: list[str] = Field(default_factory=list)
    reason: Optional[str] = None

    @property
    def is_classified(self) -> bool:
        return self.status == SeverityStatus.CLASSIFIED


# ── Motor scales ─────────────────────────────────────────────────────────────


class AIMSResult(_Result):
    posture_scores: dict[str, int] = Field(default_factory=dict)
    total_score: int = 0
    max_score: int = 58
    source: str = "items"  # items | raw_scores
    assessment_age_months: Optional[float] = None
    percentile: Optional[PercentileResult] = None
    missing_expected_items: list[str] = Field(default_factory=list)
    unknown_items: list[str] = Field(default_factory=list)


class FSOS2Section(_Result):
    posture: str
    subtotal: int
    max_score: int
    percent: int
    items_scored: int


class FSOS2Result(_Result):
    sections: dict[str, FSOS2Section] = Field(default_factory=dict)
    total_score: int = 0
    max_score: int = 112
    percent: int = 0
    complete: bool = False


class MFSResult(_Result):
    right: Optional[int] = None
    left: Optional[int] = None
    symmetric: Optional[bool] = None
    difference: Optional[int] = None
    average: Optional[float] = None
    weaker_side: Optional[str] = None
    age_reference_mean: Optional[float] = None
    below_age_reference: Optional[bool] = None

    @property
    def status(self) -> Optional[str]:
        if self.symmetric is None:
            return None
        return "symmetric" if self.symmetric else "asymmetric"


class NeurodynamicSummary(_Result):
    altered: list[str] = Field(default_factory=list)
    untested: list[str] = Field(default_factory=list)
    normal: list[str] = Field(default_factory=list)

    @property
    def any_altered(self) -> bool:
        return bool(self.altered)


# ── Consistency & aggregate ──────────────────────────────────────────────────


class WarningSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class ConsistencyWarning(_Result):
    code: str
    severity: WarningSeverity
    message: str


class ComputedAssessment(_Result):
    """Everything derived from one EvaluationSnapshot."""

    goniometry: GoniometryAnalysis
    cranial: CraniometricAnalysis
    torticollis: TorticollisSeverity
    aims: Optional[AIMSResult] = None
    fsos2: Optional[FSOS2Result] = None
    mfs: MFSResult
    neurodynamic: NeurodynamicSummary
    consistency_warnings: list[ConsistencyWarning] = Field(default_factory=list)
    reference_version: str
    low_confidence: bool = False

    @property
    def warning_messages(self) -> list[str]:
        return [warning.message for warning in self.consistency_warnings]
