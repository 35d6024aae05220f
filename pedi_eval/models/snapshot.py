"""Input model: an immutable snapshot of one evaluation record.

Built from the persisted evaluation fields by the caller. Every measurement
is optional; analyzers treat ``None`` as "not measured" and never as zero.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class Side(str, Enum):
    """Body side."""

    RIGHT = "right"
    LEFT = "left"
    BILATERAL = "bilateral"


class Tonus(str, Enum):
    """Sternocleidomastoid tonus on palpation."""

    NORMAL = "normal"
    TAUT_BAND = "taut_band"


class NoduleLocation(str, Enum):
    """Where along the SCM a fibrotic nodule was palpated."""

    ABSENT = "absent"
    LOWER_THIRD = "lower_third"
    MIDDLE_THIRD = "middle_third"
    UPPER_THIRD = "upper_third"


class NoduleSize(str, Enum):
    LT_1CM = "lt_1cm"
    CM_1_3 = "1_3cm"
    GT_3CM = "gt_3cm"


class TorticollisType(str, Enum):
    """Clinical torticollis type recorded by the therapist."""

    POSTURAL = "POST"  # postural preference, full passive ROM
    MUSCULAR = "MT"  # passive ROM restriction, no mass
    STERNOMASTOID_MASS = "SMT"  # restriction plus SCM nodule/mass
    OTHER = "other"  # ocular, osseous, neurological


class HeadPosture(str, Enum):
    CENTERED = "centered"
    TILT_RIGHT_ROTATE_LEFT = "tilt_right_rotate_left"
    TILT_LEFT_ROTATE_RIGHT = "tilt_left_rotate_right"
    ATYPICAL = "atypical"  # tilts and rotates to the same side


class RestrictionQuality(str, Enum):
    NO_RESTRICTION = "no_restriction"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class NeurodynamicStatus(str, Enum):
    NORMAL = "normal"
    ALTERED = "altered"
    UNTESTED = "untested"


def _finite_or_none(value: Any) -> Any:
    """Treat NaN/inf measurements as missing."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


# Optional numeric measurement; NaN and infinities become None
Measurement = Annotated[Optional[float], BeforeValidator(_finite_or_none)]


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class AxisReading(_Snapshot):
    """Active/passive range of motion for one cervical movement, in degrees."""

    active_right: Measurement = None
    active_left: Measurement = None
    passive_right: Measurement = None
    passive_left: Measurement = None


class GoniometryReadings(_Snapshot):
    """Cervical goniometry."""

    rotation: AxisReading = Field(default_factory=AxisReading)
    inclination: AxisReading = Field(default_factory=AxisReading)
    rotation_quality: Optional[RestrictionQuality] = None
    inclination_quality: Optional[RestrictionQuality] = None
    end_feel: Optional[str] = None

    @property
    def has_rotation(self) -> bool:
        return self.rotation.passive_right is not None and self.rotation.passive_left is not None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for axis in (self.rotation, self.inclination)
            for value in axis.model_dump().values()
        )


class PalpationFindings(_Snapshot):
    """SCM palpation and the therapist's torticollis classification."""

    right_tonus: Optional[Tonus] = None
    right_nodule: Optional[NoduleLocation] = None
    right_nodule_size: Optional[NoduleSize] = None
    left_tonus: Optional[Tonus] = None
    left_nodule: Optional[NoduleLocation] = None
    left_nodule_size: Optional[NoduleSize] = None
    clinical_type: Optional[TorticollisType] = None
    affected_side: Optional[Side] = None
    head_posture: Optional[HeadPosture] = None

    @property
    def right_has_nodule(self) -> bool:
        return self.right_nodule is not None and self.right_nodule != NoduleLocation.ABSENT

    @property
    def left_has_nodule(self) -> bool:
        return self.left_nodule is not None and self.left_nodule != NoduleLocation.ABSENT

    @property
    def has_nodule(self) -> bool:
        return self.right_has_nodule or self.left_has_nodule

    @property
    def is_empty(self) -> bool:
        return all(
            getattr(self, name) is None
            for name in ("right_tonus", "right_nodule", "left_tonus", "left_nodule", "clinical_type")
        )


class CranialMeasurements(_Snapshot):
    """Caliper/tape cranial measurements."""

    diagonal_a_mm: Measurement = None
    diagonal_b_mm: Measurement = None
    length_ap_mm: Measurement = None
    width_ml_mm: Measurement = None
    head_circumference_cm: Measurement = None
    ear_shift: Optional[str] = None  # aligned | lt_5mm | gt_5mm


class AIMSChecklist(_Snapshot):
    """Alberta Infant Motor Scale observations.

    ``checked_items`` is the item-level checklist. Older evaluations only
    stored per-posture counts in ``raw_scores``; those are used when no
    item is recorded.
    """

    checked_items: dict[str, bool] = Field(default_factory=dict)
    raw_scores: dict[str, int] = Field(default_factory=dict)
    assessment_age_months: Measurement = None


class FSOS2Scores(_Snapshot):
    """FSOS-2 item scores (0-4) per posture."""

    supine: dict[str, int] = Field(default_factory=dict)
    prone: dict[str, int] = Field(default_factory=dict)
    sitting: dict[str, int] = Field(default_factory=dict)
    standing: dict[str, int] = Field(default_factory=dict)

    def section(self, posture: str) -> dict[str, int]:
        return getattr(self, posture)


class NeurodynamicTests(_Snapshot):
    """Neuromeningeal tension tests per limb plus passive neck flexion."""

    upper_right: Optional[NeurodynamicStatus] = None
    upper_left: Optional[NeurodynamicStatus] = None
    lower_right: Optional[NeurodynamicStatus] = None
    lower_left: Optional[NeurodynamicStatus] = None
    passive_neck_flexion: Optional[NeurodynamicStatus] = None


class Identification(_Snapshot):
    patient_name: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None


class Anamnesis(_Snapshot):
    chief_complaint: Optional[str] = None
    delivery_type: Optional[str] = None  # e.g. "vaginal", "cesarean"
    gestational_age_weeks: Optional[float] = None
    prenatal_complications: Optional[str] = None


class SensoryFindings(_Snapshot):
    visual_tracking_restricted: Optional[Side] = None
    lip_seal: Optional[str] = None  # closed | lips_open
    tongue_anatomy: Optional[str] = None  # normal | short_frenulum | heart_shaped


class CervicalControl(_Snapshot):
    supine_midline: Optional[str] = None  # holds_firm | falls_to_preference | unstable
    prone_tolerance: Optional[str] = None  # good | cries_immediately | tires_quickly


class EvaluationSnapshot(_Snapshot):
    """Everything the engine reads from one evaluation."""

    age_months: Measurement = None
    goniometry: GoniometryReadings = Field(default_factory=GoniometryReadings)
    palpation: PalpationFindings = Field(default_factory=PalpationFindings)
    cranial: CranialMeasurements = Field(default_factory=CranialMeasurements)
    aims: Optional[AIMSChecklist] = None
    fsos2: Optional[FSOS2Scores] = None
    mfs_right: Optional[int] = None
    mfs_left: Optional[int] = None
    neurodynamic: NeurodynamicTests = Field(default_factory=NeurodynamicTests)

    identification: Identification = Field(default_factory=Identification)
    anamnesis: Anamnesis = Field(default_factory=Anamnesis)
    sensory: SensoryFindings = Field(default_factory=SensoryFindings)
    cervical_control: CervicalControl = Field(default_factory=CervicalControl)
    treatment_plan: Optional[str] = None
