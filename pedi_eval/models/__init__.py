"""Input snapshot and computed-assessment models."""

from pedi_eval.models.assessment import (
    AIMSResult,
    AxisAnalysis,
    Classification,
    ComputedAssessment,
    ConsistencyWarning,
    CranialShape,
    CraniometricAnalysis,
    FSOS2Result,
    FSOS2Section,
    GoniometryAnalysis,
    GradeCriteria,
    MFSResult,
    NeurodynamicSummary,
    Prognosis,
    SeverityStatus,
    TorticollisSeverity,
    WarningSeverity,
)
from pedi_eval.models.snapshot import (
    AIMSChecklist,
    AxisReading,
    CranialMeasurements,
    EvaluationSnapshot,
    FSOS2Scores,
    GoniometryReadings,
    HeadPosture,
    NeurodynamicStatus,
    NeurodynamicTests,
    NoduleLocation,
    PalpationFindings,
    RestrictionQuality,
    Side,
    Tonus,
    TorticollisType,
)

__all__ = [
    # Snapshot
    "AIMSChecklist",
    "AxisReading",
    "CranialMeasurements",
    "EvaluationSnapshot",
    "FSOS2Scores",
    "GoniometryReadings",
    "HeadPosture",
    "NeurodynamicStatus",
    "NeurodynamicTests",
    "NoduleLocation",
    "PalpationFindings",
    "RestrictionQuality",
    "Side",
    "Tonus",
    "TorticollisType",
    # Results
    "AIMSResult",
    "AxisAnalysis",
    "Classification",
    "ComputedAssessment",
    "ConsistencyWarning",
    "CranialShape",
    "CraniometricAnalysis",
    "FSOS2Result",
    "FSOS2Section",
    "GoniometryAnalysis",
    "GradeCriteria",
    "MFSResult",
    "NeurodynamicSummary",
    "Prognosis",
    "SeverityStatus",
    "TorticollisSeverity",
    "WarningSeverity",
]
