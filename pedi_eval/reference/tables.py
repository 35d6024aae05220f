"""Clinical reference tables.

Versioned constants consumed by every analyzer: age-indexed goniometry norms,
classification bands, AIMS percentiles and item catalog, FSOS-2 items, MFS
scale and torticollis prognosis per grade.

Sources:
  Cervical ROM norms ........ Klackenberg et al. (2005), table 4
  Asymmetry severity ........ Cheng et al. (2001)
  Plagiocephaly (CVAI) ...... Children's Healthcare of Atlanta (CHOA) scale
  Cephalic index ............ standard CI bands (meso 75-85)
  AIMS ...................... Piper & Darrah (1994), approximate percentiles
  FSOS-2 .................... Functional Symmetry Observation Scale v2
  MFS ....................... Öhman & Beckung, Muscle Function Scale for infants
"""
from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict

REFERENCE_TABLES_VERSION = "2025.1"


class AgeNormRow(BaseModel):
    """Mean passive cervical range of motion at a given age."""

    model_config = ConfigDict(frozen=True)

    age_months: float
    rotation_mean: float
    inclination_mean: float


class ClassificationBand(BaseModel):
    """A half-open [lower, upper) interval mapped to a clinical label."""

    model_config = ConfigDict(frozen=True)

    code: str
    label: str
    level: int  # 1 = normal tier, higher = more severe
    lower: float
    upper: float
    color: str = "gray"
    category: str = "normal"

    @property
    def is_normal(self) -> bool:
        return self.category == "normal"

    def contains(self, value: float) -> bool:
        return self.lower <= value < self.upper


class BandTable(BaseModel):
    """Ordered, contiguous set of classification bands."""

    model_config = ConfigDict(frozen=True)

    name: str
    unit: str
    bands: tuple[ClassificationBand, ...]

    @property
    def most_severe(self) -> ClassificationBand:
        return max(self.bands, key=lambda b: b.level)


class PercentileRow(BaseModel):
    """AIMS total-score thresholds for one age (in completed months)."""

    model_config = ConfigDict(frozen=True)

    age_months: int
    p5: int
    p10: int
    p25: int
    p50: int
    p75: int
    p90: int

    def brackets(self) -> list[tuple[int, int]]:
        """(percentile, upper score) pairs, lowest bracket first."""
        return [
            (5, self.p5),
            (10, self.p10),
            (25, self.p25),
            (50, self.p50),
            (75, self.p75),
            (90, self.p90),
        ]


class AIMSItem(BaseModel):
    """One observable AIMS motor item."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    posture: str  # prone | supine | sitting | standing
    typical_age_months: int


class GradePrognosis(BaseModel):
    """Expected treatment duration and message for a torticollis grade."""

    model_config = ConfigDict(frozen=True)

    grade: int
    title: str
    min_months: float
    max_months: float
    message: str
    color: str


# ── Cervical goniometry ──────────────────────────────────────────────────────

CERVICAL_ROM_NORMS: tuple[AgeNormRow, ...] = (
    AgeNormRow(age_months=2, rotation_mean=105.2, inclination_mean=68.1),
    AgeNormRow(age_months=4, rotation_mean=111.8, inclination_mean=69.5),
    AgeNormRow(age_months=6, rotation_mean=112.4, inclination_mean=69.2),
    AgeNormRow(age_months=10, rotation_mean=111.7, inclination_mean=70.0),
)

# Sides under this share of the age norm are flagged as restricted
BELOW_NORM_RATIO = 0.9

ROM_ASYMMETRY_BANDS = BandTable(
    name="rom_asymmetry",
    unit="degrees",
    bands=(
        ClassificationBand(code="normal", label="Normal", level=1, lower=0, upper=5, color="green"),
        ClassificationBand(
            code="mild", label="Mild", level=2, lower=5, upper=15, color="yellow", category="asymmetry"
        ),
        ClassificationBand(
            code="moderate", label="Moderate", level=3, lower=15, upper=30, color="orange", category="asymmetry"
        ),
        ClassificationBand(
            code="severe", label="Severe", level=4, lower=30, upper=math.inf, color="red", category="asymmetry"
        ),
    ),
)

# ── Craniometry ──────────────────────────────────────────────────────────────

PLAGIOCEPHALY_CVAI_BANDS = BandTable(
    name="plagiocephaly_cvai",
    unit="percent",
    bands=(
        ClassificationBand(code="normal", label="Normal", level=1, lower=0, upper=3.5, color="green"),
        ClassificationBand(
            code="mild", label="Mild", level=2, lower=3.5, upper=6.25, color="yellow", category="plagiocephaly"
        ),
        ClassificationBand(
            code="moderate", label="Moderate", level=3, lower=6.25, upper=8.75, color="orange",
            category="plagiocephaly",
        ),
        ClassificationBand(
            code="severe", label="Severe", level=4, lower=8.75, upper=11.0, color="red", category="plagiocephaly"
        ),
        ClassificationBand(
            code="very_severe", label="Very Severe", level=5, lower=11.0, upper=math.inf, color="darkred",
            category="plagiocephaly",
        ),
    ),
)

CEPHALIC_INDEX_BANDS = BandTable(
    name="cephalic_index",
    unit="percent",
    bands=(
        ClassificationBand(
            code="scaphocephaly", label="Scaphocephaly", level=2, lower=0, upper=75, color="purple",
            category="scaphocephaly",
        ),
        ClassificationBand(
            code="normal", label="Normal (Mesocephalic)", level=1, lower=75, upper=85, color="green"
        ),
        ClassificationBand(
            code="brachycephaly_mild", label="Mild Brachycephaly", level=2, lower=85, upper=90, color="yellow",
            category="brachycephaly",
        ),
        ClassificationBand(
            code="brachycephaly_moderate", label="Moderate Brachycephaly", level=3, lower=90, upper=100,
            color="orange", category="brachycephaly",
        ),
        ClassificationBand(
            code="brachycephaly_severe", label="Severe Brachycephaly", level=4, lower=100, upper=math.inf,
            color="red", category="brachycephaly",
        ),
    ),
)

BAND_TABLES: dict[str, BandTable] = {
    table.name: table
    for table in (ROM_ASYMMETRY_BANDS, PLAGIOCEPHALY_CVAI_BANDS, CEPHALIC_INDEX_BANDS)
}

# ── Torticollis ──────────────────────────────────────────────────────────────

AGE_GROUP_LABELS: dict[str, str] = {
    "early": "0-6 months",
    "late_7_9": "7-9 months",
    "late_10_12": "10-12 months",
    "very_late": ">12 months",
}

PROGNOSIS_BY_GRADE: dict[int, GradePrognosis] = {
    1: GradePrognosis(
        grade=1, title="Early Mild", min_months=1.5, max_months=2, color="yellow",
        message="Short treatment with excellent prognosis.",
    ),
    2: GradePrognosis(
        grade=2, title="Early Moderate", min_months=2, max_months=3, color="orange",
        message="Rapid response to conservative treatment expected.",
    ),
    3: GradePrognosis(
        grade=3, title="Early Severe", min_months=3, max_months=4, color="red",
        message="Close follow-up required due to fibrosis.",
    ),
    4: GradePrognosis(
        grade=4, title="Late Mild", min_months=3, max_months=4, color="yellow",
        message="Longer treatment because of late onset.",
    ),
    5: GradePrognosis(
        grade=5, title="Late Moderate", min_months=5, max_months=6, color="orange",
        message="Moderate prognosis; surgical referral risk if unresponsive.",
    ),
    6: GradePrognosis(
        grade=6, title="Late Severe", min_months=6, max_months=7, color="red",
        message="Intensive treatment required; monitor progress.",
    ),
    7: GradePrognosis(
        grade=7, title="Late Extreme", min_months=7, max_months=9, color="darkred",
        message="Long-term treatment due to fibrosis and advanced age.",
    ),
    8: GradePrognosis(
        grade=8, title="Very Late", min_months=9, max_months=12, color="darkred",
        message="Guarded prognosis. Consider surgical evaluation.",
    ),
}

# A "postural" torticollis should have no meaningful passive restriction
POSTURAL_DEFICIT_WARNING_DEGREES = 10.0

# ── AIMS ─────────────────────────────────────────────────────────────────────

AIMS_POSTURE_MAX: dict[str, int] = {"prone": 21, "supine": 9, "sitting": 12, "standing": 16}
AIMS_MAX_SCORE = sum(AIMS_POSTURE_MAX.values())

AIMS_PERCENTILES: tuple[PercentileRow, ...] = (
    PercentileRow(age_months=1, p5=3, p10=3, p25=4, p50=5, p75=6, p90=7),
    PercentileRow(age_months=2, p5=4, p10=5, p25=6, p50=7, p75=8, p90=9),
    PercentileRow(age_months=3, p5=6, p10=7, p25=8, p50=10, p75=11, p90=13),
    PercentileRow(age_months=4, p5=8, p10=9, p25=11, p50=13, p75=15, p90=17),
    PercentileRow(age_months=5, p5=10, p10=12, p25=14, p50=17, p75=20, p90=23),
    PercentileRow(age_months=6, p5=13, p10=15, p25=18, p50=22, p75=26, p90=30),
    PercentileRow(age_months=7, p5=16, p10=19, p25=23, p50=28, p75=33, p90=38),
    PercentileRow(age_months=8, p5=20, p10=24, p25=29, p50=34, p75=40, p90=45),
    PercentileRow(age_months=9, p5=25, p10=29, p25=35, p50=41, p75=46, p90=50),
    PercentileRow(age_months=10, p5=30, p10=35, p25=41, p50=46, p75=51, p90=54),
    PercentileRow(age_months=11, p5=36, p10=41, p25=46, p50=51, p75=54, p90=56),
    PercentileRow(age_months=12, p5=42, p10=46, p25=51, p50=54, p75=56, p90=57),
    PercentileRow(age_months=13, p5=46, p10=50, p25=53, p50=56, p75=57, p90=58),
    PercentileRow(age_months=14, p5=50, p10=53, p25=55, p50=57, p75=58, p90=58),
    PercentileRow(age_months=15, p5=53, p10=55, p25=56, p50=57, p75=58, p90=58),
    PercentileRow(age_months=16, p5=55, p10=56, p25=57, p50=58, p75=58, p90=58),
    PercentileRow(age_months=17, p5=56, p10=57, p25=57, p50=58, p75=58, p90=58),
    PercentileRow(age_months=18, p5=57, p10=57, p25=58, p50=58, p75=58, p90=58),
)

# Percentile at or below which each tier applies, checked in order
AIMS_CLASSIFICATION_TIERS: tuple[tuple[int, str], ...] = (
    (5, "atypical"),
    (10, "suspicious"),
)
AIMS_TOP_PERCENTILE = 95


def _items(posture: str, rows: list[tuple[str, str, int]]) -> tuple[AIMSItem, ...]:
    return tuple(
        AIMSItem(id=item_id, name=name, posture=posture, typical_age_months=age)
        for item_id, name, age in rows
    )


AIMS_ITEMS: tuple[AIMSItem, ...] = (
    _items("prone", [
        ("P1", "Prone lying 1 - physiological flexion", 0),
        ("P2", "Prone lying 2 - head to midline", 1),
        ("P3", "Prone prop 1 - unstable forearm support", 2),
        ("P4", "Forearm support 2 - stable", 3),
        ("P5", "Forearm support 3 - chest elevated", 4),
        ("P6", "Extended arm support 1", 5),
        ("P7", "Extended arm support 2", 5),
        ("P8", "Reaching from forearm support", 6),
        ("P9", "Swimming", 5),
        ("P10", "Rolling prone to supine without rotation", 4),
        ("P11", "Rolling prone to supine with rotation", 5),
        ("P12", "Pivoting 1", 6),
        ("P13", "Pivoting 2", 7),
        ("P14", "Four-point kneeling 1", 7),
        ("P15", "Four-point kneeling 2", 8),
        ("P16", "Four-point reaching", 8),
        ("P17", "Propped lying to crawling", 8),
        ("P18", "Reciprocal crawling 1", 9),
        ("P19", "Reciprocal crawling 2", 10),
        ("P20", "Reciprocal crawling 3", 11),
        ("P21", "Bear walk", 12),
    ])
    + _items("supine", [
        ("S1", "Supine lying 1 - physiological flexion", 0),
        ("S2", "Supine lying 2 - head to midline", 2),
        ("S3", "Supine lying 3 - hands to midline", 3),
        ("S4", "Active extension", 4),
        ("S5", "Rolling supine to side", 4),
        ("S6", "Rolling supine to prone 1", 5),
        ("S7", "Rolling supine to prone 2", 6),
        ("S8", "Pull to sit 1", 5),
        ("S9", "Pull to sit 2", 6),
    ])
    + _items("sitting", [
        ("Sit1", "Sitting with support 1", 3),
        ("Sit2", "Sitting with support 2", 4),
        ("Sit3", "Sitting with propped arms forward", 5),
        ("Sit4", "Sitting with propped arms sideways", 6),
        ("Sit5", "Unsustained sitting", 6),
        ("Sit6", "Sitting without arm support", 7),
        ("Sit7", "Sitting with trunk rotation", 8),
        ("Sit8", "Sitting with lateral reach", 8),
        ("Sit9", "Sitting to prone", 8),
        ("Sit10", "Sitting to four-point kneeling", 9),
        ("Sit11", "Four-point kneeling to sitting", 9),
        ("Sit12", "Side sitting", 10),
    ])
    + _items("standing", [
        ("St1", "Supported standing 1", 5),
        ("St2", "Supported standing 2", 6),
        ("St3", "Supported standing 3", 8),
        ("St4", "Pulls to stand 1", 8),
        ("St5", "Pulls to stand 2", 9),
        ("St6", "Pulls to stand 3", 10),
        ("St7", "Cruising 1", 9),
        ("St8", "Cruising 2", 10),
        ("St9", "Stands alone", 11),
        ("St10", "Early stepping", 11),
        ("St11", "Walks alone 1", 12),
        ("St12", "Walks alone 2", 13),
        ("St13", "Walks alone 3", 14),
        ("St14", "Squat to stand", 13),
        ("St15", "Sideways walking", 15),
        ("St16", "Walks backwards", 16),
    ])
)

AIMS_ITEMS_BY_ID: dict[str, AIMSItem] = {item.id: item for item in AIMS_ITEMS}

# ── FSOS-2 ───────────────────────────────────────────────────────────────────

FSOS2_POSTURES: tuple[str, ...] = ("supine", "prone", "sitting", "standing")

FSOS2_ITEMS: dict[str, str] = {
    "head_rotation": "Head rotation",
    "lateral_flexion_righting": "Lateral trunk flexion / head righting",
    "lateral_trunk_rebalancing": "Lateral trunk rebalancing",
    "arm_use": "Use of arms",
    "hand_use": "Use of hands",
    "movement_transitions": "Movement transitions",
    "postural_alignment": "Postural alignment",
}

FSOS2_ITEM_MAX = 4
FSOS2_SECTION_MAX = FSOS2_ITEM_MAX * len(FSOS2_ITEMS)
FSOS2_TOTAL_MAX = FSOS2_SECTION_MAX * len(FSOS2_POSTURES)

# ── MFS ──────────────────────────────────────────────────────────────────────

MFS_MAX_SCORE = 5

MFS_SCALE: dict[int, str] = {
    0: "Head below horizontal line",
    1: "Head on horizontal line",
    2: "Head slightly above horizontal (<15°)",
    3: "Head 15° to 45° above horizontal",
    4: "Head 45° to 75° above horizontal",
    5: "Head more than 75° above horizontal",
}

# Mean MFS score by age, used as a loose reference only
MFS_AGE_REFERENCE: tuple[tuple[int, float], ...] = (
    (2, 1.0),
    (4, 2.6),
    (6, 3.0),
    (10, 3.4),
)


def find_aims_item(item_id: str) -> Optional[AIMSItem]:
    """Look up an AIMS item by id."""
    return AIMS_ITEMS_BY_ID.get(item_id)


def describe_tables() -> dict:
    """Serializable snapshot of every reference table, for API and CLI display."""
    return {
        "version": REFERENCE_TABLES_VERSION,
        "cervical_rom_norms": [row.model_dump() for row in CERVICAL_ROM_NORMS],
        "band_tables": {
            name: {
                "unit": table.unit,
                "bands": [
                    {**band.model_dump(), "upper": None if math.isinf(band.upper) else band.upper}
                    for band in table.bands
                ],
            }
            for name, table in BAND_TABLES.items()
        },
        "aims_percentiles": [row.model_dump() for row in AIMS_PERCENTILES],
        "aims_posture_max": dict(AIMS_POSTURE_MAX),
        "fsos2_items": dict(FSOS2_ITEMS),
        "mfs_scale": {str(score): text for score, text in MFS_SCALE.items()},
        "torticollis_prognosis": {
            str(grade): prog.model_dump() for grade, prog in PROGNOSIS_BY_GRADE.items()
        },
    }
