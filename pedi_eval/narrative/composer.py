"""Kinetic-functional diagnosis composer.

Turns a snapshot plus its ComputedAssessment into named text sections, a
deduplicated tag list and one narrative string. Pure templating: no
clinical rule lives here, and the output carries no timestamp, so composing
twice gives identical text.
"""
from __future__ import annotations

import math
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pedi_eval.models.assessment import ComputedAssessment
from pedi_eval.models.snapshot import (
    EvaluationSnapshot,
    NoduleLocation,
    Side,
    Tonus,
    TorticollisType,
)
from pedi_eval.reference.lookup import round_half_up

SECTION_ORDER: tuple[str, ...] = (
    "identification",
    "anamnesis",
    "physical_findings",
    "torticollis_classification",
    "cranial_asymmetry",
    "motor_development",
    "functional_conclusion",
    "treatment_plan",
)

TYPE_DESCRIPTIONS: dict[TorticollisType, str] = {
    TorticollisType.POSTURAL: "postural torticollis",
    TorticollisType.MUSCULAR: "muscular torticollis",
    TorticollisType.STERNOMASTOID_MASS: "sternocleidomastoid mass torticollis",
    TorticollisType.OTHER: "torticollis of non-muscular origin",
}
DEFAULT_TYPE_DESCRIPTION = "congenital muscular torticollis"

NODULE_LOCATIONS: dict[NoduleLocation, str] = {
    NoduleLocation.LOWER_THIRD: "lower third",
    NoduleLocation.MIDDLE_THIRD: "middle third",
    NoduleLocation.UPPER_THIRD: "upper third",
}

NEURODYNAMIC_LABELS: dict[str, str] = {
    "upper_right": "right upper limb",
    "upper_left": "left upper limb",
    "lower_right": "right lower limb",
    "lower_left": "left lower limb",
    "passive_neck_flexion": "passive neck flexion",
}

# Findings below this many degrees are not worth a sentence
MIN_REPORTED_ASYMMETRY = 5.0

_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


class DiagnosisReport(BaseModel):
    """Composed diagnosis: every section key is present, empty when omitted."""

    model_config = ConfigDict(frozen=True)

    sections: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    narrative: str = ""


def strip_html(text: Optional[str]) -> str:
    """Drop markup from rich-text fields and normalize whitespace."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", _HTML_TAG.sub(" ", text)).strip()


def _tag(*parts: str) -> str:
    return "-".join(part.lower().replace("_", "-").replace(" ", "-") for part in parts)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_age(age_months: float) -> str:
    """'4 months', '1 month', '1 year and 3 months'."""
    months = max(math.floor(age_months), 0)
    if months < 12:
        return _plural(months, "month")
    years, remainder = divmod(months, 12)
    return f"{_plural(years, 'year')} and {_plural(remainder, 'month')}"


def _degrees(value: float) -> str:
    return f"{round_half_up(value, 1):g}°"


def _join_sentences(parts: list[str]) -> str:
    if not parts:
        return ""
    text = ". ".join(part.rstrip(".") for part in parts)
    return f"{text}."


# ── Sections ─────────────────────────────────────────────────────────────────


def _identification(snapshot: EvaluationSnapshot) -> str:
    ident = snapshot.identification
    name = strip_html(ident.patient_name)
    father, mother = strip_html(ident.father_name), strip_html(ident.mother_name)

    parts = [f"Patient {name}" if name else "Patient"]
    if snapshot.age_months is not None:
        parts.append(format_age(snapshot.age_months))
    parents = " and ".join(p for p in (father, mother) if p)
    if parents:
        parts.append(f"child of {parents}")

    if len(parts) == 1 and not name:
        return ""
    return ", ".join(parts) + "."


def _anamnesis(snapshot: EvaluationSnapshot, tags: list[str]) -> str:
    anamnesis = snapshot.anamnesis
    parts: list[str] = []
    complaint = strip_html(anamnesis.chief_complaint)
    if complaint:
        parts.append(f"Chief complaint: {complaint}")
    if anamnesis.delivery_type:
        parts.append(f"Born by {anamnesis.delivery_type.lower()} delivery")
        tags.append(_tag("delivery", anamnesis.delivery_type))
    if anamnesis.gestational_age_weeks:
        parts.append(f"{anamnesis.gestational_age_weeks:g} weeks of gestational age")
    complications = strip_html(anamnesis.prenatal_complications)
    if complications:
        parts.append(f"Prenatal complications: {complications}")
    return _join_sentences(parts)


def _physical_findings(snapshot: EvaluationSnapshot, assessment: ComputedAssessment, tags: list[str]) -> str:
    findings: list[str] = []
    rotation = assessment.goniometry.rotation
    inclination = assessment.goniometry.inclination
    palpation = snapshot.palpation

    if rotation.passive_asymmetry is not None and rotation.passive_asymmetry > MIN_REPORTED_ASYMMETRY:
        findings.append(
            f"passive cervical rotation deficit of {_degrees(rotation.passive_asymmetry)} "
            f"toward the {rotation.restricted_side}"
        )
        if rotation.classification is not None:
            tags.append(_tag("rotation-deficit", rotation.classification.code))

    if inclination.passive_asymmetry is not None and inclination.passive_asymmetry > MIN_REPORTED_ASYMMETRY:
        findings.append(f"lateral inclination asymmetry of {_degrees(inclination.passive_asymmetry)}")

    if palpation.has_nodule:
        side, location = (
            ("right", palpation.right_nodule) if palpation.right_has_nodule else ("left", palpation.left_nodule)
        )
        findings.append(f"fibrous nodule in the {NODULE_LOCATIONS[location]} of the {side} SCM")
        tags.append("nodule-present")
    elif not palpation.is_empty:
        findings.append("no palpable nodule at present")
        tags.append("nodule-absent")

    taut = [
        side
        for side, tonus in (("right", palpation.right_tonus), ("left", palpation.left_tonus))
        if tonus == Tonus.TAUT_BAND
    ]
    if taut:
        findings.append(f"increased tone of the {' and '.join(taut)} SCM")

    if not findings:
        return ""
    return f"On physical examination: {', '.join(findings)}."


def _torticollis(snapshot: EvaluationSnapshot, assessment: ComputedAssessment, tags: list[str]) -> str:
    severity = assessment.torticollis
    if not severity.is_classified:
        return ""

    clinical_type = snapshot.palpation.clinical_type
    description = TYPE_DESCRIPTIONS.get(clinical_type, DEFAULT_TYPE_DESCRIPTION)
    text = f"Kinetic-functional picture consistent with {description}, grade {severity.grade} ({severity.title})"
    if severity.affected_rotation_side in ("left", "right"):
        text += f", rotation restricted to the {severity.affected_rotation_side}"

    tags.append(_tag("torticollis-grade", str(severity.grade)))
    tags.append(_tag("torticollis", severity.criteria.age_group))
    return text + "."


def _cranial(snapshot: EvaluationSnapshot, assessment: ComputedAssessment, tags: list[str]) -> str:
    cranial = assessment.cranial
    findings: list[str] = []

    if cranial.plagiocephaly is not None and not cranial.plagiocephaly.is_normal:
        findings.append(
            f"{cranial.plagiocephaly.label.lower()} plagiocephaly (CVAI: {round_half_up(cranial.cvai_percent, 1):.1f}%)"
        )
        tags.append(_tag("plagiocephaly", cranial.plagiocephaly.code))

    if cranial.cephalic_index is not None and not cranial.cephalic_index.is_normal:
        findings.append(f"{cranial.cephalic_index.label.lower()} (CI: {round_half_up(cranial.ci_percent, 1):.1f}%)")
        tags.append(_tag(cranial.cephalic_index.code))

    ear_shift = snapshot.cranial.ear_shift
    if ear_shift and ear_shift != "aligned":
        findings.append(f"ear misalignment ({ear_shift.replace('_', ' ')})")

    if not findings:
        return ""
    return f"Associated with {' and '.join(findings)}."


def _aims_description(classification: str, percentile: int) -> str:
    if classification == "atypical":
        return "significant motor delay"
    if classification == "suspicious":
        return "motor delay"
    if percentile <= 25:
        return "borderline motor development"
    return "age-appropriate motor development"


def _motor(snapshot: EvaluationSnapshot, assessment: ComputedAssessment, tags: list[str]) -> str:
    findings: list[str] = []

    aims = assessment.aims
    if aims is not None and aims.percentile is not None:
        pct = aims.percentile
        findings.append(f"{_aims_description(pct.classification, pct.percentile)} (AIMS percentile {pct.percentile})")
        if pct.classification != "normal":
            tags.append("motor-delay")

    control = snapshot.cervical_control
    if control.supine_midline in ("falls_to_preference", "unstable"):
        findings.append("difficulty keeping the head in midline in supine")
        tags.append("cervical-control-altered")
    if control.prone_tolerance in ("cries_immediately", "tires_quickly"):
        findings.append("low tolerance to prone positioning")

    mfs = assessment.mfs
    if mfs.symmetric is False:
        findings.append(f"asymmetric lateral neck flexor strength (MFS: R{mfs.right}/L{mfs.left})")
        tags.append("mfs-asymmetry")

    fsos2 = assessment.fsos2
    if fsos2 is not None and fsos2.total_score > 0:
        findings.append(f"FSOS-2 total {fsos2.total_score}/{fsos2.max_score} ({fsos2.percent}%)")

    if not findings:
        return ""
    return f"Regarding motor development: {', '.join(findings)}."


def _functional(snapshot: EvaluationSnapshot, assessment: ComputedAssessment, tags: list[str]) -> str:
    findings: list[str] = []
    sensory = snapshot.sensory

    if sensory.visual_tracking_restricted in (Side.RIGHT, Side.LEFT):
        findings.append(f"signs of visual neglect to the {sensory.visual_tracking_restricted.value}")
        tags.append("visual-neglect")
    if sensory.lip_seal == "lips_open":
        findings.append("mouth-breathing pattern")
        tags.append("mouth-breathing")
    if sensory.tongue_anatomy in ("short_frenulum", "heart_shaped"):
        findings.append("short lingual frenulum")
        tags.append("short-frenulum")

    altered = assessment.neurodynamic.altered
    if altered:
        findings.append(
            "positive neural tension test ("
            + ", ".join(NEURODYNAMIC_LABELS[name] for name in altered)
            + ")"
        )
        tags.append("neural-tension-positive")

    if not findings:
        return ""
    return f"Functionally, presents {', '.join(findings)}."


def _treatment_plan(snapshot: EvaluationSnapshot, assessment: ComputedAssessment) -> str:
    parts: list[str] = []
    prognosis = assessment.torticollis.prognosis
    if assessment.torticollis.is_classified and prognosis is not None:
        parts.append(
            f"Estimated prognosis: {prognosis.min_months:g} to {prognosis.max_months:g} months of treatment. "
            f"{prognosis.message}"
        )
    plan = strip_html(snapshot.treatment_plan)
    if plan:
        parts.append(plan)
    return " ".join(parts)


def compose_diagnosis(snapshot: EvaluationSnapshot, assessment: ComputedAssessment) -> DiagnosisReport:
    """Assemble the diagnosis sections, tags and narrative.

    Any section without material is left empty and skipped in the
    narrative.
    """
    tags: list[str] = []
    sections = {
        "identification": _identification(snapshot),
        "anamnesis": _anamnesis(snapshot, tags),
        "physical_findings": _physical_findings(snapshot, assessment, tags),
        "torticollis_classification": _torticollis(snapshot, assessment, tags),
        "cranial_asymmetry": _cranial(snapshot, assessment, tags),
        "motor_development": _motor(snapshot, assessment, tags),
        "functional_conclusion": _functional(snapshot, assessment, tags),
        "treatment_plan": _treatment_plan(snapshot, assessment),
    }

    narrative = "\n\n".join(sections[name] for name in SECTION_ORDER if sections[name])
    return DiagnosisReport(
        sections=sections,
        tags=list(dict.fromkeys(tags)),
        narrative=narrative,
    )
