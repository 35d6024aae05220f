"""Pytest configuration and fixtures."""

import pytest

from pedi_eval.models.snapshot import (
    AIMSChecklist,
    Anamnesis,
    AxisReading,
    CranialMeasurements,
    EvaluationSnapshot,
    FSOS2Scores,
    GoniometryReadings,
    Identification,
    NeurodynamicTests,
    PalpationFindings,
)


@pytest.fixture
def empty_snapshot():
    """Snapshot with nothing recorded but the age."""
    return EvaluationSnapshot(age_months=4)


@pytest.fixture
def moderate_rotation():
    """Passive rotation right=70°, left=55°."""
    return GoniometryReadings(
        rotation=AxisReading(active_right=75, active_left=60, passive_right=70, passive_left=55),
        inclination=AxisReading(passive_right=65, passive_left=60),
    )


@pytest.fixture
def full_snapshot(moderate_rotation):
    """A typical 4-month torticollis evaluation with every section filled."""
    return EvaluationSnapshot(
        age_months=4,
        goniometry=moderate_rotation,
        palpation=PalpationFindings(
            right_tonus="taut_band",
            right_nodule="middle_third",
            right_nodule_size="1_3cm",
            left_tonus="normal",
            left_nodule="absent",
            clinical_type="SMT",
            affected_side="right",
            head_posture="tilt_right_rotate_left",
        ),
        cranial=CranialMeasurements(
            diagonal_a_mm=145, diagonal_b_mm=135, length_ap_mm=130, width_ml_mm=110
        ),
        aims=AIMSChecklist(checked_items={"P1": True, "P2": True, "P3": True, "S1": True, "S2": True}),
        fsos2=FSOS2Scores(supine={"head_rotation": 3, "arm_use": 4}),
        mfs_right=2,
        mfs_left=3,
        neurodynamic=NeurodynamicTests(upper_right="altered", upper_left="normal"),
        identification=Identification(patient_name="Ana", mother_name="Maria"),
        anamnesis=Anamnesis(
            chief_complaint="<p>Head always turned to the <b>left</b></p>",
            delivery_type="Vaginal",
            gestational_age_weeks=39,
        ),
        treatment_plan="<p>Stretching and positioning guidance.</p>",
    )


@pytest.fixture
def snapshot_payload(full_snapshot):
    """JSON-ready body for API and CLI tests."""
    return full_snapshot.model_dump(mode="json")
