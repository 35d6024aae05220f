"""Assessment endpoints for the evaluation-editing UI.

Scoring is CPU-bound and fast, so handlers are plain functions that
FastAPI runs in its threadpool.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pedi_eval.models.assessment import ComputedAssessment
from pedi_eval.models.snapshot import EvaluationSnapshot
from pedi_eval.narrative.composer import DiagnosisReport, compose_diagnosis
from pedi_eval.reference.tables import describe_tables
from pedi_eval.scoring.aims import mark_items_below_age
from pedi_eval.scoring.engine import assess

logger = logging.getLogger(__name__)

router = APIRouter()


class DiagnosisResponse(BaseModel):
    """Assessment plus the composed diagnosis."""

    assessment: ComputedAssessment
    diagnosis: DiagnosisReport


class AIMSPrefillRequest(BaseModel):
    """Bulk-fill request for the AIMS checklist."""

    checked_items: dict[str, bool] = Field(default_factory=dict)
    age_threshold: float = Field(..., ge=0, description="Mark items typical before this age (months)")


class AIMSPrefillResponse(BaseModel):
    checked_items: dict[str, bool]
    newly_checked: list[str]


@router.post("/assessment/compute", response_model=ComputedAssessment)
def compute_assessment(snapshot: EvaluationSnapshot) -> ComputedAssessment:
    """Score a full evaluation snapshot."""
    return assess(snapshot)


@router.post("/assessment/diagnosis", response_model=DiagnosisResponse)
def generate_diagnosis(snapshot: EvaluationSnapshot) -> DiagnosisResponse:
    """Score a snapshot and compose its kinetic-functional diagnosis."""
    assessment = assess(snapshot)
    diagnosis = compose_diagnosis(snapshot, assessment)
    logger.info("Diagnosis composed with %d tags", len(diagnosis.tags))
    return DiagnosisResponse(assessment=assessment, diagnosis=diagnosis)


@router.post("/assessment/aims/prefill", response_model=AIMSPrefillResponse)
def prefill_aims(request: AIMSPrefillRequest) -> AIMSPrefillResponse:
    """Check every AIMS item whose typical age is below the threshold."""
    filled = mark_items_below_age(request.checked_items, request.age_threshold)
    newly_checked = [
        item_id for item_id, checked in filled.items()
        if checked and not request.checked_items.get(item_id, False)
    ]
    return AIMSPrefillResponse(checked_items=filled, newly_checked=newly_checked)


@router.get("/reference/tables")
def reference_tables() -> dict:
    """Versioned reference tables used by every calculation."""
    return describe_tables()
