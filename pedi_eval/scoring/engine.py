"""Assessment engine.

Runs every analyzer over one EvaluationSnapshot and bundles the results.
Stateless: the same snapshot always yields the same ComputedAssessment.
"""
from __future__ import annotations

import logging

from pedi_eval.models.assessment import ComputedAssessment
from pedi_eval.models.snapshot import EvaluationSnapshot
from pedi_eval.reference.lookup import validate_band_table
from pedi_eval.reference.tables import BAND_TABLES, REFERENCE_TABLES_VERSION
from pedi_eval.scoring.aims import score_aims
from pedi_eval.scoring.consistency import check_consistency
from pedi_eval.scoring.craniometry import analyze_cranium
from pedi_eval.scoring.fsos import score_fsos2
from pedi_eval.scoring.goniometry import analyze_goniometry
from pedi_eval.scoring.mfs import score_mfs
from pedi_eval.scoring.neurodynamic import summarize_neurodynamic
from pedi_eval.scoring.torticollis import classify_torticollis

logger = logging.getLogger(__name__)

for _table in BAND_TABLES.values():
    for _problem in validate_band_table(_table):
        logger.debug("Reference table problem: %s", _problem)


def assess(snapshot: EvaluationSnapshot) -> ComputedAssessment:
    """Compute every derived result for an evaluation snapshot.

    Goniometry runs first because torticollis grading reads its passive
    rotation deficit; every other analyzer is independent.
    """
    age = snapshot.age_months

    goniometry = analyze_goniometry(snapshot.goniometry, age)
    logger.debug(
        "Goniometry: rotation asymmetry=%s inclination asymmetry=%s",
        goniometry.rotation.passive_asymmetry,
        goniometry.inclination.passive_asymmetry,
    )

    cranial = analyze_cranium(snapshot.cranial)
    logger.debug("Craniometry: CVAI=%s CI=%s shape=%s", cranial.cvai_percent, cranial.ci_percent, cranial.cranial_shape)

    torticollis = classify_torticollis(age, goniometry, snapshot.palpation, snapshot.goniometry)
    logger.debug("Torticollis: status=%s grade=%s", torticollis.status.value, torticollis.grade)

    aims = score_aims(snapshot.aims, age) if snapshot.aims is not None else None
    fsos2 = score_fsos2(snapshot.fsos2) if snapshot.fsos2 is not None else None
    mfs = score_mfs(snapshot.mfs_right, snapshot.mfs_left, age)
    neurodynamic = summarize_neurodynamic(snapshot.neurodynamic)

    warnings = check_consistency(snapshot, goniometry, aims)

    low_confidence = bool(
        (goniometry.norm is not None and goniometry.norm.extrapolated)
        or (aims is not None and aims.percentile is not None and aims.percentile.extrapolated)
        or torticollis.assumptions
    )

    assessment = ComputedAssessment(
        goniometry=goniometry,
        cranial=cranial,
        torticollis=torticollis,
        aims=aims,
        fsos2=fsos2,
        mfs=mfs,
        neurodynamic=neurodynamic,
        consistency_warnings=warnings,
        reference_version=REFERENCE_TABLES_VERSION,
        low_confidence=low_confidence,
    )

    logger.info(
        "Assessment computed: grade=%s aims_total=%s warnings=%d low_confidence=%s",
        torticollis.grade,
        aims.total_score if aims else None,
        len(warnings),
        low_confidence,
    )
    return assessment
