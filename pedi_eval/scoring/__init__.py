"""Clinical analyzers and the assessment engine."""

from pedi_eval.scoring.aims import mark_items_below_age, score_aims
from pedi_eval.scoring.consistency import check_consistency
from pedi_eval.scoring.craniometry import analyze_cranium
from pedi_eval.scoring.engine import assess
from pedi_eval.scoring.fsos import score_fsos2
from pedi_eval.scoring.goniometry import analyze_goniometry
from pedi_eval.scoring.mfs import score_mfs
from pedi_eval.scoring.neurodynamic import summarize_neurodynamic
from pedi_eval.scoring.torticollis import GRADE_RULES, GradeRule, classify_torticollis

__all__ = [
    "assess",
    "analyze_goniometry",
    "analyze_cranium",
    "classify_torticollis",
    "GRADE_RULES",
    "GradeRule",
    "score_aims",
    "mark_items_below_age",
    "score_fsos2",
    "score_mfs",
    "summarize_neurodynamic",
    "check_consistency",
]
