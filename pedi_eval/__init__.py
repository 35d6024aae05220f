"""PediEval - pediatric physiotherapy assessment scoring and classification engine."""

__version__ = "0.1.0"

from pedi_eval.narrative.composer import DiagnosisReport, compose_diagnosis  # noqa: E402
from pedi_eval.scoring.engine import assess  # noqa: E402

__all__ = ["__version__", "assess", "compose_diagnosis", "DiagnosisReport"]
