"""Diagnosis narrative composition."""

from pedi_eval.narrative.composer import DiagnosisReport, compose_diagnosis

__all__ = ["DiagnosisReport", "compose_diagnosis"]
