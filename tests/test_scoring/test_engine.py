"""Tests for the assessment engine."""

import logging

import pytest
from pydantic import ValidationError

from pedi_eval import assess
from pedi_eval.models.assessment import SeverityStatus
from pedi_eval.models.snapshot import AxisReading, CranialMeasurements, EvaluationSnapshot, GoniometryReadings
from pedi_eval.reference.tables import REFERENCE_TABLES_VERSION


class TestAssess:
    def test_full_snapshot(self, full_snapshot):
        result = assess(full_snapshot)

        assert result.goniometry.rotation.passive_asymmetry == 15
        assert result.cranial.plagiocephaly.code == "moderate"
        assert result.torticollis.grade == 3
        assert result.aims.total_score == 5
        assert result.aims.percentile.classification == "atypical"
        assert result.aims.missing_expected_items == ["P4", "S3", "Sit1"]
        assert result.fsos2.total_score == 7
        assert result.mfs.weaker_side == "right"
        assert result.neurodynamic.altered == ["upper_right"]
        assert result.consistency_warnings == []
        assert result.reference_version == REFERENCE_TABLES_VERSION
        assert result.low_confidence is False

    def test_empty_snapshot(self, empty_snapshot):
        result = assess(empty_snapshot)

        assert result.torticollis.status == SeverityStatus.INSUFFICIENT_DATA
        assert result.aims is None
        assert result.fsos2 is None
        assert result.cranial.cranial_shape is None
        assert result.mfs.status is None
        assert len(result.neurodynamic.untested) == 5

    def test_deterministic(self, full_snapshot):
        assert assess(full_snapshot) == assess(full_snapshot)

    def test_result_is_immutable(self, full_snapshot):
        result = assess(full_snapshot)
        with pytest.raises(ValidationError):
            result.low_confidence = True

    def test_low_confidence_when_extrapolated(self, moderate_rotation):
        result = assess(EvaluationSnapshot(age_months=18, goniometry=moderate_rotation))
        assert result.low_confidence is True
        assert "reference_extrapolated" in [w.code for w in result.consistency_warnings]

    def test_logs_summary(self, full_snapshot, caplog):
        with caplog.at_level(logging.INFO, logger="pedi_eval.scoring.engine"):
            assess(full_snapshot)
        assert "Assessment computed: grade=3" in caplog.text

    def test_snapshot_from_json(self, snapshot_payload):
        snapshot = EvaluationSnapshot.model_validate(snapshot_payload)
        assert assess(snapshot).torticollis.grade == 3

    def test_nan_age_is_missing(self):
        snapshot = EvaluationSnapshot(age_months=float("nan"))
        assert snapshot.age_months is None
        assert assess(snapshot).torticollis.status == SeverityStatus.INSUFFICIENT_DATA

    def test_large_readings_do_not_raise(self):
        snapshot = EvaluationSnapshot(
            age_months=4,
            goniometry=GoniometryReadings(rotation=AxisReading(passive_right=1e30, passive_left=1e30)),
            cranial=CranialMeasurements(length_ap_mm=1e-28, width_ml_mm=120),
        )
        result = assess(snapshot)

        assert result.goniometry.rotation.passive_asymmetry == 0
        assert result.goniometry.rotation.percent_of_norm > 10**29
        assert result.torticollis.grade == 1
        assert result.cranial.ci_percent == pytest.approx(1.2e32)
