"""Tests for torticollis severity grading."""

import pytest

from pedi_eval.models.assessment import SeverityStatus
from pedi_eval.models.snapshot import AxisReading, GoniometryReadings, PalpationFindings
from pedi_eval.scoring.goniometry import analyze_goniometry
from pedi_eval.scoring.torticollis import GRADE_RULES, GradeInputs, age_group, classify_torticollis, match_grade


def _rotation(deficit):
    return GoniometryReadings(rotation=AxisReading(passive_right=100, passive_left=100 - deficit))


def _classify(age, deficit=None, nodule=False, palpation=None):
    readings = _rotation(deficit) if deficit is not None else GoniometryReadings()
    if palpation is None:
        palpation = PalpationFindings(right_nodule="middle_third" if nodule else "absent")
    return classify_torticollis(age, analyze_goniometry(readings, age), palpation, readings)


class TestDecisionTable:
    @pytest.mark.parametrize(
        "age,deficit,nodule,grade",
        [
            (5, 20, False, 2),
            (3, 10, False, 1),
            (6, 15, False, 2),
            (6, 30, False, 2),
            (6, 31, False, 3),
            (2, 5, True, 3),
            (6.9, 10, False, 1),
            (8, 10, False, 4),
            (11, 10, False, 5),
            (9, 40, False, 6),
            (12, 30, False, 6),
            (7, 5, True, 7),
            (10, 31, False, 7),
            (12.5, 10, False, 8),
            (12.5, 20, True, 8),
            (13, 0, False, 8),
            (24, 45, True, 8),
        ],
    )
    def test_grades(self, age, deficit, nodule, grade):
        result = _classify(age, deficit, nodule)
        assert result.status == SeverityStatus.CLASSIFIED
        assert result.grade == grade

    def test_rules_total_over_realistic_inputs(self):
        for months in range(0, 25):
            for deficit in (0, 7.5, 14.9, 15, 22, 30, 30.1, 60):
                for nodule in (False, True):
                    assert match_grade(GradeInputs(months=months, deficit=deficit, nodule=nodule)) is not None

    def test_rules_reference_known_grades(self):
        assert {rule.grade for rule in GRADE_RULES} == set(range(1, 9))


class TestResultContents:
    def test_criteria_and_prognosis(self):
        result = _classify(5, 20)

        assert result.title == "Early Moderate"
        assert result.criteria.age_group == "early"
        assert result.criteria.age_bracket == "0-6 months"
        assert result.criteria.deficit_degrees == 20
        assert result.criteria.nodule is False
        assert result.prognosis.min_months == 2
        assert result.prognosis.max_months == 3
        assert result.affected_rotation_side == "left"

    def test_late_bracket_labels(self):
        assert age_group(8) == ("late", "7-9 months")
        assert age_group(12) == ("late", "10-12 months")
        assert age_group(13)[0] == "very_late"
        assert age_group(12.5)[0] == "very_late"
        assert age_group(6.9) == ("early", "0-6 months")

    def test_just_past_twelve_months_is_very_late(self):
        result = _classify(12.5, 10)
        assert result.criteria.age_group == "very_late"
        assert any("12 months" in alert for alert in result.alerts)

    def test_very_late_alerts(self):
        result = _classify(15, 20, nodule=True)
        assert len(result.alerts) == 3

    def test_nodule_with_large_deficit_alert(self):
        result = _classify(4, 35, nodule=True)
        assert result.grade == 3
        assert any("30°" in alert for alert in result.alerts)


class TestInsufficientData:
    def test_unknown_age(self):
        result = _classify(None, 20)
        assert result.status == SeverityStatus.INSUFFICIENT_DATA
        assert result.grade is None

    def test_no_goniometry_no_palpation(self):
        result = _classify(4, palpation=PalpationFindings())
        assert result.status == SeverityStatus.INSUFFICIENT_DATA
        assert not result.is_classified

    def test_palpation_only_assumes_zero_deficit(self):
        result = _classify(4, palpation=PalpationFindings(clinical_type="POST"))

        assert result.status == SeverityStatus.CLASSIFIED
        assert result.grade == 1
        assert result.criteria.deficit_measured is False
        assert result.assumptions

    def test_negative_age_clamped(self):
        result = _classify(-1, 10)
        assert result.grade == 1
        assert any("Negative age" in note for note in result.assumptions)
