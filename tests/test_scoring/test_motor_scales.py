"""Tests for the AIMS, FSOS-2 and MFS scorers."""

import pytest

from pedi_eval.models.snapshot import AIMSChecklist, FSOS2Scores
from pedi_eval.reference.tables import AIMS_ITEMS, FSOS2_ITEMS
from pedi_eval.scoring.aims import mark_items_below_age, posture_subtotals, score_aims
from pedi_eval.scoring.fsos import score_fsos2
from pedi_eval.scoring.mfs import score_mfs


def _checklist_with(count_by_posture):
    checked = {}
    for posture, count in count_by_posture.items():
        items = [item for item in AIMS_ITEMS if item.posture == posture][:count]
        checked.update({item.id: True for item in items})
    return checked


class TestAIMS:
    def test_total_equals_sum_of_subtotals(self):
        checked = _checklist_with({"prone": 8, "supine": 7, "sitting": 6, "standing": 3})
        result = score_aims(AIMSChecklist(checked_items=checked), age_months=8)

        assert result.posture_scores == {"prone": 8, "supine": 7, "sitting": 6, "standing": 3}
        assert result.total_score == sum(result.posture_scores.values()) == 24
        assert result.source == "items"

    def test_six_months_score_30_is_normal(self):
        checked = _checklist_with({"prone": 12, "supine": 9, "sitting": 6, "standing": 3})
        result = score_aims(AIMSChecklist(checked_items=checked), age_months=6)

        assert result.total_score == 30
        assert result.percentile.reference_age_months == 6
        assert result.percentile.classification == "normal"

    def test_unchecked_items_do_not_count(self):
        subtotals, unknown = posture_subtotals({"P1": True, "P2": False, "S1": True})
        assert subtotals["prone"] == 1
        assert subtotals["supine"] == 1
        assert unknown == []

    def test_unknown_items_reported_and_ignored(self):
        result = score_aims(AIMSChecklist(checked_items={"P1": True, "Z9": True}), age_months=2)
        assert result.total_score == 1
        assert result.unknown_items == ["Z9"]

    def test_missing_expected_items(self):
        result = score_aims(AIMSChecklist(checked_items={"P1": True, "S1": True}), age_months=2)
        assert result.missing_expected_items == ["P2"]

    def test_raw_scores_fallback_clamped(self):
        result = score_aims(AIMSChecklist(raw_scores={"prone": 30, "supine": 4, "sitting": -2}), age_months=6)

        assert result.source == "raw_scores"
        assert result.posture_scores == {"prone": 21, "supine": 4, "sitting": 0, "standing": 0}
        assert result.total_score == 25
        assert result.missing_expected_items == []

    def test_assessment_age_override(self):
        result = score_aims(AIMSChecklist(checked_items={"P1": True}, assessment_age_months=3), age_months=9)
        assert result.assessment_age_months == 3
        assert result.percentile.reference_age_months == 3

    def test_no_age_no_percentile(self):
        result = score_aims(AIMSChecklist(checked_items={"P1": True}), age_months=None)
        assert result.percentile is None


class TestMarkItemsBelowAge:
    def test_marks_items_below_threshold(self):
        filled = mark_items_below_age({}, 2)
        assert set(filled) == {"P1", "P2", "S1"}
        assert all(filled.values())

    def test_does_not_mutate_or_uncheck(self):
        checklist = {"St16": True, "P1": False}
        filled = mark_items_below_age(checklist, 1)

        assert checklist == {"St16": True, "P1": False}
        assert filled["St16"] is True
        assert filled["P1"] is True

    def test_threshold_is_exclusive(self):
        filled = mark_items_below_age({}, 0)
        assert filled == {}


class TestFSOS2:
    def test_section_and_total(self):
        full = {item: 4 for item in FSOS2_ITEMS}
        result = score_fsos2(FSOS2Scores(supine=full, prone={"head_rotation": 2, "arm_use": 1}))

        assert result.sections["supine"].subtotal == 28
        assert result.sections["supine"].percent == 100
        assert result.sections["prone"].subtotal == 3
        assert result.sections["prone"].percent == 11  # 3 / 28 = 10.7
        assert result.total_score == 31
        assert result.max_score == 112
        assert result.percent == 28  # 27.7
        assert result.complete is False

    def test_complete_flag(self):
        full = {item: 2 for item in FSOS2_ITEMS}
        result = score_fsos2(FSOS2Scores(supine=full, prone=full, sitting=full, standing=full))
        assert result.complete
        assert result.total_score == 56
        assert result.percent == 50

    def test_out_of_range_scores_clamped(self):
        result = score_fsos2(FSOS2Scores(sitting={"hand_use": 9, "arm_use": -1}))
        assert result.sections["sitting"].subtotal == 4

    def test_unknown_items_ignored(self):
        result = score_fsos2(FSOS2Scores(standing={"not_an_item": 4}))
        assert result.total_score == 0
        assert result.sections["standing"].items_scored == 0


class TestMFS:
    def test_symmetric(self):
        result = score_mfs(3, 3)

        assert result.symmetric is True
        assert result.status == "symmetric"
        assert result.difference == 0
        assert result.average == 3.0
        assert result.weaker_side is None

    def test_asymmetric(self):
        result = score_mfs(1, 4)

        assert result.status == "asymmetric"
        assert result.difference == 3
        assert result.average == pytest.approx(2.5)
        assert result.weaker_side == "right"
        assert (result.right, result.left) == (1, 4)

    def test_missing_side(self):
        result = score_mfs(3, None)
        assert result.symmetric is None
        assert result.status is None
        assert result.average is None
        assert result.right == 3

    def test_age_reference(self):
        result = score_mfs(2, 2, age_months=4)
        assert result.age_reference_mean == pytest.approx(2.6)
        assert result.below_age_reference is True

    def test_scores_clamped(self):
        result = score_mfs(7, -1)
        assert (result.right, result.left) == (5, 0)
