"""Tests for diagnosis composition."""

import pytest

from pedi_eval import assess, compose_diagnosis
from pedi_eval.models.snapshot import EvaluationSnapshot, Identification, SensoryFindings
from pedi_eval.narrative.composer import SECTION_ORDER, format_age, strip_html


@pytest.fixture
def report(full_snapshot):
    return compose_diagnosis(full_snapshot, assess(full_snapshot))


class TestSections:
    def test_every_section_key_present(self, report):
        assert list(report.sections) == list(SECTION_ORDER)

    def test_identification(self, report):
        assert report.sections["identification"] == "Patient Ana, 4 months, child of Maria."

    def test_anamnesis_strips_html(self, report):
        anamnesis = report.sections["anamnesis"]
        assert "<" not in anamnesis
        assert anamnesis.startswith("Chief complaint: Head always turned to the left.")
        assert "Born by vaginal delivery" in anamnesis
        assert "39 weeks of gestational age" in anamnesis

    def test_physical_findings(self, report):
        findings = report.sections["physical_findings"]
        assert "rotation deficit of 15° toward the left" in findings
        assert "fibrous nodule in the middle third of the right SCM" in findings
        assert "increased tone of the right SCM" in findings
        # 5° inclination asymmetry is below the reporting threshold
        assert "inclination" not in findings

    def test_torticollis_classification(self, report):
        text = report.sections["torticollis_classification"]
        assert "sternocleidomastoid mass torticollis, grade 3 (Early Severe)" in text

    def test_cranial(self, report):
        assert report.sections["cranial_asymmetry"] == "Associated with moderate plagiocephaly (CVAI: 6.9%)."

    def test_motor(self, report):
        motor = report.sections["motor_development"]
        assert "significant motor delay (AIMS percentile 5)" in motor
        assert "MFS: R2/L3" in motor

    def test_treatment_plan(self, report):
        plan = report.sections["treatment_plan"]
        assert plan.startswith("Estimated prognosis: 3 to 4 months of treatment.")
        assert plan.endswith("Stretching and positioning guidance.")


class TestTagsAndNarrative:
    def test_tags(self, report):
        assert report.tags == [
            "delivery-vaginal",
            "rotation-deficit-moderate",
            "nodule-present",
            "torticollis-grade-3",
            "torticollis-early",
            "plagiocephaly-moderate",
            "motor-delay",
            "mfs-asymmetry",
            "neural-tension-positive",
        ]

    def test_tags_unique(self, report):
        assert len(report.tags) == len(set(report.tags))

    def test_narrative_joins_non_empty_sections(self, report):
        parts = report.narrative.split("\n\n")
        assert parts == [report.sections[name] for name in SECTION_ORDER if report.sections[name]]

    def test_idempotent(self, full_snapshot):
        assessment = assess(full_snapshot)
        assert compose_diagnosis(full_snapshot, assessment) == compose_diagnosis(full_snapshot, assessment)

    def test_missing_sections_omitted(self, empty_snapshot):
        report = compose_diagnosis(empty_snapshot, assess(empty_snapshot))

        assert report.sections["torticollis_classification"] == ""
        assert report.sections["treatment_plan"] == ""
        assert report.narrative == "Patient, 4 months."
        assert report.tags == []

    def test_nothing_recorded(self):
        snapshot = EvaluationSnapshot()
        report = compose_diagnosis(snapshot, assess(snapshot))
        assert report.narrative == ""

    def test_functional_conclusion(self):
        snapshot = EvaluationSnapshot(
            age_months=3,
            identification=Identification(patient_name="Leo"),
            sensory=SensoryFindings(visual_tracking_restricted="left", lip_seal="lips_open"),
        )
        report = compose_diagnosis(snapshot, assess(snapshot))

        assert "visual neglect to the left" in report.sections["functional_conclusion"]
        assert report.tags == ["visual-neglect", "mouth-breathing"]


class TestHelpers:
    @pytest.mark.parametrize(
        "age,text",
        [(1, "1 month"), (4, "4 months"), (4.6, "4 months"), (12, "1 year and 0 months"), (27, "2 years and 3 months")],
    )
    def test_format_age(self, age, text):
        assert format_age(age) == text

    def test_strip_html(self):
        assert strip_html("<p>Two <em>words</em></p>") == "Two words"
        assert strip_html(None) == ""
