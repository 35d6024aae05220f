"""Tests for the reference table data."""

import math

import pytest

from pedi_eval.reference.lookup import validate_band_table
from pedi_eval.reference.tables import (
    AIMS_ITEMS,
    AIMS_MAX_SCORE,
    AIMS_PERCENTILES,
    AIMS_POSTURE_MAX,
    BAND_TABLES,
    CERVICAL_ROM_NORMS,
    FSOS2_SECTION_MAX,
    FSOS2_TOTAL_MAX,
    MFS_AGE_REFERENCE,
    PROGNOSIS_BY_GRADE,
    BandTable,
    ClassificationBand,
    describe_tables,
    find_aims_item,
)


class TestBandTables:
    @pytest.mark.parametrize("name", sorted(BAND_TABLES))
    def test_tables_are_contiguous(self, name):
        assert validate_band_table(BAND_TABLES[name]) == []

    @pytest.mark.parametrize("name", sorted(BAND_TABLES))
    def test_last_band_is_open_ended(self, name):
        assert math.isinf(BAND_TABLES[name].bands[-1].upper)

    def test_detects_gap(self):
        table = BandTable(
            name="broken",
            unit="degrees",
            bands=(
                ClassificationBand(code="a", label="A", level=1, lower=0, upper=5),
                ClassificationBand(code="b", label="B", level=2, lower=6, upper=math.inf),
            ),
        )
        problems = validate_band_table(table)
        assert len(problems) == 1
        assert "gap" in problems[0]

    def test_detects_overlap_and_closed_end(self):
        table = BandTable(
            name="broken",
            unit="degrees",
            bands=(
                ClassificationBand(code="a", label="A", level=1, lower=0, upper=10),
                ClassificationBand(code="b", label="B", level=2, lower=5, upper=20),
            ),
        )
        problems = validate_band_table(table)
        assert any("overlaps" in p for p in problems)
        assert any("not open-ended" in p for p in problems)

    def test_most_severe_is_highest_level(self):
        assert BAND_TABLES["plagiocephaly_cvai"].most_severe.code == "very_severe"
        assert BAND_TABLES["cephalic_index"].most_severe.code == "brachycephaly_severe"


class TestAgeNorms:
    def test_breakpoints_sorted(self):
        ages = [row.age_months for row in CERVICAL_ROM_NORMS]
        assert ages == sorted(ages)
        assert ages == [2, 4, 6, 10]

    def test_mfs_reference_sorted(self):
        ages = [age for age, _ in MFS_AGE_REFERENCE]
        assert ages == sorted(ages)


class TestAIMSCatalog:
    def test_item_counts_match_posture_maxima(self):
        for posture, maximum in AIMS_POSTURE_MAX.items():
            assert sum(1 for item in AIMS_ITEMS if item.posture == posture) == maximum

    def test_total_is_58(self):
        assert AIMS_MAX_SCORE == 58
        assert len(AIMS_ITEMS) == 58

    def test_ids_unique(self):
        assert len({item.id for item in AIMS_ITEMS}) == len(AIMS_ITEMS)

    def test_find_item(self):
        assert find_aims_item("Sit5").posture == "sitting"
        assert find_aims_item("X99") is None

    def test_percentile_rows_monotonic(self):
        for row in AIMS_PERCENTILES:
            thresholds = [threshold for _, threshold in row.brackets()]
            assert thresholds == sorted(thresholds)
            assert thresholds[-1] <= AIMS_MAX_SCORE


class TestOtherTables:
    def test_fsos2_maxima(self):
        assert FSOS2_SECTION_MAX == 28
        assert FSOS2_TOTAL_MAX == 112

    def test_prognosis_for_every_grade(self):
        assert sorted(PROGNOSIS_BY_GRADE) == list(range(1, 9))
        for prog in PROGNOSIS_BY_GRADE.values():
            assert prog.min_months <= prog.max_months

    def test_describe_tables_is_json_safe(self):
        described = describe_tables()
        for table in described["band_tables"].values():
            assert table["bands"][-1]["upper"] is None
        assert described["version"]
        assert len(described["torticollis_prognosis"]) == 8
