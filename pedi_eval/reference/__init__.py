"""Clinical reference tables and lookups."""

from pedi_eval.reference.lookup import (
    AgeNorm,
    PercentileResult,
    classify_band,
    interpolate_age_norm,
    lookup_percentile,
    round_half_up,
    validate_band_table,
)
from pedi_eval.reference.tables import (
    BAND_TABLES,
    REFERENCE_TABLES_VERSION,
    BandTable,
    ClassificationBand,
    describe_tables,
)

__all__ = [
    "AgeNorm",
    "PercentileResult",
    "classify_band",
    "interpolate_age_norm",
    "lookup_percentile",
    "round_half_up",
    "validate_band_table",
    "BAND_TABLES",
    "REFERENCE_TABLES_VERSION",
    "BandTable",
    "ClassificationBand",
    "describe_tables",
]
