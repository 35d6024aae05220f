"""Cranial vault asymmetry and cephalic index.

CVA  = |diagonal A - diagonal B|            (mm)
CVAI = CVA / longer diagonal * 100          (%)
CI   = mediolateral width / AP length * 100 (%)
"""
from __future__ import annotations

from typing import Optional

from pedi_eval.models.assessment import Classification, CranialShape, CraniometricAnalysis
from pedi_eval.models.snapshot import CranialMeasurements
from pedi_eval.reference.lookup import classify_band, round_half_up
from pedi_eval.reference.tables import CEPHALIC_INDEX_BANDS, PLAGIOCEPHALY_CVAI_BANDS


def _positive(value: Optional[float]) -> Optional[float]:
    # Zero or negative dimensions are recording errors, not measurements
    if value is None or value <= 0:
        return None
    return value


def cranial_vault_asymmetry(diagonal_a: Optional[float], diagonal_b: Optional[float]) -> Optional[float]:
    a, b = _positive(diagonal_a), _positive(diagonal_b)
    if a is None or b is None:
        return None
    return abs(a - b)


def cvai(diagonal_a: Optional[float], diagonal_b: Optional[float]) -> Optional[float]:
    """Cranial Vault Asymmetry Index, normalized by the longer diagonal."""
    cva = cranial_vault_asymmetry(diagonal_a, diagonal_b)
    if cva is None:
        return None
    return cva / max(diagonal_a, diagonal_b) * 100


def cephalic_index(length_ap: Optional[float], width_ml: Optional[float]) -> Optional[float]:
    length, width = _positive(length_ap), _positive(width_ml)
    if length is None or width is None:
        return None
    return width / length * 100


def cranial_shape(
    plagiocephaly: Optional[Classification],
    ci_class: Optional[Classification],
) -> Optional[CranialShape]:
    """Combined shape tag; needs both indices to say anything."""
    if plagiocephaly is None or ci_class is None:
        return None
    plagio_abnormal = not plagiocephaly.is_normal
    ci_abnormal = not ci_class.is_normal
    if plagio_abnormal and ci_abnormal:
        return CranialShape.MIXED
    if plagio_abnormal:
        return CranialShape.PLAGIOCEPHALY
    if ci_abnormal:
        return CranialShape(ci_class.category)
    return CranialShape.NORMAL


def analyze_cranium(measurements: CranialMeasurements) -> CraniometricAnalysis:
    """Compute CVA/CVAI/CI, classify them and derive the cranial shape."""
    cva = cranial_vault_asymmetry(measurements.diagonal_a_mm, measurements.diagonal_b_mm)
    cvai_value = cvai(measurements.diagonal_a_mm, measurements.diagonal_b_mm)
    ci_value = cephalic_index(measurements.length_ap_mm, measurements.width_ml_mm)

    plagio = (
        Classification.from_band(classify_band(cvai_value, PLAGIOCEPHALY_CVAI_BANDS))
        if cvai_value is not None
        else None
    )
    ci_class = (
        Classification.from_band(classify_band(ci_value, CEPHALIC_INDEX_BANDS))
        if ci_value is not None
        else None
    )
    shape = cranial_shape(plagio, ci_class)

    alerts: list[str] = []
    if plagio is not None and plagio.level >= 3:
        alerts.append(
            f"{plagio.label} plagiocephaly (CVAI {round_half_up(cvai_value, 1)}%): "
            "consider cranial orthosis referral."
        )
    if ci_class is not None and not ci_class.is_normal:
        alerts.append(f"{ci_class.label} (CI {round_half_up(ci_value, 1)}%).")
    if shape == CranialShape.MIXED:
        alerts.append("Combined plagiocephaly and abnormal cephalic index.")

    return CraniometricAnalysis(
        cva_mm=cva,
        cvai_percent=cvai_value,
        ci_percent=ci_value,
        plagiocephaly=plagio,
        cephalic_index=ci_class,
        cranial_shape=shape,
        alerts=alerts,
    )
