"""Neuromeningeal tension test summary."""
from __future__ import annotations

from pedi_eval.models.assessment import NeurodynamicSummary
from pedi_eval.models.snapshot import NeurodynamicStatus, NeurodynamicTests

NEURODYNAMIC_TESTS: tuple[str, ...] = (
    "upper_right",
    "upper_left",
    "lower_right",
    "lower_left",
    "passive_neck_flexion",
)


def summarize_neurodynamic(tests: NeurodynamicTests) -> NeurodynamicSummary:
    """Group tests by status; unrecorded tests count as untested."""
    groups: dict[NeurodynamicStatus, list[str]] = {status: [] for status in NeurodynamicStatus}
    for name in NEURODYNAMIC_TESTS:
        status = getattr(tests, name) or NeurodynamicStatus.UNTESTED
        groups[status].append(name)
    return NeurodynamicSummary(
        altered=groups[NeurodynamicStatus.ALTERED],
        untested=groups[NeurodynamicStatus.UNTESTED],
        normal=groups[NeurodynamicStatus.NORMAL],
    )
