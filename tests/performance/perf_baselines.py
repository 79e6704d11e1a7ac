"""Performance baselines for layout computation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class PerfBaseline:
    """Configuration for a performance benchmark assertion."""

    loops: int
    image_count: int
    max_us_per_call: float
    reference_us_per_call: float


PERF_BASELINES: Final[dict[str, PerfBaseline]] = {
    "uniform_layout": PerfBaseline(
        loops=200,
        image_count=200,
        max_us_per_call=20_000.0,
        reference_us_per_call=450.0,
    ),
    "shelf_layout": PerfBaseline(
        loops=200,
        image_count=200,
        max_us_per_call=20_000.0,
        reference_us_per_call=500.0,
    ),
}
