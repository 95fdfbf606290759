"""
Gauge constants and the yarn-width bound.

Every stitch column occupies GAUGE natural units horizontally. A yarn whose
width exceeds a sixth of the gauge makes neighbouring tube cross-sections
overlap themselves, so the bound is checked by callers and re-checked here.
All functions are pure.
"""

from __future__ import annotations

import math

GAUGE: float = 2.0
MAX_WIDTH_FRACTION: float = 1.0 / 6.0


class InvalidWidthError(ValueError):
    """Raised when a yarn width is non-positive or exceeds gauge / 6."""


def max_yarn_width(gauge: float = GAUGE) -> float:
    """Return the largest yarn width that keeps cross-sections apart."""
    if gauge <= 0:
        raise ValueError(f"gauge must be positive, got {gauge}")
    return gauge * MAX_WIDTH_FRACTION


def check_yarn_width(yarn_width: float, gauge: float = GAUGE) -> float:
    """Return *yarn_width* unchanged, or raise InvalidWidthError if it is out of bounds."""
    limit = max_yarn_width(gauge)
    if not math.isfinite(yarn_width) or yarn_width <= 0:
        raise InvalidWidthError(f"yarn_width must be a positive number, got {yarn_width}")
    if yarn_width > limit:
        raise InvalidWidthError(
            f"yarn_width {yarn_width} exceeds gauge/6 ({limit:.4f}); "
            f"choose a yarn width of at most {limit:.4f}"
        )
    return yarn_width


def row_height(yarn_width: float) -> float:
    """Vertical distance between consecutive rows for a given yarn width."""
    return 2.0 - 3.0 * yarn_width
