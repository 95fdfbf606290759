"""
Centerline curves for atomic stitches.

Each stitch is drawn as one period of the parametric yarn loop

    x(θ) = (θ + stitchWidth·sin 2θ) / π
    y(θ) = stitchHeight · cos(θ + π)
    z(θ) = depthFactor·cos 2θ − depthOffset·yarnWidth

sampled at θ = 2π·j / stitch_res, then moved to its column and sheared toward
the column its produced loop ended up in. Which depth parameters apply is a
table lookup on the stitch's BehaviorClass plus its cable hold state; there is
one curve routine for every stitch type.

Curves are row-agnostic: the row's vertical offset is added when the curve
is swept into a mesh.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from knitpreview.catalog.types import BaseStitchTypeInfo, BehaviorClass, HoldDirection
from knitpreview.graph.types import AtomicStitch, Loop, Stitch
from knitpreview.schemas.settings import DEFAULT_STITCH_RES
from knitpreview.utilities.gauge import GAUGE, check_yarn_width

STITCH_HEIGHT: float = 1.0
STITCH_WIDTH: float = 1.6
BASE_DEPTH_FACTOR: float = 0.3
BASE_DEPTH_OFFSET: float = 2.1  # multiplied by yarn width

HOLD_DEPTH_FACTORS: MappingProxyType[HoldDirection, float] = MappingProxyType(
    {HoldDirection.FRONT: 0.5, HoldDirection.BACK: 0.20}
)


class UnsupportedArityError(ValueError):
    """Raised when a curve is requested for anything other than one loop in, one loop out."""


@dataclass(frozen=True)
class _BehaviorProfile:
    sign: float  # purl loops bulge to the back
    scale: float  # two-into-one decreases pull twice as deep


_PROFILES: MappingProxyType[BehaviorClass, _BehaviorProfile] = MappingProxyType(
    {
        BehaviorClass.KNIT: _BehaviorProfile(sign=1.0, scale=1.0),
        BehaviorClass.PURL: _BehaviorProfile(sign=-1.0, scale=1.0),
        BehaviorClass.DECREASE: _BehaviorProfile(sign=1.0, scale=2.0),
        BehaviorClass.INCREASE: _BehaviorProfile(sign=1.0, scale=1.0),
        BehaviorClass.CABLE: _BehaviorProfile(sign=1.0, scale=1.0),
    }
)


@dataclass(frozen=True)
class CurveShape:
    """Resolved shape parameters for one stitch curve."""

    depth_factor: float
    depth_offset: float
    height: float = STITCH_HEIGHT
    width: float = STITCH_WIDTH


def resolve_behavior(base: BaseStitchTypeInfo, hold: HoldDirection) -> BehaviorClass:
    """Knit strands worked through a cable needle take the CABLE profile."""
    if hold != HoldDirection.NONE and base.behavior == BehaviorClass.KNIT:
        return BehaviorClass.CABLE
    return base.behavior


def curve_shape(behavior: BehaviorClass, hold: HoldDirection, yarn_width: float) -> CurveShape:
    """Return depth parameters for *behavior* under cable *hold*."""
    profile = _PROFILES[behavior]
    factor = HOLD_DEPTH_FACTORS.get(hold, BASE_DEPTH_FACTOR)
    offset = BASE_DEPTH_OFFSET * yarn_width
    return CurveShape(
        depth_factor=profile.sign * profile.scale * factor,
        depth_offset=profile.sign * profile.scale * offset,
    )


def stitch_curve(
    consumed_column: float,
    produced_column: float,
    yarn_width: float,
    shape: CurveShape,
    stitch_res: int = DEFAULT_STITCH_RES,
) -> np.ndarray:
    """
    Sample one stitch loop as a ``(stitch_res, 3)`` float64 array.

    The loop starts at ``2·consumed_column + yarn_width`` (each column spans two
    natural units) and is sheared by ``produced_column − consumed_column``, more
    strongly toward the top of the loop.
    """
    if stitch_res < 2:
        raise ValueError(f"stitch_res must be >= 2, got {stitch_res}")
    theta = 2.0 * np.pi * np.arange(stitch_res, dtype=np.float64) / stitch_res

    x = (theta + shape.width * np.sin(2.0 * theta)) / np.pi
    y = shape.height * np.cos(theta + np.pi)
    z = shape.depth_factor * np.cos(2.0 * theta) - shape.depth_offset * yarn_width

    loop_x_start = 2.0 * consumed_column + yarn_width
    loop_x_offset = float(produced_column) - float(consumed_column)
    x = x + loop_x_start
    x = x + loop_x_offset * (1.0 + yarn_width) + loop_x_offset * y

    return np.column_stack((x, y, z))


def _base_of(stitch: AtomicStitch | Stitch) -> BaseStitchTypeInfo:
    if isinstance(stitch, AtomicStitch):
        return stitch.base
    bases = stitch.info.base_stitches
    if len(bases) != 1 or (bases[0].loops_consumed, bases[0].loops_produced) != (1, 1):
        raise UnsupportedArityError(
            f"{stitch.stitch_type.value} is a composite stitch; "
            f"decompose it into atomic stitches before generating curves"
        )
    return bases[0]


def curve_for(
    stitch: AtomicStitch | Stitch,
    consumed_loops: Sequence[Loop],
    produced_loops: Sequence[Loop],
    yarn_width: float,
    hold: HoldDirection | None = None,
    stitch_res: int = DEFAULT_STITCH_RES,
    gauge: float = GAUGE,
) -> np.ndarray:
    """
    Return the centerline for one atomic stitch.

    Parameters
    ----------
    stitch:
        The atomic stitch (or a plain one-to-one Stitch) being drawn.
    consumed_loops, produced_loops:
        The single loop taken from the previous row and the single loop left
        on the needle; their ``end_index`` values are the curve's columns.
    yarn_width:
        Tube radius; must satisfy ``0 < yarn_width <= gauge / 6``.
    hold:
        Cable hold state; defaults to the atomic stitch's own.

    Raises
    ------
    UnsupportedArityError
        If the stitch does not turn exactly one loop into one loop.
    InvalidWidthError
        If *yarn_width* is out of bounds for *gauge*.
    """
    if len(consumed_loops) != 1 or len(produced_loops) != 1:
        raise UnsupportedArityError(
            f"curves need exactly one consumed and one produced loop, "
            f"got {len(consumed_loops)} consumed and {len(produced_loops)} produced"
        )
    base = _base_of(stitch)
    check_yarn_width(yarn_width, gauge)
    if hold is None:
        hold = stitch.hold if isinstance(stitch, AtomicStitch) else HoldDirection.NONE

    shape = curve_shape(resolve_behavior(base, hold), hold, yarn_width)
    return stitch_curve(
        consumed_loops[0].end_index,
        produced_loops[0].end_index,
        yarn_width,
        shape,
        stitch_res,
    )
