"""
Stitch geometry — public API.

Exposed names
-------------
curve_for              -- centerline of one atomic stitch
stitch_curve           -- centerline from raw columns and a CurveShape
curve_shape            -- depth parameters for a behavior and hold state
resolve_behavior       -- behavior class a base stitch is drawn with
sweep                  -- tube mesh along a centerline
merge_buffers          -- concatenate mesh buffers with index offsets
MeshBuffers            -- float32 vertices plus uint32 triangle indices
UnsupportedArityError  -- curve requested for a non one-to-one stitch
"""

from knitpreview.geometry.curve import (
    BASE_DEPTH_FACTOR,
    BASE_DEPTH_OFFSET,
    HOLD_DEPTH_FACTORS,
    STITCH_HEIGHT,
    STITCH_WIDTH,
    CurveShape,
    UnsupportedArityError,
    curve_for,
    curve_shape,
    resolve_behavior,
    stitch_curve,
)
from knitpreview.geometry.mesher import REFERENCE_AXIS, MeshBuffers, merge_buffers, sweep

__all__ = [
    "BASE_DEPTH_FACTOR",
    "BASE_DEPTH_OFFSET",
    "HOLD_DEPTH_FACTORS",
    "REFERENCE_AXIS",
    "STITCH_HEIGHT",
    "STITCH_WIDTH",
    "CurveShape",
    "MeshBuffers",
    "UnsupportedArityError",
    "curve_for",
    "curve_shape",
    "merge_buffers",
    "resolve_behavior",
    "stitch_curve",
    "sweep",
]
