"""
Loop graph — public API.

Exposed names
-------------
build_rows              -- build the ordered rows of a stitch-type matrix
LoopGraph               -- catalog-bound wrapper around build_rows
verify_rows             -- collect structural invariant violations
TopologyUnderflowError  -- a stitch asked for more loops than were on the needle
Loop, Stitch, AtomicStitch, Row -- graph runtime objects
"""

from knitpreview.graph.builder import (
    CAST_ON_ROW_INDEX,
    LoopGraph,
    TopologyUnderflowError,
    build_rows,
    verify_rows,
)
from knitpreview.graph.types import AtomicStitch, Loop, Row, Stitch

__all__ = [
    "CAST_ON_ROW_INDEX",
    "AtomicStitch",
    "Loop",
    "LoopGraph",
    "Row",
    "Stitch",
    "TopologyUnderflowError",
    "build_rows",
    "verify_rows",
]
