"""
Pattern assembler — public API.

Exposed names
-------------
PatternAssembler  -- runs the preview pipeline over a PatternSpec
MeshPayload       -- mesh of one atomic stitch
StitchFailure     -- one atomic stitch whose geometry failed
AssemblyResult    -- payloads, failures and the loop graph of one run
AssemblyError     -- raised by assemble() when any stitch failed
group_by_row      -- merge payload meshes per row
"""

from knitpreview.assembler.pipeline import (
    AssemblyError,
    AssemblyResult,
    MeshPayload,
    PatternAssembler,
    StitchFailure,
    group_by_row,
)

__all__ = [
    "AssemblyError",
    "AssemblyResult",
    "MeshPayload",
    "PatternAssembler",
    "StitchFailure",
    "group_by_row",
]
