"""
knitpreview — 3D tube-mesh previews of knitting charts.

Pipeline: PatternSpec → LoopGraph → CurveGenerator → CrossSectionMesher → MeshPayload.
"""

from knitpreview.api.preview import preview_chart, preview_pattern
from knitpreview.assembler import (
    AssemblyError,
    AssemblyResult,
    MeshPayload,
    PatternAssembler,
    StitchFailure,
    group_by_row,
)
from knitpreview.catalog import StitchCatalog, StitchType, UnknownStitchWarning, get_catalog
from knitpreview.geometry import MeshBuffers, UnsupportedArityError
from knitpreview.graph import TopologyUnderflowError
from knitpreview.schemas import PatternSpec, PreviewSettings
from knitpreview.utilities import InvalidWidthError

__all__ = [
    "AssemblyError",
    "AssemblyResult",
    "InvalidWidthError",
    "MeshBuffers",
    "MeshPayload",
    "PatternAssembler",
    "PatternSpec",
    "PreviewSettings",
    "StitchCatalog",
    "StitchFailure",
    "StitchType",
    "TopologyUnderflowError",
    "UnknownStitchWarning",
    "UnsupportedArityError",
    "get_catalog",
    "group_by_row",
    "preview_chart",
    "preview_pattern",
]
