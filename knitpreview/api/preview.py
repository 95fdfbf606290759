"""
Public fabric preview API.

preview_pattern() takes a stitch-type matrix and returns one mesh payload per
atomic stitch. preview_chart() does the same for a chart from the built-in
chart library. Both wire the full pipeline: PatternSpec → PatternAssembler
(LoopGraph → CurveGenerator → CrossSectionMesher).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import knitpreview.patterns  # noqa: F401  (registers the built-in charts)
import knitpreview.patterns.registry as chart_registry
from knitpreview.assembler.pipeline import MeshPayload, PatternAssembler
from knitpreview.schemas.pattern import PatternSpec, StitchTag
from knitpreview.schemas.settings import DEFAULT_RADIAL_RES, DEFAULT_STITCH_RES, PreviewSettings
from knitpreview.utilities.gauge import GAUGE


def preview_pattern(
    rows: Sequence[Sequence[StitchTag]],
    yarn_width: float = 0.1,
    gauge: float = GAUGE,
    stitch_res: int = DEFAULT_STITCH_RES,
    radial_res: int = DEFAULT_RADIAL_RES,
) -> tuple[MeshPayload, ...]:
    """
    Build tube meshes for every atomic stitch of a chart.

    Parameters
    ----------
    rows:
        Stitch tags per row, bottom row first. Tags may be StitchType members,
        enum value strings or chart abbreviations such as ``"k2tog"``.
    yarn_width:
        Yarn radius; must satisfy ``0 < yarn_width <= gauge / 6``.
    gauge:
        Horizontal size of one stitch column.
    stitch_res:
        Samples along each stitch centerline.
    radial_res:
        Points around each tube cross-section.

    Returns
    -------
    tuple[MeshPayload, ...]
        Payloads in row, column, sub-index order.

    Raises
    ------
    InvalidWidthError
        If *yarn_width* is out of bounds.
    TopologyUnderflowError
        If a row asks for more loops than the previous row supplies.
    AssemblyError
        If any stitch fails to mesh.
    """
    pattern = PatternSpec(rows=rows, yarn_width=yarn_width, gauge=gauge)
    settings = PreviewSettings(stitch_res=stitch_res, radial_res=radial_res)
    return PatternAssembler(settings=settings).assemble(pattern)


def preview_chart(
    chart_name: str,
    n_rows: int,
    stitches_per_row: int,
    yarn_width: float = 0.1,
    **chart_params: Any,
) -> tuple[MeshPayload, ...]:
    """
    Build tube meshes for a chart from the built-in chart library.

    Raises
    ------
    KeyError
        If *chart_name* is not registered.
    """
    chart = chart_registry.get(chart_name, n_rows, stitches_per_row, **chart_params)
    return preview_pattern(chart, yarn_width=yarn_width)
