"""
Chart factory registry.

A simple mapping from chart name to a callable that returns a stitch-type
matrix (rows bottom first, cells in chart column order).

Usage
-----
Factories self-register at import time by calling ``register()``. Import the
``knitpreview.patterns`` package to ensure all built-in charts are registered::

    import knitpreview.patterns
    from knitpreview.patterns.registry import get, list_types

    chart = get("rib", n_rows=8, stitches_per_row=12, knit_count=1, purl_count=1)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from knitpreview.catalog.types import StitchType

Chart = tuple[tuple[StitchType, ...], ...]
ChartFactory = Callable[..., Chart]

_REGISTRY: dict[str, ChartFactory] = {}


def register(chart_name: str, factory: ChartFactory) -> None:
    """Register *factory* under *chart_name*.

    ``factory(n_rows, stitches_per_row, **params)`` must return a Chart.
    Registering an existing name replaces its factory.
    """
    _REGISTRY[chart_name] = factory


def get(chart_name: str, n_rows: int, stitches_per_row: int, **params: Any) -> Chart:
    """Return a fresh chart for *chart_name*.

    Raises
    ------
    KeyError
        If *chart_name* has not been registered.
    ValueError
        If the factory rejects the dimensions or parameters.
    """
    if chart_name not in _REGISTRY:
        raise KeyError(f"Unknown chart type: {chart_name!r}")
    return _REGISTRY[chart_name](n_rows, stitches_per_row, **params)


def list_types() -> list[str]:
    """Return a sorted list of all registered chart names."""
    return sorted(_REGISTRY.keys())
