"""
Pattern schema: the stitch-type matrix plus yarn scalars.

Rows are ordered bottom (cast-on side) to top; each row is an ordered sequence
of stitch tags in chart column order. Tags are resolved through the stitch
catalog later, so StitchType members, their string values and chart
abbreviations are all accepted here.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from knitpreview.catalog.types import StitchType
from knitpreview.utilities.gauge import GAUGE, check_yarn_width

StitchTag = StitchType | str


@dataclass(frozen=True)
class PatternSpec:
    """
    A knitting chart to preview.

    Attributes:
        rows: Stitch tags per row. Nested lists are promoted to tuples.
        yarn_width: Radius of the yarn tube, in natural units.
        gauge: Horizontal natural units per stitch column.
    """

    rows: tuple[tuple[StitchTag, ...], ...]
    yarn_width: float = 0.1
    gauge: float = GAUGE

    def __post_init__(self) -> None:
        # Accept nested lists at construction sites and promote to tuples.
        if isinstance(self.rows, (str, bytes)) or not isinstance(self.rows, Sequence):
            raise TypeError(f"rows must be a sequence of rows, got {type(self.rows).__name__}")
        rows = []
        for index, row in enumerate(self.rows):
            if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
                raise TypeError(
                    f"row {index} must be a sequence of stitch tags, got {type(row).__name__}"
                )
            rows.append(tuple(row))
        object.__setattr__(self, "rows", tuple(rows))
        check_yarn_width(self.yarn_width, self.gauge)

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def stitches_per_row(self) -> int:
        """Number of chart cells in the widest row."""
        return max((len(row) for row in self.rows), default=0)

    @classmethod
    def from_rows(
        cls, rows: Sequence[Sequence[StitchTag]], yarn_width: float = 0.1, gauge: float = GAUGE
    ) -> PatternSpec:
        return cls(rows=tuple(tuple(r) for r in rows), yarn_width=yarn_width, gauge=gauge)
