"""
Built-in charts.

  jersey       — every cell KNIT.
  rib          — ``knit_count`` knit columns then ``purl_count`` purl columns, repeated.
  cable-panel  — purl padding either side of ``cables_per_row`` cable blocks
                 separated by purls. A block crosses once every
                 ``cable_length + 1`` rows and is knit plain otherwise. The
                 panel width follows from the layout, not stitches_per_row.
  eyelet       — plain rows alternating with rows of (k2tog, yo) pairs; the
                 loop count is constant row to row.

Every chart's rows consume exactly what the previous row produces, so all of
them build without underflow.
"""

from __future__ import annotations

from knitpreview.catalog.types import StitchType
from knitpreview.patterns.registry import Chart, register

_CROSSING_CABLES: dict[int, StitchType] = {
    2: StitchType.CABLE_1_OVER_1_RIGHT,
    4: StitchType.CABLE_2_OVER_2_RIGHT,
}
_PLAIN_CABLES: dict[int, StitchType] = {
    2: StitchType.CABLE_KNIT_2,
    4: StitchType.CABLE_KNIT_4,
}


def _check_dimensions(n_rows: int, stitches_per_row: int) -> None:
    if n_rows < 1:
        raise ValueError(f"n_rows must be >= 1, got {n_rows}")
    if stitches_per_row < 1:
        raise ValueError(f"stitches_per_row must be >= 1, got {stitches_per_row}")


def jersey(n_rows: int, stitches_per_row: int) -> Chart:
    _check_dimensions(n_rows, stitches_per_row)
    row = (StitchType.KNIT,) * stitches_per_row
    return (row,) * n_rows


def rib(n_rows: int, stitches_per_row: int, knit_count: int = 2, purl_count: int = 2) -> Chart:
    _check_dimensions(n_rows, stitches_per_row)
    if knit_count < 1 or purl_count < 0:
        raise ValueError(
            f"rib needs knit_count >= 1 and purl_count >= 0, got {knit_count}/{purl_count}"
        )
    repeat = knit_count + purl_count
    row = tuple(
        StitchType.KNIT if i % repeat < knit_count else StitchType.PURL
        for i in range(stitches_per_row)
    )
    return (row,) * n_rows


def cable_panel(
    n_rows: int,
    stitches_per_row: int,
    padding: int = 2,
    cables_per_row: int = 2,
    block_size: int = 4,
    separation: int = 2,
    cable_length: int = 4,
) -> Chart:
    """Purl-framed cable blocks crossing every ``cable_length + 1`` rows."""
    _check_dimensions(n_rows, stitches_per_row)
    if block_size not in _CROSSING_CABLES:
        raise ValueError(f"block_size must be 2 or 4, got {block_size}")
    if cables_per_row < 1:
        raise ValueError(f"cables_per_row must be >= 1, got {cables_per_row}")
    if cable_length < 1:
        raise ValueError(f"cable_length must be >= 1, got {cable_length}")
    if padding < 0 or separation < 0:
        raise ValueError(
            f"padding and separation must be >= 0, got {padding} and {separation}"
        )

    def _row(block: StitchType) -> tuple[StitchType, ...]:
        cells: list[StitchType] = [StitchType.PURL] * padding
        for b in range(cables_per_row):
            if b:
                cells.extend([StitchType.PURL] * separation)
            cells.append(block)
        cells.extend([StitchType.PURL] * padding)
        return tuple(cells)

    crossing = _row(_CROSSING_CABLES[block_size])
    plain = _row(_PLAIN_CABLES[block_size])
    return tuple(
        crossing if r % (cable_length + 1) == cable_length else plain for r in range(n_rows)
    )


def eyelet(n_rows: int, stitches_per_row: int) -> Chart:
    _check_dimensions(n_rows, stitches_per_row)
    plain = (StitchType.KNIT,) * stitches_per_row
    lace: list[StitchType] = []
    for _ in range(stitches_per_row // 2):
        lace.extend([StitchType.KNIT2TOG, StitchType.YARN_OVER])
    if stitches_per_row % 2:
        lace.append(StitchType.KNIT)
    return tuple(plain if r % 2 == 0 else tuple(lace) for r in range(n_rows))


register("jersey", jersey)
register("rib", rib)
register("cable-panel", cable_panel)
register("eyelet", eyelet)
