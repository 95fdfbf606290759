"""
Loop graph construction from a stitch-type matrix.

build_rows() works the chart row by row, the way it is knitted flat:

  1. Row 0 consumes from a synthetic cast-on row holding exactly as many loops
     as row 0 asks for.
  2. Within a row, stitches are worked in working order (chart column order on
     even rows, reversed on odd rows), and each stitch pops its consumed loops
     off the previous row's needle positionally in that same order.
  3. A running counter hands out one slot per produced loop. Slots are needle
     positions from the chart's left edge, so on odd rows the counter fills the
     needle from the right.
  4. Cables displace their produced loops: the ``held`` loops taken first are
     worked last and move ``n - held`` slots along the working direction; the
     loops worked straight away move back ``held`` slots.
  5. The row is finalized (loops sorted into the arena by needle position,
     stitches rewritten to arena indices) before the next row is built.

Asking for more loops than the previous row left on the needle raises
TopologyUnderflowError. Loops left over at the end of a row stay live.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from knitpreview.catalog.registry import StitchCatalog, get_catalog
from knitpreview.catalog.types import HoldDirection, ShiftDirection, StitchTypeInfo

from .types import AtomicStitch, Loop, Row, Stitch

logger = logging.getLogger(__name__)

CAST_ON_ROW_INDEX: int = -1


class TopologyUnderflowError(ValueError):
    """Raised when a stitch requests more loops than the previous row supplies."""

    def __init__(self, row_index: int, column: int, requested: int, available: int) -> None:
        super().__init__(
            f"row {row_index}, column {column}: stitch needs {requested} loop(s) "
            f"but only {available} remain on the needle"
        )
        self.row_index = row_index
        self.column = column
        self.requested = requested
        self.available = available


@dataclass
class _WorkedStitch:
    """A stitch between being worked and the row being finalized."""

    info: StitchTypeInfo
    column: int
    consumed: list[Loop]
    produced: list[Loop]


class LoopGraph:
    """Builds rows of loops and stitches against a stitch catalog."""

    def __init__(self, catalog: StitchCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else get_catalog()

    def build(
        self, stitch_type_matrix: Sequence[Sequence[object]], yarn_width: float = 0.1
    ) -> tuple[Row, ...]:
        return build_rows(stitch_type_matrix, catalog=self.catalog, yarn_width=yarn_width)


def build_rows(
    stitch_type_matrix: Sequence[Sequence[object]],
    catalog: StitchCatalog | None = None,
    yarn_width: float = 0.1,
) -> tuple[Row, ...]:
    """
    Build the ordered rows of a pattern.

    Parameters
    ----------
    stitch_type_matrix:
        Rows of stitch tags, bottom row first, each in chart column order.
    catalog:
        Stitch catalog used to resolve tags; defaults to the module catalog.
    yarn_width:
        Recorded on every loop.

    Returns
    -------
    tuple[Row, ...]
        One Row per matrix row. Row 0's ``previous`` is the cast-on row.

    Raises
    ------
    TopologyUnderflowError
        If any stitch needs more loops than the previous row left.
    """
    catalog = catalog if catalog is not None else get_catalog()
    infos_by_row = [[catalog.info_for(tag) for tag in row] for row in stitch_type_matrix]
    if not infos_by_row:
        return ()

    previous = _cast_on_row(sum(info.loops_consumed for info in infos_by_row[0]), yarn_width)
    rows: list[Row] = []
    for row_index, infos in enumerate(infos_by_row):
        row = _build_row(row_index, infos, previous, yarn_width)
        row.previous = previous
        previous.next = row
        rows.append(row)
        previous = row

    logger.debug(
        "Built loop graph: %d rows, widths %s", len(rows), [row.n_loops for row in rows]
    )
    return tuple(rows)


def _cast_on_row(n_loops: int, yarn_width: float) -> Row:
    loops = tuple(
        Loop(row_index=CAST_ON_ROW_INDEX, start_index=i, end_index=i, yarn_width=yarn_width)
        for i in range(n_loops)
    )
    return Row(index=CAST_ON_ROW_INDEX, loops=loops)


def _build_row(
    row_index: int, infos: Sequence[StitchTypeInfo], previous: Row, yarn_width: float
) -> Row:
    forward = row_index % 2 == 0
    width = sum(info.loops_produced for info in infos)
    columns = range(len(infos)) if forward else range(len(infos) - 1, -1, -1)
    needle = list(previous.loops) if forward else list(reversed(previous.loops))

    cursor = 0
    counter = 0
    worked: dict[int, _WorkedStitch] = {}
    for column in columns:
        info = infos[column]
        remaining = len(needle) - cursor
        if info.loops_consumed > remaining:
            raise TopologyUnderflowError(row_index, column, info.loops_consumed, remaining)
        consumed = needle[cursor : cursor + info.loops_consumed]
        cursor += info.loops_consumed

        slots = [
            counter + k if forward else width - 1 - (counter + k)
            for k in range(info.loops_produced)
        ]
        counter += info.loops_produced
        ends, holds = _displace(info, slots)

        produced = [
            Loop(
                row_index=row_index,
                start_index=slot,
                end_index=end,
                yarn_width=yarn_width,
                produced_by=column,
                hold=hold,
            )
            for slot, end, hold in zip(slots, ends, holds)
        ]
        for loop in consumed:
            loop.consumed_by = column
        worked[column] = _WorkedStitch(info, column, consumed, produced)

    if cursor < len(needle):
        logger.debug(
            "row %d leaves %d loop(s) of row %d unconsumed",
            row_index,
            len(needle) - cursor,
            previous.index,
        )

    # Finalize: arena in needle order, then stitches as arena indices.
    arena = sorted((loop for ws in worked.values() for loop in ws.produced), key=_needle_order)
    stitches = tuple(
        Stitch(
            info=ws.info,
            row_index=row_index,
            column=ws.column,
            consumed_loops=tuple(loop.end_index for loop in ws.consumed),
            produced_loops=tuple(loop.end_index for loop in ws.produced),
            atomics=_decompose(ws, row_index),
        )
        for ws in (worked[c] for c in range(len(infos)))
    )
    return Row(index=row_index, stitches=stitches, loops=tuple(arena))


def _needle_order(loop: Loop) -> int:
    return loop.end_index


def _displace(
    info: StitchTypeInfo, slots: list[int]
) -> tuple[list[int], list[HoldDirection]]:
    """Return (end indices, hold states) for a stitch's produced loops in working order."""
    n = len(slots)
    held = info.held
    if held == 0:
        return list(slots), [HoldDirection.NONE] * n
    ends: list[int] = []
    holds: list[HoldDirection] = []
    for i in range(n):
        if i < held:
            ends.append(slots[i + (n - held)])
            holds.append(info.hold_direction)
        else:
            ends.append(slots[i - held])
            holds.append(info.hold_direction.opposite())
    return ends, holds


def _primary_loop(taken: list[Loop], shift: ShiftDirection) -> Loop:
    """The consumed loop a decrease is drawn from: the one that ends up on top."""
    if shift == ShiftDirection.RIGHT:
        return min(taken, key=_needle_order)
    if shift == ShiftDirection.LEFT:
        return max(taken, key=_needle_order)
    return taken[0]


def _decompose(ws: _WorkedStitch, row_index: int) -> tuple[AtomicStitch, ...]:
    """Split a worked stitch into one-to-one atomic stitches, base by base."""
    atomics: list[AtomicStitch] = []
    c = 0
    p = 0
    last_source: Loop | None = None
    for base in ws.info.base_stitches:
        taken = ws.consumed[c : c + base.loops_consumed]
        made = ws.produced[p : p + base.loops_produced]
        c += base.loops_consumed
        p += base.loops_produced

        if len(taken) == 1:
            source: Loop | None = taken[0]
        elif len(taken) == 2:
            source = _primary_loop(taken, base.shift_direction)
        elif base.reuses_previous_loop:
            source = last_source
        else:
            # Yarn overs and empty cells have nothing to draw from.
            source = None

        if source is not None:
            for loop in made:
                atomics.append(
                    AtomicStitch(
                        base=base,
                        stitch_type=ws.info.stitch_type,
                        row_index=row_index,
                        column=ws.column,
                        sub_index=len(atomics),
                        consumed_loop=source.end_index,
                        produced_loop=loop.end_index,
                        hold=loop.hold,
                    )
                )
            last_source = source
    return tuple(atomics)


def verify_rows(rows: Sequence[Row]) -> list[str]:
    """
    Check structural invariants of built rows and return every problem found.

    An empty list means the graph is consistent: stitch loop counts match their
    catalog entries, each row's end indices are exactly 0..P-1, and every
    consumed loop records the stitch that consumed it.
    """
    errors: list[str] = []
    for row in rows:
        indices = row.loop_indices()
        if sorted(indices) != list(range(len(indices))):
            errors.append(f"row {row.index}: loop indices {indices} are not 0..{len(indices) - 1}")
        for stitch in row.stitches:
            prefix = f"row {row.index}, column {stitch.column}"
            if len(stitch.consumed_loops) != stitch.info.loops_consumed:
                errors.append(
                    f"{prefix}: consumed {len(stitch.consumed_loops)} loops, "
                    f"{stitch.stitch_type.value} declares {stitch.info.loops_consumed}"
                )
            if len(stitch.produced_loops) != stitch.info.loops_produced:
                errors.append(
                    f"{prefix}: produced {len(stitch.produced_loops)} loops, "
                    f"{stitch.stitch_type.value} declares {stitch.info.loops_produced}"
                )
            for loop in row.consumed_loops_of(stitch):
                if loop.consumed_by != stitch.column:
                    errors.append(
                        f"{prefix}: loop {loop.end_index} of row {loop.row_index} "
                        f"records consumer {loop.consumed_by}"
                    )
    return errors
