"""
Runtime objects for the loop graph.

A Row owns its loops in an arena (``Row.loops``) ordered by needle position, so
a loop's ``end_index`` is also its slot in the arena. Stitches and loops refer
to each other by integer index only: a Stitch lists arena slots in the previous
row (consumed) and in its own row (produced); a Loop records the chart column
of the stitch that produced it and of the stitch that consumed it. Nothing in
the graph owns anything in another row.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from knitpreview.catalog.types import (
    BaseStitchTypeInfo,
    HoldDirection,
    StitchType,
    StitchTypeInfo,
)


@dataclass(eq=False)
class Loop:
    """
    One strand position on the needle.

    Attributes:
        row_index: Row that produced the loop (-1 for the cast-on row).
        start_index: Slot handed out by the row's running counter.
        end_index: Needle position once cable displacement is applied.
        yarn_width: Width of the yarn the loop is made of.
        produced_by: Chart column of the producing stitch; None for cast-on loops.
        hold: Side of the needle the loop was held on while its cable was worked.
        consumed_by: Chart column of the consuming stitch in the next row, if any.
    """

    row_index: int
    start_index: int
    end_index: int
    yarn_width: float
    produced_by: int | None = None
    hold: HoldDirection = HoldDirection.NONE
    consumed_by: int | None = None

    @property
    def held_in_front(self) -> bool:
        return self.hold == HoldDirection.FRONT

    @property
    def held_behind(self) -> bool:
        return self.hold == HoldDirection.BACK

    @property
    def displacement(self) -> int:
        """Columns the loop moved from its allocated slot (non-zero only in cables)."""
        return self.end_index - self.start_index


@dataclass(frozen=True)
class AtomicStitch:
    """
    A drawable one-to-one unit: one base stitch turning one loop into one loop.

    consumed_loop indexes the previous row's arena; produced_loop indexes the
    arena of the row the stitch belongs to.
    """

    base: BaseStitchTypeInfo
    stitch_type: StitchType
    row_index: int
    column: int
    sub_index: int
    consumed_loop: int
    produced_loop: int
    hold: HoldDirection = HoldDirection.NONE


@dataclass(frozen=True)
class Stitch:
    """One chart cell worked on the needle."""

    info: StitchTypeInfo
    row_index: int
    column: int
    consumed_loops: tuple[int, ...]
    produced_loops: tuple[int, ...]
    atomics: tuple[AtomicStitch, ...] = ()

    @property
    def stitch_type(self) -> StitchType:
        return self.info.stitch_type


@dataclass(eq=False)
class Row:
    """
    Stitches of one row plus the loops they leave on the needle.

    ``previous`` and ``next`` link neighbouring rows so consumed loop indices
    can be resolved positionally. Row 0's ``previous`` is the cast-on row.
    """

    index: int
    stitches: tuple[Stitch, ...] = ()
    loops: tuple[Loop, ...] = ()
    previous: Row | None = field(default=None, repr=False)
    next: Row | None = field(default=None, repr=False)

    @property
    def is_cast_on(self) -> bool:
        return self.index < 0

    @property
    def n_loops(self) -> int:
        return len(self.loops)

    def loop_indices(self) -> tuple[int, ...]:
        """End indices of the row's loops in needle order."""
        return tuple(loop.end_index for loop in self.loops)

    def consumed_loops_of(self, stitch: Stitch | AtomicStitch) -> tuple[Loop, ...]:
        """Resolve the loops *stitch* took from the previous row."""
        if self.previous is None:
            raise ValueError(f"row {self.index} has no previous row to consume from")
        if isinstance(stitch, AtomicStitch):
            return (self.previous.loops[stitch.consumed_loop],)
        return tuple(self.previous.loops[i] for i in stitch.consumed_loops)

    def produced_loops_of(self, stitch: Stitch | AtomicStitch) -> tuple[Loop, ...]:
        """Resolve the loops *stitch* left on this row's needle."""
        if isinstance(stitch, AtomicStitch):
            return (self.loops[stitch.produced_loop],)
        return tuple(self.loops[i] for i in stitch.produced_loops)

    def atomics(self) -> tuple[AtomicStitch, ...]:
        """All atomic stitches of the row, in chart column order."""
        return tuple(a for stitch in self.stitches for a in stitch.atomics)
