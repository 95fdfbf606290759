"""
Core type definitions for the stitch catalog.

Enums are the canonical vocabulary; dataclasses are the registry entries.
Entry types (BaseStitchTypeInfo, StitchTypeInfo) are loaded from the YAML
lookup tables and are frozen after startup; nothing writes to them at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ── Enums ──────────────────────────────────────────────────────────────────────


class StitchType(str, Enum):
    """Chart-level stitch instructions, one per chart cell."""

    NO_STITCH = "NO_STITCH"
    KNIT = "KNIT"
    PURL = "PURL"
    SSK = "SSK"
    KNIT2TOG = "KNIT2TOG"
    KNIT3TOG = "KNIT3TOG"
    M1 = "M1"
    YARN_OVER = "YARN_OVER"
    K1_TBL_K1 = "K1_TBL_K1"
    CABLE_KNIT_2 = "CABLE_KNIT_2"
    CABLE_KNIT_4 = "CABLE_KNIT_4"
    CABLE_1_OVER_1_RIGHT = "CABLE_1_OVER_1_RIGHT"
    CABLE_1_OVER_1_LEFT = "CABLE_1_OVER_1_LEFT"
    CABLE_1_OVER_2_RIGHT = "CABLE_1_OVER_2_RIGHT"
    CABLE_1_OVER_2_LEFT = "CABLE_1_OVER_2_LEFT"
    CABLE_2_OVER_2_RIGHT = "CABLE_2_OVER_2_RIGHT"
    CABLE_2_OVER_2_LEFT = "CABLE_2_OVER_2_LEFT"


class BaseStitchKind(str, Enum):
    """Atomic operations that composite stitches are built from."""

    NONE = "NONE"
    KNIT = "KNIT"
    PURL = "PURL"
    KNIT_BACK_LOOP = "KNIT_BACK_LOOP"  # worked again into the loop just consumed
    KNIT_SAME_LOOP = "KNIT_SAME_LOOP"  # worked again into the loop just consumed
    KNIT2TOG = "KNIT2TOG"
    SSK = "SSK"
    JOIN_PREVIOUS = "JOIN_PREVIOUS"  # next loop folded into the previous base's loop
    M1 = "M1"
    YARN_OVER = "YARN_OVER"


class HoldDirection(str, Enum):
    """Where held cable loops sit relative to the working needle."""

    NONE = "NONE"
    FRONT = "FRONT"
    BACK = "BACK"

    def opposite(self) -> HoldDirection:
        """Return the other side of the needle; NONE stays NONE."""
        if self is HoldDirection.FRONT:
            return HoldDirection.BACK
        if self is HoldDirection.BACK:
            return HoldDirection.FRONT
        return HoldDirection.NONE


class ShiftDirection(str, Enum):
    """Lean of a decrease: which consumed loop ends up on top."""

    NONE = "NONE"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class BehaviorClass(str, Enum):
    """Curve-shape family selected for an atomic stitch."""

    KNIT = "KNIT"
    PURL = "PURL"
    DECREASE = "DECREASE"
    INCREASE = "INCREASE"
    CABLE = "CABLE"


# ── Registry entry types (frozen, loaded from YAML) ───────────────────────────


@dataclass(frozen=True)
class BaseStitchTypeInfo:
    kind: BaseStitchKind
    loops_consumed: int
    loops_produced: int
    behavior: BehaviorClass
    shift_direction: ShiftDirection = ShiftDirection.NONE
    description: str = ""

    def __post_init__(self) -> None:
        for name in ("loops_consumed", "loops_produced"):
            value = getattr(self, name)
            if value not in (0, 1, 2):
                raise ValueError(f"{name} must be 0, 1 or 2 for base stitches, got {value}")

    @property
    def reuses_previous_loop(self) -> bool:
        """True for bases worked into the loop the preceding base consumed."""
        return self.kind in (BaseStitchKind.KNIT_BACK_LOOP, BaseStitchKind.KNIT_SAME_LOOP)


@dataclass(frozen=True)
class StitchTypeInfo:
    stitch_type: StitchType
    loops_consumed: int
    loops_produced: int
    base_stitches: tuple[BaseStitchTypeInfo, ...]
    held: int = 0
    hold_direction: HoldDirection = HoldDirection.NONE
    description: str = ""
    abbreviations: tuple[str, ...] = ()

    @property
    def is_cable(self) -> bool:
        return self.held > 0
