"""
Preview resolution settings.

All types are frozen dataclasses with fail-fast validation in __post_init__.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

DEFAULT_STITCH_RES: int = 40
DEFAULT_RADIAL_RES: int = 8


@dataclass(frozen=True)
class PreviewSettings:
    """
    Sampling resolution for curve generation and tube sweeping.

    Attributes:
        stitch_res: Samples along each stitch centerline.
        radial_res: Points around each cross-section ring.
    """

    stitch_res: int = DEFAULT_STITCH_RES
    radial_res: int = DEFAULT_RADIAL_RES

    def __post_init__(self) -> None:
        if self.stitch_res < 2:
            raise ValueError(f"stitch_res must be >= 2, got {self.stitch_res}")
        if self.radial_res < 3:
            raise ValueError(f"radial_res must be >= 3, got {self.radial_res}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> PreviewSettings:
        """Build settings from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown preview settings: {', '.join(unknown)}")
        return cls(**{k: int(v) for k, v in values.items()})
