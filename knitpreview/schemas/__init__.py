"""schemas — frozen input dataclasses."""

from knitpreview.schemas.pattern import PatternSpec, StitchTag
from knitpreview.schemas.settings import PreviewSettings

__all__ = ["PatternSpec", "PreviewSettings", "StitchTag"]
