from .registry import StitchCatalog, UnknownStitchWarning, get_catalog
from .types import (
    BaseStitchKind,
    BaseStitchTypeInfo,
    BehaviorClass,
    HoldDirection,
    ShiftDirection,
    StitchType,
    StitchTypeInfo,
)

__all__ = [
    # Enums
    "StitchType",
    "BaseStitchKind",
    "HoldDirection",
    "ShiftDirection",
    "BehaviorClass",
    # Catalog entry types (frozen, loaded from YAML)
    "BaseStitchTypeInfo",
    "StitchTypeInfo",
    # Catalog
    "StitchCatalog",
    "UnknownStitchWarning",
    "get_catalog",
]
