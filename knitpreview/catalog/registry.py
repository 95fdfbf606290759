"""
Stitch catalog: loads the stitch lookup tables from YAML at startup, validates
cross-references, and exposes a read-only query API.

The catalog is a module-level instance; call get_catalog() to obtain it, or
construct StitchCatalog directly and pass it to the graph builder and the
assembler. All tables are loaded and validated once at import time. Nothing
writes to the catalog after startup.

──────────────────────────────────────────────────────────────────────────────
Lenient lookup contract
──────────────────────────────────────────────────────────────────────────────
info_for() never fails. A tag may be a StitchType, the string value of one
("KNIT2TOG"), or a chart abbreviation ("k2tog", case-insensitive). Anything
else resolves to plain KNIT and emits UnknownStitchWarning so chart authoring
mistakes stay visible without aborting a preview.
──────────────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import warnings
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from .types import (
    BaseStitchKind,
    BaseStitchTypeInfo,
    BehaviorClass,
    HoldDirection,
    ShiftDirection,
    StitchType,
    StitchTypeInfo,
)

_DATA_DIR = Path(__file__).parent / "data"


class UnknownStitchWarning(UserWarning):
    """Emitted when a chart tag is not in the catalog and KNIT is substituted."""


class StitchCatalog:
    """
    Read-only registry of stitch topology metadata.

    All public dict attributes are wrapped in MappingProxyType after loading
    and are immutable for the lifetime of the catalog instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_catalog() for the module instance.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotations only; actual assignment happens in _load_*
        self.base_stitches: MappingProxyType[BaseStitchKind, BaseStitchTypeInfo]
        self.stitch_types: MappingProxyType[StitchType, StitchTypeInfo]
        self.abbreviations: MappingProxyType[str, StitchType]

        self._errors: list[str] = []
        self._load_all()
        self._validate_cross_references()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Stitch catalog data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse stitch catalog data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        self._load_base_stitches()
        self._load_stitch_types()

    def _load_base_stitches(self) -> None:
        data = self._load_yaml("base_stitches.yaml")
        result: dict[BaseStitchKind, BaseStitchTypeInfo] = {}
        for entry in data["entries"]:
            kind = BaseStitchKind(entry["id"])
            result[kind] = BaseStitchTypeInfo(
                kind=kind,
                loops_consumed=entry["loops_consumed"],
                loops_produced=entry["loops_produced"],
                behavior=BehaviorClass(entry["behavior"]),
                shift_direction=ShiftDirection(entry.get("shift_direction", "NONE")),
                description=entry.get("description", "").strip(),
            )
        self.base_stitches = MappingProxyType(result)

    def _load_stitch_types(self) -> None:
        data = self._load_yaml("stitch_types.yaml")
        result: dict[StitchType, StitchTypeInfo] = {}
        abbreviations: dict[str, StitchType] = {}
        for entry in data["entries"]:
            st = StitchType(entry["id"])
            bases: list[BaseStitchTypeInfo] = []
            for base_id in entry["base_stitches"]:
                kind = BaseStitchKind(base_id)
                base = self.base_stitches.get(kind)
                if base is None:
                    self._errors.append(
                        f"stitch_types entry {st.value}: base stitch {kind.value!r} "
                        f"is not defined in base_stitches"
                    )
                    continue
                bases.append(base)
            abbrevs = tuple(str(a).lower() for a in entry.get("abbreviations", []))
            for abbrev in abbrevs:
                if abbrev in abbreviations:
                    self._errors.append(
                        f"stitch_types entry {st.value}: abbreviation {abbrev!r} "
                        f"already used by {abbreviations[abbrev].value}"
                    )
                else:
                    abbreviations[abbrev] = st
            result[st] = StitchTypeInfo(
                stitch_type=st,
                loops_consumed=entry["loops_consumed"],
                loops_produced=entry["loops_produced"],
                base_stitches=tuple(bases),
                held=entry.get("held", 0),
                hold_direction=HoldDirection(entry.get("hold_direction", "NONE")),
                description=entry.get("description", "").strip(),
                abbreviations=abbrevs,
            )
        self.stitch_types = MappingProxyType(result)
        self.abbreviations = MappingProxyType(abbreviations)

    # ── Cross-reference validation ─────────────────────────────────────────────

    def _validate_cross_references(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if any
        table entry references an undefined kind or violates a structural
        invariant.
        """
        errors = self._errors
        self._check_completeness(errors)
        self._check_loop_counts(errors)
        self._check_cables(errors)
        if errors:
            raise ValueError(
                "Stitch catalog cross-reference validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_completeness(self, errors: list[str]) -> None:
        """Every enum value must have exactly one table entry."""
        for kind in BaseStitchKind:
            if kind not in self.base_stitches:
                errors.append(f"base stitch {kind.value!r} has no entry in base_stitches")
        for st in StitchType:
            if st not in self.stitch_types:
                errors.append(f"stitch type {st.value!r} has no entry in stitch_types")

    def _check_loop_counts(self, errors: list[str]) -> None:
        """Base stitch counts must sum to the composite's declared counts."""
        for st, info in self.stitch_types.items():
            prefix = f"stitch_types entry {st.value}"
            if info.loops_consumed < 0 or info.loops_produced < 0:
                errors.append(f"{prefix}: loop counts must be >= 0")
                continue
            if not info.base_stitches:
                errors.append(f"{prefix}: no base stitches")
                continue
            consumed = sum(b.loops_consumed for b in info.base_stitches)
            produced = sum(b.loops_produced for b in info.base_stitches)
            if consumed != info.loops_consumed:
                errors.append(
                    f"{prefix}: base stitches consume {consumed} loops, "
                    f"declared loops_consumed is {info.loops_consumed}"
                )
            if produced != info.loops_produced:
                errors.append(
                    f"{prefix}: base stitches produce {produced} loops, "
                    f"declared loops_produced is {info.loops_produced}"
                )
            first = info.base_stitches[0]
            if first.reuses_previous_loop:
                errors.append(
                    f"{prefix}: first base stitch {first.kind.value} has no loop to work into"
                )

    def _check_cables(self, errors: list[str]) -> None:
        """held and hold_direction must agree, and held loops must exist."""
        for st, info in self.stitch_types.items():
            prefix = f"stitch_types entry {st.value}"
            if info.held < 0:
                errors.append(f"{prefix}: held must be >= 0, got {info.held}")
            elif info.held > 0 and info.hold_direction == HoldDirection.NONE:
                errors.append(f"{prefix}: held is {info.held} but hold_direction is NONE")
            elif info.held == 0 and info.hold_direction != HoldDirection.NONE:
                errors.append(
                    f"{prefix}: hold_direction is {info.hold_direction.value} but held is 0"
                )
            if info.held > 0:
                if info.loops_consumed != info.loops_produced:
                    errors.append(f"{prefix}: cable stitches must produce what they consume")
                if info.held >= info.loops_consumed:
                    errors.append(
                        f"{prefix}: held ({info.held}) must be less than "
                        f"loops_consumed ({info.loops_consumed})"
                    )
                if any(
                    (b.loops_consumed, b.loops_produced) != (1, 1) for b in info.base_stitches
                ):
                    errors.append(f"{prefix}: cable base stitches must be one-to-one")

    # ── Query API ──────────────────────────────────────────────────────────────

    def info_for(self, tag: object) -> StitchTypeInfo:
        """Return the StitchTypeInfo for *tag*, falling back to KNIT with a warning."""
        stitch_type = self.resolve(tag)
        if stitch_type is None:
            warnings.warn(
                f"Unknown stitch tag {tag!r}; rendering it as KNIT",
                UnknownStitchWarning,
                stacklevel=2,
            )
            stitch_type = StitchType.KNIT
        return self.stitch_types[stitch_type]

    def resolve(self, tag: object) -> StitchType | None:
        """Return the StitchType named by *tag*, or None if it is not recognized."""
        if isinstance(tag, StitchType):
            return tag
        if not isinstance(tag, str):
            return None
        key = tag.strip()
        try:
            return StitchType(key.upper())
        except ValueError:
            return self.abbreviations.get(key.lower())

    def base_info(self, kind: BaseStitchKind) -> BaseStitchTypeInfo:
        """Return the entry for an atomic stitch kind.

        Raises KeyError if the kind has no entry. The cross-reference
        validation guarantees all BaseStitchKind values have entries after
        construction.
        """
        try:
            return self.base_stitches[kind]
        except KeyError:
            raise KeyError(f"No base stitch entry for {kind!r}") from None


# ── Module-level instance ──────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# in concurrent contexts. The catalog is read-only after construction, so
# sharing it across threads is safe.

_catalog: StitchCatalog = StitchCatalog()


def get_catalog() -> StitchCatalog:
    """Return the module-level stitch catalog."""
    return _catalog
