"""
PatternAssembler: wires the preview pipeline from a PatternSpec to mesh payloads.

Pipeline stages:

  1. check_yarn_width()   → InvalidWidthError on failure
  2. build_rows()         → loop graph; TopologyUnderflowError propagates
  3. curve_for()          → centerline per atomic stitch
  4. sweep()              → tube mesh per atomic stitch

Stages 3 and 4 run once per atomic stitch, row by row, column by column. A
stitch whose geometry fails is recorded as a StitchFailure and the rest of the
pattern is still meshed; ``collect`` returns everything it found, ``assemble``
raises AssemblyError if anything failed.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np

from knitpreview.catalog.registry import StitchCatalog, get_catalog
from knitpreview.catalog.types import BaseStitchKind, StitchType
from knitpreview.geometry.curve import UnsupportedArityError, curve_for
from knitpreview.geometry.mesher import MeshBuffers, merge_buffers, sweep
from knitpreview.graph.builder import build_rows
from knitpreview.graph.types import AtomicStitch, Row
from knitpreview.schemas.pattern import PatternSpec
from knitpreview.schemas.settings import PreviewSettings
from knitpreview.utilities.gauge import check_yarn_width

logger = logging.getLogger(__name__)

FailureType = Literal["arity", "geometry", "non_finite"]


@dataclass(frozen=True)
class MeshPayload:
    """Mesh of one atomic stitch, tagged for grouping by the caller."""

    row_index: int
    column: int
    sub_index: int
    stitch_type: StitchType
    base_kind: BaseStitchKind
    mesh: MeshBuffers


@dataclass(frozen=True)
class StitchFailure:
    """
    A single atomic stitch whose geometry could not be produced.

    Attributes:
        row_index: Row of the failing stitch.
        column: Chart column of the failing stitch.
        sub_index: Position of the atomic stitch within its stitch.
        message: Human-readable description of the failure.
        error_type: ``"arity"``, ``"geometry"`` or ``"non_finite"``.
    """

    row_index: int
    column: int
    sub_index: int
    message: str
    error_type: FailureType

    def __str__(self) -> str:
        return (
            f"row {self.row_index}, column {self.column}.{self.sub_index} "
            f"[{self.error_type}]: {self.message}"
        )


@dataclass(frozen=True)
class AssemblyResult:
    """
    Result of running the pipeline over a whole pattern.

    Attributes:
        passed: True if every atomic stitch produced a mesh.
        payloads: Meshes in row, column, sub-index order.
        failures: Every stitch that failed.
        rows: The loop graph the meshes were built from.
    """

    passed: bool
    payloads: tuple[MeshPayload, ...]
    failures: tuple[StitchFailure, ...]
    rows: tuple[Row, ...]


class AssemblyError(Exception):
    """Raised by ``assemble`` when at least one stitch failed.

    Attributes:
        failures: Every StitchFailure collected during the run.
    """

    def __init__(self, failures: Sequence[StitchFailure]) -> None:
        self.failures = tuple(failures)
        lines = "\n".join(f"  • {f}" for f in self.failures)
        super().__init__(f"{len(self.failures)} stitch(es) failed to mesh:\n{lines}")


class PatternAssembler:
    """
    Runs LoopGraph, CurveGenerator and CrossSectionMesher over a pattern.

    The assembler holds no per-run state; one instance can assemble any number
    of patterns.
    """

    def __init__(
        self,
        catalog: StitchCatalog | None = None,
        settings: PreviewSettings | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else get_catalog()
        self.settings = settings if settings is not None else PreviewSettings()

    def collect(self, pattern: PatternSpec) -> AssemblyResult:
        """Mesh every atomic stitch of *pattern*, collecting failures instead of raising.

        Raises
        ------
        InvalidWidthError
            If the pattern's yarn width is out of bounds for its gauge.
        TopologyUnderflowError
            If the chart asks for more loops than a row supplies.
        """
        check_yarn_width(pattern.yarn_width, pattern.gauge)
        rows = build_rows(pattern.rows, catalog=self.catalog, yarn_width=pattern.yarn_width)

        payloads: list[MeshPayload] = []
        failures: list[StitchFailure] = []
        for row in rows:
            n_before = len(payloads)
            for stitch in row.stitches:
                for atomic in stitch.atomics:
                    try:
                        payload = self._mesh_atomic(row, atomic, pattern)
                    except UnsupportedArityError as exc:
                        failures.append(_failure(atomic, str(exc), "arity"))
                        continue
                    except ValueError as exc:
                        failures.append(_failure(atomic, str(exc), "geometry"))
                        continue
                    if not np.all(np.isfinite(payload.mesh.vertices)):
                        failures.append(
                            _failure(atomic, "mesh contains non-finite vertices", "non_finite")
                        )
                        continue
                    payloads.append(payload)
            logger.debug("row %d: %d mesh payload(s)", row.index, len(payloads) - n_before)

        logger.info(
            "Assembled %d payload(s) from %d row(s), %d failure(s)",
            len(payloads),
            len(rows),
            len(failures),
        )
        return AssemblyResult(
            passed=not failures,
            payloads=tuple(payloads),
            failures=tuple(failures),
            rows=rows,
        )

    def assemble(self, pattern: PatternSpec) -> tuple[MeshPayload, ...]:
        """Mesh every atomic stitch of *pattern*, or raise AssemblyError listing every failure."""
        result = self.collect(pattern)
        if not result.passed:
            raise AssemblyError(result.failures)
        return result.payloads

    def _mesh_atomic(self, row: Row, atomic: AtomicStitch, pattern: PatternSpec) -> MeshPayload:
        curve = curve_for(
            atomic,
            row.consumed_loops_of(atomic),
            row.produced_loops_of(atomic),
            pattern.yarn_width,
            stitch_res=self.settings.stitch_res,
            gauge=pattern.gauge,
        )
        mesh = sweep(
            curve,
            pattern.yarn_width,
            radial_resolution=self.settings.radial_res,
            row_index=row.index,
        )
        return MeshPayload(
            row_index=atomic.row_index,
            column=atomic.column,
            sub_index=atomic.sub_index,
            stitch_type=atomic.stitch_type,
            base_kind=atomic.base.kind,
            mesh=mesh,
        )


def _failure(atomic: AtomicStitch, message: str, error_type: FailureType) -> StitchFailure:
    return StitchFailure(
        row_index=atomic.row_index,
        column=atomic.column,
        sub_index=atomic.sub_index,
        message=message,
        error_type=error_type,
    )


def group_by_row(payloads: Sequence[MeshPayload]) -> dict[int, MeshBuffers]:
    """Merge payload meshes into one MeshBuffers per row, keyed by row index."""
    by_row: dict[int, list[MeshBuffers]] = defaultdict(list)
    for payload in payloads:
        by_row[payload.row_index].append(payload.mesh)
    return {index: merge_buffers(meshes) for index, meshes in sorted(by_row.items())}
