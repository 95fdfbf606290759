"""
Tube meshes swept along stitch centerlines.

A circle of radius ``yarn_width`` is laid in the y-z plane, rotated so its
normal follows the curve tangent, and stamped at every curve sample. Rings are
stitched together with two triangles per quad.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from knitpreview.schemas.settings import DEFAULT_RADIAL_RES
from knitpreview.utilities.gauge import row_height

REFERENCE_AXIS: np.ndarray = np.array([1.0, 0.0, 0.0])

_EPS = 1e-12
_HALF_TURN_Z = np.diag([-1.0, -1.0, 1.0])


@dataclass(frozen=True)
class MeshBuffers:
    """
    Vertex and triangle buffers ready for a renderer.

    Attributes:
        vertices: float32 array of shape (N, 3).
        triangles: flat uint32 array of vertex indices, three per triangle.
    """

    vertices: np.ndarray
    triangles: np.ndarray

    def __post_init__(self) -> None:
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise ValueError(f"vertices must have shape (N, 3), got {self.vertices.shape}")
        if self.triangles.ndim != 1 or self.triangles.size % 3 != 0:
            raise ValueError(
                f"triangles must be a flat array with a multiple of 3 entries, "
                f"got shape {self.triangles.shape}"
            )

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_triangles(self) -> int:
        return int(self.triangles.size // 3)

    @classmethod
    def empty(cls) -> MeshBuffers:
        return cls(
            vertices=np.zeros((0, 3), dtype=np.float32),
            triangles=np.zeros(0, dtype=np.uint32),
        )


def _tangents(curve: np.ndarray) -> np.ndarray:
    """Forward-difference unit tangents; the last sample and degenerate segments get +x."""
    tangents = np.tile(REFERENCE_AXIS, (len(curve), 1))
    if len(curve) < 2:
        return tangents
    diffs = curve[1:] - curve[:-1]
    norms = np.linalg.norm(diffs, axis=1)
    ok = norms > _EPS
    tangents[:-1][ok] = diffs[ok] / norms[ok, None]
    return tangents


def _rotations_from_axis(tangents: np.ndarray) -> np.ndarray:
    """
    Minimal rotations taking REFERENCE_AXIS onto each unit tangent.

    Rodrigues' formula R = I + K + K²/(1 + cos) with K the cross-product matrix
    of axis × tangent; a tangent opposite the axis gets a half-turn about z.
    """
    cos = tangents @ REFERENCE_AXIS
    v = np.cross(REFERENCE_AXIS, tangents)

    k = np.zeros((len(tangents), 3, 3))
    k[:, 0, 1] = -v[:, 2]
    k[:, 0, 2] = v[:, 1]
    k[:, 1, 0] = v[:, 2]
    k[:, 1, 2] = -v[:, 0]
    k[:, 2, 0] = -v[:, 1]
    k[:, 2, 1] = v[:, 0]

    antiparallel = cos <= -1.0 + _EPS
    scale = np.where(antiparallel, 0.0, 1.0 / np.where(antiparallel, 1.0, 1.0 + cos))
    rotations = np.eye(3) + k + (k @ k) * scale[:, None, None]
    rotations[antiparallel] = _HALF_TURN_Z
    return rotations


def _ring(yarn_width: float, radial_resolution: int) -> np.ndarray:
    angles = 2.0 * np.pi * np.arange(radial_resolution) / radial_resolution
    return np.column_stack(
        (
            np.zeros(radial_resolution),
            yarn_width * np.cos(angles),
            yarn_width * np.sin(angles),
        )
    )


def _triangles(n_rings: int, radial_resolution: int) -> np.ndarray:
    r = radial_resolution
    ring = np.arange(n_rings - 1)[:, None] * r
    i = np.arange(r)[None, :]
    idx = ring + i
    nxt = ring + (i + 1) % r
    quads = np.stack((nxt, idx + r, idx, nxt + r, idx + r, nxt), axis=-1)
    return quads.reshape(-1).astype(np.uint32)


def sweep(
    curve: np.ndarray,
    yarn_width: float,
    radial_resolution: int = DEFAULT_RADIAL_RES,
    row_index: int = 0,
) -> MeshBuffers:
    """
    Sweep a circular cross-section along *curve*.

    Parameters
    ----------
    curve:
        Centerline samples, shape (L, 3).
    yarn_width:
        Radius of the tube.
    radial_resolution:
        Points per ring (R).
    row_index:
        Row the curve belongs to; vertices are lifted by
        ``row_index · (2 − 3·yarn_width)``.

    Returns
    -------
    MeshBuffers
        L·R vertices (sample-major) and (L−1)·R·6 triangle indices.
    """
    points = np.asarray(curve, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"curve must have shape (L, 3), got {points.shape}")
    if len(points) == 0:
        raise ValueError("cannot sweep an empty curve")
    if radial_resolution < 3:
        raise ValueError(f"radial_resolution must be >= 3, got {radial_resolution}")
    if not yarn_width > 0:
        raise ValueError(f"yarn_width must be positive, got {yarn_width}")

    rotations = _rotations_from_axis(_tangents(points))
    circle = _ring(yarn_width, radial_resolution)
    rings = points[:, None, :] + np.einsum("lij,rj->lri", rotations, circle)
    vertices = rings.reshape(-1, 3)
    vertices[:, 1] += row_index * row_height(yarn_width)

    return MeshBuffers(
        vertices=vertices.astype(np.float32),
        triangles=_triangles(len(points), radial_resolution),
    )


def merge_buffers(buffers: Sequence[MeshBuffers]) -> MeshBuffers:
    """Concatenate *buffers* into one, offsetting each buffer's indices past the ones before it."""
    if not buffers:
        return MeshBuffers.empty()
    offsets = np.cumsum([0] + [b.n_vertices for b in buffers[:-1]])
    vertices = np.concatenate([b.vertices for b in buffers]).astype(np.float32)
    triangles = np.concatenate(
        [b.triangles.astype(np.int64) + int(offset) for b, offset in zip(buffers, offsets)]
    )
    return MeshBuffers(vertices=vertices, triangles=triangles.astype(np.uint32))
