"""
Tests for the tube mesher.

Covers:
  - Buffer sizes, dtypes and index bounds
  - Ring orientation along the tangent, including the antiparallel case
  - The final ring stays in the y-z plane
  - Row offset
  - Triangle winding
  - merge_buffers index offsets
"""

import numpy as np
import pytest

from knitpreview.catalog import BehaviorClass, HoldDirection
from knitpreview.geometry import (
    MeshBuffers,
    curve_shape,
    merge_buffers,
    stitch_curve,
    sweep,
)


@pytest.fixture(scope="module")
def knit_curve():
    shape = curve_shape(BehaviorClass.KNIT, HoldDirection.NONE, 0.1)
    return stitch_curve(0, 0, 0.1, shape, stitch_res=40)


def _ring(mesh, j, radial_resolution):
    return mesh.vertices[j * radial_resolution : (j + 1) * radial_resolution].astype(np.float64)


# ── Buffer sizes ───────────────────────────────────────────────────────────────


class TestBufferSizes:
    def test_plain_knit_sizes(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        assert mesh.vertices.shape == (320, 3)
        assert mesh.triangles.shape == (1872,)
        assert mesh.n_vertices == 320
        assert mesh.n_triangles == 624

    def test_dtypes(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        assert mesh.vertices.dtype == np.float32
        assert mesh.triangles.dtype == np.uint32

    @pytest.mark.parametrize("radial_resolution", [3, 8, 16])
    def test_indices_in_bounds(self, knit_curve, radial_resolution):
        mesh = sweep(knit_curve, 0.1, radial_resolution)
        assert mesh.triangles.max() < len(knit_curve) * radial_resolution
        assert mesh.triangles.size == (len(knit_curve) - 1) * radial_resolution * 6

    def test_all_finite(self, knit_curve):
        assert np.all(np.isfinite(sweep(knit_curve, 0.1, 8).vertices))

    def test_single_point_curve_has_no_triangles(self):
        mesh = sweep(np.zeros((1, 3)), 0.1, 6)
        assert mesh.n_vertices == 6
        assert mesh.n_triangles == 0


# ── Ring orientation ───────────────────────────────────────────────────────────


class TestRings:
    def test_ring_radius(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        for j in range(len(knit_curve)):
            distances = np.linalg.norm(_ring(mesh, j, 8) - knit_curve[j], axis=1)
            assert np.allclose(distances, 0.1, atol=1e-5)

    def test_ring_normal_to_tangent(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        for j in range(len(knit_curve) - 1):
            tangent = knit_curve[j + 1] - knit_curve[j]
            tangent /= np.linalg.norm(tangent)
            offsets = _ring(mesh, j, 8) - knit_curve[j]
            assert np.allclose(offsets @ tangent, 0.0, atol=1e-5)

    def test_last_ring_in_yz_plane(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        last = _ring(mesh, len(knit_curve) - 1, 8)
        assert np.allclose(last[:, 0], knit_curve[-1, 0], atol=1e-5)

    def test_tangent_along_y(self):
        curve = np.array([[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 2.0, 0.0]])
        mesh = sweep(curve, 0.1, 8)
        assert np.allclose(_ring(mesh, 0, 8)[:, 1], 0.0, atol=1e-6)

    def test_antiparallel_tangent(self):
        curve = np.array([[0.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        mesh = sweep(curve, 0.1, 8)
        first = _ring(mesh, 0, 8)
        assert np.all(np.isfinite(first))
        assert np.allclose(first[:, 0], 0.0, atol=1e-6)
        assert np.allclose(np.linalg.norm(first, axis=1), 0.1, atol=1e-6)

    def test_repeated_sample_falls_back_to_axis(self):
        curve = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        mesh = sweep(curve, 0.1, 4)
        assert np.allclose(_ring(mesh, 0, 4)[:, 0], 0.0, atol=1e-6)


# ── Placement and winding ──────────────────────────────────────────────────────


class TestPlacement:
    def test_row_offset(self, knit_curve):
        base = sweep(knit_curve, 0.1, 8, row_index=0)
        lifted = sweep(knit_curve, 0.1, 8, row_index=3)
        assert np.allclose(lifted.vertices[:, 1] - base.vertices[:, 1], 3 * (2 - 0.3), atol=1e-5)
        assert np.array_equal(lifted.vertices[:, [0, 2]], base.vertices[:, [0, 2]])
        assert np.array_equal(lifted.triangles, base.triangles)

    def test_winding(self):
        curve = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        mesh = sweep(curve, 0.1, 4)
        assert mesh.triangles[:6].tolist() == [1, 4, 0, 5, 4, 1]
        # Last quad of the ring wraps around to its first vertex.
        assert mesh.triangles[-6:].tolist() == [0, 7, 3, 4, 7, 0]


# ── Errors ─────────────────────────────────────────────────────────────────────


class TestErrors:
    def test_empty_curve(self):
        with pytest.raises(ValueError, match="empty"):
            sweep(np.zeros((0, 3)), 0.1, 8)

    def test_radial_resolution_too_small(self, knit_curve):
        with pytest.raises(ValueError, match="radial_resolution"):
            sweep(knit_curve, 0.1, 2)

    def test_non_positive_width(self, knit_curve):
        with pytest.raises(ValueError, match="yarn_width"):
            sweep(knit_curve, 0.0, 8)

    def test_bad_curve_shape(self):
        with pytest.raises(ValueError, match="shape"):
            sweep(np.zeros((4, 2)), 0.1, 8)

    def test_mesh_buffers_validate_shapes(self):
        with pytest.raises(ValueError, match="vertices"):
            MeshBuffers(vertices=np.zeros((3, 2)), triangles=np.zeros(0, dtype=np.uint32))
        with pytest.raises(ValueError, match="triangles"):
            MeshBuffers(vertices=np.zeros((3, 3)), triangles=np.zeros(4, dtype=np.uint32))


# ── Merging ────────────────────────────────────────────────────────────────────


class TestMerge:
    def test_offsets_indices(self):
        curve = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        a = sweep(curve, 0.1, 4)
        b = sweep(curve + 5.0, 0.1, 4)
        merged = merge_buffers([a, b])
        assert merged.n_vertices == 16
        assert merged.triangles.dtype == np.uint32
        assert np.array_equal(merged.triangles[: a.triangles.size], a.triangles)
        assert np.array_equal(merged.triangles[a.triangles.size :], b.triangles + 8)
        assert np.array_equal(merged.vertices[8:], b.vertices)

    def test_merge_empty(self):
        merged = merge_buffers([])
        assert merged.n_vertices == 0
        assert merged.n_triangles == 0

    def test_merge_single_is_identity(self, knit_curve):
        mesh = sweep(knit_curve, 0.1, 8)
        merged = merge_buffers([mesh])
        assert np.array_equal(merged.vertices, mesh.vertices)
        assert np.array_equal(merged.triangles, mesh.triangles)
