"""Unit tests for plane intersection and the checkerboard pattern.

Tests cover:
- Host-side plane coefficient normalization
- Ray-plane hits from either side
- Parallel rays never hitting
- Checkerboard cells, including the negative-coordinate branch
"""

import pytest
import taichi as ti


def _run_hit(origin, direction, normal, offset, t_min=1e-4, t_max=1e10):
    from src.whitted.core.ray import vec3
    from src.whitted.geometry.plane import Plane, hit_plane

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    hit_normal = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, n: vec3, off: ti.f32, lo: ti.f32, hi: ti.f32):
        plane = Plane(normal=n, offset=off)
        record = hit_plane(o, d, plane, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        hit_normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction), vec3(*normal), offset, t_min, t_max)
    n = hit_normal[None]
    return hit[None], float(t_val[None]), (float(n[0]), float(n[1]), float(n[2]))


def _checker(base, point):
    from src.whitted.core.ray import vec3
    from src.whitted.geometry.plane import checker_color

    result = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(b: vec3, p: vec3):
        result[None] = checker_color(b, p)

    test_kernel(vec3(*base), vec3(*point))
    r = result[None]
    return (float(r[0]), float(r[1]), float(r[2]))


class TestPlaneCoefficients:
    """Tests for make_plane_coefficients."""

    def test_normalizes_normal_and_offset(self):
        """Scaling the normal scales the offset by the same factor."""
        from src.whitted.geometry.plane import make_plane_coefficients

        normal, offset = make_plane_coefficients((2.0, 0.0, 0.0), 4.0)

        assert normal == pytest.approx((1.0, 0.0, 0.0))
        assert offset == pytest.approx(2.0)

    def test_zero_normal_becomes_up(self):
        """A zero normal is replaced by (0, 1, 0) and the offset kept."""
        from src.whitted.geometry.plane import make_plane_coefficients

        normal, offset = make_plane_coefficients((0.0, 0.0, 0.0), -3.0)

        assert normal == (0.0, 1.0, 0.0)
        assert offset == -3.0


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_from_above(self):
        """A ray pointing down hits the floor plane y = -1."""
        hit, t, normal = _run_hit((0, 0, 0), (0, -1, 0), (0, 1, 0), 1.0)

        assert hit == 1
        assert abs(t - 1.0) < 1e-6
        assert normal == (0.0, 1.0, 0.0)

    def test_hit_from_below_keeps_geometric_normal(self):
        """The returned normal is not flipped toward the ray."""
        hit, t, normal = _run_hit((0, -3, 0), (0, 1, 0), (0, 1, 0), 1.0)

        assert hit == 1
        assert abs(t - 2.0) < 1e-6
        assert normal == (0.0, 1.0, 0.0)

    def test_parallel_ray_never_hits(self):
        """A ray parallel to the plane misses, even when lying in it."""
        hit_above, _, _ = _run_hit((0, 0, 0), (1, 0, 0), (0, 1, 0), 1.0)
        hit_inside, _, _ = _run_hit((0, -1, 0), (0, 0, -1), (0, 1, 0), 1.0)

        assert hit_above == 0
        assert hit_inside == 0

    def test_plane_behind_ray_misses(self):
        """Negative t is rejected."""
        hit, _, _ = _run_hit((0, 0, 0), (0, 1, 0), (0, 1, 0), 1.0)
        assert hit == 0

    def test_hit_beyond_t_max_misses(self):
        """Hits past t_max are rejected."""
        hit, _, _ = _run_hit((0, 0, 0), (0, -1, 0), (0, 1, 0), 1.0, t_max=0.5)
        assert hit == 0


class TestChecker:
    """Tests for the checkerboard pattern."""

    def test_origin_cell_is_light(self):
        """Point (0.25, 0.25) is in cell sum 0, a light cell."""
        assert _checker((0.8, 0.6, 0.4), (0.25, 0.25, -5.0)) == pytest.approx((0.8, 0.6, 0.4))

    def test_neighbor_cell_is_dark(self):
        """Moving one cell along x halves the color."""
        assert _checker((0.8, 0.6, 0.4), (0.75, 0.25, 0.0)) == pytest.approx((0.4, 0.3, 0.2))

    def test_pattern_ignores_z(self):
        """Only x and y select the cell."""
        a = _checker((1.0, 1.0, 1.0), (0.75, 0.25, 0.0))
        b = _checker((1.0, 1.0, 1.0), (0.75, 0.25, 123.0))
        assert a == b

    def test_negative_coordinates_shift_cells(self):
        """For negative x the cell index is floor((0.5 - x) / 0.5)."""
        # x = -0.25 -> index 1 (dark); x = -0.75 -> index 2 (light)
        assert _checker((1.0, 1.0, 1.0), (-0.25, 0.25, 0.0)) == pytest.approx((0.5, 0.5, 0.5))
        assert _checker((1.0, 1.0, 1.0), (-0.75, 0.25, 0.0)) == pytest.approx((1.0, 1.0, 1.0))

    def test_negative_y(self):
        """The negative branch applies to y as well."""
        # y = -1 -> index 3, x = 0.25 -> index 0: odd sum, dark
        assert _checker((1.0, 1.0, 1.0), (0.25, -1.0, 0.0)) == pytest.approx((0.5, 0.5, 0.5))
