"""Unit tests for ray and vector utilities.

Tests cover:
- Ray construction and evaluation
- Mirror reflection
- Refraction (straight-through at normal incidence, bending, total internal
  reflection)
- Degenerate vector detection, normal orientation and color clamping
"""

import taichi as ti


def _read(v):
    return (float(v[0]), float(v[1]), float(v[2]))


class TestRay:
    """Tests for the Ray dataclass."""

    def test_ray_at(self):
        """Test evaluating a point along the ray."""
        from src.whitted.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        x, y, z = _read(result[None])
        assert abs(x - 1.0) < 1e-6
        assert abs(y - 2.0) < 1e-6
        assert abs(z - 0.5) < 1e-6

    def test_vector_helpers(self):
        """Test dot, cross and length helpers."""
        from src.whitted.core.ray import cross, dot, length, length_squared, vec3

        result_dot = ti.field(dtype=ti.f32, shape=())
        result_len = ti.field(dtype=ti.f32, shape=())
        result_len2 = ti.field(dtype=ti.f32, shape=())
        result_cross = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(3.0, 4.0, 0.0)
            result_dot[None] = dot(a, vec3(1.0, 1.0, 1.0))
            result_len[None] = length(a)
            result_len2[None] = length_squared(a)
            result_cross[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(result_dot[None] - 7.0) < 1e-6
        assert abs(result_len[None] - 5.0) < 1e-6
        assert abs(result_len2[None] - 25.0) < 1e-6
        assert _read(result_cross[None]) == (0.0, 0.0, 1.0)


class TestReflect:
    """Tests for mirror reflection."""

    def test_reflect_at_normal_incidence_reverses(self):
        """A ray hitting a surface head-on comes straight back."""
        from src.whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        x, y, z = _read(result[None])
        assert abs(x) < 1e-6
        assert abs(y) < 1e-6
        assert abs(z - 1.0) < 1e-6

    def test_reflect_at_45_degrees(self):
        """Test that the tangential component is preserved."""
        from src.whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        x, y, z = _read(result[None])
        assert abs(x - 1.0) < 1e-6
        assert abs(y - 1.0) < 1e-6
        assert abs(z) < 1e-6


class TestRefract:
    """Tests for Snell's-law refraction."""

    def test_normal_incidence_passes_straight(self):
        """At normal incidence the direction is unchanged for any eta."""
        from src.whitted.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.0 / 1.5)

        test_kernel()
        x, y, z = _read(result[None])
        assert abs(x) < 1e-6
        assert abs(y) < 1e-6
        assert abs(z + 1.0) < 1e-5

    def test_entering_glass_bends_toward_normal(self):
        """The refracted ray is closer to the normal than the incident one."""
        import math

        from src.whitted.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        s = math.sqrt(0.5)

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        x, y, _ = _read(result[None])
        # sin(theta_t) = sin(45) / 1.5
        assert abs(x - s / 1.5) < 1e-5
        assert y < -s

    def test_total_internal_reflection_returns_zero(self):
        """Past the critical angle no transmitted direction exists."""
        import math

        from src.whitted.core.ray import is_degenerate, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_degenerate = ti.field(dtype=ti.i32, shape=())
        c = math.cos(math.radians(80.0))
        s = math.sin(math.radians(80.0))

        @ti.kernel
        def test_kernel():
            r = refract(vec3(s, -c, 0.0), vec3(0.0, 1.0, 0.0), 1.5)
            result[None] = r
            result_degenerate[None] = is_degenerate(r)

        test_kernel()
        assert _read(result[None]) == (0.0, 0.0, 0.0)
        assert result_degenerate[None] == 1


class TestHelpers:
    """Tests for small helpers used by the tracer."""

    def test_is_degenerate(self):
        """Test the squared-length threshold."""
        from src.whitted.core.ray import is_degenerate, vec3

        result_small = ti.field(dtype=ti.i32, shape=())
        result_unit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result_small[None] = is_degenerate(vec3(1e-4, 0.0, 0.0))
            result_unit[None] = is_degenerate(vec3(1.0, 0.0, 0.0))

        test_kernel()
        assert result_small[None] == 1
        assert result_unit[None] == 0

    def test_face_against_flips_only_when_needed(self):
        """Test orienting a normal against a ray direction."""
        from src.whitted.core.ray import face_against, vec3

        result_kept = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_flipped = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            result_kept[None] = face_against(n, vec3(0.0, -1.0, 0.0))
            result_flipped[None] = face_against(n, vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert _read(result_kept[None]) == (0.0, 1.0, 0.0)
        assert _read(result_flipped[None]) == (0.0, -1.0, 0.0)

    def test_clamp_color(self):
        """Test per-channel clamping to [0, 1]."""
        from src.whitted.core.ray import clamp_color, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = clamp_color(vec3(-0.5, 0.25, 3.0))

        test_kernel()
        assert _read(result[None]) == (0.0, 0.25, 1.0)
