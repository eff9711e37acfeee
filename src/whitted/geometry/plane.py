"""Infinite plane primitive with ray-plane intersection and checkerboard.

A plane is stored in normalized implicit form:
    dot(normal, p) + offset = 0
with a unit-length normal. Planes are the only primitive with a non-constant
surface color: a procedural checkerboard evaluated directly on the world-space
x and y coordinates of the hit point.

The checkerboard reproduces the reference renderer exactly, including its
asymmetric cell index for negative coordinates:
    index(v) = floor(v / 0.5)          for v >= 0
    index(v) = floor((0.5 - v) / 0.5)  for v < 0
The two per-axis indices are summed; the fractional part of half the sum,
doubled, selects the darker cell when it exceeds 0.5. This does not tile
seamlessly across the axes but existing scenes depend on it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.plane import Plane, hit_plane
    >>> # Floor plane y = -1 (normal +y, offset 1)
    >>> plane = Plane(normal=ti.math.vec3(0, 1, 0), offset=1.0)
    >>> # Use hit_plane within a Taichi kernel
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# |dot(normal, direction)| below this is treated as a parallel ray
PARALLEL_EPSILON = 1e-6

# Checkerboard cell size in world units
CHECKER_SCALE = 0.5


@ti.dataclass
class Plane:
    """An infinite plane dot(normal, p) + offset = 0.

    Attributes:
        normal: Unit normal of the plane (vec3).
        offset: Signed offset of the normalized plane equation.
    """

    normal: vec3
    offset: ti.f32


def make_plane_coefficients(
    normal: tuple[float, float, float],
    offset: float,
) -> tuple[tuple[float, float, float], float]:
    """Normalize plane coefficients on the host.

    Dividing the offset by the normal's length keeps the plane equation
    unchanged. A zero-length normal is replaced by world up (0, 1, 0) and the
    offset is kept as given.

    Args:
        normal: The (possibly unnormalized) plane normal.
        offset: The plane offset matching the given normal.

    Returns:
        Tuple of (unit_normal, offset).
    """
    n = np.asarray(normal, dtype=np.float64)
    norm = float(np.linalg.norm(n))
    if norm == 0.0:
        return (0.0, 1.0, 0.0), float(offset)
    unit = n / norm
    return (float(unit[0]), float(unit[1]), float(unit[2])), float(offset) / norm


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Solves dot(normal, origin + t * direction) + offset = 0 for t:
        t = -(dot(normal, origin) + offset) / dot(normal, direction)

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.
        t_min: Minimum t value for a valid hit (inclusive).
        t_max: Maximum t value for a valid hit (inclusive).

    Returns:
        A HitRecord whose normal is the plane's fixed unit normal.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    # Parallel rays never hit
    if ti.abs(denom) >= PARALLEL_EPSILON:
        t = -(tm.dot(plane.normal, ray_origin) + plane.offset) / denom

        if t >= t_min and t <= t_max:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = plane.normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
    )


@ti.func
def _checker_index(v: ti.f32) -> ti.f32:
    """Per-axis checker cell index (asymmetric for negative coordinates)."""
    index = 0.0
    if v < 0.0:
        index = ti.floor((0.5 - v) / CHECKER_SCALE)
    else:
        index = ti.floor(v / CHECKER_SCALE)
    return index


@ti.func
def checker_color(base_color: vec3, point: vec3) -> vec3:
    """Evaluate the plane checkerboard at a world-space point.

    Args:
        base_color: The material's diffuse color.
        point: The hit point in world space.

    Returns:
        base_color for light cells, 0.5 * base_color for dark cells.
    """
    checker = _checker_index(point.x) + _checker_index(point.y)

    half = checker * 0.5
    parity = (half - ti.cast(half, ti.i32)) * 2.0

    result = base_color
    if parity > 0.5:
        result = 0.5 * base_color
    return result


@ti.func
def make_plane(normal: vec3, offset: ti.f32) -> Plane:
    """Create a plane from an already normalized normal and offset."""
    return Plane(normal=normal, offset=offset)
