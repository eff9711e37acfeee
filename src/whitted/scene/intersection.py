"""Scene-level primitive storage and intersection testing.

Primitives are kept in one ordered table (a tagged variant): each entry has a
PrimitiveKind tag, a vector parameter (sphere center or plane normal), a
scalar parameter (sphere radius or plane offset) and a material id. The
table index is the primitive's identity; hit records carry it so the tracer
can exclude the shaded primitive from its own shadow test and re-intersect
a transparent primitive to find where a refracted ray leaves it.

The table is stored in Taichi fields for kernel access.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.intersection import (
    ...     SceneHitRecord, add_sphere, add_plane, closest_hit, clear_primitives
    ... )
    >>> clear_primitives()
    >>> add_sphere((0, 0, -1), 0.5, material_id=0)
    >>> add_plane((0, 1, 0), 1.0, material_id=1)
    >>> # Use closest_hit / is_shadowed within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.geometry.plane import (
    Plane,
    checker_color,
    hit_plane,
    make_plane_coefficients,
)
from src.whitted.geometry.primitive import PrimitiveKind
from src.whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss
from src.whitted.materials.material import get_material_diffuse

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Extends HitRecord with the identity of the primitive that was hit.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The geometric normal at the hit (not oriented to the ray).
        primitive_id: Index of the hit primitive in the table, -1 on a miss.
        material_id: Material id of the hit primitive, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    primitive_id: ti.i32
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Primitive storage: Structure of Arrays layout
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
# Sphere center or plane unit normal
primitive_vectors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
# Sphere radius or plane offset
primitive_scalars = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_material_ids = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_primitives() -> None:
    """Clear all primitives from the scene.

    Resets the primitive count to zero. The field data is overwritten when
    new primitives are added.
    """
    num_primitives[None] = 0


def _add_primitive(kind: PrimitiveKind, vector, scalar: float, material_id: int) -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    primitive_kinds[idx] = int(kind)
    primitive_vectors[idx] = vec3(vector[0], vector[1], vector[2])
    primitive_scalars[idx] = scalar
    primitive_material_ids[idx] = material_id
    num_primitives[None] = idx + 1
    return idx


def add_sphere(center, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere (x, y, z).
        radius: The radius of the sphere (must be positive).
        material_id: The material id to associate with this sphere.

    Returns:
        The primitive id of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    return _add_primitive(PrimitiveKind.SPHERE, center, radius, material_id)


def add_plane(normal, offset: float, material_id: int = 0) -> int:
    """Add an infinite plane dot(normal, p) + offset = 0 to the scene.

    The normal does not need to be unit length; the coefficients are
    normalized on insertion (see make_plane_coefficients).

    Args:
        normal: The plane normal (x, y, z).
        offset: The plane offset matching the given normal.
        material_id: The material id to associate with this plane.

    Returns:
        The primitive id of the added plane.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    unit_normal, unit_offset = make_plane_coefficients(
        (float(normal[0]), float(normal[1]), float(normal[2])), offset
    )
    return _add_primitive(PrimitiveKind.PLANE, unit_normal, unit_offset, material_id)


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


def get_primitive_kind(primitive_id: int) -> PrimitiveKind:
    """Get the kind of a primitive (Python side)."""
    if primitive_id < 0 or primitive_id >= num_primitives[None]:
        raise IndexError(f"Invalid primitive_id: {primitive_id}")
    return PrimitiveKind(int(primitive_kinds[primitive_id]))


def get_primitive_material_id(primitive_id: int) -> int:
    """Get the material id of a primitive (Python side)."""
    if primitive_id < 0 or primitive_id >= num_primitives[None]:
        raise IndexError(f"Invalid primitive_id: {primitive_id}")
    return int(primitive_material_ids[primitive_id])


def get_primitive_parameters(primitive_id: int) -> tuple[tuple[float, float, float], float]:
    """Get the stored (vector, scalar) parameters of a primitive.

    For spheres this is (center, radius); for planes (unit normal, offset).
    """
    if primitive_id < 0 or primitive_id >= num_primitives[None]:
        raise IndexError(f"Invalid primitive_id: {primitive_id}")
    v = primitive_vectors[primitive_id]
    return (float(v[0]), float(v[1]), float(v[2])), float(primitive_scalars[primitive_id])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        primitive_id=-1,
        material_id=-1,
    )


@ti.func
def _to_scene_hit_record(rec: HitRecord, primitive_id: ti.i32) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        primitive_id=primitive_id,
        material_id=primitive_material_ids[primitive_id],
    )


@ti.func
def intersect_primitive(
    primitive_id: ti.i32,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with one primitive, dispatching on its kind tag.

    Args:
        primitive_id: Index into the primitive table.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value for a valid hit.
        t_max: Maximum t value for a valid hit.

    Returns:
        The primitive's HitRecord, or a miss for unknown kinds.
    """
    rec = make_miss()
    kind = primitive_kinds[primitive_id]

    if kind == int(PrimitiveKind.SPHERE):
        sphere = Sphere(
            center=primitive_vectors[primitive_id],
            radius=primitive_scalars[primitive_id],
        )
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    elif kind == int(PrimitiveKind.PLANE):
        plane = Plane(
            normal=primitive_vectors[primitive_id],
            offset=primitive_scalars[primitive_id],
        )
        rec = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)

    return rec


@ti.func
def closest_hit(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the nearest primitive hit along a ray.

    Every primitive is tested against a shrinking [t_min, best_t] window,
    so later primitives only replace the current hit when they are at least
    as close.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if nothing was hit in [t_min, t_max].
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_primitives[None]):
        rec = intersect_primitive(i, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(rec, i)

    return result


@ti.func
def is_shadowed(
    origin: vec3,
    direction: vec3,
    max_dist: ti.f32,
    ignore_id: ti.i32,
    epsilon: ti.f32,
) -> ti.i32:
    """Test whether anything blocks the segment from a point toward a light.

    The shadow ray starts at origin + epsilon * direction and is tested over
    [epsilon, max_dist] against every primitive except ignore_id (the surface
    being shaded). Returns on the first blocker found, not the closest.

    Args:
        origin: The shaded surface point.
        direction: Unit vector toward the light.
        max_dist: Distance to the light (large for directional lights).
        ignore_id: Primitive id to skip, or -1 to test all.
        epsilon: Self-intersection bias.

    Returns:
        1 if the light is blocked, 0 otherwise.
    """
    shadow_origin = origin + direction * epsilon
    blocked = 0

    for i in range(num_primitives[None]):
        if blocked == 0 and i != ignore_id:
            rec = intersect_primitive(i, shadow_origin, direction, epsilon, max_dist)
            if rec.hit == 1:
                blocked = 1

    return blocked


@ti.func
def primitive_color_at(primitive_id: ti.i32, point: vec3) -> vec3:
    """Surface base color of a primitive at a point.

    Spheres return their material's diffuse color; planes apply the
    checkerboard pattern to it.
    """
    base = get_material_diffuse(primitive_material_ids[primitive_id])
    result = base
    if primitive_kinds[primitive_id] == int(PrimitiveKind.PLANE):
        result = checker_color(base, point)
    return result


@ti.func
def get_primitive_kind_func(primitive_id: ti.i32) -> ti.i32:
    """Kernel-side lookup of a primitive's kind tag."""
    return primitive_kinds[primitive_id]
