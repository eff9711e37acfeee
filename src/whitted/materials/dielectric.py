"""Dielectric (glass) material implementation.

Transparent surfaces model a single fixed dielectric (index 1.5) against air
(index 1.0). There is no Fresnel weighting: a ray either refracts or, when
Snell's law has no solution, reflects.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Entering (dot(direction, N) < 0): eta = 1.0 / 1.5
    - Leaving (dot(direction, N) >= 0): eta = 1.5 / 1.0
    - Total internal reflection when the refracted vector is degenerate

The functions here handle a single boundary crossing. The tracer chains an
entry crossing with an exit crossing on the same primitive when that
primitive is convex and closed.

Example:
    >>> # Within a Taichi kernel:
    >>> # origin, direction, reflected = refract_entry(point, normal, ray_dir, eps)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import face_against, is_degenerate, reflect, refract

# Type alias for 3D vectors
vec3 = tm.vec3

# Refractive indices
AIR_IOR = 1.0
GLASS_IOR = 1.5


@ti.func
def refraction_ratio(incident_direction: vec3, normal: vec3) -> ti.f32:
    """Choose eta = n_incident / n_transmitted from the side the ray is on.

    Args:
        incident_direction: The incoming ray direction.
        normal: The geometric (outward) normal at the boundary.

    Returns:
        AIR_IOR / GLASS_IOR when entering, GLASS_IOR / AIR_IOR otherwise.
    """
    eta = GLASS_IOR / AIR_IOR
    if tm.dot(incident_direction, normal) < 0.0:
        eta = AIR_IOR / GLASS_IOR
    return eta


@ti.func
def refract_entry(
    hit_point: vec3,
    normal: vec3,
    incident_direction: vec3,
    epsilon: ti.f32,
):
    """Cross a dielectric boundary at the first hit.

    Args:
        hit_point: The intersection point on the surface.
        normal: The geometric normal at the hit (outward for spheres).
        incident_direction: The incoming ray direction.
        epsilon: Origin bias along the new direction.

    Returns:
        A tuple of (origin, direction, reflected) where direction is
        normalized and reflected is 1 when total internal reflection
        replaced the refraction.
    """
    eta = refraction_ratio(incident_direction, normal)
    n = -normal
    if tm.dot(incident_direction, normal) < 0.0:
        n = normal

    refract_dir = refract(tm.normalize(incident_direction), n, eta)

    origin = vec3(0.0, 0.0, 0.0)
    direction = vec3(0.0, 0.0, 0.0)
    reflected = 0

    if is_degenerate(refract_dir):
        reflect_dir = reflect(incident_direction, n)
        origin = hit_point + reflect_dir * epsilon
        direction = tm.normalize(reflect_dir)
        reflected = 1
    else:
        origin = hit_point + refract_dir * epsilon
        direction = tm.normalize(refract_dir)

    return origin, direction, reflected


@ti.func
def refract_exit(
    exit_point: vec3,
    exit_normal: vec3,
    interior_direction: vec3,
    epsilon: ti.f32,
):
    """Leave a dielectric through its far boundary (glass to air).

    Args:
        exit_point: Where the interior ray meets the surface again.
        exit_normal: The geometric normal at the exit point.
        interior_direction: The normalized direction of the interior ray.
        epsilon: Origin bias along the outgoing direction.

    Returns:
        A tuple of (origin, direction) for the outgoing ray; direction is
        normalized. Falls back to an internal reflection when refraction is
        impossible.
    """
    n = face_against(exit_normal, interior_direction)

    out_dir = refract(interior_direction, n, GLASS_IOR / AIR_IOR)
    if is_degenerate(out_dir):
        out_dir = reflect(interior_direction, n)

    origin = exit_point + out_dir * epsilon
    return origin, tm.normalize(out_dir)
