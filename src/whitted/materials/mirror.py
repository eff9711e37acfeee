"""Perfect mirror (reflective) material.

A reflective surface contributes no local shading. Its entire visible color
is whatever the reflected ray sees:

    R = I - 2(I . N)N

with N oriented against the incoming ray. The reflected ray starts a small
epsilon along R from the hit point so it does not re-hit the mirror.

Example:
    >>> # Within a Taichi kernel:
    >>> # origin, direction = scatter_mirror(hit_point, normal, ray_dir, epsilon)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import face_against, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_mirror(
    hit_point: vec3,
    normal: vec3,
    incident_direction: vec3,
    epsilon: ti.f32,
):
    """Compute the reflection ray leaving a mirror surface.

    Args:
        hit_point: The intersection point on the mirror.
        normal: The geometric normal at the hit (any orientation).
        incident_direction: The incoming ray direction.
        epsilon: Origin bias along the reflected direction.

    Returns:
        A tuple of (origin, direction) for the reflected ray; direction is
        normalized.
    """
    n = face_against(normal, incident_direction)
    reflect_dir = reflect(incident_direction, n)
    origin = hit_point + reflect_dir * epsilon
    return origin, tm.normalize(reflect_dir)
