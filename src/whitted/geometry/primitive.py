"""Primitive kind tags shared by the scene table and the tracer."""

from enum import IntEnum

import taichi as ti


class PrimitiveKind(IntEnum):
    """Tag selecting the intersection routine for a primitive table entry."""

    SPHERE = 0
    PLANE = 1


@ti.func
def is_convex_closed(kind: ti.i32) -> ti.i32:
    """Whether a ray entering the primitive is guaranteed to exit it again.

    Refraction uses this to decide whether to search for an exit point on
    the same primitive. Only spheres qualify; planes are open surfaces.
    """
    result = 0
    if kind == int(PrimitiveKind.SPHERE):
        result = 1
    return result
