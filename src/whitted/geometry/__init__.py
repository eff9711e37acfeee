"""Geometry module for shape primitives.

This module provides the implicit primitives the tracer supports:

Components:
    sphere: Sphere primitive, shared HitRecord, ray-sphere intersection
    plane: Infinite plane, ray-plane intersection, checkerboard pattern
    primitive: PrimitiveKind tags and the convex-closed capability query

All intersection routines are implemented as Taichi functions (@ti.func).
Ray-object intersection follows the pattern:
    record = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)
and only reports hits with t in [t_min, t_max], preferring the smallest t.
"""

from .plane import (
    CHECKER_SCALE,
    PARALLEL_EPSILON,
    Plane,
    checker_color,
    hit_plane,
    make_plane,
    make_plane_coefficients,
)
from .primitive import PrimitiveKind, is_convex_closed
from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss",
    "Plane",
    "hit_plane",
    "make_plane",
    "make_plane_coefficients",
    "checker_color",
    "CHECKER_SCALE",
    "PARALLEL_EPSILON",
    "PrimitiveKind",
    "is_convex_closed",
]
