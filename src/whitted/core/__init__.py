"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities (reflect, refract, clamp)
    integrator: Whitted-style tracer (shading, recursive reflect/refract
        dispatch) and the render target buffers
    renderer: WhittedRenderer, a thin object wrapper around the integrator

Rendering is deterministic: one primary ray per pixel, local Phong
illumination at opaque surfaces, and one recursive ray per mirror or
dielectric hit until the configured maximum depth is exceeded.

All per-ray computation runs inside Taichi kernels.
"""

from .ray import (
    DEGENERATE_LENGTH_SQUARED,
    Ray,
    clamp_color,
    cross,
    dot,
    face_against,
    is_degenerate,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.whitted.core.integrator or src.whitted.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "is_degenerate",
    "face_against",
    "clamp_color",
    "DEGENERATE_LENGTH_SQUARED",
]
