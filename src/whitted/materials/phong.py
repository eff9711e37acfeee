"""Phong local illumination terms.

For a light with intensity I seen along the unit vector L from a surface
point with unit normal N (oriented against the viewing ray):

    diffuse  = base_color * I * max(dot(N, L), 0)
    specular = specular_color * I * max(dot(V, reflect(-L, N)), 0)^shininess

where V points from the surface toward the camera eye. The tracer sums these
over the visible lights, adds material.ambient * scene.ambient and clamps.

Example:
    >>> # Within a Taichi kernel:
    >>> # color += phong_diffuse(base, intensity, normal, to_light)
    >>> # color += phong_specular(spec, intensity, view_dir, normal, to_light, 32.0)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def lambert_factor(normal: vec3, to_light: vec3) -> ti.f32:
    """Cosine between the normal and the light vector, clamped at zero."""
    return tm.max(tm.dot(normal, to_light), 0.0)


@ti.func
def phong_diffuse(
    base_color: vec3,
    intensity: vec3,
    normal: vec3,
    to_light: vec3,
) -> vec3:
    """Lambertian diffuse contribution of one light.

    Args:
        base_color: Surface color at the hit point (checkerboard aware).
        intensity: Light intensity (RGB).
        normal: Unit surface normal facing the viewer.
        to_light: Unit vector from the surface toward the light.

    Returns:
        The diffuse radiance (RGB).
    """
    return base_color * intensity * lambert_factor(normal, to_light)


@ti.func
def phong_specular(
    specular_color: vec3,
    intensity: vec3,
    view_dir: vec3,
    normal: vec3,
    to_light: vec3,
    shininess: ti.f32,
) -> vec3:
    """Phong specular highlight contribution of one light.

    Args:
        specular_color: Material specular reflectance (RGB).
        intensity: Light intensity (RGB).
        view_dir: Unit vector from the surface toward the camera eye.
        normal: Unit surface normal facing the viewer.
        to_light: Unit vector from the surface toward the light.
        shininess: Phong exponent.

    Returns:
        The specular radiance (RGB).
    """
    reflect_dir = reflect(-to_light, normal)
    spec = tm.max(tm.dot(view_dir, reflect_dir), 0.0) ** shininess
    return specular_color * intensity * spec
