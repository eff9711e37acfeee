"""Ray data structure and vector utilities for Whitted ray tracing.

This module provides the Ray dataclass and the small set of vector operations
the tracer needs: dot/cross products, normalization, mirror reflection and
Snell's-law refraction. All operations are Taichi functions so they can be
called from the per-pixel rendering kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Squared length below which a refracted direction is treated as missing
# (total internal reflection)
DEGENERATE_LENGTH_SQUARED = 1e-6


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length at construction; shading code normalizes before use.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length."""
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes R = I - 2(I . N)N. The normal should be unit length; the
    incident vector keeps its length in the result.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    Uses the vector form:
        k = 1 - eta^2 * (1 - (N . I)^2)
        T = eta * I - (eta * (N . I) + sqrt(k)) * N

    When k < 0 the incidence angle is past the critical angle and no
    transmitted direction exists; the zero vector is returned so callers can
    detect total internal reflection with is_degenerate().

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal, oriented against the incident vector.
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector, or the zero vector on total internal
        reflection.
    """
    n_dot_i = tm.dot(normal, incident)
    k = 1.0 - eta * eta * (1.0 - n_dot_i * n_dot_i)
    result = vec3(0.0, 0.0, 0.0)
    if k >= 0.0:
        result = eta * incident - (eta * n_dot_i + ti.sqrt(k)) * normal
    return result


@ti.func
def is_degenerate(v: vec3) -> ti.i32:
    """Check whether a direction is too short to be used.

    Returns:
        1 if the squared length is below DEGENERATE_LENGTH_SQUARED, 0 otherwise.
    """
    result = 0
    if tm.dot(v, v) < DEGENERATE_LENGTH_SQUARED:
        result = 1
    return result


@ti.func
def face_against(normal: vec3, direction: vec3) -> vec3:
    """Flip a normal so that it opposes the given ray direction.

    Guarantees dot(result, direction) <= 0.
    """
    result = normal
    if tm.dot(direction, normal) > 0.0:
        result = -normal
    return result


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Clamp each color channel to [0, 1]."""
    return tm.clamp(color, 0.0, 1.0)
