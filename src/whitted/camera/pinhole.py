"""Pinhole camera model for primary ray generation.

The camera is described by an eye position, a forward direction, an up hint
and a rectangular screen placed `screen_distance` in front of the eye. The
camera builds an orthonormal basis from these:

- forward: normalized view direction
- right: normalize(forward x up)
- up: normalize(right x forward), the corrected up vector

One ray is traced through the center of every pixel; there is no jitter.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import CameraParams, setup_camera, get_ray
    >>> setup_camera(CameraParams(eye=(0.0, 0.0, 3.0)))
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 100, 100)  # Ray through bottom-left pixel
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class CameraParams:
    """Configuration for a pinhole camera.

    Attributes:
        eye: Camera position in world space (x, y, z).
        up: Up hint; corrected to be orthogonal to forward.
        forward: View direction; need not be unit length.
        screen_distance: Distance from the eye to the screen center.
        screen_width: Width of the screen in world units.
        screen_height: Height of the screen in world units.
    """

    eye: tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    forward: tuple[float, float, float] = (0.0, 0.0, -1.0)
    screen_distance: float = 1.0
    screen_width: float = 2.0
    screen_height: float = 2.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())

_screen_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_screen_size = ti.Vector.field(2, dtype=ti.f32, shape=())


def _unit(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v
    return v / norm


def setup_camera(camera: CameraParams) -> None:
    """Initialize camera state from configuration.

    Computes the camera basis and screen center with NumPy and writes them
    to Taichi fields. Must be called before rendering.

    Args:
        camera: Camera configuration.
    """
    eye = np.array(camera.eye, dtype=np.float64)
    forward = _unit(np.array(camera.forward, dtype=np.float64))
    up_hint = np.array(camera.up, dtype=np.float64)

    right = _unit(np.cross(forward, up_hint))
    up = _unit(np.cross(right, forward))

    center = eye + forward * camera.screen_distance

    _camera_origin[None] = eye.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_forward[None] = forward.tolist()
    _screen_center[None] = center.tolist()
    _screen_size[None] = [camera.screen_width, camera.screen_height]


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Pixel (0, 0) is the bottom-left corner of the image.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the eye with a normalized direction.
    """
    size = _screen_size[None]
    px = ((ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32) - 0.5) * size[0]
    py = ((ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32) - 0.5) * size[1]

    origin = _camera_origin[None]
    target = _screen_center[None] + _camera_right[None] * px + _camera_up[None] * py
    direction = tm.normalize(target - origin)

    return make_ray(origin, direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position (the eye) in world space."""
    return _camera_origin[None]


@ti.func
def get_camera_basis():
    """Get the camera's orthonormal basis vectors.

    Returns:
        A tuple (right, up, forward).
    """
    return _camera_right[None], _camera_up[None], _camera_forward[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, right, up, forward, screen_center and
        screen_size.
    """

    def _triple(v) -> tuple[float, float, float]:
        return (float(v[0]), float(v[1]), float(v[2]))

    size = _screen_size[None]
    return {
        "origin": _triple(_camera_origin[None]),
        "right": _triple(_camera_right[None]),
        "up": _triple(_camera_up[None]),
        "forward": _triple(_camera_forward[None]),
        "screen_center": _triple(_screen_center[None]),
        "screen_size": (float(size[0]), float(size[1])),
    }
