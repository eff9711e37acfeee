"""Light sources and ambient level.

Two light types are supported, stored together in one table:

    directional  direction points FROM the light TOWARD the scene; the light
                 is infinitely far away and never attenuates
    spot         a point light at `position` emitting into a cone around
                 `direction`; points whose angle from the axis has a cosine
                 below `cutoff` receive nothing

Neither type attenuates with distance. The scene ambient level is stored
alongside the lights.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.lights import Light, add_light, set_ambient
    >>> set_ambient((0.1, 0.1, 0.1))
    >>> add_light(Light(direction=(0, -1, 0), intensity=(1, 1, 1)))
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class Light:
    """Host-side description of a light.

    Attributes:
        direction: Light direction; normalized when added to the scene.
        position: Light position (spot lights only).
        intensity: Light intensity (RGB).
        is_spot: True for a spot light, False for a directional light.
        cutoff: Cosine of the spot cone half-angle (spot lights only).
    """

    direction: tuple[float, float, float] = (0.0, 0.0, 0.0)
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    intensity: tuple[float, float, float] = (0.0, 0.0, 0.0)
    is_spot: bool = False
    cutoff: float = 0.0


def normalize_direction(direction) -> tuple[float, float, float]:
    """Normalize a direction on the host; a zero vector stays zero."""
    d = np.asarray(direction, dtype=np.float64)
    norm = float(np.linalg.norm(d))
    if norm == 0.0:
        return (0.0, 0.0, 0.0)
    d = d / norm
    return (float(d[0]), float(d[1]), float(d[2]))


# =============================================================================
# Light Field Storage
# =============================================================================

# Maximum number of lights in the scene
MAX_LIGHTS = 64

light_directions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_is_spot = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_cutoffs = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Scene ambient light level (RGB)
_ambient = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_lights() -> None:
    """Remove all lights and reset the ambient level to black."""
    num_lights[None] = 0
    _ambient[None] = [0.0, 0.0, 0.0]


def add_light(light: Light) -> int:
    """Add a light to the scene.

    Args:
        light: The light description. Its direction is normalized here.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_directions[idx] = vec3(*normalize_direction(light.direction))
    light_positions[idx] = vec3(*light.position)
    light_intensities[idx] = vec3(*light.intensity)
    light_is_spot[idx] = 1 if light.is_spot else 0
    light_cutoffs[idx] = light.cutoff
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


def get_light(idx: int) -> Light:
    """Read a light back from the fields (Python side)."""
    if idx < 0 or idx >= num_lights[None]:
        raise IndexError(f"Invalid light index: {idx}")

    def _triple(v) -> tuple[float, float, float]:
        return (float(v[0]), float(v[1]), float(v[2]))

    return Light(
        direction=_triple(light_directions[idx]),
        position=_triple(light_positions[idx]),
        intensity=_triple(light_intensities[idx]),
        is_spot=bool(light_is_spot[idx]),
        cutoff=float(light_cutoffs[idx]),
    )


def set_ambient(ambient: tuple[float, float, float]) -> None:
    """Set the scene ambient light level (RGB)."""
    _ambient[None] = [ambient[0], ambient[1], ambient[2]]


def get_ambient() -> tuple[float, float, float]:
    """Get the scene ambient light level (Python side)."""
    a = _ambient[None]
    return (float(a[0]), float(a[1]), float(a[2]))


@ti.func
def get_ambient_func() -> vec3:
    """Kernel-side access to the scene ambient level."""
    return _ambient[None]
