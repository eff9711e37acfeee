"""Whitted ray tracing integrator.

This module implements the per-pixel rendering kernel: one primary ray per
pixel, traced recursively through mirror and glass surfaces until it reaches
an opaque surface (shaded with Phong illumination and hard shadows), leaves
the scene, or exceeds the maximum recursion depth.

Every non-leaf hit spawns exactly one secondary ray, so the recursion is a
chain rather than a tree. It is evaluated as a bounded loop with an explicit
depth counter, which keeps it inside a single Taichi function.

Trace rules for a ray at depth d:
    - d > max_depth: black
    - no hit in [epsilon, T_MAX]: background color
    - opaque hit: local Phong shading (leaf)
    - reflective hit: mirror ray at depth d + 1
    - transparent hit: refracted (or totally internally reflected) ray at
      depth d + 1, passing through convex closed primitives in one step

The maximum depth, self-intersection epsilon and background color are kept
in Taichi fields and set with configure_tracer(), so they can be changed
without recompiling the kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.integrator import (
    ...     TracerConfig, configure_tracer, setup_render_target, render_image
    ... )
    >>> configure_tracer(TracerConfig(max_depth=5))
    >>> setup_render_target(512, 512)
    >>> render_image()
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import get_camera_origin, get_ray
from src.whitted.core.ray import clamp_color, face_against, is_degenerate
from src.whitted.geometry.primitive import is_convex_closed
from src.whitted.materials.dielectric import refract_entry, refract_exit
from src.whitted.materials.material import (
    MaterialKind,
    get_material_ambient,
    get_material_kind,
    get_material_shininess,
    get_material_specular,
)
from src.whitted.materials.mirror import scatter_mirror
from src.whitted.materials.phong import phong_diffuse, phong_specular
from src.whitted.scene.intersection import (
    SceneHitRecord,
    closest_hit,
    get_primitive_kind_func,
    intersect_primitive,
    is_shadowed,
    primitive_color_at,
)
from src.whitted.scene.lights import (
    get_ambient_func,
    light_cutoffs,
    light_directions,
    light_intensities,
    light_is_spot,
    light_positions,
    num_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Upper end of the ray parameter range ("infinity")
T_MAX = 1e10

# Default recursion limit and self-intersection bias
DEFAULT_MAX_DEPTH = 5
DEFAULT_EPSILON = 1e-4


@dataclass
class TracerConfig:
    """Tracer settings.

    Attributes:
        max_depth: Largest recursion depth that is still traced. A ray at a
            greater depth contributes black.
        epsilon: Offset applied to secondary ray origins and used as t_min.
        background: Color returned for rays that leave the scene.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    epsilon: float = DEFAULT_EPSILON
    background: tuple[float, float, float] = (0.0, 0.0, 0.0)


_max_depth = ti.field(dtype=ti.i32, shape=())
_epsilon = ti.field(dtype=ti.f32, shape=())
_background = ti.Vector.field(3, dtype=ti.f32, shape=())


def configure_tracer(config: TracerConfig) -> None:
    """Store the tracer settings in the kernel-visible fields.

    Args:
        config: The settings to apply.

    Raises:
        ValueError: If epsilon is not positive or max_depth is negative.
    """
    if config.epsilon <= 0.0:
        raise ValueError(f"epsilon must be positive, got {config.epsilon}")
    if config.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {config.max_depth}")

    _max_depth[None] = config.max_depth
    _epsilon[None] = config.epsilon
    _background[None] = [config.background[0], config.background[1], config.background[2]]


def get_tracer_config() -> TracerConfig:
    """Read the current tracer settings back from the fields."""
    bg = _background[None]
    return TracerConfig(
        max_depth=int(_max_depth[None]),
        epsilon=float(_epsilon[None]),
        background=(float(bg[0]), float(bg[1]), float(bg[2])),
    )


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final pixel colors, indexed [i, j] with j = 0 the bottom row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_opaque(hit: SceneHitRecord, direction: vec3) -> vec3:
    """Local Phong illumination at an opaque hit.

    Starts from the material ambient term and adds, for every light that
    reaches the point, a Lambertian diffuse term on the surface base color
    and a Phong specular term. Lights contribute nothing when the point is
    behind a spot light's cone or when something blocks the way to them.

    Args:
        hit: The closest hit of the incoming ray.
        direction: The incoming ray direction.

    Returns:
        The shaded color, clamped to [0, 1].
    """
    epsilon = _epsilon[None]
    point = hit.point
    normal = face_against(hit.normal, direction)
    base_color = primitive_color_at(hit.primitive_id, point)

    material_id = hit.material_id
    specular = get_material_specular(material_id)
    shininess = get_material_shininess(material_id)

    color = get_material_ambient(material_id) * get_ambient_func()
    view_dir = tm.normalize(get_camera_origin() - point)

    for k in range(num_lights[None]):
        to_light = vec3(0.0, 0.0, 0.0)
        max_dist = T_MAX
        lit = 1

        if light_is_spot[k] == 1:
            offset = light_positions[k] - point
            dist = tm.length(offset)
            if dist <= 0.0:
                lit = 0
            else:
                to_light = offset / dist
                max_dist = dist
                # Outside the cone
                if tm.dot(light_directions[k], -to_light) < light_cutoffs[k]:
                    lit = 0
        else:
            to_light = -light_directions[k]
            if is_degenerate(to_light):
                lit = 0

        if lit == 1:
            if is_shadowed(point, to_light, max_dist - epsilon, hit.primitive_id, epsilon):
                lit = 0

        if lit == 1:
            intensity = light_intensities[k]
            color += phong_diffuse(base_color, intensity, normal, to_light)
            color += phong_specular(specular, intensity, view_dir, normal, to_light, shininess)

    return clamp_color(color)


@ti.func
def transmit(hit: SceneHitRecord, direction: vec3):
    """Continue a ray through a transparent surface.

    Refracts at the hit point. If the hit primitive is convex and closed,
    the refracted ray is followed to where it leaves that primitive and
    refracted again, so the returned ray is already back outside. Otherwise
    the refracted ray itself is returned. Total internal reflection at
    either boundary turns the refraction into a mirror reflection.

    Args:
        hit: The hit on the transparent primitive.
        direction: The incoming ray direction.

    Returns:
        A tuple (origin, direction) for the continuing ray.
    """
    epsilon = _epsilon[None]
    origin, new_direction, reflected = refract_entry(hit.point, hit.normal, direction, epsilon)

    if reflected == 0:
        if is_convex_closed(get_primitive_kind_func(hit.primitive_id)) == 1:
            exit_rec = intersect_primitive(hit.primitive_id, origin, new_direction, epsilon, T_MAX)
            if exit_rec.hit == 1:
                origin, new_direction = refract_exit(
                    exit_rec.point, exit_rec.normal, new_direction, epsilon
                )

    return origin, new_direction


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        The color (RGB) arriving along the ray.
    """
    max_depth = _max_depth[None]
    epsilon = _epsilon[None]

    origin = ray_origin
    direction = ray_direction
    current_depth = depth

    # Stays black when the depth limit is exceeded
    color = vec3(0.0, 0.0, 0.0)

    # Taichi doesn't support break in ti.func loops
    active = 1

    # One iteration per depth level plus one to detect the cutoff
    for _ in range(max_depth - depth + 2):
        if active == 1:
            if current_depth > max_depth:
                active = 0
            else:
                hit = closest_hit(origin, direction, epsilon, T_MAX)

                if hit.hit == 0:
                    color = _background[None]
                    active = 0
                else:
                    kind = get_material_kind(hit.material_id)

                    if kind == int(MaterialKind.REFLECTIVE):
                        origin, direction = scatter_mirror(
                            hit.point, hit.normal, direction, epsilon
                        )
                        current_depth += 1
                    elif kind == int(MaterialKind.TRANSPARENT):
                        origin, direction = transmit(hit, direction)
                        current_depth += 1
                    else:
                        color = shade_opaque(hit, direction)
                        active = 0

    return color


@ti.func
def _pixel_color(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    ray = get_ray(pixel_i, pixel_j, width, height)
    color = clamp_color(trace(ray.origin, ray.direction, 0))

    # Replace NaN (degenerate camera or light setup) with black
    for c in ti.static(range(3)):
        if tm.isnan(color[c]):
            color[c] = 0.0

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Render rows [row_start, row_end) of the image into the color buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = _pixel_color(i, j, width, height)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    # One serial task keeps the tracer loops from being parallelized
    ti.loop_config(serialize=True)
    for _ in range(1):
        color = _pixel_color(pixel_i, pixel_j, width, height)
    return color


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    ti.loop_config(serialize=True)
    for _ in range(1):
        color = trace(origin, direction, depth)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image() -> None:
    """Render every pixel of the image once.

    The result is deterministic: rendering again with the same scene
    produces the same buffer.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_rows(width, height, 0, height)


def render_row_range(row_start: int, row_end: int) -> None:
    """Render the rows [row_start, row_end) of the image.

    Rows are counted from the bottom of the image. Used for progress
    reporting on large images.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if row_start < 0 or row_end > height or row_start > row_end:
        raise ValueError(f"Invalid row range [{row_start}, {row_end}) for height {height}")
    if row_start == row_end:
        return
    _render_rows(width, height, row_start, row_end)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel and return its color without storing it.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace one ray through the current scene (Python side).

    Args:
        origin: Ray origin.
        direction: Ray direction (unit length, like camera rays).
        depth: Starting recursion depth.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_single_ray(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_normalized_image_numpy():
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32, values clamped
    to [0, 1] and the top row of the image first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (buffer row 0 is the bottom of the image)
    image = np.flipud(image)

    image = np.clip(image, 0.0, 1.0)

    return image.astype(np.float32)


def get_image_uint8():
    """Get the rendered image as 8-bit RGB (channel value truncated from c * 255)."""
    import numpy as np

    image = get_normalized_image_numpy()
    return (image * 255.0).astype(np.uint8)


def save_image(filepath: str) -> None:
    """Save the rendered image to a file.

    The format follows the file extension; no gamma correction is applied.

    Args:
        filepath: Path to save the image (e.g., "render.png").

    Raises:
        RuntimeError: If render target has not been set up.
        OSError: If the file cannot be written.
    """
    from PIL import Image as PILImage

    pil_image = PILImage.fromarray(get_image_uint8())
    pil_image.save(filepath)
