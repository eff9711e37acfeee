"""Scene module for scene storage, loading and ray-scene queries.

Components:
    intersection: Ordered primitive table with closest-hit and shadow queries
    lights: Directional and spot light table plus the ambient level
    loader: Reader for the text scene description format
    manager: SceneManager, which uploads scenes into the Taichi fields

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for primitives and lights
    - Primitive ids equal their declaration order
"""

from .intersection import (
    MAX_PRIMITIVES,
    SceneHitRecord,
    add_plane,
    add_sphere,
    clear_primitives,
    closest_hit,
    get_primitive_count,
    get_primitive_kind,
    get_primitive_material_id,
    get_primitive_parameters,
    intersect_primitive,
    is_shadowed,
    primitive_color_at,
)
from .lights import (
    MAX_LIGHTS,
    Light,
    add_light,
    clear_lights,
    get_ambient,
    get_light,
    get_light_count,
    set_ambient,
)
from .loader import PrimitiveRecord, SceneDescription, load_scene_file, parse_scene
from .manager import PrimitiveInfo, SceneManager

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "MAX_PRIMITIVES",
    "add_sphere",
    "add_plane",
    "clear_primitives",
    "get_primitive_count",
    "get_primitive_kind",
    "get_primitive_material_id",
    "get_primitive_parameters",
    "intersect_primitive",
    "closest_hit",
    "is_shadowed",
    "primitive_color_at",
    # Lights module
    "Light",
    "MAX_LIGHTS",
    "add_light",
    "clear_lights",
    "get_light",
    "get_light_count",
    "set_ambient",
    "get_ambient",
    # Loader module
    "SceneDescription",
    "PrimitiveRecord",
    "parse_scene",
    "load_scene_file",
    # Manager module
    "SceneManager",
    "PrimitiveInfo",
]
