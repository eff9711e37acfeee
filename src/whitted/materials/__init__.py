"""Materials module for Whitted shading.

Components:
    material: Material kinds, host-side Material description and the
        Taichi-field material registry
    phong: Lambertian diffuse and Phong specular terms for opaque surfaces
    mirror: Perfect mirror reflection for reflective surfaces
    dielectric: Glass/air refraction with total internal reflection fallback

Only opaque materials are shaded locally. Reflective and transparent
materials each spawn exactly one secondary ray per hit.

All per-hit computations are implemented as Taichi functions.
"""

from .dielectric import (
    AIR_IOR,
    GLASS_IOR,
    refract_entry,
    refract_exit,
    refraction_ratio,
)
from .material import (
    DEFAULT_SPECULAR,
    MAX_MATERIALS,
    Material,
    MaterialKind,
    add_material,
    clear_materials,
    get_material,
    get_material_ambient,
    get_material_count,
    get_material_diffuse,
    get_material_kind,
    get_material_shininess,
    get_material_specular,
    set_material,
)
from .mirror import scatter_mirror
from .phong import lambert_factor, phong_diffuse, phong_specular

__all__ = [
    # Registry
    "Material",
    "MaterialKind",
    "DEFAULT_SPECULAR",
    "MAX_MATERIALS",
    "add_material",
    "set_material",
    "get_material",
    "clear_materials",
    "get_material_count",
    "get_material_kind",
    "get_material_ambient",
    "get_material_diffuse",
    "get_material_specular",
    "get_material_shininess",
    # Phong
    "lambert_factor",
    "phong_diffuse",
    "phong_specular",
    # Mirror
    "scatter_mirror",
    # Dielectric
    "AIR_IOR",
    "GLASS_IOR",
    "refraction_ratio",
    "refract_entry",
    "refract_exit",
]
