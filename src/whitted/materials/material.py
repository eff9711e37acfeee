"""Material registry for Whitted shading.

Every primitive references one material slot. A material carries the Phong
coefficients used for local illumination and a kind tag that selects how the
tracer treats a hit:

    OPAQUE       local illumination only (leaf of the recursion)
    REFLECTIVE   perfect mirror, one recursive reflection ray
    TRANSPARENT  glass-like dielectric, one recursive refraction ray

Reflective and transparent materials keep their ambient/diffuse values but
the tracer never shades them locally; only the tag drives their behavior.

Material properties live in Taichi fields (Structure of Arrays) so the
rendering kernel can look them up by id.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.material import Material, MaterialKind, add_material
    >>> red = add_material(Material(ambient=(0.8, 0.1, 0.1), diffuse=(0.8, 0.1, 0.1)))
    >>> mirror = add_material(Material(kind=MaterialKind.REFLECTIVE))
"""

from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialKind(IntEnum):
    """How the tracer responds to a hit on a surface."""

    OPAQUE = 0
    REFLECTIVE = 1
    TRANSPARENT = 2


# Specular color used when a scene does not specify one
DEFAULT_SPECULAR = (0.7, 0.7, 0.7)


@dataclass
class Material:
    """Host-side description of a material.

    Attributes:
        ambient: Ambient reflectance (RGB), multiplied by the scene ambient.
        diffuse: Diffuse reflectance (RGB); also the base checkerboard color.
        specular: Specular reflectance (RGB) for the Phong highlight.
        shininess: Phong exponent.
        kind: The material kind tag.
    """

    ambient: tuple[float, float, float] = (0.0, 0.0, 0.0)
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular: tuple[float, float, float] = DEFAULT_SPECULAR
    shininess: float = 1.0
    kind: MaterialKind = MaterialKind.OPAQUE


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 1024

material_ambients = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuses = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_speculars = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def _write_material(idx: int, material: Material) -> None:
    material_ambients[idx] = vec3(*material.ambient)
    material_diffuses[idx] = vec3(*material.diffuse)
    material_speculars[idx] = vec3(*material.specular)
    material_shininess[idx] = material.shininess
    material_kinds[idx] = int(material.kind)


def add_material(material: Material) -> int:
    """Add a material to the registry.

    Args:
        material: The material description.

    Returns:
        The material id (index into the material fields).

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    _write_material(idx, material)
    num_materials[None] = idx + 1
    return idx


def set_material(material_id: int, material: Material) -> None:
    """Overwrite an existing material slot.

    Used when a color record arrives after the primitive that owns the slot.

    Args:
        material_id: The id returned by add_material().
        material: The new material description.

    Raises:
        IndexError: If material_id does not refer to an existing material.
    """
    if material_id < 0 or material_id >= num_materials[None]:
        raise IndexError(f"Invalid material_id: {material_id}")
    _write_material(material_id, material)


def get_material(material_id: int) -> Material:
    """Read a material back from the fields (Python side).

    Raises:
        IndexError: If material_id does not refer to an existing material.
    """
    if material_id < 0 or material_id >= num_materials[None]:
        raise IndexError(f"Invalid material_id: {material_id}")

    def _triple(v) -> tuple[float, float, float]:
        return (float(v[0]), float(v[1]), float(v[2]))

    return Material(
        ambient=_triple(material_ambients[material_id]),
        diffuse=_triple(material_diffuses[material_id]),
        specular=_triple(material_speculars[material_id]),
        shininess=float(material_shininess[material_id]),
        kind=MaterialKind(int(material_kinds[material_id])),
    )


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def _is_valid_material(material_id: ti.i32) -> ti.i32:
    """1 if material_id names a registered material; other ids read as black."""
    result = 0
    if material_id >= 0 and material_id < num_materials[None]:
        result = 1
    return result


@ti.func
def get_material_kind(material_id: ti.i32) -> ti.i32:
    """Get the kind tag for a material id.

    Returns:
        The MaterialKind as an integer, or -1 for an invalid id.
    """
    result = -1
    if _is_valid_material(material_id):
        result = material_kinds[material_id]
    return result


@ti.func
def get_material_ambient(material_id: ti.i32) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    if _is_valid_material(material_id):
        result = material_ambients[material_id]
    return result


@ti.func
def get_material_diffuse(material_id: ti.i32) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    if _is_valid_material(material_id):
        result = material_diffuses[material_id]
    return result


@ti.func
def get_material_specular(material_id: ti.i32) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    if _is_valid_material(material_id):
        result = material_speculars[material_id]
    return result


@ti.func
def get_material_shininess(material_id: ti.i32) -> ti.f32:
    result = 1.0
    if _is_valid_material(material_id):
        result = material_shininess[material_id]
    return result
