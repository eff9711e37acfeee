"""Scene manager coordinating primitives, materials, lights and camera.

The SceneManager is the single place where a scene is written into the
Taichi fields. It keeps Python-side copies of everything it uploads, so a
scene can be inspected or serialized without reading fields back.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.material import Material, MaterialKind
    >>> from src.whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(Material(ambient=(0.2, 0, 0), diffuse=(0.8, 0, 0)))
    >>> scene.add_sphere((0, 0, -3), 1.0, red)
    >>> mirror = scene.add_material(Material(kind=MaterialKind.REFLECTIVE))
    >>> scene.add_plane((0, 1, 0), 1.0, mirror)
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

from src.whitted.camera.pinhole import CameraParams, setup_camera
from src.whitted.geometry.primitive import PrimitiveKind
from src.whitted.materials.material import (
    Material,
    add_material,
    clear_materials,
    get_material_count,
    set_material,
)
from src.whitted.scene.intersection import (
    add_plane,
    add_sphere,
    clear_primitives,
    get_primitive_count,
)
from src.whitted.scene.lights import (
    Light,
    add_light,
    clear_lights,
    get_light_count,
    normalize_direction,
    set_ambient,
)
from src.whitted.scene.loader import SceneDescription

logger = logging.getLogger(__name__)


@dataclass
class PrimitiveInfo:
    """Information about a primitive in the scene.

    Attributes:
        primitive_id: Index in the primitive table.
        kind: SPHERE or PLANE.
        vector: Sphere center or plane normal, as given.
        scalar: Sphere radius or plane offset, as given.
        material_id: The material assigned to the primitive.
    """

    primitive_id: int
    kind: PrimitiveKind
    vector: tuple[float, float, float]
    scalar: float
    material_id: int


class SceneManager:
    """High-level scene builder.

    Creating a SceneManager clears every scene table and resets the camera
    to its defaults.

    Attributes:
        materials: Materials in id order.
        primitives: PrimitiveInfo for every primitive in declaration order.
        lights: Lights in declaration order (directions normalized).
        camera: The active camera parameters.
        ambient: The scene ambient level.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[Material] = []
        self.primitives: list[PrimitiveInfo] = []
        self.lights: list[Light] = []
        self.camera = CameraParams()
        self.ambient: tuple[float, float, float] = (0.0, 0.0, 0.0)
        self.clear()

    def clear(self) -> None:
        """Clear the entire scene and reset the camera."""
        clear_primitives()
        clear_materials()
        clear_lights()
        self.materials.clear()
        self.primitives.clear()
        self.lights.clear()
        self.ambient = (0.0, 0.0, 0.0)
        self.set_camera(CameraParams())

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material.

        Returns:
            The material id.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = add_material(material)
        self.materials.append(material)
        return material_id

    def set_material(self, material_id: int, material: Material) -> None:
        """Replace an existing material.

        Raises:
            IndexError: If material_id is invalid.
        """
        set_material(material_id, material)
        self.materials[material_id] = material

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Returns:
            The primitive id of the sphere.

        Raises:
            ValueError: If the radius is not positive or material_id is invalid.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        self._check_material_id(material_id)
        primitive_id = add_sphere(center, radius, material_id)
        self.primitives.append(
            PrimitiveInfo(primitive_id, PrimitiveKind.SPHERE, tuple(center), radius, material_id)
        )
        return primitive_id

    def add_plane(
        self,
        normal: tuple[float, float, float],
        offset: float,
        material_id: int,
    ) -> int:
        """Add an infinite plane dot(normal, p) + offset = 0 to the scene.

        Returns:
            The primitive id of the plane.

        Raises:
            ValueError: If material_id is invalid.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        self._check_material_id(material_id)
        primitive_id = add_plane(normal, offset, material_id)
        self.primitives.append(
            PrimitiveInfo(primitive_id, PrimitiveKind.PLANE, tuple(normal), offset, material_id)
        )
        return primitive_id

    # =========================================================================
    # Lights and Camera
    # =========================================================================

    def add_light(self, light: Light) -> int:
        """Add a light; its direction is normalized.

        Returns:
            The light index.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        index = add_light(light)
        self.lights.append(
            Light(
                direction=normalize_direction(light.direction),
                position=tuple(light.position),
                intensity=tuple(light.intensity),
                is_spot=light.is_spot,
                cutoff=light.cutoff,
            )
        )
        return index

    def set_ambient(self, ambient: tuple[float, float, float]) -> None:
        """Set the scene ambient light level."""
        set_ambient(ambient)
        self.ambient = tuple(ambient)

    def set_camera(self, camera: CameraParams) -> None:
        """Set the active camera."""
        setup_camera(camera)
        self.camera = camera

    # =========================================================================
    # Loading
    # =========================================================================

    def load_description(self, desc: SceneDescription) -> None:
        """Replace the current scene with a parsed scene description.

        Every primitive gets its own material slot, in declaration order.

        Args:
            desc: The result of parse_scene() or load_scene_file().
        """
        self.clear()
        self.set_camera(desc.camera)
        self.set_ambient(desc.ambient)

        for record in desc.primitives:
            material_id = self.add_material(record.material)
            if record.kind == PrimitiveKind.SPHERE:
                self.add_sphere(record.vector, record.scalar, material_id)
            else:
                self.add_plane(record.vector, record.scalar, material_id)

        for light in desc.lights:
            self.add_light(light)

        logger.debug(
            "Scene uploaded: %d primitives, %d materials, %d lights",
            self.get_primitive_count(),
            self.get_material_count(),
            self.get_light_count(),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_primitive_count(self) -> int:
        """Get the number of primitives in the scene."""
        return get_primitive_count()

    def get_material_count(self) -> int:
        """Get the number of materials in the scene."""
        return get_material_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a plain dictionary.

        Returns:
            Dictionary with camera, ambient, materials, primitives and lights.
        """
        return {
            "camera": asdict(self.camera),
            "ambient": list(self.ambient),
            "materials": [
                {**asdict(mat), "kind": mat.kind.name.lower()} for mat in self.materials
            ],
            "primitives": [
                {
                    "kind": prim.kind.name.lower(),
                    "vector": list(prim.vector),
                    "scalar": prim.scalar,
                    "material_id": prim.material_id,
                }
                for prim in self.primitives
            ],
            "lights": [asdict(light) for light in self.lights],
        }
