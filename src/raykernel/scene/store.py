"""Scene Store: validated scene records and their upload into Taichi fields.

The kernel trusts its inputs. This module is where a scene is checked
before it reaches the kernel: radii must be positive, material indices must
exist, normals are normalized (with a warning) and capacities are enforced.

A scene is a ``SceneDescription`` holding ordered lists of records per
kind. It can be built in Python, from a plain dictionary or from a JSON
file with the keys ``materials``, ``spheres``, ``planes``, ``triangles`` and
``lights``:

    {
        "materials": [{"albedo": [0.8, 0.2, 0.2], "reflective": true}],
        "spheres": [{"center": [0, 16, 0], "radius": 16, "material_id": 0}],
        "planes": [{"normal": [0, 1, 0], "distance_from_origin": 0, "material_id": 0}],
        "triangles": [{"v0": [...], "v1": [...], "v2": [...], "material_id": 0}],
        "lights": [{"position": [0, 50, 0], "color": [500, 500, 500]}]
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.store import SceneStore, load_scene
    >>> scene = load_scene("scenes/demo.json")
    >>> SceneStore().upload(scene)
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import taichi.math as tm

from raykernel.scene.intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    MAX_TRIANGLES,
    add_plane,
    add_sphere,
    add_triangle,
    clear_scene,
    get_plane_count,
    get_sphere_count,
    get_triangle_count,
)
from raykernel.shading.lights import MAX_SCENE_LIGHTS, add_light, clear_lights, get_light_count
from raykernel.shading.materials import (
    DEFAULT_SHININESS,
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)

logger = logging.getLogger(__name__)

vec3 = tm.vec3

Vec3 = tuple[float, float, float]

# Tolerance on |n| - 1 before a normal is renormalized
_UNIT_TOLERANCE = 1e-4


def _to_vec3(value: Any, name: str) -> Vec3:
    """Convert a 3-sequence to a float tuple.

    Raises:
        ValueError: If the value does not have exactly three numeric entries.
    """
    try:
        items = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a sequence of three numbers, got {value!r}") from e
    if len(items) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(items)}")
    return (items[0], items[1], items[2])


def _normalized(value: Vec3, name: str) -> tuple[Vec3, float]:
    """Return value scaled to unit length together with its original length.

    Logs a warning if the vector was not unit length already.

    Raises:
        ValueError: If the vector has zero length.
    """
    length = math.sqrt(value[0] ** 2 + value[1] ** 2 + value[2] ** 2)
    if length < 1e-12:
        raise ValueError(f"{name} must not be a zero vector")
    if abs(length - 1.0) > _UNIT_TOLERANCE:
        logger.warning("%s %s is not unit length (%.6f); normalizing", name, value, length)
    return (value[0] / length, value[1] / length, value[2] / length), length


# =============================================================================
# Scene Records
# =============================================================================


@dataclass
class MaterialInfo:
    """A material table entry.

    Attributes:
        albedo: Base color, components in [0, 1].
        roughness: Cook-Torrance roughness in [0, 1].
        metalness: Cook-Torrance metalness in [0, 1].
        reflective: Whether rays bounce off this material.
        shininess: Blinn-Phong specular exponent.
    """

    albedo: Vec3
    roughness: float = 0.5
    metalness: float = 0.0
    reflective: bool = False
    shininess: float = DEFAULT_SHININESS


@dataclass
class SphereInfo:
    """A sphere with its material index."""

    center: Vec3
    radius: float
    material_id: int = 0


@dataclass
class PlaneInfo:
    """A plane dot(normal, P) + distance_from_origin = 0 with its material index."""

    normal: Vec3
    distance_from_origin: float
    material_id: int = 0


@dataclass
class TriangleInfo:
    """A single-sided triangle, visible from the side of cross(v1 - v0, v2 - v0)."""

    v0: Vec3
    v1: Vec3
    v2: Vec3
    material_id: int = 0


@dataclass
class LightInfo:
    """A point light in addition to the frame's key light."""

    position: Vec3
    color: Vec3


@dataclass
class SceneDescription:
    """Ordered primitive, material and light lists making up one scene."""

    materials: list[MaterialInfo] = field(default_factory=list)
    spheres: list[SphereInfo] = field(default_factory=list)
    planes: list[PlaneInfo] = field(default_factory=list)
    triangles: list[TriangleInfo] = field(default_factory=list)
    lights: list[LightInfo] = field(default_factory=list)

    def add_material(self, albedo: Vec3, **params: Any) -> int:
        """Append a material and return its index."""
        self.materials.append(MaterialInfo(albedo=tuple(albedo), **params))
        return len(self.materials) - 1

    def add_sphere(self, center: Vec3, radius: float, material_id: int) -> int:
        """Append a sphere and return its index among spheres."""
        self.spheres.append(SphereInfo(center=tuple(center), radius=radius, material_id=material_id))
        return len(self.spheres) - 1

    def add_plane(self, normal: Vec3, distance_from_origin: float, material_id: int) -> int:
        """Append a plane and return its index among planes."""
        self.planes.append(
            PlaneInfo(
                normal=tuple(normal),
                distance_from_origin=distance_from_origin,
                material_id=material_id,
            )
        )
        return len(self.planes) - 1

    def add_triangle(self, v0: Vec3, v1: Vec3, v2: Vec3, material_id: int) -> int:
        """Append a triangle and return its index among triangles."""
        self.triangles.append(
            TriangleInfo(v0=tuple(v0), v1=tuple(v1), v2=tuple(v2), material_id=material_id)
        )
        return len(self.triangles) - 1

    def add_light(self, position: Vec3, color: Vec3) -> int:
        """Append a point light and return its index among scene lights."""
        self.lights.append(LightInfo(position=tuple(position), color=tuple(color)))
        return len(self.lights) - 1

    def primitive_count(self) -> int:
        """Total number of primitives of all kinds."""
        return len(self.spheres) + len(self.planes) + len(self.triangles)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "materials": [asdict(m) for m in self.materials],
            "spheres": [asdict(s) for s in self.spheres],
            "planes": [asdict(p) for p in self.planes],
            "triangles": [asdict(t) for t in self.triangles],
            "lights": [asdict(light) for light in self.lights],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneDescription":
        """Build a scene from a dictionary.

        Raises:
            ValueError: If the dictionary has unknown keys or malformed entries.
        """
        unknown = set(data) - {"materials", "spheres", "planes", "triangles", "lights"}
        if unknown:
            raise ValueError(f"Unknown scene keys: {sorted(unknown)}")

        scene = cls()
        for i, mat in enumerate(data.get("materials", [])):
            scene.materials.append(
                MaterialInfo(
                    albedo=_to_vec3(mat.get("albedo", (0.5, 0.5, 0.5)), f"materials[{i}].albedo"),
                    roughness=float(mat.get("roughness", 0.5)),
                    metalness=float(mat.get("metalness", 0.0)),
                    reflective=bool(mat.get("reflective", False)),
                    shininess=float(mat.get("shininess", DEFAULT_SHININESS)),
                )
            )
        for i, sph in enumerate(data.get("spheres", [])):
            scene.spheres.append(
                SphereInfo(
                    center=_to_vec3(sph.get("center", (0.0, 0.0, 0.0)), f"spheres[{i}].center"),
                    radius=float(sph.get("radius", 1.0)),
                    material_id=int(sph.get("material_id", 0)),
                )
            )
        for i, pl in enumerate(data.get("planes", [])):
            scene.planes.append(
                PlaneInfo(
                    normal=_to_vec3(pl.get("normal", (0.0, 1.0, 0.0)), f"planes[{i}].normal"),
                    distance_from_origin=float(pl.get("distance_from_origin", 0.0)),
                    material_id=int(pl.get("material_id", 0)),
                )
            )
        for i, tri in enumerate(data.get("triangles", [])):
            try:
                vertices = [_to_vec3(tri[k], f"triangles[{i}].{k}") for k in ("v0", "v1", "v2")]
            except KeyError as e:
                raise ValueError(f"triangles[{i}] is missing vertex {e}") from e
            scene.triangles.append(
                TriangleInfo(
                    v0=vertices[0],
                    v1=vertices[1],
                    v2=vertices[2],
                    material_id=int(tri.get("material_id", 0)),
                )
            )
        for i, light in enumerate(data.get("lights", [])):
            scene.lights.append(
                LightInfo(
                    position=_to_vec3(light.get("position", (0.0, 0.0, 0.0)), f"lights[{i}].position"),
                    color=_to_vec3(light.get("color", (1.0, 1.0, 1.0)), f"lights[{i}].color"),
                )
            )
        return scene


def load_scene(path: str | Path) -> SceneDescription:
    """Load a scene description from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not a scene object.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid scene file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    logger.info("Loaded scene description from %s", path)
    return SceneDescription.from_dict(data)


def save_scene(scene: SceneDescription, path: str | Path) -> None:
    """Write a scene description to a JSON file."""
    Path(path).write_text(json.dumps(scene.to_dict(), indent=2), encoding="utf-8")


# =============================================================================
# Store
# =============================================================================


class SceneStore:
    """Validates scenes and uploads them into the kernel's fields.

    Uploading replaces whatever scene was loaded before. The store keeps the
    last uploaded description for inspection.

    Example:
        >>> store = SceneStore()
        >>> scene = SceneDescription()
        >>> mat = scene.add_material((0.8, 0.8, 0.8))
        >>> scene.add_sphere((0, 16, 0), 16.0, mat)
        0
        >>> store.upload(scene)
        >>> store.get_sphere_count()
        1
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.scene: SceneDescription | None = None

    @staticmethod
    def clear() -> None:
        """Remove all primitives, materials and scene lights from the kernel."""
        clear_scene()
        clear_materials()
        clear_lights()

    @staticmethod
    def validate(scene: SceneDescription) -> SceneDescription:
        """Check a scene and return a copy with normalized plane normals.

        Raises:
            ValueError: On out-of-range material parameters, a negative light
                color, a non-positive radius, an invalid material index, a
                zero-length normal or a degenerate triangle.
            RuntimeError: If any list exceeds the kernel's capacity.
        """
        capacities = (
            ("materials", len(scene.materials), MAX_MATERIALS),
            ("spheres", len(scene.spheres), MAX_SPHERES),
            ("planes", len(scene.planes), MAX_PLANES),
            ("triangles", len(scene.triangles), MAX_TRIANGLES),
            ("lights", len(scene.lights), MAX_SCENE_LIGHTS),
        )
        for name, count, limit in capacities:
            if count > limit:
                raise RuntimeError(f"Scene has {count} {name}, maximum is {limit}")

        for i, mat in enumerate(scene.materials):
            if any(c < 0.0 or c > 1.0 for c in mat.albedo):
                raise ValueError(f"materials[{i}] albedo {mat.albedo} is outside [0, 1]")
            if not 0.0 <= mat.roughness <= 1.0:
                raise ValueError(f"materials[{i}] roughness {mat.roughness} is outside [0, 1]")
            if not 0.0 <= mat.metalness <= 1.0:
                raise ValueError(f"materials[{i}] metalness {mat.metalness} is outside [0, 1]")
            if mat.shininess <= 0.0:
                raise ValueError(f"materials[{i}] shininess must be positive")

        for i, light in enumerate(scene.lights):
            if any(c < 0.0 for c in light.color):
                raise ValueError(f"lights[{i}] color {light.color} has a negative component")

        n_materials = len(scene.materials)

        def check_material(kind: str, index: int, material_id: int) -> None:
            if material_id < 0 or material_id >= n_materials:
                raise ValueError(
                    f"{kind}[{index}] has invalid material_id {material_id} "
                    f"({n_materials} materials defined)"
                )

        for i, sphere in enumerate(scene.spheres):
            if sphere.radius <= 0.0:
                raise ValueError(f"spheres[{i}] radius must be positive, got {sphere.radius}")
            check_material("spheres", i, sphere.material_id)

        planes = []
        for i, plane in enumerate(scene.planes):
            check_material("planes", i, plane.material_id)
            normal, length = _normalized(plane.normal, f"planes[{i}].normal")
            # Scale the constant with the normal so the plane stays in place
            planes.append(
                PlaneInfo(
                    normal=normal,
                    distance_from_origin=plane.distance_from_origin / length,
                    material_id=plane.material_id,
                )
            )

        for i, tri in enumerate(scene.triangles):
            check_material("triangles", i, tri.material_id)
            e1 = [tri.v1[k] - tri.v0[k] for k in range(3)]
            e2 = [tri.v2[k] - tri.v0[k] for k in range(3)]
            n = (
                e1[1] * e2[2] - e1[2] * e2[1],
                e1[2] * e2[0] - e1[0] * e2[2],
                e1[0] * e2[1] - e1[1] * e2[0],
            )
            if n[0] ** 2 + n[1] ** 2 + n[2] ** 2 < 1e-20:
                raise ValueError(f"triangles[{i}] is degenerate (zero area)")

        return SceneDescription(
            materials=list(scene.materials),
            spheres=list(scene.spheres),
            planes=planes,
            triangles=list(scene.triangles),
            lights=list(scene.lights),
        )

    def upload(self, scene: SceneDescription) -> None:
        """Validate a scene and write it into the kernel's fields.

        The previous scene is cleared first. Validation happens before
        anything is written, so a rejected scene leaves the old one intact.

        Raises:
            ValueError: If the scene fails validation.
            RuntimeError: If the scene exceeds capacity.
        """
        checked = self.validate(scene)
        self.clear()

        for mat in checked.materials:
            add_material(
                albedo=mat.albedo,
                roughness=mat.roughness,
                metalness=mat.metalness,
                reflective=mat.reflective,
                shininess=mat.shininess,
            )
        for sphere in checked.spheres:
            add_sphere(vec3(*sphere.center), sphere.radius, sphere.material_id)
        for plane in checked.planes:
            add_plane(vec3(*plane.normal), plane.distance_from_origin, plane.material_id)
        for tri in checked.triangles:
            add_triangle(vec3(*tri.v0), vec3(*tri.v1), vec3(*tri.v2), tri.material_id)
        for light in checked.lights:
            add_light(light.position, light.color)

        self.scene = checked
        logger.info(
            "Uploaded scene: %d materials, %d spheres, %d planes, %d triangles, %d extra lights",
            len(checked.materials),
            len(checked.spheres),
            len(checked.planes),
            len(checked.triangles),
            len(checked.lights),
        )

    # =========================================================================
    # Scene Queries
    # =========================================================================

    @staticmethod
    def get_sphere_count() -> int:
        """Get the number of spheres in the kernel's fields."""
        return get_sphere_count()

    @staticmethod
    def get_plane_count() -> int:
        """Get the number of planes in the kernel's fields."""
        return get_plane_count()

    @staticmethod
    def get_triangle_count() -> int:
        """Get the number of triangles in the kernel's fields."""
        return get_triangle_count()

    @staticmethod
    def get_material_count() -> int:
        """Get the number of materials in the kernel's fields."""
        return get_material_count()

    @staticmethod
    def get_light_count() -> int:
        """Get the number of lights lit per hit, including the key light."""
        return get_light_count()
