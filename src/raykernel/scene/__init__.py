"""Scene module for primitive storage, hit records and scene loading.

Components:
    intersection: Primitive fields, Intersection record, nearest-hit resolver
    store: Scene records, validation, dict/JSON loading and upload
    demo: Reference scene and frame configuration

Scene data is organized for the kernel:
    - Structure-of-Arrays layout for geometric data
    - Contiguous material ID arrays
    - Fixed capacities with per-kind counts
"""

from .demo import DemoSceneParams, create_demo_scene
from .intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    MAX_TRIANGLES,
    Intersection,
    add_plane,
    add_sphere,
    add_triangle,
    clear_scene,
    get_plane_count,
    get_sphere_count,
    get_triangle_count,
    trace,
    trace_any,
)
from .store import (
    LightInfo,
    MaterialInfo,
    PlaneInfo,
    SceneDescription,
    SceneStore,
    SphereInfo,
    TriangleInfo,
    load_scene,
    save_scene,
)

__all__ = [
    # Intersection module
    "Intersection",
    "add_sphere",
    "add_plane",
    "add_triangle",
    "clear_scene",
    "get_sphere_count",
    "get_plane_count",
    "get_triangle_count",
    "trace",
    "trace_any",
    "MAX_SPHERES",
    "MAX_PLANES",
    "MAX_TRIANGLES",
    # Store module
    "SceneStore",
    "SceneDescription",
    "MaterialInfo",
    "SphereInfo",
    "PlaneInfo",
    "TriangleInfo",
    "LightInfo",
    "load_scene",
    "save_scene",
    # Demo scene
    "DemoSceneParams",
    "create_demo_scene",
]
