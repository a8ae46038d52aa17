"""Scene module for scene management and world queries.

Components:
    intersection: Sphere storage and closest-hit world queries
    manager: Unified scene manager coordinating spheres and materials
    default: Built-in scenes

Scene data is organized for efficient parallel access:
    - Structure-of-Arrays layout for geometric data
    - Spheres store material IDs into a shared material arena
"""

# Built-in scenes
from .default import create_default_scene, create_diffuse_scene

# World storage and intersection
from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_world,
    get_sphere_count,
    intersect_world,
)

# Scene manager for coordinating primitives and materials
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    clear_scene_data,
    get_material_type,
    get_material_type_index,
    load_scene_file,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_world",
    "get_sphere_count",
    "intersect_world",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "clear_scene_data",
    "get_material_type",
    "get_material_type_index",
    "load_scene_file",
    # Built-in scenes
    "create_default_scene",
    "create_diffuse_scene",
]
