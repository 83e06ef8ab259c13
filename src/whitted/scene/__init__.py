"""Scene description and query module.

Components:
    intersection: Ordered object table and nearest-hit queries (raycast)
    lights: Point and directional lights
    manager: SceneManager, the high-level scene building API
    loader: Plain-text scene description parser
    demo: Built-in demo scene

Taichi-side queries (raycast, sample_light) are imported from their modules
directly; this package exposes the Python-side building API.
"""

from .demo import DemoSceneParams, create_demo_scene
from .intersection import MAX_OBJECTS, IntersectionInfo, ObjectKind
from .lights import MAX_LIGHTS, Light, LightType
from .loader import SceneFile, SceneFileError, load_scene_file, parse_scene
from .manager import SceneConfig, SceneManager, SphereInfo, TriangleInfo

__all__ = [
    "SceneManager",
    "SceneConfig",
    "SphereInfo",
    "TriangleInfo",
    "Light",
    "LightType",
    "ObjectKind",
    "IntersectionInfo",
    "SceneFile",
    "SceneFileError",
    "parse_scene",
    "load_scene_file",
    "DemoSceneParams",
    "create_demo_scene",
    "MAX_OBJECTS",
    "MAX_LIGHTS",
]
