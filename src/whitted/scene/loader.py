"""Plain-text scene description loader.

A scene file is a sequence of whitespace-separated tokens (line breaks carry
no meaning):

    width height
    position.x position.y position.z
    lookTarget.x lookTarget.y lookTarget.z
    globalUp.x globalUp.y globalUp.z
    fovY focalLength
    maxDepth numObjects
    numObjects x:
        sphere   center.x center.y center.z radius
      | triangle A.x A.y A.z B.x B.y B.z C.x C.y C.z
        ambient.r ambient.g ambient.b
        diffuse.r diffuse.g diffuse.b
        specular.r specular.g specular.b
        shininess
    numLights
    numLights x:
        position.x position.y position.z position.w
        ambient.r ambient.g ambient.b
        diffuse.r diffuse.g diffuse.b
        specular.r specular.g specular.b
        constant linear quadratic

Example:
    >>> from whitted.scene.loader import load_scene_file
    >>> scene_file = load_scene_file("scenes/mirror.txt")
    >>> scene = scene_file.build_scene()
    >>> scene_file.camera.image_width
    320
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

from whitted.camera.pinhole import Camera
from whitted.scene.manager import SceneManager

logger = logging.getLogger(__name__)


class SceneFileError(ValueError):
    """Raised when a scene description cannot be parsed."""


@dataclass
class SceneFile:
    """Parsed contents of a scene description.

    Attributes:
        camera: The camera (not yet validated).
        max_depth: Reflection depth budget requested by the file.
        scene: Objects and lights in SceneManager.to_dict() format.
    """

    camera: Camera
    max_depth: int
    scene: dict[str, Any]

    def build_scene(self, scene: SceneManager | None = None) -> SceneManager:
        """Load the objects and lights into a SceneManager.

        Args:
            scene: Manager to fill (its previous contents are replaced). A new
                one is created when omitted.

        Returns:
            The populated SceneManager.

        Raises:
            ValueError: If an object or light is invalid (e.g. a zero-radius
                sphere or a degenerate triangle).
        """
        if scene is None:
            scene = SceneManager()
        scene.from_dict(self.scene)
        return scene


class _TokenReader:
    """Sequential reader over the tokens of a scene description."""

    def __init__(self, text: str) -> None:
        self._tokens = text.split()
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._pos

    def word(self, what: str) -> str:
        if self._pos >= len(self._tokens):
            raise SceneFileError(f"Unexpected end of input at token {self._pos}: expected {what}")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def number(self, what: str) -> float:
        token = self.word(what)
        try:
            return float(token)
        except ValueError:
            raise SceneFileError(
                f"Token {self._pos - 1} ({token!r}): expected a number for {what}"
            ) from None

    def integer(self, what: str) -> int:
        token = self.word(what)
        try:
            return int(token)
        except ValueError:
            raise SceneFileError(
                f"Token {self._pos - 1} ({token!r}): expected an integer for {what}"
            ) from None

    def count(self, what: str) -> int:
        value = self.integer(what)
        if value < 0:
            raise SceneFileError(f"Token {self._pos - 1}: {what} must be non-negative, got {value}")
        return value

    def vector(self, n: int, what: str) -> list[float]:
        return [self.number(f"{what}[{i}]") for i in range(n)]


def _read_material(reader: _TokenReader) -> dict[str, Any]:
    return {
        "ambient": reader.vector(3, "material ambient"),
        "diffuse": reader.vector(3, "material diffuse"),
        "specular": reader.vector(3, "material specular"),
        "shininess": reader.number("material shininess"),
    }


def parse_scene(text: str) -> SceneFile:
    """Parse a scene description.

    Args:
        text: The scene file contents.

    Returns:
        The parsed SceneFile.

    Raises:
        SceneFileError: If a token is missing or malformed, an object keyword
            is unknown, or a count is negative.
    """
    reader = _TokenReader(text)

    width = reader.integer("image width")
    height = reader.integer("image height")
    position = reader.vector(3, "camera position")
    look_target = reader.vector(3, "camera look target")
    global_up = reader.vector(3, "camera global up")
    fov_y = reader.number("camera fovY")
    focal_length = reader.number("camera focal length")
    camera = Camera(
        position=tuple(position),
        look_target=tuple(look_target),
        global_up=tuple(global_up),
        fov_y=fov_y,
        focal_length=focal_length,
        image_width=width,
        image_height=height,
    )

    max_depth = reader.integer("max depth")
    num_objects = reader.count("object count")

    objects: list[dict[str, Any]] = []
    for _ in range(num_objects):
        keyword = reader.word("object type")
        if keyword == "sphere":
            obj: dict[str, Any] = {
                "type": "sphere",
                "center": reader.vector(3, "sphere center"),
                "radius": reader.number("sphere radius"),
            }
        elif keyword == "triangle":
            obj = {
                "type": "triangle",
                "vertices": [
                    reader.vector(3, "triangle A"),
                    reader.vector(3, "triangle B"),
                    reader.vector(3, "triangle C"),
                ],
            }
        else:
            raise SceneFileError(f"Unknown object type {keyword!r}")
        obj["material"] = _read_material(reader)
        objects.append(obj)

    num_lights = reader.count("light count")
    lights: list[dict[str, Any]] = []
    for _ in range(num_lights):
        lights.append(
            {
                "position": reader.vector(4, "light position"),
                "ambient": reader.vector(3, "light ambient"),
                "diffuse": reader.vector(3, "light diffuse"),
                "specular": reader.vector(3, "light specular"),
                "attenuation": reader.vector(3, "light attenuation"),
            }
        )

    if reader.remaining:
        logger.warning("Ignoring %d trailing tokens in scene description", reader.remaining)

    return SceneFile(camera=camera, max_depth=max_depth, scene={"objects": objects, "lights": lights})


def load_scene_file(path: str | os.PathLike[str]) -> SceneFile:
    """Read and parse a scene description file.

    Raises:
        OSError: If the file cannot be read.
        SceneFileError: If the contents are malformed.
    """
    with open(path, encoding="utf-8") as f:
        text = f.read()
    scene_file = parse_scene(text)
    logger.info(
        "Loaded %s: %dx%d, %d objects, %d lights, max depth %d",
        path,
        scene_file.camera.image_width,
        scene_file.camera.image_height,
        len(scene_file.scene["objects"]),
        len(scene_file.scene["lights"]),
        scene_file.max_depth,
    )
    return scene_file
