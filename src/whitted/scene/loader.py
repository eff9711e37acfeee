"""Scene description reader.

A scene file is a whitespace-separated token stream. Each record starts with
a one-letter tag followed by four numbers:

    e x y z dist     camera eye position and screen distance
    u x y z h        camera up vector and screen height
    f x y z w        camera forward vector and screen width
    a r g b _        ambient light level (fourth value ignored)
    d x y z flag     new light with this direction; spot light if flag > 0.5
    p x y z cutoff   position and cutoff cosine for the first spot light
                     that has no position yet
    i r g b _        intensity for the first light that has no intensity yet
    o|r|t a b c d    opaque, reflective or transparent primitive: a sphere
                     with center (a, b, c) and radius d if d > 0, otherwise
                     a plane with normal (a, b, c) and offset d
    c r g b n        ambient = diffuse = (r, g, b) and shininess n for the
                     earliest primitive that has not been colored yet

A record may span lines. An unknown tag skips the rest of its line. Missing
or malformed numbers read as 0.0 (shininess defaults to 1.0 when absent).

Parsing is plain Python and produces a SceneDescription; uploading it into
the Taichi fields is the job of SceneManager.load_description().

Example:
    >>> from src.whitted.scene.loader import parse_scene
    >>> desc = parse_scene("e 0 0 4 1\\no 0 0 0 1\\nc 1 0 0 10\\n")
    >>> desc.primitives[0].material.diffuse
    (1.0, 0.0, 0.0)
"""

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from pathlib import Path

from src.whitted.camera.pinhole import CameraParams
from src.whitted.geometry.primitive import PrimitiveKind
from src.whitted.materials.material import Material, MaterialKind
from src.whitted.scene.lights import Light, normalize_direction

logger = logging.getLogger(__name__)

_KIND_BY_TAG = {
    "o": MaterialKind.OPAQUE,
    "r": MaterialKind.REFLECTIVE,
    "t": MaterialKind.TRANSPARENT,
}


@dataclass
class PrimitiveRecord:
    """A primitive as read from a scene file.

    Attributes:
        kind: SPHERE or PLANE.
        vector: Sphere center or plane normal (as written, not normalized).
        scalar: Sphere radius or plane offset.
        material: The primitive's material.
    """

    kind: PrimitiveKind
    vector: tuple[float, float, float]
    scalar: float
    material: Material = field(default_factory=Material)


@dataclass
class SceneDescription:
    """Everything read from a scene file, in declaration order."""

    camera: CameraParams = field(default_factory=CameraParams)
    ambient: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lights: list[Light] = field(default_factory=list)
    primitives: list[PrimitiveRecord] = field(default_factory=list)


@dataclass
class _PendingLight:
    light: Light
    has_position: bool = False
    has_intensity: bool = False


class _TokenStream:
    """Tokens with their line numbers, so a record can skip its line."""

    def __init__(self, text: str) -> None:
        self._tokens = [
            (line_no, token)
            for line_no, line in enumerate(text.splitlines())
            for token in line.split()
        ]
        self._pos = 0

    def __bool__(self) -> bool:
        return self._pos < len(self._tokens)

    def next_token(self) -> tuple[int, str]:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def read_floats(self, count: int, defaults: tuple[float, ...] | None = None) -> list[float]:
        values = list(defaults) if defaults is not None else [0.0] * count
        for k in range(count):
            if not self:
                break
            line_no, token = self.next_token()
            try:
                values[k] = float(token)
            except ValueError:
                logger.warning("Line %d: malformed number %r read as 0.0", line_no + 1, token)
                values[k] = 0.0
        return values

    def skip_line(self, line_no: int) -> None:
        while self and self._tokens[self._pos][0] == line_no:
            self._pos += 1


def parse_scene(text: str) -> SceneDescription:
    """Parse a scene description.

    Args:
        text: The scene file contents.

    Returns:
        The parsed scene. Never raises for malformed content.
    """
    desc = SceneDescription()
    camera = desc.camera
    pending: list[_PendingLight] = []
    uncolored: deque[PrimitiveRecord] = deque()

    tokens = _TokenStream(text)
    while tokens:
        line_no, tag = tokens.next_token()

        if tag == "e":
            x, y, z, dist = tokens.read_floats(4)
            camera.eye = (x, y, z)
            camera.screen_distance = dist
        elif tag == "u":
            x, y, z, h = tokens.read_floats(4)
            camera.up = (x, y, z)
            camera.screen_height = h
        elif tag == "f":
            x, y, z, w = tokens.read_floats(4)
            camera.forward = (x, y, z)
            camera.screen_width = w
        elif tag == "a":
            r, g, b, _ = tokens.read_floats(4)
            desc.ambient = (r, g, b)
        elif tag == "d":
            x, y, z, flag = tokens.read_floats(4)
            light = Light(direction=normalize_direction((x, y, z)), is_spot=flag > 0.5)
            pending.append(_PendingLight(light))
        elif tag == "p":
            x, y, z, cutoff = tokens.read_floats(4)
            for pl in pending:
                if pl.light.is_spot and not pl.has_position:
                    pl.light.position = (x, y, z)
                    pl.light.cutoff = cutoff
                    pl.has_position = True
                    break
            else:
                logger.debug("Line %d: no spot light waiting for a position", line_no + 1)
        elif tag == "i":
            r, g, b, _ = tokens.read_floats(4)
            for pl in pending:
                if not pl.has_intensity:
                    pl.light.intensity = (r, g, b)
                    pl.has_intensity = True
                    break
            else:
                logger.debug("Line %d: no light waiting for an intensity", line_no + 1)
        elif tag in _KIND_BY_TAG:
            a, b, c, d = tokens.read_floats(4)
            kind = PrimitiveKind.SPHERE if d > 0.0 else PrimitiveKind.PLANE
            record = PrimitiveRecord(
                kind=kind,
                vector=(a, b, c),
                scalar=d,
                material=Material(kind=_KIND_BY_TAG[tag]),
            )
            desc.primitives.append(record)
            uncolored.append(record)
        elif tag == "c":
            r, g, b, shininess = tokens.read_floats(4, defaults=(0.0, 0.0, 0.0, 1.0))
            if uncolored:
                record = uncolored.popleft()
                record.material = replace(
                    record.material,
                    ambient=(r, g, b),
                    diffuse=(r, g, b),
                    shininess=shininess,
                )
            else:
                logger.debug("Line %d: color record without an uncolored primitive", line_no + 1)
        else:
            logger.debug("Line %d: skipping unknown tag %r", line_no + 1, tag)
            tokens.skip_line(line_no)

    desc.lights = [pl.light for pl in pending]
    return desc


def load_scene_file(path: str | Path) -> SceneDescription | None:
    """Read and parse a scene file.

    Args:
        path: Path to the scene file.

    Returns:
        The parsed scene, or None if the file could not be read.
    """
    try:
        text = Path(path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to open scene file %s: %s", path, e)
        return None

    desc = parse_scene(text)
    logger.info(
        "Loaded %s: %d primitives, %d lights",
        path,
        len(desc.primitives),
        len(desc.lights),
    )
    return desc
