"""Render and camera configuration.

A render configuration is read from JSON (or any mapping) such as::

    {
        "file_name": "spheres.png",
        "img_width": 400,
        "aspect": 1.7777777,
        "samples_per_pixel": 100,
        "max_depth": 50,
        "camera": {
            "lookFrom": {"x": 13, "y": 2, "z": 3},
            "lookAt": [0, 0, 0],
            "vup": {"x": 0, "y": 1, "z": 0},
            "vfov": 20,
            "aperture": 0.1,
            "focusDist": 10
        },
        "materials": [{"type": "lambertian", "albedo": {"x": 0.5, "y": 0.5, "z": 0.5}}]
    }

Keys match case-insensitively and ignore underscores, so ``lookFrom``,
``look_from`` and ``lookfrom`` are the same key. Vectors may be written as
``{x, y, z}`` mappings or three-element lists.
"""

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.pathcore.camera.thin_lens import ThinLensCamera
from src.pathcore.materials.description import materials_from_descriptions
from src.pathcore.materials.material import AnyMaterial

logger = logging.getLogger(__name__)

Vector = tuple[float, float, float]


class ConfigError(ValueError):
    """Raised when a configuration value is missing or malformed."""


@dataclass(frozen=True)
class CameraConfig:
    """Camera placement and lens parameters.

    Attributes:
        lookfrom: Initial camera position.
        lookat: Point the camera is looking at.
        vup: Which direction is up.
        vfov: Vertical field of view in degrees.
        aperture: Lens diameter.
        focus_dist: Distance to the plane of perfect focus.
    """

    lookfrom: Vector = (0.0, 0.0, 0.0)
    lookat: Vector = (0.0, 0.0, -1.0)
    vup: Vector = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aperture: float = 0.0
    focus_dist: float = 1.0

    def to_camera(self, aspect_ratio: float) -> ThinLensCamera:
        """Create the camera for an image of the given aspect ratio."""
        return ThinLensCamera(
            lookfrom=self.lookfrom,
            lookat=self.lookat,
            vup=self.vup,
            vfov=self.vfov,
            aspect_ratio=aspect_ratio,
            aperture=self.aperture,
            focus_dist=self.focus_dist,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CameraConfig":
        """Decode a camera configuration.

        Raises:
            ConfigError: If a value is malformed.
        """
        values = _normalize_keys(data, "camera")
        defaults = cls()
        return cls(
            lookfrom=_vector(values, "lookfrom", defaults.lookfrom),
            lookat=_vector(values, "lookat", defaults.lookat),
            vup=_vector(values, "vup", defaults.vup),
            vfov=_number(values, "vfov", defaults.vfov),
            aperture=_number(values, "aperture", defaults.aperture),
            focus_dist=_number(values, "focusdist", defaults.focus_dist),
        )


@dataclass(frozen=True)
class RenderConfig:
    """Top-level render settings.

    Attributes:
        file_name: Name of the file to save the render to.
        img_width: Output width in pixels.
        aspect: Width / height ratio, e.g. 16:9 = 1.7777777.
        samples_per_pixel: Rays traced per pixel.
        max_depth: Maximum number of bounces per path.
        camera: Camera configuration.
        materials: Materials decoded from the "materials" list.
    """

    file_name: str = "render.png"
    img_width: int = 400
    aspect: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    camera: CameraConfig = field(default_factory=CameraConfig)
    materials: tuple[AnyMaterial, ...] = ()

    def __post_init__(self) -> None:
        if self.img_width <= 0:
            raise ConfigError(f"img_width must be positive, got {self.img_width}")
        if not (self.aspect > 0.0) or not math.isfinite(self.aspect):
            raise ConfigError(f"aspect must be a finite positive number, got {self.aspect}")
        if self.samples_per_pixel <= 0:
            raise ConfigError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth <= 0:
            raise ConfigError(f"max_depth must be positive, got {self.max_depth}")

    @property
    def image_height(self) -> int:
        """Output height in pixels derived from the width and aspect ratio."""
        return int(self.img_width / self.aspect)

    def make_camera(self) -> ThinLensCamera:
        """Create the configured camera for this image's aspect ratio."""
        return self.camera.to_camera(self.aspect)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderConfig":
        """Decode a render configuration.

        Raises:
            ConfigError: If a value is malformed.
            UnrecognizedMaterialError: If a material description is invalid.
        """
        values = _normalize_keys(data, "render config")
        defaults = cls()

        file_name = values.get("filename", defaults.file_name)
        if not isinstance(file_name, str):
            raise ConfigError(f"file_name must be a string, got {file_name!r}")

        camera = values.get("camera")
        materials = values.get("materials", [])
        if not isinstance(materials, list):
            raise ConfigError(f"materials must be a list, got {type(materials).__name__}")

        return cls(
            file_name=file_name,
            img_width=_integer(values, "imgwidth", defaults.img_width),
            aspect=_number(values, "aspect", defaults.aspect),
            samples_per_pixel=_integer(values, "samplesperpixel", defaults.samples_per_pixel),
            max_depth=_integer(values, "maxdepth", defaults.max_depth),
            camera=CameraConfig() if camera is None else CameraConfig.from_dict(camera),
            materials=tuple(materials_from_descriptions(materials)),
        )


def load_config(path: str | Path) -> RenderConfig:
    """Load a render configuration from a JSON file.

    Raises:
        ConfigError: If the file is not valid JSON or a value is malformed.
        UnrecognizedMaterialError: If a material description is invalid.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON: {exc}") from exc

    config = RenderConfig.from_dict(data)
    logger.debug(
        "Loaded %s: %dx%d, %d spp, depth %d, %d materials",
        path,
        config.img_width,
        config.image_height,
        config.samples_per_pixel,
        config.max_depth,
        len(config.materials),
    )
    return config


# =============================================================================
# Value decoding
# =============================================================================


def _normalize_keys(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")
    return {str(key).replace("_", "").lower(): value for key, value in data.items()}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _number(values: Mapping[str, Any], key: str, default: float) -> float:
    value = values.get(key)
    if value is None:
        return default
    if not _is_number(value):
        raise ConfigError(f"'{key}' must be a finite number, got {value!r}")
    return float(value)


def _integer(values: Mapping[str, Any], key: str, default: int) -> int:
    value = values.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    return value


def _vector(values: Mapping[str, Any], key: str, default: Vector) -> Vector:
    value = values.get(key)
    if value is None:
        return default
    if isinstance(value, Mapping):
        components = _normalize_keys(value, key)
        value = [components.get("x"), components.get("y"), components.get("z")]
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(_is_number(c) for c in value):
        return (float(value[0]), float(value[1]), float(value[2]))
    raise ConfigError(f"'{key}' must be an {{x, y, z}} mapping or three numbers, got {value!r}")
