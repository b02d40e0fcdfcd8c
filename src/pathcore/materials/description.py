"""Decoding of generic key-value material descriptions.

Scene files describe each surface material as a plain mapping, e.g.::

    {"type": "metal", "albedo": {"x": 0.8, "y": 0.6, "z": 0.2}, "fuzz": 0.3}

Field rules per kind:

    lambertian  albedo (optional, default black)
    metal       albedo (optional, default black), fuzz (optional, default 0)
    dielectric  refindex (required)

The type is matched case-insensitively. An albedo, when present, must carry
numeric x, y and z. Anything else fails with UnrecognizedMaterialError so a
scene is never built with a silently substituted material.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any

from src.pathcore.materials.dielectric import DielectricMaterial
from src.pathcore.materials.lambertian import LambertianMaterial
from src.pathcore.materials.material import AnyMaterial
from src.pathcore.materials.metal import MetalMaterial


class UnrecognizedMaterialError(ValueError):
    """Raised when a material description cannot be turned into a material."""


def _number(description: Mapping[str, Any], key: str, default: float | None) -> float:
    value = description.get(key)
    if value is None:
        if default is None:
            raise UnrecognizedMaterialError(f"Unrecognized material: missing '{key}'")
        return default
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnrecognizedMaterialError(
            f"Unrecognized material: '{key}' must be a number, got {value!r}"
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise UnrecognizedMaterialError(
            f"Unrecognized material: '{key}' must be a finite number, got {value!r}"
        )
    return float(value)


def _albedo(description: Mapping[str, Any]) -> tuple[float, float, float]:
    albedo = description.get("albedo")
    if albedo is None:
        return (0.0, 0.0, 0.0)
    if not isinstance(albedo, Mapping):
        raise UnrecognizedMaterialError(
            f"Unrecognized material: 'albedo' must be a mapping with x, y, z, got {albedo!r}"
        )
    return (
        _number(albedo, "x", None),
        _number(albedo, "y", None),
        _number(albedo, "z", None),
    )


def material_from_description(description: Mapping[str, Any]) -> AnyMaterial:
    """Build a material from a key-value description.

    Args:
        description: Mapping with a 'type' key and the fields of that kind.

    Returns:
        A LambertianMaterial, MetalMaterial or DielectricMaterial.

    Raises:
        UnrecognizedMaterialError: If the type is unknown or a field is
            malformed or out of range.
    """
    if not isinstance(description, Mapping):
        raise UnrecognizedMaterialError(
            f"Unrecognized material: expected a mapping, got {type(description).__name__}"
        )

    material_type = description.get("type")
    kind = material_type.lower() if isinstance(material_type, str) else ""

    try:
        if kind == "lambertian":
            return LambertianMaterial(albedo=_albedo(description))
        if kind == "metal":
            return MetalMaterial(
                albedo=_albedo(description),
                fuzz=_number(description, "fuzz", 0.0),
            )
        if kind == "dielectric":
            return DielectricMaterial(ref_index=_number(description, "refindex", None))
    except UnrecognizedMaterialError:
        raise
    except ValueError as exc:
        raise UnrecognizedMaterialError(f"Unrecognized material: {exc}") from exc

    raise UnrecognizedMaterialError(f"Unrecognized material type: {material_type!r}")


def materials_from_descriptions(descriptions: Sequence[Mapping[str, Any]]) -> list[AnyMaterial]:
    """Build materials from a list of descriptions.

    Raises:
        UnrecognizedMaterialError: On the first invalid description, naming
            its position in the list.
    """
    materials = []
    for index, description in enumerate(descriptions):
        try:
            materials.append(material_from_description(description))
        except UnrecognizedMaterialError as exc:
            raise UnrecognizedMaterialError(f"Material {index}: {exc}") from exc
    return materials


def material_to_description(material: AnyMaterial) -> dict[str, Any]:
    """Export a material as a key-value description.

    The result decodes back to an equal material with
    material_from_description().

    Raises:
        TypeError: If material is not one of the supported kinds.
    """
    if isinstance(material, LambertianMaterial):
        return {"type": "lambertian", "albedo": _albedo_description(material.albedo)}
    if isinstance(material, MetalMaterial):
        return {
            "type": "metal",
            "albedo": _albedo_description(material.albedo),
            "fuzz": material.fuzz,
        }
    if isinstance(material, DielectricMaterial):
        return {"type": "dielectric", "refindex": material.ref_index}
    raise TypeError(f"Unsupported material: {material!r}")


def _albedo_description(albedo: tuple[float, float, float]) -> dict[str, float]:
    return {"x": albedo[0], "y": albedo[1], "z": albedo[2]}
