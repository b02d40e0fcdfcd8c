"""Material registry and scatter dispatch over the closed set of material kinds.

Every surface references its material by id. The registry stores each
material as one tagged record (kind plus the union of all parameters) in
Taichi fields, so a kernel resolves a hit to its material with a single
lookup and dispatches through scatter() without dynamic polymorphism.

Materials are registered from Python while the scene is built and are only
read by kernels afterwards.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.materials import LambertianMaterial, add_material, scatter_hit
    >>> ground = add_material(LambertianMaterial(albedo=(0.8, 0.8, 0.0)))
    >>> # Inside a kernel, after the intersector filled rec.material_id:
    >>> # did_scatter, attenuation, scattered = scatter_hit(ray_in, rec)
"""

import logging
from enum import IntEnum
from typing import Union

import taichi as ti
import taichi.math as tm

from src.pathcore.core.hit_record import HitRecord
from src.pathcore.core.ray import Ray, make_ray
from src.pathcore.materials.dielectric import DielectricMaterial, scatter_dielectric
from src.pathcore.materials.lambertian import LambertianMaterial, scatter_lambertian
from src.pathcore.materials.metal import MetalMaterial, scatter_metal

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

AnyMaterial = Union[LambertianMaterial, MetalMaterial, DielectricMaterial]


class MaterialKind(IntEnum):
    """Enumeration of supported material kinds.

    Used as the tag of the device-side Material record.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Device-side tagged material record.

    Attributes:
        kind: The MaterialKind tag.
        albedo: Reflectance color (Lambertian and Metal).
        fuzz: Reflection roughness (Metal).
        ref_index: Index of refraction (Dielectric).
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f32
    ref_index: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_MATERIALS = 1024

material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_fuzzes = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_ref_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

# Host-side copies of the registered materials, indexed by material id
_registered: list[AnyMaterial] = []


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0
    _registered.clear()


def add_material(material: AnyMaterial) -> int:
    """Add a material to the registry.

    Args:
        material: A LambertianMaterial, MetalMaterial or DielectricMaterial.

    Returns:
        The material id to store in hit records.

    Raises:
        TypeError: If material is not one of the supported kinds.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    albedo = (0.0, 0.0, 0.0)
    fuzz = 0.0
    ref_index = 0.0
    if isinstance(material, LambertianMaterial):
        kind = MaterialKind.LAMBERTIAN
        albedo = material.albedo
    elif isinstance(material, MetalMaterial):
        kind = MaterialKind.METAL
        albedo = material.albedo
        fuzz = material.fuzz
    elif isinstance(material, DielectricMaterial):
        kind = MaterialKind.DIELECTRIC
        ref_index = material.ref_index
    else:
        raise TypeError(f"Unsupported material: {material!r}")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_kinds[idx] = int(kind)
    material_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    material_fuzzes[idx] = fuzz
    material_ref_indices[idx] = ref_index
    num_materials[None] = idx + 1
    _registered.append(material)

    logger.debug("Registered material %d: %r", idx, material)
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


def get_material_info(material_id: int) -> AnyMaterial:
    """Get the host-side material registered under an id.

    Raises:
        ValueError: If the id is not registered.
    """
    if material_id < 0 or material_id >= len(_registered):
        raise ValueError(f"Invalid material_id: {material_id}")
    return _registered[material_id]


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Load the tagged material record for an id.

    Args:
        material_id: The registry id (typically rec.material_id).

    Returns:
        The Material record.
    """
    return Material(
        kind=material_kinds[material_id],
        albedo=material_albedos[material_id],
        fuzz=material_fuzzes[material_id],
        ref_index=material_ref_indices[material_id],
    )


# =============================================================================
# Scatter Dispatch
# =============================================================================


@ti.func
def scatter(material: Material, ray_in: Ray, rec: HitRecord):
    """Scatter a ray according to the material kind.

    Args:
        material: The tagged material record.
        ray_in: The incoming ray.
        rec: The hit record at the surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if the path continues, 0 if the ray is absorbed.
        - attenuation: The color to multiply into the path throughput.
        - scattered: The outgoing ray from rec.point.
    """
    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    scatter_direction = vec3(0.0, 0.0, 0.0)

    if material.kind == int(MaterialKind.LAMBERTIAN):
        lambertian_scatter, lambertian_attenuation, lambertian_ray = scatter_lambertian(
            material.albedo, ray_in, rec
        )
        did_scatter = lambertian_scatter
        attenuation = lambertian_attenuation
        scatter_direction = lambertian_ray.direction

    elif material.kind == int(MaterialKind.METAL):
        metal_scatter, metal_attenuation, metal_ray = scatter_metal(
            material.albedo, material.fuzz, ray_in, rec
        )
        did_scatter = metal_scatter
        attenuation = metal_attenuation
        scatter_direction = metal_ray.direction

    elif material.kind == int(MaterialKind.DIELECTRIC):
        dielectric_scatter, dielectric_attenuation, dielectric_ray = scatter_dielectric(
            material.ref_index, ray_in, rec
        )
        did_scatter = dielectric_scatter
        attenuation = dielectric_attenuation
        scatter_direction = dielectric_ray.direction

    return did_scatter, attenuation, make_ray(rec.point, scatter_direction)


@ti.func
def scatter_hit(ray_in: Ray, rec: HitRecord):
    """Scatter a ray off the material referenced by a hit record.

    Args:
        ray_in: The incoming ray.
        rec: The hit record; rec.material_id must be registered.

    Returns:
        A tuple of (did_scatter, attenuation, scattered), see scatter().
    """
    return scatter(get_material(rec.material_id), ray_in, rec)
