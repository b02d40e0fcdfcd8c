"""Metal (specular reflective) material implementation.

This module implements the metal BSDF, which models specular reflection with
optional fuzz. Polished metals (fuzz=0) produce mirror-like reflections,
while fuzzy metals scatter reflected rays within a ball around the mirror
direction.

The reflection formula is:
    R = I - 2(I . N)N

where I is the unit incident direction and N is the surface normal.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_metal(
    >>> #     albedo, fuzz, ray_in, rec
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.pathcore.core.hit_record import HitRecord
from src.pathcore.core.ray import (
    Ray,
    dot,
    make_ray,
    random_in_unit_sphere,
    reflect,
    unit_vector,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class MetalMaterial:
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB). Defaults to black.
        fuzz: Surface roughness in [0, 1]. 0 = perfect mirror.

    Raises:
        ValueError: If fuzz is outside [0, 1].
    """

    albedo: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        # Written as a negated range so NaN is rejected too
        if not (0.0 <= self.fuzz <= 1.0):
            raise ValueError(
                f"Fuzz = {self.fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, ray_in: Ray, rec: HitRecord):
    """Scatter a ray off a metal surface.

    Reflects the unit incident direction about the normal and perturbs it by
    a random point in the unit sphere scaled by fuzz. The ray is absorbed
    when the perturbed direction points into the surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The surface roughness in [0, 1].
        ray_in: The incoming ray.
        rec: The hit record at the surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if the direction leaves the surface, 0 if absorbed.
        - attenuation: The albedo.
        - scattered: The reflected ray from the hit point. Its direction is
          not normalized.
    """
    reflected = reflect(unit_vector(ray_in.direction), rec.normal)
    scatter_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 0
    if dot(scatter_direction, rec.normal) > 0.0:
        did_scatter = 1

    return did_scatter, albedo, make_ray(rec.point, scatter_direction)
