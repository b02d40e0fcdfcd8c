"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and angle-dependent reflection.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when the refraction ratio * sin(theta) > 1
    - A stochastic choice between reflection and refraction weighted by the
      reflectance at the incident angle

The reflectance term is r0 * (1 - r0) * (1 - cos)^5 rather than Schlick's
r0 + (1 - r0) * (1 - cos)^5. Existing renders were produced with this form,
so it is kept for output compatibility.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_dielectric(
    >>> #     ref_index, ray_in, rec
    >>> # )
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.pathcore.core.hit_record import HitRecord
from src.pathcore.core.ray import (
    Ray,
    dot,
    make_ray,
    random_double,
    reflect,
    refract,
    unit_vector,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class DielectricMaterial:
    """Dielectric (glass/water) material properties.

    Attributes:
        ref_index: Index of refraction, strictly greater than 1.0. Common
            values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Raises:
        ValueError: If ref_index is not a finite number greater than 1.0.
    """

    ref_index: float

    def __post_init__(self) -> None:
        # Written as a negated comparison so NaN is rejected too
        if not (self.ref_index > 1.0) or not math.isfinite(self.ref_index):
            raise ValueError(
                f"Index of refraction = {self.ref_index} is not a finite number greater "
                "than 1.0, which a refracting material requires."
            )


@ti.func
def reflectance(cosine: ti.f32, ref_ratio: ti.f32) -> ti.f32:
    """Probability of reflecting at a dielectric boundary.

    Args:
        cosine: Cosine of the angle between the incident ray and the normal.
        ref_ratio: Refraction ratio at the boundary.

    Returns:
        r0 * (1 - r0) * (1 - cosine)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.
    """
    r0 = (1.0 - ref_ratio) / (1.0 + ref_ratio)
    r0 = r0 * r0
    return r0 * (1.0 - r0) * (1.0 - cosine) ** 5


@ti.func
def incidence(ref_index: ti.f32, ray_in: Ray, rec: HitRecord):
    """Refraction ratio and incident angle of a ray at a dielectric boundary.

    Returns:
        A tuple of (refraction_ratio, unit_direction, cos_theta, sin_theta).
        The ratio is 1 / ref_index entering the medium (front face) and
        ref_index leaving it.
    """
    refraction_ratio = ref_index
    if rec.front_face == 1:
        refraction_ratio = 1.0 / ref_index

    unit_direction = unit_vector(ray_in.direction)
    cos_theta = tm.min(dot(-unit_direction, rec.normal), 1.0)
    sin_theta = tm.sqrt(1.0 - cos_theta * cos_theta)

    return refraction_ratio, unit_direction, cos_theta, sin_theta


@ti.func
def will_reflect(ref_index: ti.f32, ray_in: Ray, rec: HitRecord) -> ti.i32:
    """Determine if total internal reflection will occur.

    Args:
        ref_index: Index of refraction of the material.
        ray_in: The incoming ray.
        rec: The hit record at the surface.

    Returns:
        1 if no refracted direction exists at this angle, 0 otherwise.
    """
    refraction_ratio, unit_direction, cos_theta, sin_theta = incidence(ref_index, ray_in, rec)
    return 1 if refraction_ratio * sin_theta > 1.0 else 0


@ti.func
def scatter_dielectric(ref_index: ti.f32, ray_in: Ray, rec: HitRecord):
    """Scatter a ray at a dielectric boundary.

    Under total internal reflection (see will_reflect), or when a uniform
    draw falls below the reflectance, the ray reflects; otherwise it
    refracts.

    Args:
        ref_index: Index of refraction of the material.
        ray_in: The incoming ray.
        rec: The hit record at the surface. Its normal must oppose ray_in.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where did_scatter is
        always 1 and attenuation is white (clear glass does not tint).
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    refraction_ratio, unit_direction, cos_theta, sin_theta = incidence(ref_index, ray_in, rec)

    scatter_direction = vec3(0.0, 0.0, 0.0)
    if will_reflect(ref_index, ray_in, rec) == 1 or random_double() < reflectance(
        cos_theta, refraction_ratio
    ):
        scatter_direction = reflect(unit_direction, rec.normal)
    else:
        scatter_direction = refract(unit_direction, rec.normal, refraction_ratio)

    return 1, attenuation, make_ray(rec.point, scatter_direction)
