"""Lambertian (diffuse) material implementation.

Diffuse surfaces always scatter. The outgoing direction is the surface
normal plus a random unit vector, which concentrates bounces around the
normal. This is the normalized in-sphere distribution, not exact
cosine-weighted hemisphere sampling, and renders depend on that choice.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_lambertian(albedo, ray_in, rec)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.pathcore.core.hit_record import HitRecord
from src.pathcore.core.ray import Ray, make_ray, near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class LambertianMaterial:
    """Lambertian (diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB). Defaults to black.
    """

    albedo: tuple[float, float, float] = (0.0, 0.0, 0.0)


@ti.func
def scatter_lambertian_offset(albedo: vec3, rec: HitRecord, offset: vec3):
    """Scatter along rec.normal + offset.

    When the offset almost cancels the normal, the normal itself is used
    instead so the outgoing ray never has a zero direction.

    Args:
        albedo: The diffuse reflectance color (RGB).
        rec: The hit record at the surface.
        offset: A unit vector added to the normal.

    Returns:
        A tuple of (did_scatter, attenuation, scattered), see
        scatter_lambertian().
    """
    scatter_direction = rec.normal + offset

    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return 1, albedo, make_ray(rec.point, scatter_direction)


@ti.func
def scatter_lambertian(albedo: vec3, ray_in: Ray, rec: HitRecord):
    """Scatter a ray off a Lambertian surface.

    The direction is rec.normal + random_unit_vector(), with the near-zero
    fallback of scatter_lambertian_offset().

    Args:
        albedo: The diffuse reflectance color (RGB).
        ray_in: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit record at the surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where did_scatter is
        always 1 and attenuation equals albedo.
    """
    return scatter_lambertian_offset(albedo, rec, random_unit_vector())
