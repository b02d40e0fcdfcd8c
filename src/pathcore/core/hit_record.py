"""Surface interaction records handed from an intersector to the materials.

The intersector (sphere lists, BVHs and so on) lives outside this package.
It reports each hit as a HitRecord whose normal always opposes the incoming
ray; the dielectric material relies on that orientation together with the
front_face flag to pick its refraction ratio.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.core.hit_record import make_hit_record
    >>> # Inside a Taichi kernel, after solving for t:
    >>> # rec = make_hit_record(ray, t, outward_normal, material_id)
"""

import taichi as ti
import taichi.math as tm

from src.pathcore.core.ray import Ray, dot, ray_at

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        point: The 3D point where the ray hit the surface.
        normal: Unit surface normal, oriented against the incoming ray
            (outward for front face hits, inward otherwise).
        t: The ray parameter at the intersection.
        front_face: 1 if the ray hit the outward-facing side, 0 otherwise.
        material_id: The registry id of the surface material.
    """

    point: vec3
    normal: vec3
    t: ti.f32
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def set_face_normal(ray: Ray, outward_normal: vec3):
    """Orient a geometric normal against the incoming ray.

    Args:
        ray: The incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple of (front_face, normal) where front_face is 1 when the ray
        arrives from outside and normal is flipped for back face hits.
    """
    front_face = 0
    normal = -outward_normal
    if dot(ray.direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def make_hit_record(ray: Ray, t: ti.f32, outward_normal: vec3, material_id: ti.i32) -> HitRecord:
    """Build a hit record at ray parameter t honoring the normal orientation.

    Args:
        ray: The ray that produced the hit.
        t: The ray parameter of the intersection.
        outward_normal: Unit normal pointing out of the surface.
        material_id: The registry id of the surface material.

    Returns:
        A HitRecord at ray_at(ray, t).
    """
    front_face, normal = set_face_normal(ray, outward_normal)
    return HitRecord(
        point=ray_at(ray, t),
        normal=normal,
        t=t,
        front_face=front_face,
        material_id=material_id,
    )
