"""Core light-transport building blocks.

Components:
    ray: Ray data structure, vector algebra and random sampling
    hit_record: Surface interaction records consumed by the materials

Everything here is a Taichi function or dataclass, so it can be called
from any kernel that parallelizes over pixels or samples.
"""

from .hit_record import (
    HitRecord,
    make_hit_record,
    set_face_normal,
)
from .ray import (
    Ray,
    color,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    point3,
    random_double,
    random_double_range,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    unit_vector,
    vec3,
)

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "point3",
    "color",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "near_zero",
    "reflect",
    "refract",
    "random_double",
    "random_double_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "HitRecord",
    "set_face_normal",
    "make_hit_record",
]
