"""Ray data structure, vector algebra and random sampling for path tracing.

This module provides the Ray dataclass together with the vector operations
and Monte Carlo sampling helpers that the camera and the materials build on.
All operations are Taichi functions, callable from any kernel.

Vectors, points and colors share one type (``vec3``). The arithmetic
operators of ``vec3`` already cover addition, subtraction, component-wise
multiplication, negation and scalar add/multiply/divide; the named helpers
below add the products, lengths and the reflection/refraction operators.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Semantic aliases: a spatial point and a linear RGB color
point3 = vec3
color = vec3

# Attempts before a rejection sampler gives up
MAX_REJECTION_ATTEMPTS = 100


@ti.dataclass
class Ray:
    """A half-line with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to
            be unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The vector must have nonzero length. A zero vector produces NaN
    components; no fallback value is substituted.

    Args:
        v: The input vector.

    Returns:
        v / length(v).
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Returns:
        1 if every component is below 1e-8 in magnitude, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, normal: vec3) -> vec3:
    """Mirror a vector about a surface normal.

    Computes v - 2 (v . n) n. The normal must be unit length for the
    result to be a reflection.

    Args:
        v: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        The reflected direction.
    """
    return v - 2.0 * dot(v, normal) * normal


@ti.func
def refract(uv: vec3, normal: vec3, etai_over_etat: ti.f32) -> vec3:
    """Refract a unit vector through a surface using Snell's law.

    The result is split into a component parallel to the surface and one
    along the normal:

        cos_theta = (-uv) . n
        parallel  = etai_over_etat * (uv + cos_theta * n)
        perp      = -sqrt(1 - |parallel|^2) * n

    Only meaningful when etai_over_etat * sin_theta <= 1, so callers rule out
    total internal reflection first. Near the critical angle the f32 rounding
    of |parallel|^2 can push 1 - |parallel|^2 slightly below zero; its
    magnitude is used so the result never contains NaN.

    Args:
        uv: The incoming unit direction.
        normal: The unit surface normal, facing against uv.
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = dot(-uv, normal)
    r_out_parallel = etai_over_etat * (uv + cos_theta * normal)
    r_out_perp = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_parallel))) * normal
    return r_out_parallel + r_out_perp


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================
#
# ti.random keeps its generator state per thread, so samples drawn from
# parallel kernel iterations are independent streams. Seed them through
# ti.init(random_seed=...).


@ti.func
def random_double() -> ti.f32:
    """Uniform random scalar in [0, 1)."""
    return ti.random(ti.f32)


@ti.func
def random_double_range(lo: ti.f32, hi: ti.f32) -> ti.f32:
    """Uniform random scalar in [lo, hi)."""
    return lo + (hi - lo) * random_double()


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit sphere.

    Uses rejection sampling in the [-1, 1]^3 cube.

    Returns:
        A random point with squared length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = vec3(
                random_double_range(-1.0, 1.0),
                random_double_range(-1.0, 1.0),
                random_double_range(-1.0, 1.0),
            )
            if length_squared(p) < 1.0:
                found = True
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector by normalizing random_in_unit_sphere().

    Lambertian scattering adds this to the surface normal, which yields the
    normalized in-sphere distribution rather than exact cosine weighting.
    """
    return unit_vector(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for lens sampling in the thin-lens camera.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = vec3(
                random_double_range(-1.0, 1.0),
                random_double_range(-1.0, 1.0),
                0.0,
            )
            if p.x * p.x + p.y * p.y < 1.0:
                found = True
    return p
