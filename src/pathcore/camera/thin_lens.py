"""Thin-lens camera model for primary ray generation with depth of field.

This module implements a positionable camera that generates primary rays.
The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view in degrees
- Arbitrary aspect ratios
- A finite aperture focused at a chosen distance (depth of field)

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The image plane sits at focus_dist in front of the camera. Rays start from a
random point on the lens disk and pass through the same point of the image
plane, so only geometry at focus_dist stays sharp. An aperture of 0 turns the
model into a pinhole camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.pathcore.camera.thin_lens import ThinLensCamera, setup_camera, get_ray
    >>>
    >>> camera = ThinLensCamera(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=16.0 / 9.0,
    ...     aperture=0.1,
    ...     focus_dist=10.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathcore.core.ray import Ray, make_ray, random_in_unit_disk, vec3

logger = logging.getLogger(__name__)

# Basis vectors shorter than this are treated as degenerate
_DEGENERATE_EPSILON = 1e-12

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class ThinLensCamera:
    """Configuration for a thin-lens (depth of field) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction for camera orientation (typically (0, 1, 0)).
            Need not be orthogonal to the view direction, but must not be
            parallel to it.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 disables depth of field.
        focus_dist: Distance from the camera to the plane of perfect focus.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_dist: float = 1.0


def compute_camera_geometry(camera: ThinLensCamera) -> dict[str, np.ndarray]:
    """Derive the camera basis and viewport from its configuration.

    Args:
        camera: Camera configuration with position, orientation, FOV and lens.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        (float64 arrays of shape (3,)) and lens_radius (0-d array).

    Raises:
        ValueError: If lookfrom equals lookat or vup is parallel to the view
            direction, which leaves the basis undefined.
    """
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h
    viewport_width = camera.aspect_ratio * viewport_height

    origin = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    # w points from lookat toward lookfrom (backward)
    w = origin - lookat
    w_norm = np.linalg.norm(w)
    if w_norm < _DEGENERATE_EPSILON:
        raise ValueError(f"lookfrom {camera.lookfrom} and lookat {camera.lookat} coincide")
    w = w / w_norm

    u = np.cross(vup, w)
    u_norm = np.linalg.norm(u)
    if u_norm < _DEGENERATE_EPSILON:
        raise ValueError(f"vup {camera.vup} is parallel to the view direction")
    u = u / u_norm

    v = np.cross(w, u)

    horizontal = u * viewport_width * camera.focus_dist
    vertical = v * viewport_height * camera.focus_dist
    lower_left = origin - horizontal / 2.0 - vertical / 2.0 - w * camera.focus_dist

    return {
        "origin": origin,
        "u": u,
        "v": v,
        "w": w,
        "horizontal": horizontal,
        "vertical": vertical,
        "lower_left": lower_left,
        "lens_radius": np.array(camera.aperture / 2.0),
    }


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport at focus_dist
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())

_lens_radius = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: ThinLensCamera) -> None:
    """Upload the camera geometry to Taichi fields.

    Must be called from Python before any kernel calls get_ray(). The fields
    are only read by kernels afterwards.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the camera basis is degenerate.
    """
    geometry = compute_camera_geometry(camera)

    _camera_origin[None] = geometry["origin"].tolist()
    _camera_u[None] = geometry["u"].tolist()
    _camera_v[None] = geometry["v"].tolist()
    _camera_w[None] = geometry["w"].tolist()
    _viewport_horizontal[None] = geometry["horizontal"].tolist()
    _viewport_vertical[None] = geometry["vertical"].tolist()
    _lower_left_corner[None] = geometry["lower_left"].tolist()
    _lens_radius[None] = float(geometry["lens_radius"])

    logger.debug(
        "Camera set up at %s looking at %s (vfov=%s, aperture=%s, focus_dist=%s)",
        camera.lookfrom,
        camera.lookat,
        camera.vfov,
        camera.aperture,
        camera.focus_dist,
    )


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    The ray origin is jittered across the lens disk while the target point
    on the focal plane stays fixed:
    - s = 0 / 1: left / right edge of image
    - t = 0 / 1: bottom / top edge of image

    Args:
        s: Horizontal coordinate in [0, 1].
        t: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the sampled lens point toward the focal-plane point. The
        direction is not normalized.
    """
    rd = _lens_radius[None] * random_in_unit_disk()
    offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y

    origin = _camera_origin[None]
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]

    return make_ray(origin + offset, target - origin - offset)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position (lens center) in world space."""
    return _camera_origin[None]


@ti.func
def get_camera_basis():
    """Get the camera's orthonormal basis vectors.

    Returns:
        A tuple (u, v, w) where:
        - u: Right direction in world space
        - v: Up direction in world space
        - w: Backward direction (opposite view direction)
    """
    return _camera_u[None], _camera_v[None], _camera_w[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        as tuples and lens_radius as a float.
    """
    info: dict[str, tuple[float, float, float] | float] = {}
    for name, vector_field in (
        ("origin", _camera_origin),
        ("u", _camera_u),
        ("v", _camera_v),
        ("w", _camera_w),
        ("horizontal", _viewport_horizontal),
        ("vertical", _viewport_vertical),
        ("lower_left", _lower_left_corner),
    ):
        value = vector_field[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    info["lens_radius"] = float(_lens_radius[None])
    return info
