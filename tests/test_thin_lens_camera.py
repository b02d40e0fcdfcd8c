"""Unit tests for the thin-lens camera module.

Tests cover:
- Camera geometry and orthonormal basis computation
- Degenerate basis rejection
- Ray generation through the image center and corners
- Lens sampling for depth of field
"""

import math

import numpy as np
import pytest
import taichi as ti


def _default_camera(**overrides):
    from src.pathcore.camera.thin_lens import ThinLensCamera

    params = {
        "lookfrom": (0.0, 0.0, 0.0),
        "lookat": (0.0, 0.0, -1.0),
        "vup": (0.0, 1.0, 0.0),
        "vfov": 90.0,
        "aspect_ratio": 1.0,
        "aperture": 0.0,
        "focus_dist": 1.0,
    }
    params.update(overrides)
    return ThinLensCamera(**params)


class TestCameraGeometry:
    """Tests for host-side camera geometry."""

    def test_orthonormal_basis(self):
        """Test that u, v, w form an orthonormal basis for a tilted camera."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        camera = _default_camera(lookfrom=(13.0, 2.0, 3.0), lookat=(0.0, 0.0, 0.0), vfov=20.0)
        geometry = compute_camera_geometry(camera)
        u, v, w = geometry["u"], geometry["v"], geometry["w"]

        assert abs(np.dot(u, v)) < 1e-12
        assert abs(np.dot(u, w)) < 1e-12
        assert abs(np.dot(v, w)) < 1e-12
        for basis_vector in (u, v, w):
            assert abs(np.linalg.norm(basis_vector) - 1.0) < 1e-12

    def test_basis_directions_looking_at_negative_z(self):
        """Test basis vectors when the camera looks down the -z axis."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        geometry = compute_camera_geometry(_default_camera())

        np.testing.assert_allclose(geometry["w"], [0.0, 0.0, 1.0], atol=1e-12)
        np.testing.assert_allclose(geometry["u"], [1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(geometry["v"], [0.0, 1.0, 0.0], atol=1e-12)

    def test_viewport_scaled_by_focus_distance(self):
        """Test viewport size and lower-left corner at the focus distance."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        camera = _default_camera(vfov=90.0, aspect_ratio=2.0, focus_dist=3.0, aperture=0.5)
        geometry = compute_camera_geometry(camera)

        # tan(45 degrees) = 1, so the viewport is 2 high and 4 wide at unit distance
        np.testing.assert_allclose(geometry["vertical"], [0.0, 6.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(geometry["horizontal"], [12.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(geometry["lower_left"], [-6.0, -3.0, -3.0], atol=1e-12)
        assert float(geometry["lens_radius"]) == 0.25

    def test_non_orthogonal_vup_is_accepted(self):
        """Test that vup only needs to be non-parallel to the view direction."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        geometry = compute_camera_geometry(_default_camera(vup=(0.0, 1.0, 1.0)))
        np.testing.assert_allclose(geometry["v"], [0.0, 1.0, 0.0], atol=1e-12)

    def test_vup_parallel_to_view_raises(self):
        """Test that a degenerate basis is rejected."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        with pytest.raises(ValueError, match="parallel"):
            compute_camera_geometry(_default_camera(vup=(0.0, 0.0, 2.0)))

    def test_coincident_lookfrom_lookat_raises(self):
        """Test that lookfrom == lookat is rejected."""
        from src.pathcore.camera.thin_lens import compute_camera_geometry

        with pytest.raises(ValueError, match="coincide"):
            compute_camera_geometry(_default_camera(lookat=(0.0, 0.0, 0.0)))

    def test_camera_is_immutable(self):
        """Test that the camera configuration cannot be modified."""
        camera = _default_camera()
        with pytest.raises(AttributeError):
            camera.vfov = 45.0


class TestSetupCamera:
    """Tests for uploading the camera to Taichi fields."""

    def test_camera_info_matches_geometry(self):
        """Test that get_camera_info reflects the uploaded geometry."""
        from src.pathcore.camera.thin_lens import (
            compute_camera_geometry,
            get_camera_info,
            setup_camera,
        )

        camera = _default_camera(lookfrom=(0.0, 0.0, 3.0), lookat=(0.0, 0.0, 0.0), aperture=0.2)
        setup_camera(camera)
        info = get_camera_info()
        geometry = compute_camera_geometry(camera)

        for key in ("origin", "u", "v", "w", "horizontal", "vertical", "lower_left"):
            np.testing.assert_allclose(info[key], geometry[key], atol=1e-6)
        assert abs(info["lens_radius"] - 0.1) < 1e-6

    def test_camera_basis_in_kernel(self):
        """Test get_camera_origin and get_camera_basis inside a kernel."""
        from src.pathcore.camera.thin_lens import (
            get_camera_basis,
            get_camera_origin,
            setup_camera,
        )

        setup_camera(_default_camera(lookfrom=(1.0, 2.0, 3.0), lookat=(1.0, 2.0, 0.0)))
        result = ti.Vector.field(3, dtype=ti.f32, shape=4)

        @ti.kernel
        def test_kernel():
            u, v, w = get_camera_basis()
            result[0] = get_camera_origin()
            result[1] = u
            result[2] = v
            result[3] = w

        test_kernel()
        values = result.to_numpy()
        np.testing.assert_allclose(values[0], [1.0, 2.0, 3.0], atol=1e-6)
        np.testing.assert_allclose(values[3], [0.0, 0.0, 1.0], atol=1e-6)


class TestGetRay:
    """Tests for ray generation."""

    def test_center_ray_points_down_view_axis(self):
        """Test that the center ray of a pinhole camera points along -w."""
        from src.pathcore.camera.thin_lens import get_ray, setup_camera

        setup_camera(_default_camera())
        origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = get_ray(0.5, 0.5)
            origin[None] = ray.origin
            direction[None] = ti.math.normalize(ray.direction)

        test_kernel()
        np.testing.assert_allclose(origin.to_numpy(), [0.0, 0.0, 0.0], atol=1e-6)
        np.testing.assert_allclose(direction.to_numpy(), [0.0, 0.0, -1.0], atol=1e-6)

    def test_corner_rays_hit_viewport_corners(self):
        """Test that (0, 0) and (1, 1) reach the viewport corners unnormalized."""
        from src.pathcore.camera.thin_lens import get_ray, setup_camera

        setup_camera(_default_camera())
        directions = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            directions[0] = get_ray(0.0, 0.0).direction
            directions[1] = get_ray(1.0, 1.0).direction

        test_kernel()
        values = directions.to_numpy()
        np.testing.assert_allclose(values[0], [-1.0, -1.0, -1.0], atol=1e-6)
        np.testing.assert_allclose(values[1], [1.0, 1.0, -1.0], atol=1e-6)

    def test_field_of_view_angle(self):
        """Test that edge rays subtend half the vertical field of view."""
        from src.pathcore.camera.thin_lens import get_ray, setup_camera

        setup_camera(_default_camera(vfov=60.0, focus_dist=5.0))
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            direction[None] = get_ray(0.5, 1.0).direction

        test_kernel()
        d = direction.to_numpy()
        angle = math.degrees(math.atan2(d[1], -d[2]))
        assert abs(angle - 30.0) < 1e-3

    def test_aperture_jitters_origin_but_keeps_focus_point(self):
        """Test depth of field: origins vary on the lens, targets stay fixed."""
        from src.pathcore.camera.thin_lens import get_ray, setup_camera

        aperture = 0.5
        focus_dist = 4.0
        setup_camera(
            _default_camera(
                lookfrom=(0.0, 0.0, 0.0),
                lookat=(0.0, 0.0, -1.0),
                aperture=aperture,
                focus_dist=focus_dist,
            )
        )

        num_samples = 200
        origins = ti.Vector.field(3, dtype=ti.f32, shape=num_samples)
        targets = ti.Vector.field(3, dtype=ti.f32, shape=num_samples)

        @ti.kernel
        def test_kernel():
            for i in range(num_samples):
                ray = get_ray(0.25, 0.75)
                origins[i] = ray.origin
                targets[i] = ray.origin + ray.direction

        test_kernel()
        o = origins.to_numpy()
        t = targets.to_numpy()

        # Origins lie on the lens disk in the camera's uv-plane
        radii = np.sqrt(o[:, 0] ** 2 + o[:, 1] ** 2)
        assert radii.max() < aperture / 2.0 + 1e-6
        assert np.abs(o[:, 2]).max() < 1e-6
        assert radii.max() - radii.min() > 0.05

        # Every ray passes through the same point of the focal plane
        np.testing.assert_allclose(t, np.broadcast_to(t[0], t.shape), atol=1e-5)
        assert abs(t[0][2] + focus_dist) < 1e-5

    def test_zero_aperture_has_fixed_origin(self):
        """Test that a pinhole camera always starts rays at the camera origin."""
        from src.pathcore.camera.thin_lens import get_ray, setup_camera

        setup_camera(_default_camera(lookfrom=(0.0, 1.0, 2.0), lookat=(0.0, 0.0, 0.0)))
        num_samples = 50
        origins = ti.Vector.field(3, dtype=ti.f32, shape=num_samples)

        @ti.kernel
        def test_kernel():
            for i in range(num_samples):
                origins[i] = get_ray(ti.random(), ti.random()).origin

        test_kernel()
        o = origins.to_numpy()
        np.testing.assert_allclose(o, np.broadcast_to([0.0, 1.0, 2.0], o.shape), atol=1e-6)
