"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Open-interval bounds on t
- Negative radius (inward normal)
- Hit points lie on the sphere surface
"""

import numpy as np
import pytest
import taichi as ti


def _hit_fields():
    return (
        ti.field(dtype=ti.i32, shape=()),
        ti.field(dtype=ti.f32, shape=()),
        ti.field(dtype=ti.math.vec3, shape=()),
        ti.field(dtype=ti.math.vec3, shape=()),
        ti.field(dtype=ti.i32, shape=()),
    )


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_reference_hit(self):
        """Test the ray (0,0,0)->(0,0,-1) hits the sphere at (0,0,-1) r=0.5 at t=0.5."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit, t_val, point, normal, front_face = _hit_fields()

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1e30)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.5) < 1e-6
        n = normal[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1]) < 1e-6
        assert abs(n[2] - 1.0) < 1e-6
        assert front_face[None] == 1

    def test_miss(self):
        """Test ray missing sphere entirely."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(5.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_sphere_behind_ray(self):
        """Test a sphere entirely behind the origin is not hit."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 5.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_inside_hits_far_wall_as_back_face(self):
        """Test ray starting inside sphere hits the far wall with a flipped normal."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit, t_val, point, normal, front_face = _hit_fields()

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-6
        # Normal faces against the ray, toward the center
        n = normal[None]
        assert abs(n[2] + 1.0) < 1e-6
        assert front_face[None] == 0

    def test_interval_is_open(self):
        """Test roots equal to t_min or t_max are rejected."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hits = ti.field(dtype=ti.i32, shape=3)
        t_far = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -2.0), radius=1.0)
            origin = vec3(0.0, 0.0, 0.0)
            direction = vec3(0.0, 0.0, -1.0)
            # Roots at t=1 and t=3
            hits[0] = hit_sphere(origin, direction, sphere, 0.001, 1.0).hit
            near_excluded = hit_sphere(origin, direction, sphere, 1.0, 10.0)
            hits[1] = near_excluded.hit
            t_far[None] = near_excluded.t
            hits[2] = hit_sphere(origin, direction, sphere, 1.0, 3.0).hit

        test_kernel()
        assert hits[0] == 0
        # Near root excluded, far root accepted
        assert hits[1] == 1
        assert abs(t_far[None] - 3.0) < 1e-5
        assert hits[2] == 0

    def test_negative_radius_flips_geometric_normal(self):
        """Test a negative radius sphere treats a ray from outside as a back-face hit."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit, t_val, point, normal, front_face = _hit_fields()

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=-0.5)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1e30)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.5) < 1e-6
        # Stored normal still faces the ray
        assert abs(normal[None][2] - 1.0) < 1e-6
        assert front_face[None] == 0

    def test_unnormalized_direction(self):
        """Test t is measured in units of the direction's length."""
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit, t_val, point, normal, front_face = _hit_fields()

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0), sphere, 0.001, 1e30)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.25) < 1e-6
        assert abs(point[None][2] + 0.5) < 1e-6


class TestSphereProperties:
    """Property checks over many random rays."""

    @pytest.mark.parametrize("radius", [0.5, 2.0, -0.7])
    def test_hits_lie_on_surface_within_bounds(self, radius):
        """Test every hit has t inside (t_min, t_max) and lies at |radius| from the center."""
        from pathtracer.core.rng import seed_rng
        from pathtracer.core.vector import random_in_range
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        n = 2048
        t_min, t_max = 0.001, 50.0
        hits = ti.field(dtype=ti.i32, shape=n)
        ts = ti.field(dtype=ti.f32, shape=n)
        distances = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel(r: ti.f32):
            center = vec3(0.2, -0.1, -3.0)
            sphere = Sphere(center=center, radius=r)
            for i in range(n):
                rng = seed_rng(11, i, 0)
                origin, rng = random_in_range(rng, -4.0, 4.0)
                # Aim inside the ball so nearly every ray crosses the surface
                half = 0.5 * ti.abs(r)
                target, rng = random_in_range(rng, -half, half)
                direction = center + target - origin
                record = hit_sphere(origin, direction, sphere, t_min, t_max)
                hits[i] = record.hit
                ts[i] = record.t
                distances[i] = (origin + record.t * direction - center).norm()

        test_kernel(radius)
        hit_mask = hits.to_numpy() == 1
        assert hit_mask.sum() > n * 9 // 10
        t = ts.to_numpy()[hit_mask]
        d = distances.to_numpy()[hit_mask]
        assert np.all(t > t_min)
        assert np.all(t < t_max)
        assert np.allclose(d, abs(radius), atol=1e-3)
