"""Unit tests for the light transport integrator.

Tests cover:
- Depth budget (depth 0 is black, each interaction consumes one level)
- Sky gradient for rays that miss the scene
- Mirror and glass paths that end in the sky deterministically
- Diffuse attenuation and absorption
- Determinism for a fixed seed
"""

import pytest


def _approx(color, expected, tol=1e-5):
    return all(abs(c - e) < tol for c, e in zip(color, expected))


class TestSky:
    """Tests for rays that escape the scene."""

    def test_depth_zero_is_black(self):
        """Test a zero depth budget yields black even with nothing to hit."""
        from pathtracer.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=0) == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize(
        "direction, expected",
        [
            ((0.0, 1.0, 0.0), (0.5, 0.7, 1.0)),
            ((0.0, -1.0, 0.0), (1.0, 1.0, 1.0)),
            ((0.0, 0.0, -1.0), (0.75, 0.85, 1.0)),
            # Direction length does not matter
            ((0.0, 5.0, 0.0), (0.5, 0.7, 1.0)),
        ],
    )
    def test_miss_returns_sky_gradient(self, direction, expected):
        """Test escaping rays blend white to sky blue by the unit direction's y."""
        from pathtracer.core.integrator import trace_ray

        color = trace_ray((0.0, 0.0, 0.0), direction, depth=1)
        assert _approx(color, expected)

    def test_sky_is_independent_of_origin(self):
        """Test the sky depends only on the ray direction."""
        from pathtracer.core.integrator import trace_ray

        a = trace_ray((0.0, 0.0, 0.0), (0.3, 0.4, -1.0), depth=5)
        b = trace_ray((10.0, -3.0, 7.0), (0.3, 0.4, -1.0), depth=5)
        assert _approx(a, b)


class TestSurfaceInteractions:
    """Tests for rays that hit materials."""

    def test_mirror_reflects_sky(self):
        """Test a perfect mirror returns the reflected sky times its albedo."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_metal_sphere((0.0, 0.0, -1.0), 0.5, (0.8, 0.6, 0.2), fuzz=0.0)

        # Reflected straight back along +z, where the sky is (0.75, 0.85, 1.0)
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=2)
        assert _approx(color, (0.8 * 0.75, 0.6 * 0.85, 0.2 * 1.0))

    def test_depth_exhausted_after_hit_is_black(self):
        """Test a path that runs out of depth on a surface contributes black."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_metal_sphere((0.0, 0.0, -1.0), 0.5, (0.8, 0.6, 0.2), fuzz=0.0)

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=1) == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 12345])
    def test_glass_on_axis_ends_in_sky(self, seed):
        """Test an on-axis ray through glass reaches the sky along +z or -z.

        Reflection and refraction both keep the ray on the z axis, and the
        sky along either direction is the same color, so every seed agrees.
        """
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_dielectric_sphere((0.0, 0.0, -1.0), 0.5, ior=1.5)

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=50, seed=seed)
        assert _approx(color, (0.75, 0.85, 1.0), tol=1e-4)

    def test_diffuse_attenuates(self):
        """Test a diffuse hit never exceeds albedo times the brightest sky."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))

        for seed in range(16):
            color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=10, seed=seed)
            assert all(0.0 <= c <= 0.5 + 1e-6 for c in color)

    def test_black_material_absorbs_everything(self):
        """Test a zero-albedo diffuse surface produces black."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.0, 0.0, 0.0))

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=10, seed=7)
        assert color == (0.0, 0.0, 0.0)

    def test_trapped_ray_is_black(self):
        """Test a ray bouncing inside a mirrored enclosure exhausts its depth."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        # Camera inside a mirror sphere: every reflection stays inside
        scene.add_metal_sphere((0.0, 0.0, 0.0), 5.0, (1.0, 1.0, 1.0), fuzz=0.0)

        color = trace_ray((0.0, 0.0, 0.0), (0.3, 0.2, -1.0), depth=20)
        assert color == (0.0, 0.0, 0.0)


class TestDeterminism:
    """Tests for reproducibility of traced rays."""

    def test_same_seed_same_color(self):
        """Test tracing with the same seed gives identical colors."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.default import create_default_scene

        create_default_scene()
        a = trace_ray((0.0, 0.0, 0.0), (-0.9, 0.1, -1.0), depth=50, seed=99)
        b = trace_ray((0.0, 0.0, 0.0), (-0.9, 0.1, -1.0), depth=50, seed=99)
        assert a == b

    def test_seed_changes_diffuse_path(self):
        """Test different seeds give different diffuse estimates."""
        from pathtracer.core.integrator import trace_ray
        from pathtracer.scene.default import create_diffuse_scene

        create_diffuse_scene()
        colors = {
            trace_ray((0.0, 0.0, 0.0), (0.0, -0.2, -1.0), depth=50, seed=seed)
            for seed in range(8)
        }
        assert len(colors) > 1
