"""Built-in scenes.

The default scene is four spheres over a large ground sphere:

- Ground: yellowish diffuse sphere of radius 100 below the others
- Center: small glass sphere
- Left: hollow glass shell, an outer sphere and a negative-radius inner
  sphere sharing one glass material
- Right: fuzzy gold metal sphere

The diffuse scene (one diffuse sphere over a diffuse ground) is the
regression scene for deterministic image checksums.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.default import create_default_scene
    >>> scene = create_default_scene()
    >>> scene.get_sphere_count()
    5
"""

from pathtracer.scene.manager import SceneManager

# =============================================================================
# Default Scene Parameters
# =============================================================================

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.8, 0.8, 0.0)

GLASS_IOR = 1.5

CENTER_SPHERE = ((0.0, 0.0, -1.0), 0.3)
SHELL_CENTER = (-1.0, 0.0, -1.0)
SHELL_OUTER_RADIUS = 0.7
SHELL_INNER_RADIUS = -0.5

METAL_CENTER = (1.0, 0.0, -1.0)
METAL_RADIUS = 0.5
METAL_ALBEDO = (0.8, 0.6, 0.2)
METAL_FUZZ = 0.5

DIFFUSE_SPHERE_ALBEDO = (0.7, 0.3, 0.3)


def create_default_scene() -> SceneManager:
    """Create the built-in glass and metal scene.

    Returns:
        The populated SceneManager.
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    center_glass = scene.add_dielectric_material(GLASS_IOR)
    shell_glass = scene.add_dielectric_material(GLASS_IOR)
    gold = scene.add_metal_material(METAL_ALBEDO, fuzz=METAL_FUZZ)

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)
    scene.add_sphere(CENTER_SPHERE[0], CENTER_SPHERE[1], center_glass)
    scene.add_sphere(SHELL_CENTER, SHELL_OUTER_RADIUS, shell_glass)
    scene.add_sphere(SHELL_CENTER, SHELL_INNER_RADIUS, shell_glass)
    scene.add_sphere(METAL_CENTER, METAL_RADIUS, gold)

    return scene


def create_diffuse_scene() -> SceneManager:
    """Create a scene with one diffuse sphere resting on a diffuse ground.

    Returns:
        The populated SceneManager.
    """
    scene = SceneManager()
    scene.add_lambertian_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)
    scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, DIFFUSE_SPHERE_ALBEDO)
    return scene
