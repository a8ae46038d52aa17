"""Taichi-based path tracer.

This package renders scenes of spheres with Lambertian, metal and
dielectric materials by Monte Carlo path tracing, with:
- An explicit, seedable random stream per pixel
- Closest-hit linear scan over the scene's spheres
- A bounded bounce loop with a sky gradient background
- 8-bit PNG output

Subpackages:
    core: Vector algebra, RNG, color, integrator and render driver
    geometry: Sphere primitive and intersection
    materials: Scattering models
    scene: Scene management, world queries and built-in scenes
    camera: Fixed camera with ray generation
    preview: PNG export and Matplotlib preview

Modules that declare Taichi fields (camera, materials, scene, renderer)
must be imported after ti.init().
"""

__version__ = "0.1.0"
