"""Core rendering module.

Components:
    rng: Explicit per-pixel random number streams
    vector: Vector algebra and random direction sampling
    ray: Ray data structure
    color: Color mixing and conversion to display values
    integrator: Light transport (ray_color)
    renderer: Render driver and image buffer

All compute-intensive operations use Taichi kernels for parallel execution.
"""

from .color import (
    BLACK,
    SKY_BLUE,
    WHITE,
    desample,
    gamma_correct,
    mix,
    to_display,
)
from .ray import Ray, make_ray, ray_at
from .rng import next_float, next_float_in_range, next_u32, seed_rng
from .vector import (
    dot,
    length,
    length_squared,
    near_zero,
    normalize,
    random_in_range,
    random_in_unit_sphere,
    random_vector,
    reflect,
    refract,
    vec3,
)

# Note: integrator and renderer are NOT imported here because they declare
# Taichi fields, which must happen after ti.init(). Import them directly:
#   from pathtracer.core.renderer import Renderer, RenderSettings

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "near_zero",
    "reflect",
    "refract",
    "random_vector",
    "random_in_range",
    "random_in_unit_sphere",
    "seed_rng",
    "next_u32",
    "next_float",
    "next_float_in_range",
    "BLACK",
    "WHITE",
    "SKY_BLUE",
    "mix",
    "desample",
    "gamma_correct",
    "to_display",
]
