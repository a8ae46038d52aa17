"""Radiance colors and their conversion to display values.

Colors are linear RGB radiance stored in a ``vec3`` (red, green, blue).
Accumulation and attenuation use the ordinary vector operators (``+=``,
component-wise ``*``); this module adds the operations with color-specific
meaning:

    mix: linear interpolation between two colors
    desample: average of an accumulated sum of samples
    gamma_correct: square-root transform for display (gamma 2)
    to_display: clamp to [0, 1], scale by 255 and truncate

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.color import WHITE, SKY_BLUE, mix
    >>> @ti.kernel
    ... def horizon() -> ti.math.vec3:
    ...     return mix(WHITE, SKY_BLUE, 0.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# 8-bit display color
ivec3 = tm.ivec3

BLACK = vec3(0.0, 0.0, 0.0)
WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)


@ti.func
def mix(a: vec3, b: vec3, proportion: ti.f32) -> vec3:
    """Linearly interpolate from a (proportion 0) to b (proportion 1).

    A proportion outside [0, 1] is a programming error. The check runs when
    Taichi is initialized with ``debug=True``.
    """
    assert proportion >= 0.0 and proportion <= 1.0, "mix proportion must lie in [0, 1]"
    return a * (1.0 - proportion) + b * proportion


@ti.func
def desample(color: vec3, samples: ti.i32) -> vec3:
    """Average an accumulated color over the number of samples taken."""
    return color / ti.cast(samples, ti.f32)


@ti.func
def gamma_correct(color: vec3) -> vec3:
    """Apply gamma 2 correction (square root per channel)."""
    return ti.sqrt(color)


@ti.func
def to_display(color: vec3) -> ivec3:
    """Convert a color to 8-bit channel values.

    Each channel is clamped to [0, 1], scaled by 255 and truncated.

    Returns:
        Integer channels in [0, 255].
    """
    return ti.cast(tm.clamp(color, 0.0, 1.0) * 255.0, ti.i32)
