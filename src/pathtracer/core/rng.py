"""Explicit random number streams for per-pixel rendering tasks.

Every random draw in the renderer takes an RNG state and returns the
advanced state alongside the value. The render driver seeds one state per
pixel from (seed, x, y), which keeps each pixel's samples independent of
thread scheduling and of how rows are batched into kernel launches.

The generator is a 32-bit xorshift stream seeded through a Wang integer
hash. It is not suitable for cryptography, only for Monte Carlo sampling.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.rng import seed_rng, next_float
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     rng = seed_rng(7, 0, 0)
    ...     value, rng = next_float(rng)
    ...     return value
"""

import taichi as ti

# 2^-24, maps the top 24 bits of a draw onto [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0


@ti.func
def _u32(value):
    return ti.cast(value, ti.u32)


@ti.func
def _shl(value, shift: ti.template()):
    """Shift left, dropping the bits that leave the 32-bit word first.

    The result equals the wrapping shift, but never trips Taichi's overflow
    checks in debug mode.
    """
    kept = value & _u32((1 << (32 - shift)) - 1)
    return kept << _u32(shift)


@ti.func
def hash_u32(key: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer with the Wang hash.

    Args:
        key: The integer to hash.

    Returns:
        A well-mixed 32-bit integer.
    """
    h = _u32(key)
    h = (h ^ _u32(61)) ^ ti.bit_shr(h, _u32(16))
    h = h * _u32(9)
    h = h ^ ti.bit_shr(h, _u32(4))
    h = h * _u32(0x27D4EB2D)
    h = h ^ ti.bit_shr(h, _u32(15))
    return h


@ti.func
def seed_rng(seed: ti.u32, x: ti.i32, y: ti.i32) -> ti.u32:
    """Derive the RNG state for the pixel at (x, y).

    Args:
        seed: The render seed shared by every pixel of a frame.
        x: Pixel column.
        y: Pixel row.

    Returns:
        A non-zero RNG state.
    """
    state = hash_u32(_u32(seed) ^ hash_u32(_u32(x) ^ hash_u32(_u32(y) + _u32(0x2545F491))))
    if state == _u32(0):
        state = _u32(1)
    return state


@ti.func
def next_u32(state: ti.u32) -> ti.u32:
    """Advance a xorshift32 state by one step."""
    x = _u32(state)
    x = x ^ _shl(x, 13)
    x = x ^ ti.bit_shr(x, _u32(17))
    x = x ^ _shl(x, 5)
    return x


@ti.func
def next_float(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: The current RNG state.

    Returns:
        A tuple of (value, new_state).
    """
    new_state = next_u32(state)
    value = ti.cast(ti.bit_shr(new_state, _u32(8)), ti.f32) * _INV_2_POW_24
    return value, new_state


@ti.func
def next_float_in_range(state: ti.u32, low: ti.f32, high: ti.f32):
    """Draw a uniform float in [low, high).

    Returns:
        A tuple of (value, new_state).
    """
    unit, new_state = next_float(state)
    return low + (high - low) * unit, new_state
