"""Vector algebra and random direction sampling.

Points and vectors share one representation, Taichi's single-precision
``vec3``. Every function here is pure: the random generators take an
explicit RNG state and hand back the advanced state with their result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.vector import reflect, vec3
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.rng import next_float, next_float_in_range

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components with magnitude below this count as zero
NEAR_ZERO_EPSILON = 1e-8

# Rejection sampling gives up after this many candidates
MAX_REJECTION_ATTEMPTS = 100


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length by dividing by its length."""
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether all components are within 1e-8 of zero.

    Used to detect scatter directions that cancelled out.

    Returns:
        1 if every component is below the threshold in magnitude, 0 otherwise.
    """
    result = 0
    if (
        ti.abs(v.x) < NEAR_ZERO_EPSILON
        and ti.abs(v.y) < NEAR_ZERO_EPSILON
        and ti.abs(v.z) < NEAR_ZERO_EPSILON
    ):
        result = 1
    return result


@ti.func
def reflect(v: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a unit normal: v - 2(v . n)n."""
    return v - 2.0 * tm.dot(v, normal) * normal


@ti.func
def refract(uv: vec3, normal: vec3, eta: ti.f32) -> vec3:
    """Refract a unit vector through a surface using Snell's law.

    The result is split into components perpendicular and parallel to the
    normal. The cosine term is clamped to 1 so that floating-point overshoot
    never reaches the square root as a negative value.

    Args:
        uv: The incoming direction (unit length).
        normal: The surface normal facing against uv (unit length).
        eta: Ratio of refractive indices, incident over transmitted.

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(tm.dot(-uv, normal), 1.0)
    r_out_perpendicular = eta * (uv + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perpendicular))) * normal
    return r_out_perpendicular + r_out_parallel


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_vector(state: ti.u32):
    """Generate a vector with each component uniform in [0, 1).

    Returns:
        A tuple of (vector, new_state).
    """
    rng = state
    x, rng = next_float(rng)
    y, rng = next_float(rng)
    z, rng = next_float(rng)
    return vec3(x, y, z), rng


@ti.func
def random_in_range(state: ti.u32, low: ti.f32, high: ti.f32):
    """Generate a vector with each component uniform in [low, high).

    Returns:
        A tuple of (vector, new_state).
    """
    rng = state
    x, rng = next_float_in_range(rng, low, high)
    y, rng = next_float_in_range(rng, low, high)
    z, rng = next_float_in_range(rng, low, high)
    return vec3(x, y, z), rng


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Generate a random unit-length direction.

    Candidates are drawn from the [-1, 1) cube and rejected until one falls
    strictly inside the unit ball; the accepted candidate is then normalized.
    The result is therefore uniform over the sphere's surface, not its
    volume. After MAX_REJECTION_ATTEMPTS misses the last candidate is
    normalized as is.

    Returns:
        A tuple of (unit_vector, new_state).
    """
    rng = state
    p = vec3(0.0, 0.0, 0.0)
    attempts = 0
    while attempts < MAX_REJECTION_ATTEMPTS:
        p, rng = random_in_range(rng, -1.0, 1.0)
        attempts += 1
        if length_squared(p) < 1.0:
            break
    return normalize(p), rng
