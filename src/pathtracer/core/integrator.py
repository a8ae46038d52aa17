"""Light transport integrator.

``ray_color`` estimates the radiance arriving along a ray. A hit on a
scattering material continues along the scattered ray with the throughput
multiplied by the material's attenuation; an absorbed ray or an exhausted
depth budget contributes black; a ray that escapes the scene picks up the
sky gradient scaled by the accumulated throughput. The bounce sequence is
an explicit loop bounded by ``depth``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import trace_ray
    >>> color = trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=10)  # Sky blue
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.color import BLACK, SKY_BLUE, WHITE, mix
from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.rng import seed_rng
from pathtracer.core.vector import normalize
from pathtracer.materials.dielectric import (
    get_dielectric_ior,
    scatter_dielectric,
)
from pathtracer.materials.lambertian import (
    get_lambertian_albedo,
    scatter_lambertian,
)
from pathtracer.materials.metal import (
    get_metal_albedo,
    get_metal_fuzz,
    scatter_metal,
)
from pathtracer.scene.intersection import intersect_world
from pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default bounce budget per camera ray
MAX_DEPTH = 100

# Hits closer than T_MIN are ignored so a scattered ray does not
# re-intersect the surface it left (shadow acne)
T_MIN = 0.001
T_MAX = tm.inf


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Dispatch to the appropriate material scattering function.

    Args:
        material_id: The unified material ID.
        incident_direction: The incoming ray direction.
        normal: The surface normal (unit length, facing against the ray).
        front_face: 1 if hit front face, 0 if back face.
        state: The RNG state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state)
        where did_scatter is 0 if the ray was absorbed.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    rng = state

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = get_lambertian_albedo(type_index)
        scattered_direction, attenuation, rng = scatter_lambertian(albedo, normal, rng)
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        albedo = get_metal_albedo(type_index)
        fuzz = get_metal_fuzz(type_index)
        scattered_direction, attenuation, did_scatter, rng = scatter_metal(
            albedo, fuzz, incident_direction, normal, rng
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        ior = get_dielectric_ior(type_index)
        scattered_direction, attenuation, rng = scatter_dielectric(
            ior, incident_direction, normal, front_face, rng
        )
        did_scatter = 1

    return scattered_direction, attenuation, did_scatter, rng


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background gradient for rays that escape the scene.

    Blends from white at the bottom (unit y = -1) to sky blue at the
    top (unit y = 1).
    """
    unit_direction = normalize(direction)
    t = tm.clamp(0.5 * (unit_direction.y + 1.0), 0.0, 1.0)
    return mix(WHITE, SKY_BLUE, t)


@ti.func
def ray_color(ray: Ray, depth: ti.i32, state: ti.u32):
    """Estimate the color seen along a ray.

    Args:
        ray: The ray to trace.
        depth: Maximum number of surface interactions. A depth of 0
            always yields black.
        state: The RNG state.

    Returns:
        A tuple of (color, new_state).
    """
    origin = ray.origin
    direction = ray.direction
    color = BLACK
    throughput = WHITE
    rng = state

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(depth):
        if active == 1:
            hit_record = intersect_world(origin, direction, T_MIN, T_MAX)

            if hit_record.hit == 0:
                color = throughput * sky_color(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter, rng = _scatter_material(
                    hit_record.material_id,
                    direction,
                    hit_record.normal,
                    hit_record.front_face,
                    rng,
                )

                if did_scatter == 0:
                    # Ray was absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    origin = hit_record.point
                    direction = scattered_direction

    return color, rng


# =============================================================================
# Python-side Helpers
# =============================================================================


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
    seed: ti.u32,
) -> vec3:
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    rng = seed_rng(seed, 0, 0)
    color, rng = ray_color(ray, depth, rng)
    return color


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = MAX_DEPTH,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Trace one ray through the current scene.

    This is a Python-callable function for testing and debugging. For
    production rendering, use the Renderer which processes all pixels in
    parallel.

    Args:
        origin: The ray origin.
        direction: The ray direction.
        depth: Maximum number of surface interactions.
        seed: Seed for the ray's random stream.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_single_ray(
        origin[0],
        origin[1],
        origin[2],
        direction[0],
        direction[1],
        direction[2],
        depth,
        seed,
    )
    return (float(color[0]), float(color[1]), float(color[2]))
