"""Dielectric (glass/water) material implementation.

Dielectrics never absorb: the attenuation is always white. Each scatter
either reflects or refracts:

    - Snell's law gives the refracted direction.
    - When ratio * sin(theta) > 1 no refraction exists (total internal
      reflection) and the ray reflects.
    - Otherwise Schlick's approximation of the Fresnel reflectance is
      compared against a uniform random draw to pick reflection.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, rng = scatter_dielectric(
    >>> #     ior, incident_dir, normal, front_face, rng
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.rng import next_float
from pathtracer.core.vector import normalize, reflect, refract

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class DielectricMaterial:
    """Dielectric (glass/water) material properties.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ior: ti.f32


@ti.func
def schlick_reflectance(cosine: ti.f32, ior: ti.f32) -> ti.f32:
    """Approximate the Fresnel reflectance with Schlick's formula.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        ior: The material's index of refraction.

    Returns:
        r0 + (1 - r0)(1 - cosine)^5 with r0 = ((1 - ior) / (1 + ior))^2.
    """
    r0 = (1.0 - ior) / (1.0 + ior)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Scatter a ray through a dielectric boundary.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing against the incoming ray.
        front_face: 1 if the ray enters the material from outside,
            0 if it is leaving the material.
        state: The RNG state.

    Returns:
        A tuple of (scattered_direction, attenuation, new_state).
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    # Entering: air to glass (1/ior); leaving: glass to air (ior)
    refraction_ratio = ior
    if front_face == 1:
        refraction_ratio = 1.0 / ior

    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    rng = state
    do_reflect = 0
    if refraction_ratio * sin_theta > 1.0:
        # Total internal reflection
        do_reflect = 1
    else:
        choice, rng = next_float(rng)
        if choice < schlick_reflectance(cos_theta, ior):
            do_reflect = 1

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if do_reflect == 1:
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio)

    return scattered_direction, attenuation, rng


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

# Storage for dielectric material properties
dielectric_iors = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(ior: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        ior: Index of refraction. Default is 1.5 (typical glass). Values
            below 1 are allowed and model e.g. an air bubble inside water.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If IOR is not positive.
    """
    if ior <= 0.0:
        raise ValueError(
            f"Index of refraction = {ior} is not positive. "
            "IOR must be > 0 for physically meaningful materials."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_iors[idx] = ior
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ior(material_idx: ti.i32) -> ti.f32:
    """Get the IOR for a dielectric material by index."""
    return dielectric_iors[material_idx]
