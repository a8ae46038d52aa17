"""Sphere primitive and ray-sphere intersection.

The intersection solves |O + tD - C|^2 = r^2 with the half-b form of the
quadratic. The nearer root is preferred when it lies strictly inside
(t_min, t_max); otherwise the farther root is tried.

The sign of the radius selects the normal convention. A negative radius
flips the geometric normal (P - C) / r so that it points toward the
center, which is how the inner surface of a hollow shell is modelled.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.vector import length_squared, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Negative values give an
            inward-facing geometric normal.
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The point of impact. Only valid if hit == 1.
        normal: Unit surface normal, always facing against the incoming
            ray. Only valid if hit == 1.
        front_face: 1 if the geometric normal already faced against the
            ray, 0 if it had to be flipped. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    With oc = origin - center the quadratic coefficients are:
        a = |direction|^2
        h = direction . oc  (half of the usual b)
        c = |oc|^2 - radius^2

    A negative discriminant h^2 - a*c means the ray misses.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Hits at or before this parameter are ignored.
        t_max: Hits at or beyond this parameter are ignored.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray_origin - sphere.center
    a = length_squared(ray_direction)
    h = tm.dot(ray_direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t = (-h - sqrt_d) / a
        valid = (t > t_min) and (t < t_max)
        if not valid:
            t = (-h + sqrt_d) / a
            valid = (t > t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction

            geometric_normal = normalize((hit_point - sphere.center) / sphere.radius)
            if tm.dot(geometric_normal, ray_direction) < 0.0:
                is_front_face = 1
                hit_normal = geometric_normal
            else:
                hit_normal = -geometric_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )
