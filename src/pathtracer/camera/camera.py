"""Fixed axis-aligned camera for primary ray generation.

The camera sits at ``origin`` looking down the negative z axis with +y up.
Its image plane lies ``focal_length`` in front of the origin and is
described by three vectors derived once in ``setup_camera``:

- lower_left: the lower-left corner of the viewport
- horizontal: the full viewport width along +x
- vertical: the full viewport height along +y

Image coordinates are normalized:
    u in [0, 1]: left to right across the image
    v in [0, 1]: bottom to top across the image

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.camera import Camera, setup_camera, get_ray
    >>> setup_camera(Camera(aspect_ratio=16.0 / 9.0))
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti

from pathtracer.core.ray import Ray, make_ray

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for the fixed camera.

    Attributes:
        aspect_ratio: Width divided by height of the output image.
        viewport_height: Height of the image plane in world units.
        focal_length: Distance from the origin to the image plane.
        origin: Camera position in world space (x, y, z).
    """

    aspect_ratio: float = 16.0 / 9.0
    viewport_height: float = 2.0
    focal_length: float = 1.0
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.viewport_height <= 0.0:
            raise ValueError(f"Viewport height must be positive, got {self.viewport_height}")
        if self.focal_length <= 0.0:
            raise ValueError(f"Focal length must be positive, got {self.focal_length}")

    @property
    def viewport_width(self) -> float:
        """Width of the image plane in world units."""
        return self.aspect_ratio * self.viewport_height


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Derive the image-plane basis from a camera configuration.

    Must be called before rendering. The camera is read-only afterward.

    Args:
        camera: Camera configuration.
    """
    origin = np.array(camera.origin, dtype=np.float32)
    horizontal = np.array([camera.viewport_width, 0.0, 0.0], dtype=np.float32)
    vertical = np.array([0.0, camera.viewport_height, 0.0], dtype=np.float32)
    depth = np.array([0.0, 0.0, camera.focal_length], dtype=np.float32)

    lower_left = origin - horizontal / 2.0 - vertical / 2.0 - depth

    _camera_origin[None] = origin.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    The direction is the vector from the origin to the image-plane point
    and is not normalized.

    Args:
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray from the camera origin through the image-plane point.
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + u * _viewport_horizontal[None]
        + v * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical, lower_left.
    """
    result = {}
    for name, field in (
        ("origin", _camera_origin),
        ("horizontal", _viewport_horizontal),
        ("vertical", _viewport_vertical),
        ("lower_left", _lower_left_corner),
    ):
        vec = field[None]
        result[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return result
