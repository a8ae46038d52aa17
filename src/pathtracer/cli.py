"""Command-line front end for the path tracer.

Usage:
    python -m pathtracer [options]

Options:
    --width WIDTH             Image width in pixels (default: 640)
    --aspect-ratio RATIO      Width / height, as 16/9 or 1.7778 (default: 16/9)
    --samples SAMPLES         Samples per pixel (default: 16)
    --max-depth DEPTH         Maximum bounces per camera ray (default: 100)
    --seed SEED               Seed for the per-pixel random streams (default: 0)
    --scene FILE              JSON scene file (default: built-in scene)
    --output OUTPUT           Output file path (default: render.png)
    --rows-per-batch ROWS     Rows per progress update (default: 16)
    --arch {cpu,gpu}          Taichi backend (default: gpu, falling back to cpu)
    --debug                   Enable Taichi debug mode (runtime assertions)
    --show                    Show the result in a Matplotlib window
    --quiet                   Only log warnings and errors
    --verbose                 Log every row band

Example:
    python -m pathtracer --width 320 --samples 32 --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from fractions import Fraction
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_aspect_ratio(value: str) -> float:
    """Parse an aspect ratio given as 'W/H' or as a decimal number."""
    try:
        ratio = float(Fraction(value.strip()))
    except (ValueError, ZeroDivisionError) as e:
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {value!r}") from e
    if ratio <= 0.0:
        raise argparse.ArgumentTypeError(f"aspect ratio must be positive: {value!r}")
    return ratio


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a sphere scene with Monte Carlo path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=parse_aspect_ratio,
        default=16.0 / 9.0,
        help="Width / height, as 16/9 or a decimal (default: 16/9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=16,
        help="Number of samples per pixel (default: 16)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=100,
        help="Maximum bounces per camera ray (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the per-pixel random streams (default: 0)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=16,
        help="Rows rendered per progress update (default: 16)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default=None,
        help="Taichi backend (default: gpu, falling back to cpu)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Taichi debug mode (runtime assertions, bounds checks)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress for every row band",
    )
    return parser.parse_args(argv)


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    """Configure root logging for command-line use."""
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def init_taichi(arch: str | None = None, debug: bool = False) -> None:
    """Initialize Taichi on the requested backend.

    Without an explicit backend the GPU is requested; Taichi falls back to
    the CPU when no GPU backend is available. With debug=True kernels check
    their asserts and field bounds at run time.
    """
    if arch == "cpu":
        ti.init(arch=ti.cpu, debug=debug)
        logger.info("Using CPU backend")
    else:
        ti.init(arch=ti.gpu, debug=debug)
        logger.info("Using GPU backend (CPU if no GPU is available)")


def render_scene(
    width: int = 640,
    aspect_ratio: float = 16.0 / 9.0,
    samples_per_pixel: int = 16,
    max_depth: int = 100,
    seed: int = 0,
    scene_file: str | None = None,
    output_path: str = "render.png",
    rows_per_batch: int = 16,
    show: bool = False,
) -> Path:
    """Render a scene and save it to a PNG file.

    Taichi must already be initialized.

    Args:
        width: Image width in pixels.
        aspect_ratio: Width divided by height.
        samples_per_pixel: Number of samples per pixel.
        max_depth: Maximum bounces per camera ray.
        seed: Seed for the per-pixel random streams.
        scene_file: JSON scene file, or None for the built-in scene.
        output_path: Output file path (PNG).
        rows_per_batch: Number of rows rendered between progress updates.
        show: If True, show the result in a Matplotlib window.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.camera.camera import Camera, setup_camera
    from pathtracer.core.renderer import Renderer, RenderSettings
    from pathtracer.preview.export import save_png
    from pathtracer.scene.default import create_default_scene
    from pathtracer.scene.manager import load_scene_file

    settings = RenderSettings(
        image_width=width,
        aspect_ratio=aspect_ratio,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
        seed=seed,
        rows_per_batch=rows_per_batch,
    )

    if scene_file is None:
        scene = create_default_scene()
    else:
        scene = load_scene_file(scene_file)
    logger.info(
        "Scene has %d spheres and %d materials",
        scene.get_sphere_count(),
        scene.get_material_count(),
    )

    setup_camera(Camera(aspect_ratio=aspect_ratio))

    renderer = Renderer(settings)
    renderer.render()

    output_file = Path(output_path)
    save_png(renderer, output_file)

    if show:
        from pathtracer.preview.display import show_preview

        show_preview(renderer)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        init_taichi(args.arch, debug=args.debug)
        output_file = render_scene(
            width=args.width,
            aspect_ratio=args.aspect_ratio,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_file=args.scene,
            output_path=args.output,
            rows_per_batch=args.rows_per_batch,
            show=args.show,
        )
        logger.info("Saved to: %s", output_file.absolute())
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
