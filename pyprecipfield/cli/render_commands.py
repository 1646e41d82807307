"""
Rendering CLI Commands for PyPrecipField

Command line interface to render a precipitation field from a point file to
a PNG image, headless.

Author: B.G.
"""

import sys

import click

from ..colormap import DEFAULT_GRADIENT, Gradient
from ..errors import ConfigurationError, InitializationError
from ..io import load_points, normalize_points, save_png
from ..projection import CameraState
from ..render import BACKENDS, DEFAULT_CONFIG, PrecipitationLayer
from ..synthetic import DEFAULT_VIEW


@click.command()
@click.argument("points_file", type=click.Path(exists=True))
@click.argument("output_png", type=click.Path())
@click.option("--lng", type=float, default=DEFAULT_VIEW["center"][0], show_default=True, help="Camera centre longitude")
@click.option("--lat", type=float, default=DEFAULT_VIEW["center"][1], show_default=True, help="Camera centre latitude")
@click.option("--zoom", "-z", type=float, default=DEFAULT_VIEW["zoom"], show_default=True, help="Camera zoom level")
@click.option("--width", type=int, default=None, help="Image width in pixels (default: resolution)")
@click.option("--height", type=int, default=None, help="Image height in pixels (default: resolution)")
@click.option("--radius", type=float, default=None, help=f"Influence radius in km (default: {DEFAULT_CONFIG.influence_radius})")
@click.option("--steepness", type=float, default=None, help=f"Falloff steepness >= 1 (default: {DEFAULT_CONFIG.falloff_steepness})")
@click.option("--resolution", type=int, default=None, help=f"Default image size (default: {DEFAULT_CONFIG.resolution})")
@click.option("--min-value", type=float, default=None, help="Raw value mapped to 0 with --normalize")
@click.option("--max-value", type=float, default=None, help="Raw value mapped to 1 with --normalize")
@click.option("--normalize", is_flag=True, help="Normalise point values with --min-value/--max-value")
@click.option("--gradient", "gradient_spec", default=None, help='Colour table, e.g. "0.0:#87cefa,0.5:navy"')
@click.option(
    "--backend",
    "-b",
    type=click.Choice(sorted(BACKENDS)),
    default="numpy",
    show_default=True,
    help="Render backend",
)
@click.option("--arch", type=click.Choice(["cpu", "gpu"]), default="cpu", show_default=True, help="Taichi arch for the taichi backend")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def render_field(
    points_file, output_png, lng, lat, zoom, width, height, radius, steepness,
    resolution, min_value, max_value, normalize, gradient_spec, backend, arch, verbose,
):
    """
    Render a precipitation field to a PNG image.

    POINTS_FILE: Sample points (.npy array of [lng, lat, value] rows or .json)
    OUTPUT_PNG: Path for the RGBA output image

    Examples:

        # Render the default view at 512x512
        precip-render points.json field.png

        # Wider blobs, taichi on the GPU
        precip-render points.npy field.png --radius 40 -b taichi --arch gpu
    """
    try:
        changes = {
            "influence_radius": radius,
            "falloff_steepness": steepness,
            "resolution": resolution,
            "min_value": min_value,
            "max_value": max_value,
        }
        config = DEFAULT_CONFIG.merged(**{k: v for k, v in changes.items() if v is not None})
        gradient = Gradient.from_spec(gradient_spec) if gradient_spec else DEFAULT_GRADIENT

        if verbose:
            click.echo(f"Loading points from '{points_file}'...")
        points = load_points(points_file)
        if normalize:
            points = normalize_points(points, config)

        width = width or config.resolution
        height = height or config.resolution
        camera = CameraState((lng, lat), zoom, (width, height))

        if backend == "taichi":
            import taichi as ti

            ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu)

        if verbose:
            click.echo(
                f"Rendering {len(points)} points at zoom {zoom} around ({lng}, {lat}) "
                f"as {width}x{height} with the {backend} backend..."
            )
        layer = PrecipitationLayer("precipitation", points, config, gradient, backend=backend)
        try:
            rgba = layer.render(camera)
        finally:
            layer.release()

        save_png(rgba, output_png)
        visible = float((rgba[..., 3] > 0).mean())
        if verbose:
            click.echo(f"Saved '{output_png}' ({visible:.1%} of pixels covered)")
        else:
            click.echo(f"Rendered '{points_file}' -> '{output_png}'")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    except InitializationError as e:
        click.echo(f"Initialization error: {e}", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    render_field()
