"""CLI command writing a synthetic demo point set."""

import sys

import click

from ..io import save_points
from ..synthetic import clustered_points


@click.command()
@click.argument("output", type=click.Path())
@click.option("--grid-points", "-n", default=200, show_default=True, type=int, help="Grid density of the point set")
@click.option("--seed", default=42, show_default=True, type=int, help="Random seed")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def demo_points(output, grid_points, seed, verbose):
    """Write clustered demo precipitation points to OUTPUT (.json or .npy)."""
    try:
        points = clustered_points(grid_points, seed=seed)
        save_points(points, output)
        if verbose:
            wet = sum(1 for p in points if p.value > 0)
            click.echo(f"{len(points)} points ({wet} with rain) written to '{output}'")
        else:
            click.echo(f"Saved '{output}'")
    except Exception as e:  # pragma: no cover - error handling path
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


__all__ = ["demo_points"]
