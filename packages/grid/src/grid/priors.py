"""Prior mass functions on a grid of probabilities."""

import numpy as np
from scipy.stats import beta
from sampling.errors import InvalidArgument

from .updater import NDArrayFloat, _validate_grid


def uniform_prior_mass(grid: NDArrayFloat) -> NDArrayFloat:
    """Equal prior mass at every grid point."""
    grid = _validate_grid(grid)
    return np.full(grid.size, 1.0 / grid.size)


def triangular_prior_mass(grid: NDArrayFloat) -> NDArrayFloat:
    """Prior mass proportional to min(theta, 1 - theta), peaked at 0.5.

    Raises
    ------
    InvalidArgument
        If the grid leaves [0, 1] or puts no mass anywhere (e.g. only the endpoints).
    """
    grid = _validate_probability_grid(grid)
    return _normalise(np.minimum(grid, 1.0 - grid))


def beta_prior_mass(grid: NDArrayFloat, a: float, b: float) -> NDArrayFloat:
    """Prior mass proportional to the Beta(a, b) density at each grid point.

    Infinite densities at the endpoints (a < 1 or b < 1) are given zero mass.

    Raises
    ------
    InvalidArgument
        If the shape parameters are not positive, or the grid leaves [0, 1].
    """
    if a <= 0 or b <= 0:
        raise InvalidArgument("Beta shape parameters must be positive.")
    grid = _validate_probability_grid(grid)
    density = beta.pdf(grid, a, b)
    density[~np.isfinite(density)] = 0.0
    return _normalise(density)


def _validate_probability_grid(grid: NDArrayFloat) -> NDArrayFloat:
    grid = _validate_grid(grid)
    if grid[0] < 0.0 or grid[-1] > 1.0:
        raise InvalidArgument("Grid of probabilities must lie within [0, 1].")
    return grid


def _normalise(weights: NDArrayFloat) -> NDArrayFloat:
    total = weights.sum()
    if total <= 0:
        raise InvalidArgument("Prior puts no mass on any grid point.")
    return weights / total
