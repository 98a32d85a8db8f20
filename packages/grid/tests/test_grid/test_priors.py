"""Tests for grid prior mass functions."""

import numpy as np
import pytest
from grid.priors import beta_prior_mass, triangular_prior_mass, uniform_prior_mass
from sampling.errors import InvalidArgument


@pytest.fixture
def theta() -> np.ndarray:
    """Eleven-point grid over [0, 1]."""
    return np.linspace(0.0, 1.0, 11)


def test_uniform_prior_mass(theta: np.ndarray) -> None:
    """Equal mass everywhere."""
    prior = uniform_prior_mass(theta)

    np.testing.assert_allclose(prior, np.full(11, 1 / 11))


def test_triangular_prior_mass(theta: np.ndarray) -> None:
    """Mass proportional to min(theta, 1 - theta), zero at the endpoints."""
    prior = triangular_prior_mass(theta)

    assert prior.sum() == pytest.approx(1.0)
    assert prior[0] == 0.0
    assert prior[-1] == 0.0
    assert np.argmax(prior) == 5
    np.testing.assert_allclose(prior, prior[::-1])


def test_beta_prior_mass_shape(theta: np.ndarray) -> None:
    """Beta(3, 1) mass increases towards 1."""
    prior = beta_prior_mass(theta, 3.0, 1.0)

    assert prior.sum() == pytest.approx(1.0)
    assert np.all(np.diff(prior) > 0)


def test_beta_prior_mass_infinite_endpoints(theta: np.ndarray) -> None:
    """Infinite densities at the endpoints get no mass."""
    prior = beta_prior_mass(theta, 0.5, 0.5)

    assert prior[0] == 0.0
    assert prior[-1] == 0.0
    assert np.all(np.isfinite(prior))
    assert prior.sum() == pytest.approx(1.0)


def test_triangular_prior_needs_interior_points() -> None:
    """A grid of only the endpoints has no triangular mass."""
    with pytest.raises(InvalidArgument, match="no mass"):
        triangular_prior_mass(np.array([0.0, 1.0]))


@pytest.mark.parametrize("grid", [[-0.1, 0.5], [0.5, 1.2]])
def test_probability_grid_must_be_in_unit_interval(grid: list) -> None:
    """Grids of probabilities stay within [0, 1]."""
    with pytest.raises(InvalidArgument, match=r"\[0, 1\]"):
        beta_prior_mass(np.array(grid), 2.0, 2.0)


def test_beta_prior_mass_invalid_shape(theta: np.ndarray) -> None:
    """Shape parameters must be positive."""
    with pytest.raises(InvalidArgument, match="positive"):
        beta_prior_mass(theta, 0.0, 1.0)
