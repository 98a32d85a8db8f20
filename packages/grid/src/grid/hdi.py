"""Highest density region of probability mass on a grid."""

from dataclasses import dataclass

import numpy as np
from sampling.errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class GridHDI:
    """Highest density region of a discrete distribution.

    Parameters
    ----------
    indices : ndarray of int
        Sorted grid indices inside the region. Not necessarily contiguous for a multimodal distribution.
    mass : float
        Total probability mass inside the region, at least the requested credible mass.
    height : float
        Smallest probability mass of any grid point inside the region.
    """

    indices: np.ndarray
    mass: float
    height: float

    def __post_init__(self) -> None:
        indices = np.array(self.indices, dtype=np.intp)
        indices.flags.writeable = False
        object.__setattr__(self, "indices", indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridHDI):
            return NotImplemented
        return (
            np.array_equal(self.indices, other.indices)
            and self.mass == other.mass
            and self.height == other.height
        )

    def __hash__(self) -> int:
        return hash((self.indices.tobytes(), self.mass, self.height))


def hdi_of_grid(prob_mass: np.ndarray, cred_mass: float = 0.95) -> GridHDI:
    """Find the highest density region of probability mass on a grid.

    Grid points are taken in decreasing order of mass until their cumulative mass
    reaches `cred_mass`. Every point with at least the mass of the last one taken
    belongs to the region, so ties at the boundary are all included.

    Parameters
    ----------
    prob_mass : ndarray, shape (n,)
        Probability mass at each grid point, summing to 1.
    cred_mass : float, optional
        Mass the region must contain, in (0, 1). Default is 0.95.

    Returns
    -------
    hdi : GridHDI
        Indices, mass and height of the region.

    Raises
    ------
    InvalidArgument
        If `prob_mass` is not a one-dimensional nonnegative array summing to 1,
        or `cred_mass` is outside (0, 1).
    """
    prob_mass = np.asarray(prob_mass, dtype=float)
    if prob_mass.ndim != 1 or prob_mass.size == 0:
        raise InvalidArgument("Probability mass must be a non-empty one-dimensional array.")
    if np.any(prob_mass < 0) or not np.isclose(prob_mass.sum(), 1.0, rtol=0, atol=1e-6):
        raise InvalidArgument("Probability mass must be nonnegative and sum to 1.")
    if not 0.0 < cred_mass < 1.0:
        raise InvalidArgument("cred_mass must lie strictly between 0 and 1.")

    sorted_mass = np.sort(prob_mass)[::-1]
    reached = np.cumsum(sorted_mass) >= cred_mass
    # Rounding can leave the total just short of cred_mass; fall back to the whole grid
    height_idx = int(np.argmax(reached)) if reached.any() else sorted_mass.size - 1
    height = float(sorted_mass[height_idx])

    indices = np.flatnonzero(prob_mass >= height)
    return GridHDI(
        indices=indices,
        mass=float(prob_mass[indices].sum()),
        height=height,
    )
