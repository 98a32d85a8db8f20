"""Prior densities for the Metropolis sampler."""

from ._protocols import DensityFunction
from .beta import BetaPrior
from .uniform import UniformPrior

__all__ = [
    "BetaPrior",
    "DensityFunction",
    "UniformPrior",
]
