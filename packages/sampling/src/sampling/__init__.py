"""Random-walk Metropolis sampling and the Bernoulli likelihood."""

from .data import ObservedData
from .errors import DegeneratePosterior, InvalidArgument
from .likelihood import BernoulliLikelihood, bernoulli_likelihood
from .metropolis import MetropolisChain, MetropolisConfig, run_chain, run_chains
from .posterior import TargetSpecification

__all__ = [
    "BernoulliLikelihood",
    "DegeneratePosterior",
    "InvalidArgument",
    "MetropolisChain",
    "MetropolisConfig",
    "ObservedData",
    "TargetSpecification",
    "bernoulli_likelihood",
    "run_chain",
    "run_chains",
]
