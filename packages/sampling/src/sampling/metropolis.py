"""Random-walk Metropolis sampling of a single scalar parameter."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import partial
from multiprocessing import Pool
from numbers import Integral
from typing import Any
from warnings import warn

import numpy as np

from .errors import InvalidArgument
from .posterior import TargetSpecification


@dataclass(frozen=True)
class MetropolisConfig:
    """Configuration of a Metropolis run.

    Defaults follow the textbook Bernoulli example: a long chain started near 0
    with a moderate proposal scale and no burn-in.

    `parallel` only affects `run_chains`, where each chain runs in a worker process.
    """

    proposal_sd: float = 0.2
    chain_length: int = 50_000
    start_value: float = 0.01
    burn_in: int = 0
    parallel: bool = False


@dataclass(frozen=True, eq=False)
class MetropolisChain:
    """Trajectory of a Metropolis run and its acceptance counts.

    Parameters
    ----------
    trajectory : ndarray, shape (chain_length,)
        States of the chain, starting with the start value. Read-only.
    n_accepted : int
        Number of accepted proposals.
    n_rejected : int
        Number of rejected proposals.
    """

    trajectory: np.ndarray
    n_accepted: int
    n_rejected: int

    def __post_init__(self) -> None:
        trajectory = np.array(self.trajectory, dtype=float)
        trajectory.flags.writeable = False
        object.__setattr__(self, "trajectory", trajectory)

    def __len__(self) -> int:
        return self.trajectory.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetropolisChain):
            return NotImplemented
        return (
            np.array_equal(self.trajectory, other.trajectory)
            and self.n_accepted == other.n_accepted
            and self.n_rejected == other.n_rejected
        )

    def __hash__(self) -> int:
        return hash((self.trajectory.tobytes(), self.n_accepted, self.n_rejected))

    @property
    def acceptance_rate(self) -> float:
        """Fraction of proposals accepted. NaN if no proposals were made."""
        n_proposed = self.n_accepted + self.n_rejected
        if n_proposed == 0:
            return float("nan")
        return self.n_accepted / n_proposed

    def retained(self, burn_in: int = 0) -> np.ndarray:
        """States after discarding the first `burn_in` entries."""
        if burn_in < 0:
            raise InvalidArgument("burn_in must be non-negative.")
        return self.trajectory[burn_in:]


def iter_chain(
    target: TargetSpecification,
    data: Any,
    proposal_sd: float,
    chain_length: int,
    start_value: float,
    seed: int | None,
) -> Iterator[tuple[float, bool | None]]:
    """Lazily walk a Metropolis chain.

    Yields `(state, accepted)` pairs. The first pair is `(start_value, None)`;
    every subsequent pair reports whether the proposal made at that step was accepted.
    The walk can only be restarted by calling again with the same seed.

    At each step the Gaussian jump is drawn before the uniform used to accept or reject it,
    so the random stream is consumed in a fixed order.

    Parameters
    ----------
    target : TargetSpecification
        Unnormalised target, exactly 0 outside its support.
    data : Any
        Observed data passed to the target's likelihood.
    proposal_sd : float
        Standard deviation of the Gaussian proposal kernel. Must be positive.
    chain_length : int
        Number of states, including the start value. Must be at least 1.
    start_value : float
        Initial state.
    seed : int | None
        Seed of the generator owned by this walk.

    Raises
    ------
    InvalidArgument
        If `proposal_sd` is not positive or `chain_length` is less than 1.
    """
    _validate_proposal_sd(proposal_sd)
    _validate_chain_length(chain_length)
    return _walk(target, data, proposal_sd, chain_length, float(start_value), seed)


def _walk(
    target: TargetSpecification,
    data: Any,
    proposal_sd: float,
    chain_length: int,
    current: float,
    seed: int | None,
) -> Iterator[tuple[float, bool | None]]:
    rng = np.random.default_rng(seed)
    current_prob = target.relative_probability(current, data)
    yield current, None

    for _ in range(chain_length - 1):
        proposed = current + rng.normal(0.0, proposal_sd)
        u = rng.uniform()
        proposed_prob = target.relative_probability(proposed, data)

        if current_prob == 0:
            # Escape a zero-density start
            acceptance_prob = 1.0
        else:
            acceptance_prob = min(1.0, proposed_prob / current_prob)

        accepted = bool(u < acceptance_prob)
        if accepted:
            current, current_prob = proposed, proposed_prob
        yield current, accepted


def run_chain(
    target: TargetSpecification,
    data: Any,
    proposal_sd: float,
    chain_length: int,
    start_value: float,
    seed: int | None,
) -> MetropolisChain:
    """Run a random-walk Metropolis chain.

    The output is bit-for-bit reproducible for identical arguments, including the seed.
    See `iter_chain` for the parameters.

    Returns
    -------
    chain : MetropolisChain
        Chain of length `chain_length` whose first entry is `start_value`.
        Accepted and rejected counts sum to `chain_length - 1`.
    """
    walk = iter_chain(target, data, proposal_sd, chain_length, start_value, seed)
    trajectory = np.empty(chain_length)
    n_accepted = 0
    for step, (state, accepted) in enumerate(walk):
        trajectory[step] = state
        n_accepted += bool(accepted)
    return MetropolisChain(
        trajectory=trajectory,
        n_accepted=n_accepted,
        n_rejected=chain_length - 1 - n_accepted,
    )


def sample_posterior(
    target: TargetSpecification,
    data: Any,
    seed: int | None,
    config: MetropolisConfig | None = None,
) -> np.ndarray:
    """Run one chain and return the draws retained after burn-in.

    Parameters
    ----------
    target : TargetSpecification
        Unnormalised target.
    data : Any
        Observed data passed to the target's likelihood.
    seed : int | None
        Seed of the chain's generator.
    config : MetropolisConfig, optional
        Run configuration. If None, the default configuration is used.

    Returns
    -------
    samples : ndarray, shape (chain_length - burn_in,)
        Retained draws. If `burn_in >= chain_length` the burn-in is ignored
        and the full chain is returned.
    """
    if config is None:
        config = MetropolisConfig()
    burn_in = _effective_burn_in(config)
    chain = _run_configured_chain(seed, target=target, data=data, config=config)
    return chain.retained(burn_in)


def run_chains(
    target: TargetSpecification,
    data: Any,
    seeds: Sequence[int],
    config: MetropolisConfig | None = None,
) -> list[MetropolisChain]:
    """Run independent chains, one per seed.

    Every chain owns its own generator, so running them in worker processes
    (`config.parallel`) gives the same chains as running them serially.
    The target and data must be picklable when running in parallel.

    Parameters
    ----------
    target : TargetSpecification
        Unnormalised target.
    data : Any
        Observed data passed to the target's likelihood.
    seeds : sequence of int
        One seed per chain.
    config : MetropolisConfig, optional
        Run configuration. If None, the default configuration is used.

    Returns
    -------
    chains : list of MetropolisChain
        Full chains, in the order of `seeds`. Burn-in is left to the caller.
    """
    if config is None:
        config = MetropolisConfig()
    _validate_proposal_sd(config.proposal_sd)
    _validate_chain_length(config.chain_length)

    run = partial(_run_configured_chain, target=target, data=data, config=config)
    if config.parallel:
        with Pool() as pool:
            return pool.map(run, seeds)
    return [run(seed) for seed in seeds]


def _run_configured_chain(
    seed: int | None,
    target: TargetSpecification,
    data: Any,
    config: MetropolisConfig,
) -> MetropolisChain:
    # Top-level so it can be pickled for multiprocessing
    return run_chain(
        target,
        data,
        proposal_sd=config.proposal_sd,
        chain_length=config.chain_length,
        start_value=config.start_value,
        seed=seed,
    )


def _effective_burn_in(config: MetropolisConfig) -> int:
    if config.burn_in < 0:
        raise InvalidArgument("burn_in must be non-negative.")
    if config.burn_in >= config.chain_length:
        warn(
            f"burn_in ({config.burn_in}) is not less than chain_length ({config.chain_length}). "
            "Keeping the full chain.",
            stacklevel=3,
        )
        return 0
    return config.burn_in


def _validate_proposal_sd(proposal_sd: float) -> None:
    if not np.isfinite(proposal_sd) or proposal_sd <= 0:
        raise InvalidArgument("proposal_sd must be a positive finite number.")


def _validate_chain_length(chain_length: int) -> None:
    if isinstance(chain_length, bool) or not isinstance(chain_length, Integral):
        raise InvalidArgument(f"chain_length must be an integer, got {chain_length!r}.")
    if chain_length < 1:
        raise InvalidArgument("chain_length must be at least 1.")
