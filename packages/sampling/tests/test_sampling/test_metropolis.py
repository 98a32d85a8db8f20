"""Tests for the random-walk Metropolis sampler.

Focus: reproducibility, chain bookkeeping, support handling, burn-in handling
and parallel runs of independent chains.
"""

from dataclasses import FrozenInstanceError, replace

import numpy as np
import pytest
from sampling.data import ObservedData
from sampling.errors import InvalidArgument
from sampling.likelihood import BernoulliLikelihood
from sampling.metropolis import (
    MetropolisChain,
    MetropolisConfig,
    iter_chain,
    run_chain,
    run_chains,
    sample_posterior,
)
from sampling.posterior import TargetSpecification
from sampling.priors import BetaPrior, UniformPrior


@pytest.fixture
def data() -> ObservedData:
    """Eleven heads in fourteen flips."""
    return ObservedData.from_counts(z=11, n=14)


@pytest.fixture
def target() -> TargetSpecification:
    """Bernoulli likelihood with a flat prior on [0, 1]."""
    return TargetSpecification(BernoulliLikelihood(), BetaPrior(1.0, 1.0))


@pytest.fixture
def small_config() -> MetropolisConfig:
    """Short chains for quick tests."""
    return MetropolisConfig(proposal_sd=0.2, chain_length=500, start_value=0.5)


def test_chain_bookkeeping(target: TargetSpecification, data: ObservedData) -> None:
    """Chain has the requested length, starts at the start value and counts every proposal."""
    chain = run_chain(target, data, proposal_sd=0.2, chain_length=300, start_value=0.3, seed=1)

    assert len(chain) == 300
    assert chain.trajectory[0] == 0.3
    assert chain.n_accepted + chain.n_rejected == 299
    assert 0.0 < chain.acceptance_rate < 1.0


def test_chain_is_reproducible(target: TargetSpecification, data: ObservedData) -> None:
    """Identical arguments give bit-identical chains."""
    kwargs = dict(proposal_sd=0.1, chain_length=1000, start_value=0.01, seed=47405)

    first = run_chain(target, data, **kwargs)
    second = run_chain(target, data, **kwargs)

    np.testing.assert_array_equal(first.trajectory, second.trajectory)
    assert first.n_accepted == second.n_accepted
    assert first.n_rejected == second.n_rejected


def test_different_seeds_give_different_chains(
    target: TargetSpecification, data: ObservedData
) -> None:
    """The seed drives the random stream."""
    first = run_chain(target, data, 0.2, 200, 0.5, seed=1)
    second = run_chain(target, data, 0.2, 200, 0.5, seed=2)

    assert not np.array_equal(first.trajectory, second.trajectory)


def test_stays_put_when_rejected(target: TargetSpecification, data: ObservedData) -> None:
    """The chain only changes state on accepted proposals."""
    walk = list(iter_chain(target, data, 0.5, 500, 0.5, seed=3))

    for (previous, _), (current, accepted) in zip(walk, walk[1:]):
        if accepted:
            assert current != previous
        else:
            assert current == previous


def test_iter_chain_matches_run_chain(
    target: TargetSpecification, data: ObservedData
) -> None:
    """The lazy walk and the materialised chain agree."""
    walk = list(iter_chain(target, data, 0.2, 100, 0.5, seed=9))
    chain = run_chain(target, data, 0.2, 100, 0.5, seed=9)

    assert walk[0] == (0.5, None)
    np.testing.assert_array_equal([state for state, _ in walk], chain.trajectory)
    assert sum(bool(accepted) for _, accepted in walk) == chain.n_accepted


def test_single_state_chain(target: TargetSpecification, data: ObservedData) -> None:
    """A chain of length 1 is just the start value and makes no proposals."""
    chain = run_chain(target, data, 0.2, 1, 0.7, seed=0)

    np.testing.assert_array_equal(chain.trajectory, [0.7])
    assert (chain.n_accepted, chain.n_rejected) == (0, 0)
    assert np.isnan(chain.acceptance_rate)


def test_chain_respects_support(data: ObservedData) -> None:
    """A prior that is 0 outside [0, 1] keeps every state inside [0, 1]."""
    target = TargetSpecification(BernoulliLikelihood(), UniformPrior(0.0, 1.0))

    for seed in range(5):
        chain = run_chain(target, data, 2.0, 2000, 0.5, seed=seed)
        assert np.all(chain.trajectory >= 0.0)
        assert np.all(chain.trajectory <= 1.0)


def test_escapes_zero_density_start(
    target: TargetSpecification, data: ObservedData
) -> None:
    """From a zero-density start the first proposal is always accepted and the chain enters the support."""
    chain = run_chain(target, data, 0.1, 2000, start_value=-0.01, seed=5)

    assert chain.trajectory[1] != chain.trajectory[0]
    assert chain.n_accepted >= 1

    inside = (chain.trajectory >= 0.0) & (chain.trajectory <= 1.0)
    first_inside = int(np.argmax(inside))
    assert inside.any()
    assert np.all(inside[first_inside:])


def test_acceptance_rate_falls_with_proposal_sd(
    target: TargetSpecification, data: ObservedData
) -> None:
    """Wider proposals are accepted less often on a unimodal target."""
    rates = []
    for proposal_sd in (0.02, 0.2, 2.0):
        chains = [
            run_chain(target, data, proposal_sd, 2000, 0.7, seed=seed)
            for seed in range(5)
        ]
        rates.append(np.mean([chain.acceptance_rate for chain in chains]))

    assert rates[0] > rates[1] > rates[2]


def test_recovers_conjugate_posterior_mean(
    target: TargetSpecification, data: ObservedData
) -> None:
    """Beta(1, 1) prior and 11/14 successes give a Beta(12, 4) posterior with mean 0.75."""
    config = MetropolisConfig(proposal_sd=0.2, chain_length=20_000, burn_in=500)

    samples = sample_posterior(target, data, seed=47405, config=config)

    assert samples.shape == (19_500,)
    assert np.mean(samples) == pytest.approx(0.75, abs=0.02)


@pytest.mark.parametrize("proposal_sd", [0.0, -0.1, np.inf, np.nan])
def test_invalid_proposal_sd(
    target: TargetSpecification, data: ObservedData, proposal_sd: float
) -> None:
    """Non-positive or non-finite proposal scales are rejected."""
    with pytest.raises(InvalidArgument, match="proposal_sd"):
        run_chain(target, data, proposal_sd, 10, 0.5, seed=0)


@pytest.mark.parametrize("chain_length", [0, -5, 5.5, 10.0])
def test_invalid_chain_length(
    target: TargetSpecification, data: ObservedData, chain_length: int
) -> None:
    """Chains need a whole number of states, at least one."""
    with pytest.raises(InvalidArgument, match="chain_length"):
        run_chain(target, data, 0.2, chain_length, 0.5, seed=0)


def test_invalid_arguments_fail_before_iterating(
    target: TargetSpecification, data: ObservedData
) -> None:
    """The lazy walk validates eagerly."""
    with pytest.raises(InvalidArgument):
        iter_chain(target, data, -1.0, 10, 0.5, seed=0)


def test_chain_is_read_only(target: TargetSpecification, data: ObservedData) -> None:
    """A finished chain cannot be modified."""
    chain = run_chain(target, data, 0.2, 10, 0.5, seed=0)

    with pytest.raises(ValueError):
        chain.trajectory[0] = 0.0
    with pytest.raises(FrozenInstanceError):
        chain.n_accepted = 0  # type: ignore[misc]


def test_retained_discards_burn_in() -> None:
    """retained() drops the first burn_in states."""
    chain = MetropolisChain(np.array([0.1, 0.2, 0.3, 0.4]), n_accepted=3, n_rejected=0)

    np.testing.assert_array_equal(chain.retained(2), [0.3, 0.4])
    np.testing.assert_array_equal(chain.retained(), chain.trajectory)
    with pytest.raises(InvalidArgument):
        chain.retained(-1)


def test_sample_posterior_shape(
    target: TargetSpecification, data: ObservedData, small_config: MetropolisConfig
) -> None:
    """Burn-in is removed from the returned draws."""
    config = replace(small_config, burn_in=100)

    samples = sample_posterior(target, data, seed=0, config=config)

    assert samples.shape == (400,)


def test_sample_posterior_excessive_burn_in_returns_full_chain(
    target: TargetSpecification, data: ObservedData, small_config: MetropolisConfig
) -> None:
    """Excessive burn_in >= chain_length: burn-in ignored with a warning, full chain retained."""
    config = replace(small_config, burn_in=small_config.chain_length)

    with pytest.warns(UserWarning, match="burn_in"):
        samples = sample_posterior(target, data, seed=0, config=config)

    assert samples.shape == (small_config.chain_length,)


def test_sample_posterior_matches_run_chain(
    target: TargetSpecification, data: ObservedData, small_config: MetropolisConfig
) -> None:
    """The configured run is the same chain as a direct call."""
    samples = sample_posterior(target, data, seed=11, config=small_config)
    chain = run_chain(target, data, 0.2, 500, 0.5, seed=11)

    np.testing.assert_array_equal(samples, chain.trajectory)


def test_config_is_frozen() -> None:
    """Configs are immutable and overridden with replace()."""
    config = MetropolisConfig()

    with pytest.raises(FrozenInstanceError):
        config.proposal_sd = 1.0  # type: ignore[misc]
    assert replace(config, proposal_sd=1.0).proposal_sd == 1.0


def test_run_chains_one_per_seed(
    target: TargetSpecification, data: ObservedData, small_config: MetropolisConfig
) -> None:
    """Each seed gives the chain run_chain would give."""
    seeds = [1, 2, 3]

    chains = run_chains(target, data, seeds, small_config)

    assert len(chains) == 3
    for seed, chain in zip(seeds, chains):
        expected = run_chain(target, data, 0.2, 500, 0.5, seed=seed)
        np.testing.assert_array_equal(chain.trajectory, expected.trajectory)


def test_run_chains_parallel_matches_serial(
    target: TargetSpecification, data: ObservedData, small_config: MetropolisConfig
) -> None:
    """Running chains in worker processes gives the same chains as running them serially."""
    seeds = [4, 5, 6, 7]

    serial = run_chains(target, data, seeds, small_config)
    parallel = run_chains(target, data, seeds, replace(small_config, parallel=True))

    for s, p in zip(serial, parallel):
        np.testing.assert_array_equal(s.trajectory, p.trajectory)
        assert s.n_accepted == p.n_accepted


def test_run_chains_validates_config(
    target: TargetSpecification, data: ObservedData
) -> None:
    """Invalid configurations fail before any chain runs."""
    with pytest.raises(InvalidArgument):
        run_chains(target, data, [0], MetropolisConfig(proposal_sd=0.0))


def test_chains_from_same_seed_compare_equal(
    target: TargetSpecification, data: ObservedData
) -> None:
    """Chains compare by trajectory and counts."""
    first = run_chain(target, data, 0.2, 300, 0.5, seed=21)
    second = run_chain(target, data, 0.2, 300, 0.5, seed=21)

    assert first == second
    assert hash(first) == hash(second)
    assert first != run_chain(target, data, 0.2, 300, 0.5, seed=22)


@pytest.mark.parametrize("start_value", [0.5, -0.01])
def test_random_stream_order(
    target: TargetSpecification, data: ObservedData, start_value: float
) -> None:
    """Each step draws the jump, then the uniform, whether or not the ratio exceeds 1."""
    proposal_sd, chain_length, seed = 0.3, 400, 123
    rng = np.random.default_rng(seed)
    current = start_value
    expected = [current]
    for _ in range(chain_length - 1):
        proposed = current + rng.normal(0.0, proposal_sd)
        u = rng.uniform()
        current_prob = target.relative_probability(current, data)
        proposed_prob = target.relative_probability(proposed, data)
        ratio = np.inf if current_prob == 0 else proposed_prob / current_prob
        if u < min(1.0, ratio):
            current = proposed
        expected.append(current)

    chain = run_chain(target, data, proposal_sd, chain_length, start_value, seed)

    np.testing.assert_array_equal(chain.trajectory, expected)
