"""Summaries of sampled chains: highest density intervals, effective sample size, convergence across chains and posterior summaries."""

from collections.abc import Sequence
from dataclasses import dataclass
from warnings import warn

import numpy as np
from scipy.stats import gaussian_kde

from .errors import InvalidArgument


@dataclass(frozen=True)
class ChainSummary:
    """Posterior summary of a chain of scalar draws.

    Probabilities relative to `comp_value` and `rope` are None when those were not given.
    """

    mean: float
    median: float
    mode: float
    ess: float
    mcse: float
    hdi_mass: float
    hdi_low: float
    hdi_high: float
    comp_value: float | None = None
    prob_gt_comp_value: float | None = None
    rope: tuple[float, float] | None = None
    prob_lt_rope: float | None = None
    prob_in_rope: float | None = None
    prob_gt_rope: float | None = None


def hdi_of_samples(samples: np.ndarray, cred_mass: float = 0.95) -> tuple[float, float]:
    """Compute the highest density interval of a chain of scalar draws.

    The HDI is the narrowest interval running from one sorted draw to the draw
    `ceil(cred_mass * n)` places after it.
    This assumes the sampled distribution is unimodal.

    Parameters
    ----------
    samples : ndarray, shape (n,)
        Draws from the distribution.
    cred_mass : float, optional
        Probability mass inside the interval, in (0, 1). Default is 0.95.

    Returns
    -------
    (float, float)
        Lower and upper limits of the HDI.

    Raises
    ------
    InvalidArgument
        If there are no samples or `cred_mass` is outside (0, 1).
    """
    samples = _validate_samples(samples)
    _validate_cred_mass(cred_mass)

    sorted_samples = np.sort(samples)
    n = sorted_samples.size
    # Offset between the endpoints of each candidate interval
    n_inside = min(int(np.ceil(cred_mass * n)), n - 1)
    widths = sorted_samples[n_inside:] - sorted_samples[: n - n_inside]
    low = int(np.argmin(widths))
    return float(sorted_samples[low]), float(sorted_samples[low + n_inside])


def autocorrelation(samples: np.ndarray) -> np.ndarray:
    """Normalised autocorrelation of a chain for lags 0..n-1, computed with an FFT."""
    x = _validate_samples(samples)
    x = x - np.mean(x)
    n = x.size

    fft_x = np.fft.fft(x, n=2 * n)
    acf = np.fft.ifft(fft_x * np.conjugate(fft_x))[:n].real
    return acf / acf[0]


def effective_sample_size(samples: np.ndarray) -> float:
    """Effective sample size of a chain.

    ESS = n / (1 + 2 sum_k rho_k), where the sum over autocorrelations is truncated
    with Geyer's initial positive sequence: pairs of consecutive lags are added while
    their sum stays positive.

    A chain that never moves has no defined autocorrelation; its ESS is reported as n
    with a warning.
    """
    x = _validate_samples(samples)
    n = x.size
    if n < 3:
        return float(n)
    if np.ptp(x) == 0:
        warn("Chain is constant; effective sample size is not meaningful.", stacklevel=2)
        return float(n)

    acf = autocorrelation(x)
    rho_sum = 0.0
    for k in range(1, n - 1, 2):
        pair = acf[k] + acf[k + 1]
        if pair <= 0:
            break
        rho_sum += pair
    tau = 1.0 + 2.0 * rho_sum
    return float(min(n / tau, n))


def monte_carlo_standard_error(samples: np.ndarray, ess: float | None = None) -> float:
    """Standard error of the chain mean, sd / sqrt(ESS).

    The effective sample size is computed from the samples when not given.
    """
    x = _validate_samples(samples)
    if ess is None:
        ess = effective_sample_size(x)
    sd = np.std(x, ddof=1) if x.size > 1 else 0.0
    return float(sd / np.sqrt(ess))


def gelman_rubin(chains: Sequence[np.ndarray]) -> float:
    """Potential scale reduction factor of several chains of the same parameter.

    Compares the variance between chain means with the variance within chains.
    Values close to 1 indicate the chains have converged to the same distribution;
    values well above 1 indicate they have not.

    Parameters
    ----------
    chains : sequence of ndarray, each shape (n,)
        Retained draws of at least two chains of equal length n >= 2.

    Returns
    -------
    float
        sqrt(((n - 1) / n W + B / n) / W), with W the mean within-chain variance
        and B / n the variance of the chain means. NaN, with a warning, if every
        chain is constant.

    Raises
    ------
    InvalidArgument
        If there are fewer than two chains, or the chains differ in length or
        hold fewer than two draws.
    """
    draws = _validate_chains(chains)
    n = draws.shape[1]

    within = np.mean(np.var(draws, axis=1, ddof=1))
    between = n * np.var(np.mean(draws, axis=1), ddof=1)
    if within == 0:
        warn("Chains are constant; potential scale reduction factor is not defined.", stacklevel=2)
        return float("nan")

    pooled = (n - 1) / n * within + between / n
    return float(np.sqrt(pooled / within))


def posterior_mode(samples: np.ndarray) -> float:
    """Mode of the draws, taken as the peak of a Gaussian kernel density estimate."""
    x = _validate_samples(samples)
    if np.ptp(x) == 0:
        return float(x[0])
    kde = gaussian_kde(x)
    points = np.linspace(x.min(), x.max(), 512)
    return float(points[np.argmax(kde(points))])


def summarize_chain(
    samples: np.ndarray,
    cred_mass: float = 0.95,
    comp_value: float | None = None,
    rope: Sequence[float] | None = None,
) -> ChainSummary:
    """Summarise a chain of scalar draws.

    Parameters
    ----------
    samples : ndarray, shape (n,)
        Retained draws from the posterior.
    cred_mass : float, optional
        Mass of the highest density interval. Default is 0.95.
    comp_value : float, optional
        Comparison value. If given, the probability of exceeding it is reported.
    rope : (float, float), optional
        Region of practical equivalence. If given, the probabilities of falling
        below, inside and above it are reported.

    Returns
    -------
    summary : ChainSummary
        Central tendency, ESS, MCSE, HDI and the optional decision probabilities.

    Raises
    ------
    InvalidArgument
        If there are no samples, `cred_mass` is outside (0, 1) or `rope` is not an increasing pair.
    """
    x = _validate_samples(samples)
    hdi_low, hdi_high = hdi_of_samples(x, cred_mass)
    ess = effective_sample_size(x)

    extra = {}
    if comp_value is not None:
        extra["comp_value"] = float(comp_value)
        extra["prob_gt_comp_value"] = float(np.mean(x > comp_value))
    if rope is not None:
        rope_low, rope_high = _validate_rope(rope)
        extra["rope"] = (rope_low, rope_high)
        extra["prob_lt_rope"] = float(np.mean(x < rope_low))
        extra["prob_in_rope"] = float(np.mean((x >= rope_low) & (x <= rope_high)))
        extra["prob_gt_rope"] = float(np.mean(x > rope_high))

    return ChainSummary(
        mean=float(np.mean(x)),
        median=float(np.median(x)),
        mode=posterior_mode(x),
        ess=ess,
        mcse=monte_carlo_standard_error(x, ess),
        hdi_mass=cred_mass,
        hdi_low=hdi_low,
        hdi_high=hdi_high,
        **extra,
    )


def _validate_samples(samples: np.ndarray) -> np.ndarray:
    x = np.asarray(samples, dtype=float)
    if x.ndim != 1:
        raise InvalidArgument("Samples must be one-dimensional.")
    if x.size == 0:
        raise InvalidArgument("Samples must not be empty.")
    return x


def _validate_chains(chains: Sequence[np.ndarray]) -> np.ndarray:
    chains = [_validate_samples(chain) for chain in chains]
    if len(chains) < 2:
        raise InvalidArgument("Need at least two chains.")
    if len({chain.size for chain in chains}) != 1:
        raise InvalidArgument("Chains must all have the same length.")
    if chains[0].size < 2:
        raise InvalidArgument("Chains must hold at least two draws each.")
    return np.stack(chains)


def _validate_cred_mass(cred_mass: float) -> None:
    if not 0.0 < cred_mass < 1.0:
        raise InvalidArgument("cred_mass must lie strictly between 0 and 1.")


def _validate_rope(rope: Sequence[float]) -> tuple[float, float]:
    if len(rope) != 2 or rope[0] >= rope[1]:
        raise InvalidArgument("rope must be a pair (low, high) with low < high.")
    return float(rope[0]), float(rope[1])
