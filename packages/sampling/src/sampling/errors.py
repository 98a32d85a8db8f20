"""Errors raised by the samplers and posterior updaters."""


class InvalidArgument(ValueError):
    """Raised when an input has the wrong shape, range or scale."""


class DegeneratePosterior(ValueError):
    """Raised when the evidence is zero and the posterior cannot be normalised."""
