class QueueSimError(Exception):
    """Base class for errors raised by the simulation core."""


class InvalidConfiguration(QueueSimError, ValueError):
    """Rejected input: rho >= 1, non-positive rates, c < 1, shape below minimum."""


class GenerationFailure(QueueSimError):
    """The cumulative-probability table for arrivals could not be built."""


class UnboundedRetry(QueueSimError, RuntimeError):
    """A resampling loop exceeded its retry budget."""
