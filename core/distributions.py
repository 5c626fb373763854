import math
import random
from typing import List, Union

from .errors import UnboundedRetry, InvalidConfiguration
from .models import ServiceDistribution

DEFAULT_MAX_RETRIES = 10_000
SERVICE_DECIMALS = 2

class VariateGenerator:
    """
    Random variates drawn from a single injectable uniform source.

    `source` is anything with a `.random()` method returning floats in [0, 1)
    (normally a `random.Random`). Passing an int or None seeds a new
    `random.Random` instead.
    """

    def __init__(self, source: Union[random.Random, int, None] = None,
                 max_retries: int = DEFAULT_MAX_RETRIES):
        if source is None or isinstance(source, int):
            source = random.Random(source)
        self._source = source
        self.max_retries = max_retries

    def uniform(self) -> float:
        return self._source.random()

    def _nonzero_uniform(self) -> float:
        for _ in range(self.max_retries):
            u = self.uniform()
            if u != 0.0:
                return u
        raise UnboundedRetry(f"uniform source returned 0 for {self.max_retries} draws")

    def exponential(self, mean: float) -> float:
        # mean = 1/rate
        return -math.log(1.0 - self.uniform()) * mean

    def normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        # Box-Muller, cosine branch only
        u = self._nonzero_uniform()
        v = self._nonzero_uniform()
        z0 = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return z0 * std + mean

    def gamma(self, shape: float, scale: float) -> float:
        """
        Gamma(shape, scale) via Marsaglia-Tsang; mean = shape * scale.

        Shapes below 1 are boosted to shape + 1 and corrected with U^(1/shape).
        Raises UnboundedRetry when no candidate is accepted within max_retries.
        """
        if shape <= 0 or scale <= 0:
            raise InvalidConfiguration("Gamma requires shape > 0 and scale > 0")

        if shape < 1.0:
            boosted = self.gamma(shape + 1.0, scale)
            return boosted * self.uniform() ** (1.0 / shape)

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)

        for _ in range(self.max_retries):
            x = self.normal(0.0, 1.0)
            v = 1.0 + c * x
            if v <= 0:
                continue

            v = v * v * v
            u = self.uniform()

            # squeeze
            if u < 1.0 - 0.0331 * x ** 4:
                return d * v * scale

            if u > 0 and math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
                return d * v * scale

        raise UnboundedRetry(
            f"gamma(shape={shape}, scale={scale}) rejected {self.max_retries} candidates"
        )

def round_to(value: float, decimals: int = SERVICE_DECIMALS) -> float:
    return round(value, decimals)

def gamma_scale(mean_service_time: float, shape_k: float) -> float:
    # mean_service_time is the gamma mean, so scale = mean / k
    return mean_service_time / shape_k

def sample_service_time(spec: ServiceDistribution, mean_service_time: float,
                        gen: VariateGenerator) -> float:
    dist_type = spec.dist_type.strip().lower()

    if dist_type == "exponential":
        value = gen.exponential(mean_service_time)
    elif dist_type == "gamma":
        value = gen.gamma(spec.shape_k, gamma_scale(mean_service_time, spec.shape_k))
    else:
        raise InvalidConfiguration(f"Unknown dist_type: {spec.dist_type}")

    return round_to(value)

def sample_service_times(n: int, spec: ServiceDistribution, mean_service_time: float,
                         gen: VariateGenerator) -> List[float]:
    """One service duration per arrival, rounded to SERVICE_DECIMALS."""
    return [sample_service_time(spec, mean_service_time, gen) for _ in range(n)]
