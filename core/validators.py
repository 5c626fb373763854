import math

from .errors import InvalidConfiguration
from .models import SimulationConfig

MIN_SHAPE_K = 0.1

def require_positive(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value <= 0:
        raise InvalidConfiguration(f"{name} must be a finite number > 0")

def require_int_at_least(name: str, value: int, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidConfiguration(f"{name} must be an integer >= {minimum}")

def require_shape(shape_k: float) -> None:
    if shape_k is None or not math.isfinite(shape_k) or shape_k < MIN_SHAPE_K:
        raise InvalidConfiguration(f"shape_k must be >= {MIN_SHAPE_K}")

def require_stable(rho: float) -> None:
    if rho >= 1.0:
        raise InvalidConfiguration(f"Unstable system: utilization rho = {rho:.4f} must be < 1")

def validate_config(config: SimulationConfig) -> None:
    require_positive("mean_interarrival_time", config.mean_interarrival_time)
    require_positive("mean_service_time", config.mean_service_time)
    require_positive("horizon", config.horizon)
    require_int_at_least("servers", config.servers, 1)

    dist_type = config.service.dist_type.strip().lower()
    if dist_type == "gamma":
        require_shape(config.service.shape_k)
    elif dist_type != "exponential":
        raise InvalidConfiguration(f"Unknown service distribution: {config.service.dist_type}")

    require_stable(config.utilization)
