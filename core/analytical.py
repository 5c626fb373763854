import math
from typing import Optional, Tuple

from .errors import InvalidConfiguration
from .models import SimulationConfig, TheoreticalMetrics
from .validators import require_int_at_least, require_positive, require_shape, require_stable


# ---------- M/M/1 ----------
def mm1(lambda_: float, mu: float) -> TheoreticalMetrics:
    require_positive("lambda", lambda_)
    require_positive("mu", mu)

    rho = lambda_ / mu
    require_stable(rho)

    Lq = (rho * rho) / (1.0 - rho)
    Wq = Lq / lambda_
    Ws = Wq + (1.0 / mu)
    Ls = lambda_ * Ws

    return TheoreticalMetrics(model="M/M/1", rho=rho, Lq=Lq, Wq=Wq, Ws=Ws, Ls=Ls, p0=1.0 - rho)

# ---------- Erlang C helpers for M/M/c ----------
def _log_sum_exp(a: float, b: float) -> float:
    hi, lo = max(a, b), min(a, b)
    if lo == -math.inf:
        return hi
    return hi + math.log1p(math.exp(lo - hi))

def _erlang_c(lambda_: float, mu: float, c: int) -> Tuple[float, float, float]:
    """
    Returns (p0, Pw, rho) where:
    rho = lambda / (c*mu)
    p0  = probability the system is empty
    Pw  = probability that an arrival must wait (Erlang C)

    Terms a^n/n! are kept as logs (n*ln a - lgamma(n+1)) so large c or
    heavy offered load cannot overflow.
    """
    rho = lambda_ / (c * mu)
    require_stable(rho)

    log_a = math.log(lambda_ / mu)  # offered load

    # log of sum_{n=0}^{c-1} (a^n / n!)
    log_s = -math.inf
    for n in range(c):
        log_s = _log_sum_exp(log_s, n * log_a - math.lgamma(n + 1))

    # log of (a^c / c!) / (1 - rho)
    log_last = c * log_a - math.lgamma(c + 1) - math.log1p(-rho)

    log_denominator = _log_sum_exp(log_s, log_last)
    p0 = math.exp(-log_denominator)
    Pw = math.exp(log_last - log_denominator)
    return p0, Pw, rho


# ---------- M/M/c ----------
def mmc(lambda_: float, mu: float, c: int) -> TheoreticalMetrics:
    require_positive("lambda", lambda_)
    require_positive("mu", mu)
    require_int_at_least("servers c", c, 1)

    p0, Pw, rho = _erlang_c(lambda_, mu, c)

    # p0 * a^c * rho / (c! (1-rho)^2) == Pw * rho / (1-rho)
    Lq = Pw * rho / (1.0 - rho)
    Wq = Lq / lambda_
    Ws = Wq + (1.0 / mu)
    Ls = lambda_ * Ws

    return TheoreticalMetrics(model="M/M/c", rho=rho, Lq=Lq, Wq=Wq, Ws=Ws, Ls=Ls, p0=p0)

# ---------- M/G/1 (Pollaczek–Khinchine) ----------
def mg1(lambda_: float, mean_service_time: float, shape_k: float) -> TheoreticalMetrics:
    """
    M/G/1 with Gamma(shape_k) service of mean `mean_service_time`.

      Cs^2 = 1/k
      Wq   = rho * E[S] * (1 + Cs^2) / (2 (1 - rho))
    """
    require_positive("lambda", lambda_)
    require_positive("mean_service_time", mean_service_time)
    require_shape(shape_k)

    rho = lambda_ * mean_service_time  # = lambda/mu
    require_stable(rho)

    Cs2 = 1.0 / shape_k

    Wq = (rho * mean_service_time * (1.0 + Cs2)) / (2.0 * (1.0 - rho))
    Lq = lambda_ * Wq
    Ws = Wq + mean_service_time
    Ls = lambda_ * Ws

    return TheoreticalMetrics(model="M/G/1", rho=rho, Lq=Lq, Wq=Wq, Ws=Ws, Ls=Ls, cs2=Cs2)


# ---------- M/G/c (Allen–Cunneen approximation) ----------
def mgc(lambda_: float, mean_service_time: float, c: int, shape_k: float) -> TheoreticalMetrics:
    """
    M/G/c using Allen–Cunneen approximation:

      Wq(M/G/c) ≈ ((1 + Cs^2) / 2) * Wq(M/M/c)

    where Wq(M/M/c) is the Erlang-C waiting time for the same lambda,
    mu = 1/E[S] and c, and Cs^2 = 1/k for Gamma(k) service.
    """
    require_positive("mean_service_time", mean_service_time)
    require_shape(shape_k)

    mu = 1.0 / mean_service_time
    base = mmc(lambda_, mu, c)

    Cs2 = 1.0 / shape_k
    factor = (1.0 + Cs2) / 2.0

    Wq = factor * base.Wq
    Lq = lambda_ * Wq
    Ws = Wq + mean_service_time
    Ls = lambda_ * Ws

    return TheoreticalMetrics(model="M/G/c", rho=base.rho, Lq=Lq, Wq=Wq, Ws=Ws, Ls=Ls, cs2=Cs2)


# ---------- Utilization banding ----------
def classify_utilization(rho: float) -> str:
    if rho >= 1.0:
        return "unstable"
    if rho >= 0.85:
        return "high"
    if rho >= 0.6:
        return "optimal"
    return "low"


# ---------- General solver (based on chosen model) ----------
def solve_analytical(model: str,
                     lambda_: float,
                     mean_service_time: float,
                     c: int = 1,
                     shape_k: Optional[float] = None) -> TheoreticalMetrics:

    m = model.strip().upper().replace(" ", "")

    if m in ["M/M/1", "MM1"]:
        return mm1(lambda_, 1.0 / mean_service_time if mean_service_time else 0.0)

    if m in ["M/M/C", "MMC", "MM/C"]:
        return mmc(lambda_, 1.0 / mean_service_time if mean_service_time else 0.0, c)

    if m in ["M/G/1", "MG1"]:
        if shape_k is None:
            raise InvalidConfiguration("shape_k is required for M/G/1")
        return mg1(lambda_, mean_service_time, shape_k)

    if m in ["M/G/C", "MGC", "MG/C"]:
        if shape_k is None:
            raise InvalidConfiguration("shape_k is required for M/G/c")
        return mgc(lambda_, mean_service_time, c, shape_k)

    raise InvalidConfiguration(f"Unknown model: {model}")


def model_name(config: SimulationConfig) -> str:
    letter = "G" if config.service.dist_type.strip().lower() == "gamma" else "M"
    servers = "1" if config.servers == 1 else "c"
    return f"M/{letter}/{servers}"


def solve_theoretical(config: SimulationConfig) -> TheoreticalMetrics:
    """Steady-state metrics matching the configured service distribution and c."""
    return solve_analytical(
        model=model_name(config),
        lambda_=config.lambda_,
        mean_service_time=config.mean_service_time,
        c=config.servers,
        shape_k=config.service.shape_k
    )
