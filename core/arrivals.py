import logging
import math
from typing import List

from .distributions import VariateGenerator
from .errors import GenerationFailure
from .models import ArrivalTrace, CPTableRow

logger = logging.getLogger(__name__)

CP_TARGET = 0.9999
CP_MAX_ROWS = 200

# ---------- Cumulative-probability table ----------
def build_cp_table(mean_interarrival_time: float) -> List[CPTableRow]:
    """
    Poisson(lambda = 1/mean) cumulative table, one row per count k = 0, 1, ...

    Stops once the cumulative probability reaches CP_TARGET or CP_MAX_ROWS rows
    exist. Row k covers [P(X < k), P(X <= k)).

    Raises GenerationFailure on numeric overflow (large lambda^k or k!).
    """
    if mean_interarrival_time <= 0:
        raise GenerationFailure("mean interarrival time must be > 0")

    lam = 1.0 / mean_interarrival_time
    rows: List[CPTableRow] = []
    cp = 0.0
    count = 0

    try:
        while cp < CP_TARGET and count < CP_MAX_ROWS:
            p = math.exp(-lam) * lam ** count / math.factorial(count)
            lower = cp
            cp += p
            rows.append(CPTableRow(count=count, probability=p, lower=lower, upper=min(cp, 1.0)))
            count += 1
    except (OverflowError, ZeroDivisionError) as exc:
        raise GenerationFailure(f"cumulative table overflow at count {count}: {exc}") from exc

    if not rows or not math.isfinite(cp):
        raise GenerationFailure(f"cumulative table is degenerate for lambda={lam}")

    return rows

def sample_gap(u: float, table: List[CPTableRow]) -> int:
    for row in table:
        if row.lower <= u < row.upper:
            return row.count + 1
    # tail beyond the table
    return 1

# ---------- Inter-arrival generation ----------
def _fill_until_horizon(gaps: List[float], horizon: float, draw) -> None:
    total = 0.0
    while total < horizon:
        gap = draw()
        gaps.append(gap)
        total += gap
    if total > horizon:
        gaps.pop()

def generate_interarrivals(mean_interarrival_time: float, horizon: float,
                           gen: VariateGenerator) -> ArrivalTrace:
    """
    Integer inter-arrival gaps covering the horizon, starting with 0.

    Falls back to rounded exponential gaps when the table cannot be built;
    the fallback is tagged on the returned trace.
    """
    gaps: List[float] = [0]

    try:
        table = build_cp_table(mean_interarrival_time)
    except GenerationFailure as exc:
        logger.warning("CP table failed, using exponential inter-arrivals: %s", exc)
        _fill_until_horizon(
            gaps, horizon,
            lambda: max(1, round(gen.exponential(mean_interarrival_time))),
        )
        return ArrivalTrace(gaps=gaps, sampler="exponential-fallback", fallback_reason=str(exc))

    _fill_until_horizon(gaps, horizon, lambda: sample_gap(gen.uniform(), table))
    return ArrivalTrace(gaps=gaps)
