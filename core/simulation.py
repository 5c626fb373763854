import logging
import random
from collections import deque
from typing import Deque, List, Optional, Sequence

from .analytical import solve_theoretical
from .arrivals import generate_interarrivals
from .distributions import VariateGenerator, sample_service_times
from .errors import InvalidConfiguration
from .models import (
    CustomerRecord, QueueRun, ServerStats, SimulationConfig, SimulationReport
)
from .validators import validate_config

logger = logging.getLogger(__name__)

# ---------- Engine ----------
def simulate_queue(interarrivals: Sequence[float], service_times: Sequence[float],
                   servers: int) -> QueueRun:
    """
    Dispatch customers in arrival order to the earliest-free server.

    Pure function of its inputs. Queue length at each arrival is the exact
    number of earlier customers whose service starts after that arrival.
    """
    if servers < 1:
        raise InvalidConfiguration("servers must be >= 1")
    if len(interarrivals) != len(service_times):
        raise InvalidConfiguration(
            f"{len(interarrivals)} inter-arrival gaps but {len(service_times)} service times"
        )

    server_available = [0.0] * servers
    pending_starts: Deque[float] = deque()  # start times of customers not yet in service
    records: List[CustomerRecord] = []
    queue_lengths: List[int] = []

    arrival_time = 0.0

    for i, (gap, service_time) in enumerate(zip(interarrivals, service_times)):
        arrival_time += gap

        # earliest available server, first index wins ties
        server_idx = 0
        for s in range(1, servers):
            if server_available[s] < server_available[server_idx]:
                server_idx = s

        start = max(arrival_time, server_available[server_idx])
        end = start + service_time
        waiting = max(0.0, start - arrival_time)
        turnaround = end - arrival_time
        response = waiting + service_time

        # FCFS on the earliest-free server keeps start times non-decreasing
        while pending_starts and pending_starts[0] <= arrival_time:
            pending_starts.popleft()
        queue_lengths.append(len(pending_starts))
        if start > arrival_time:
            pending_starts.append(start)

        server_available[server_idx] = end

        records.append(CustomerRecord(
            customer_id=i + 1,
            arrival_time=arrival_time,
            service_time=service_time,
            start_time=start,
            end_time=end,
            wait_time=waiting,
            turnaround_time=turnaround,
            response_time=response,
            server=server_idx + 1
        ))

    return QueueRun(
        records=records,
        queue_lengths=queue_lengths,
        total_customers=len(records),
        total_time=max((r.end_time for r in records), default=0.0)
    )

# ---------- Per-server summary ----------
def summarize_servers(run: QueueRun, servers: int) -> List[ServerStats]:
    customers = [0] * servers
    busy = [0.0] * servers

    for r in run.records:
        customers[r.server - 1] += 1
        busy[r.server - 1] += r.service_time

    total_time = run.total_time or 1.0

    return [
        ServerStats(
            server=s + 1,
            customers=customers[s],
            busy_time=busy[s],
            utilization=busy[s] / total_time,
            avg_service_time=busy[s] / customers[s] if customers[s] else 0.0
        )
        for s in range(servers)
    ]

def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0

# ---------- Full pipeline ----------
def simulate(config: SimulationConfig, rng: Optional[random.Random] = None) -> SimulationReport:
    """
    Validate `config`, sample arrivals and service times, run the engine and
    attach the theoretical metrics for the same parameters.

    `rng` overrides `config.seed` as the entropy source.
    """
    validate_config(config)
    gen = VariateGenerator(rng if rng is not None else config.seed)

    arrivals = generate_interarrivals(config.mean_interarrival_time, config.horizon, gen)
    service_times = sample_service_times(
        len(arrivals.gaps), config.service, config.mean_service_time, gen
    )

    run = simulate_queue(arrivals.gaps, service_times, config.servers)
    theoretical = solve_theoretical(config)

    logger.debug(
        "simulated %d customers over %.2f minutes on %d server(s) (%s)",
        run.total_customers, run.total_time, config.servers, arrivals.sampler
    )

    return SimulationReport(
        config=config,
        arrivals=arrivals,
        run=run,
        theoretical=theoretical,
        server_stats=summarize_servers(run, config.servers),
        average_wait=_mean([r.wait_time for r in run.records]),
        average_turnaround=_mean([r.turnaround_time for r in run.records])
    )
