from dataclasses import dataclass, field
from typing import List, Optional, Literal

ServiceType = Literal["exponential", "gamma"]

@dataclass
class ServiceDistribution:
    dist_type: ServiceType
    shape_k: Optional[float] = None  # only used for gamma

@dataclass
class SimulationConfig:
    mean_interarrival_time: float   # minutes between arrivals
    mean_service_time: float        # minutes per service (gamma mean when dist is gamma)
    servers: int                    # c
    service: ServiceDistribution
    horizon: float                  # total simulated minutes
    seed: Optional[int] = 123       # reproducible by default

    @property
    def lambda_(self) -> float:
        return 1.0 / self.mean_interarrival_time

    @property
    def mu(self) -> float:
        return 1.0 / self.mean_service_time

    @property
    def utilization(self) -> float:
        return self.lambda_ / (self.servers * self.mu)

@dataclass(frozen=True)
class CPTableRow:
    count: int
    probability: float
    lower: float   # P(X < count)
    upper: float   # P(X <= count)

@dataclass
class ArrivalTrace:
    gaps: List[float]                        # first gap is always 0
    sampler: str = "poisson-table"           # or "exponential-fallback"
    fallback_reason: Optional[str] = None

    @property
    def fell_back(self) -> bool:
        return self.fallback_reason is not None

@dataclass(frozen=True)
class CustomerRecord:
    customer_id: int
    arrival_time: float
    service_time: float
    start_time: float
    end_time: float
    wait_time: float
    turnaround_time: float
    response_time: float
    server: int  # 1..c

@dataclass
class QueueRun:
    records: List[CustomerRecord]
    queue_lengths: List[int]
    total_customers: int
    total_time: float

@dataclass
class ServerStats:
    server: int
    customers: int
    busy_time: float
    utilization: float
    avg_service_time: float

@dataclass(frozen=True)
class TheoreticalMetrics:
    model: str
    rho: float
    Lq: float
    Wq: float
    Ws: float
    Ls: float
    p0: Optional[float] = None   # M/M/* only
    cs2: Optional[float] = None  # gamma service only

@dataclass
class SimulationReport:
    config: SimulationConfig
    arrivals: ArrivalTrace
    run: QueueRun
    theoretical: TheoreticalMetrics
    server_stats: List[ServerStats] = field(default_factory=list)
    average_wait: float = 0.0
    average_turnaround: float = 0.0
