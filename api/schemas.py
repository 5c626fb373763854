from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


ServiceType = Literal["exponential", "gamma"]

class ServiceDistribution(BaseModel):
    dist_type: ServiceType = "gamma"
    shape_k: Optional[float] = Field(None, ge=0.1)

# ---------- Simulation ----------
class SimulationRequest(BaseModel):
    mean_interarrival_time: float = Field(..., gt=0, examples=[2.0])
    mean_service_time: float = Field(..., gt=0, examples=[1.5])
    servers: int = Field(1, ge=1)
    service: ServiceDistribution
    horizon: int = Field(..., gt=0, examples=[480])
    seed: Optional[int] = 123

    @model_validator(mode="after")
    def check_stability(self):
        if self.service.dist_type == "gamma" and self.service.shape_k is None:
            raise ValueError("Gamma service requires shape_k")

        rho = self.mean_service_time / (self.servers * self.mean_interarrival_time)
        if rho >= 1:
            raise ValueError(
                f"Unstable system: utilization rho = {rho:.2f} >= 1. "
                "Reduce arrival rate or add servers."
            )
        return self

class CustomerRecord(BaseModel):
    customer_id: int
    arrival_time: float
    service_time: float
    start_time: float
    end_time: float
    wait_time: float
    turnaround_time: float
    response_time: float
    server: int

class ServerStats(BaseModel):
    server: int
    customers: int
    busy_time: float
    utilization: float
    avg_service_time: float

class ArrivalSampler(BaseModel):
    sampler: str
    fallback_reason: Optional[str] = None

# ---------- Theoretical ----------
class TheoreticalRequest(BaseModel):
    model: str = Field(..., examples=["M/M/1", "M/M/c", "M/G/1", "M/G/c"])
    lambda_: float = Field(..., gt=0)
    mean_service_time: float = Field(..., gt=0)
    servers: int = Field(1, ge=1)
    shape_k: Optional[float] = Field(None, ge=0.1)

class TheoreticalResponse(BaseModel):
    model: str
    rho: float
    Lq: float
    Wq: float
    Ws: float
    Ls: float
    p0: Optional[float] = None
    cs2: Optional[float] = None
    utilization_level: str

class SimulationResponse(BaseModel):
    records: List[CustomerRecord]
    queue_lengths: List[int]
    total_customers: int
    total_time: float
    average_wait: float
    average_turnaround: float
    server_stats: List[ServerStats]
    arrivals: ArrivalSampler
    theoretical: TheoreticalResponse

# ---------- CP table ----------
class CPTableRow(BaseModel):
    count: int
    probability: float
    lower: float
    upper: float

class CPTableResponse(BaseModel):
    mean_interarrival_time: float
    rows: List[CPTableRow]
