from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import (
    CPTableResponse,
    SimulationRequest, SimulationResponse,
    TheoreticalRequest, TheoreticalResponse
)

from core.analytical import classify_utilization, solve_analytical
from core.arrivals import build_cp_table
from core.errors import GenerationFailure, InvalidConfiguration, UnboundedRetry
from core.models import (
    ServiceDistribution as CoreServiceDistribution,
    SimulationConfig,
    TheoreticalMetrics
)
from core.simulation import simulate

app = FastAPI(title="M/G/c Queue Simulator API", version="1.0")

# allow frontend (React/etc.) to call backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(InvalidConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
    return JSONResponse(status_code=422, content={"detail": str(exc)})

@app.exception_handler(UnboundedRetry)
async def unbounded_retry_handler(request: Request, exc: UnboundedRetry):
    return JSONResponse(status_code=500, content={"detail": str(exc)})

def _theoretical_response(t: TheoreticalMetrics) -> TheoreticalResponse:
    return TheoreticalResponse(**asdict(t), utilization_level=classify_utilization(t.rho))

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/theoretical", response_model=TheoreticalResponse)
def theoretical(req: TheoreticalRequest):
    res = solve_analytical(
        model=req.model,
        lambda_=req.lambda_,
        mean_service_time=req.mean_service_time,
        c=req.servers,
        shape_k=req.shape_k
    )
    return _theoretical_response(res)

@app.post("/simulate", response_model=SimulationResponse)
def simulate_endpoint(req: SimulationRequest):
    config = SimulationConfig(
        mean_interarrival_time=req.mean_interarrival_time,
        mean_service_time=req.mean_service_time,
        servers=req.servers,
        service=CoreServiceDistribution(
            dist_type=req.service.dist_type,
            shape_k=req.service.shape_k
        ),
        horizon=req.horizon,
        seed=req.seed
    )
    report = simulate(config)

    # convert dataclasses -> dicts for pydantic response
    return SimulationResponse(
        records=[asdict(r) for r in report.run.records],
        queue_lengths=report.run.queue_lengths,
        total_customers=report.run.total_customers,
        total_time=report.run.total_time,
        average_wait=report.average_wait,
        average_turnaround=report.average_turnaround,
        server_stats=[asdict(s) for s in report.server_stats],
        arrivals={
            "sampler": report.arrivals.sampler,
            "fallback_reason": report.arrivals.fallback_reason
        },
        theoretical=_theoretical_response(report.theoretical)
    )

@app.get("/cp-table", response_model=CPTableResponse)
def cp_table(mean_interarrival_time: float = Query(..., gt=0)):
    try:
        rows = build_cp_table(mean_interarrival_time)
    except GenerationFailure as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return CPTableResponse(
        mean_interarrival_time=mean_interarrival_time,
        rows=[asdict(r) for r in rows]
    )
