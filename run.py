# run.py

import logging

from core.models import SimulationConfig, ServiceDistribution
from core.simulation import simulate
from core.analytical import solve_analytical, classify_utilization
from core.arrivals import build_cp_table

logging.basicConfig(level=logging.INFO)

# =====================================================
# 1️⃣ Simulation (M/G/2, gamma service)
# =====================================================
config = SimulationConfig(
    mean_interarrival_time=2.0,
    mean_service_time=3.0,
    servers=2,
    service=ServiceDistribution(dist_type="gamma", shape_k=2.0),
    horizon=480,
    seed=42
)

report = simulate(config)

print("=== Simulation (first 5 customers) ===")
for r in report.run.records[:5]:
    print(r)

print("Queue lengths:", report.run.queue_lengths[:20])
print("Customers:", report.run.total_customers, "| Total time:", round(report.run.total_time, 2))
print("Avg wait:", round(report.average_wait, 2), "| Avg turnaround:", round(report.average_turnaround, 2))
print("Arrival sampler:", report.arrivals.sampler)
for s in report.server_stats:
    print(s)

print("\n=== Theoretical for the same configuration ===")
print(report.theoretical, classify_utilization(report.theoretical.rho))

# =====================================================
# 2️⃣ Analytical — M/M models
# =====================================================
print("\n=== Analytical M/M/1 ===")
print(solve_analytical(model="M/M/1", lambda_=0.5, mean_service_time=1.0))

print("\n=== Analytical M/M/c ===")
print(solve_analytical(model="M/M/c", lambda_=1.0, mean_service_time=1.0, c=2))

# =====================================================
# 3️⃣ Analytical — M/G models (gamma service)
# =====================================================
print("\n=== Analytical M/G/1 ===")
print(solve_analytical(model="M/G/1", lambda_=0.6, mean_service_time=1.0, shape_k=2.0))

print("\n=== Analytical M/G/c ===")
print(solve_analytical(model="M/G/c", lambda_=1.6, mean_service_time=1.0, c=2, shape_k=2.0))

# =====================================================
# 4️⃣ Cumulative-probability lookup table
# =====================================================
print("\n=== CP table (mean inter-arrival 2.0) ===")
for row in build_cp_table(2.0):
    print(row)
