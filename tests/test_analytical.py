"""Unit tests for the steady-state queueing formulas."""

import math

import pytest

from core.analytical import (
    classify_utilization, mg1, mgc, mm1, mmc, solve_analytical, solve_theoretical
)
from core.errors import InvalidConfiguration
from core.models import ServiceDistribution, SimulationConfig


def test_mm1_known_case():
    theory = mm1(0.5, 1.0)
    assert math.isclose(theory.rho, 0.5)
    assert math.isclose(theory.Lq, 0.5)
    assert math.isclose(theory.Wq, 1.0)
    assert math.isclose(theory.Ws, 2.0)
    assert math.isclose(theory.Ls, 1.0)
    assert math.isclose(theory.Ls, 0.5 * theory.Ws)  # Little's law


def test_erlang_c_known_case():
    theory = mmc(1.0, 1.0, 2)
    assert math.isclose(theory.rho, 0.5)
    assert math.isclose(theory.p0, 1.0 / 3.0)
    assert math.isclose(theory.Lq, 1.0 / 3.0)
    assert math.isclose(theory.Wq, 1.0 / 3.0)


def test_mmc_reduces_to_mm1_when_c_is_one():
    single = mm1(0.7, 1.0)
    multi = mmc(0.7, 1.0, 1)
    for key in ("rho", "Lq", "Wq", "Ws", "Ls"):
        assert math.isclose(getattr(multi, key), getattr(single, key), rel_tol=1e-9)


def test_mg1_with_exponential_shape_matches_mm1():
    # Gamma(k=1) is exponential, Cs^2 = 1
    general = mg1(0.6, 1.0, 1.0)
    markov = mm1(0.6, 1.0)
    assert math.isclose(general.cs2, 1.0)
    assert math.isclose(general.Wq, markov.Wq, rel_tol=1e-9)
    assert math.isclose(general.Ls, markov.Ls, rel_tol=1e-9)


def test_mg1_lower_variability_shortens_queue():
    theory = mg1(0.5, 1.0, 4.0)
    # rho * E[S] * (1 + 1/4) / (2 * 0.5)
    assert math.isclose(theory.Wq, 0.625)
    assert math.isclose(theory.Lq, 0.3125)
    assert math.isclose(theory.Ws, 1.625)
    assert math.isclose(theory.Ls, 0.8125)


def test_mgc_scales_erlang_c_wait():
    base = mmc(1.6, 1.0, 2)
    approx = mgc(1.6, 1.0, 2, 2.0)
    assert math.isclose(approx.Wq, 0.75 * base.Wq, rel_tol=1e-9)
    assert math.isclose(approx.Lq, 1.6 * approx.Wq, rel_tol=1e-9)
    assert math.isclose(approx.Ws, approx.Wq + 1.0, rel_tol=1e-9)
    assert math.isclose(approx.rho, 0.8)


def test_mgc_with_unit_shape_matches_mmc():
    assert math.isclose(mgc(2.5, 1.0, 3, 1.0).Lq, mmc(2.5, 1.0, 3).Lq, rel_tol=1e-9)


def test_invalid_inputs_raise():
    with pytest.raises(InvalidConfiguration):
        mm1(1.0, 1.0)
    with pytest.raises(InvalidConfiguration):
        mmc(2.0, 1.0, 2)
    with pytest.raises(InvalidConfiguration):
        mmc(1.0, 1.0, 0)
    with pytest.raises(InvalidConfiguration):
        mg1(0.5, 1.0, 0.05)
    with pytest.raises(InvalidConfiguration):
        mgc(0.5, 0.0, 2, 2.0)


@pytest.mark.parametrize(
    "model, expected",
    [("M/M/1", "M/M/1"), ("mm1", "M/M/1"), ("M/M/c", "M/M/c"),
     ("M / G / 1", "M/G/1"), ("mgc", "M/G/c")],
)
def test_solve_analytical_normalises_model_names(model, expected):
    res = solve_analytical(model, lambda_=0.5, mean_service_time=1.0, c=2, shape_k=2.0)
    assert res.model == expected


def test_solve_analytical_rejects_unknown_or_incomplete_models():
    with pytest.raises(InvalidConfiguration):
        solve_analytical("G/G/1", lambda_=0.5, mean_service_time=1.0)
    with pytest.raises(InvalidConfiguration):
        solve_analytical("M/G/1", lambda_=0.5, mean_service_time=1.0)


def test_solve_theoretical_picks_model_from_config():
    config = SimulationConfig(
        mean_interarrival_time=2.0,
        mean_service_time=1.0,
        servers=1,
        service=ServiceDistribution(dist_type="exponential"),
        horizon=100,
    )
    theory = solve_theoretical(config)
    assert theory.model == "M/M/1"
    assert math.isclose(theory.Lq, 0.5)
    assert theory.cs2 is None


@pytest.mark.parametrize(
    "rho, level",
    [(0.2, "low"), (0.6, "optimal"), (0.84, "optimal"), (0.9, "high"), (1.0, "unstable")],
)
def test_classify_utilization(rho, level):
    assert classify_utilization(rho) == level


@pytest.mark.parametrize("lam, mu, c", [(100.0, 1.0, 171), (800.0, 1.0, 1000), (0.5, 1.0, 400)])
def test_mmc_handles_hundreds_of_servers(lam, mu, c):
    theory = mmc(lam, mu, c)
    assert math.isclose(theory.rho, lam / (c * mu))
    assert 0.0 <= theory.p0 <= 1.0
    assert math.isfinite(theory.Lq) and theory.Lq >= 0.0
    assert math.isclose(theory.Lq, lam * theory.Wq, rel_tol=1e-9)
    assert math.isclose(theory.Ls, lam * theory.Ws, rel_tol=1e-9)


def test_mmc_heavy_load_many_servers_matches_small_scale_trend():
    # more servers at the same rho means less queueing
    assert mmc(190.0, 1.0, 200).Wq < mmc(19.0, 1.0, 20).Wq


def test_mgc_handles_hundreds_of_servers():
    theory = mgc(0.5, 100.0, 171, 2.0)
    assert math.isfinite(theory.Wq)
    assert math.isclose(theory.Ws, theory.Wq + 100.0)
