import numpy as np
import pytest

from jetopt.errors import DomainError
from jetopt.optimize import AutoDiffObjective, Bounds, SolverConfig, projected_backtracking
from jetopt.optimize.core import ObjectiveResult


def quadratic_fun(x):
    return x[0] * x[0] + x[1] * x[1]


def test_accepts_unit_step_with_sufficient_decrease():
    objective = AutoDiffObjective(quadratic_fun)
    x = np.array([1.0, -2.0])
    fx, grad = objective(x)
    ls = projected_backtracking(
        objective, x, fx, grad, -0.5 * grad, Bounds.unbounded(2), 1.0, SolverConfig()
    )
    assert ls.step == 1.0
    assert ls.nfev == 1
    assert np.allclose(ls.x, 0.0)
    assert ls.fun == 0.0


def test_backtracks_and_respects_bounds():
    objective = AutoDiffObjective(quadratic_fun)
    bounds = Bounds([0.5, -3.0], [2.0, 3.0])
    x = np.array([1.0, -2.0])
    fx, grad = objective(x)
    probes = []

    def recording(point):
        probes.append(point.copy())
        return objective(point)

    ls = projected_backtracking(recording, x, fx, grad, -grad, bounds, 4.0, SolverConfig())
    assert 0.0 < ls.step < 4.0
    assert ls.fun < fx
    assert all(bounds.contains(p) for p in probes)
    assert ls.x[0] == 0.5


def test_rejects_ascent_direction():
    objective = AutoDiffObjective(quadratic_fun)
    x = np.array([1.0, 1.0])
    fx, grad = objective(x)
    with pytest.raises(ValueError):
        projected_backtracking(objective, x, fx, grad, grad, Bounds.unbounded(2), 1.0, SolverConfig())


def test_domain_error_probe_is_rejected():
    calls = []

    def objective(point):
        calls.append(point.copy())
        if point[0] < 0.0:
            raise DomainError("negative")
        return ObjectiveResult(float((point[0] - 0.5) ** 2), np.array([2.0 * (point[0] - 0.5)]))

    x = np.array([2.0])
    fx, grad = objective(x)
    ls = projected_backtracking(
        objective, x, fx, grad, np.array([-3.0]), Bounds.unbounded(1), 1.0, SolverConfig()
    )
    assert ls.step == 0.5
    assert ls.x[0] == pytest.approx(0.5)
    assert ls.nfev == 2


def test_failure_returns_original_point():
    def objective(point):
        return ObjectiveResult(1.0, np.array([1.0]))

    x = np.array([0.0])
    config = SolverConfig(max_linesearch=5)
    ls = projected_backtracking(
        objective, x, 0.0, np.array([1.0]), np.array([-1.0]), Bounds.unbounded(1), 1.0, config
    )
    assert ls.step == 0.0
    assert ls.nfev == 5
    assert ls.x is x


def test_fully_blocked_direction_evaluates_nothing():
    def objective(point):
        raise AssertionError("should not be evaluated")

    x = np.array([0.0])
    ls = projected_backtracking(
        objective, x, 1.0, np.array([1.0]), np.array([-1.0]), Bounds([0.0], [1.0]), 1.0, SolverConfig()
    )
    assert ls.step == 0.0
    assert ls.nfev == 0


def test_clipped_uphill_trial_is_rejected():
    # Clipping x0 at its bound leaves a displacement dominated by the uphill x1 move.
    objective = AutoDiffObjective(lambda x: x[0] + 0.05 * x[1] - 0.0049899 * x[1] * x[1])
    bounds = Bounds([0.0, -np.inf], [np.inf, np.inf])
    x = np.array([0.001, 0.0])
    fx, grad = objective(x)
    probes = []

    def recording(point):
        probes.append(point.copy())
        return objective(point)

    ls = projected_backtracking(
        recording, x, fx, grad, np.array([-1.0, 10.0]), bounds, 1.0, SolverConfig()
    )
    assert 0.0 < ls.step < 1.0
    assert ls.fun < fx
    assert all(float(np.dot(grad, p - x)) < 0 for p in probes)
    assert bounds.contains(ls.x)
