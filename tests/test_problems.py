import numpy as np
import pytest

from jetopt.errors import ConfigurationError
from jetopt.optimize import check_gradient
from jetopt.problems import (
    EXP_FIT_DATA,
    exp_fit_loss,
    exp_fit_problem,
    powell,
    powell_problem,
    quadratic_problem,
    rosenbrock,
    rosenbrock_problem,
)


def test_exp_fit_data_shape():
    assert EXP_FIT_DATA.shape == (67, 2)
    assert np.all(np.diff(EXP_FIT_DATA[:, 0]) > 0)


def test_objectives_at_known_minima():
    assert powell([0.0, 0.0, 0.0, 0.0]) == 0.0
    assert rosenbrock([1.0] * 6) == 0.0


def test_exp_fit_loss_accepts_custom_data():
    xs = np.array([0.0, 1.0])
    ys = np.exp(0.5 * xs + 0.2)
    assert exp_fit_loss([0.5, 0.2], xs, ys) == pytest.approx(0.0, abs=1e-24)


def test_rosenbrock_problem_layout():
    problem = rosenbrock_problem()
    assert problem.dim == 25
    assert np.isinf(problem.bounds.lower[2]) and np.isinf(problem.bounds.upper[2])
    assert problem.bounds.lower[0] == 2.0 and problem.bounds.upper[0] == 4.0
    assert problem.x0[0] == 2.0 and problem.x0[5] == 4.0 and problem.x0[3] == 3.0


def test_rosenbrock_problem_rejects_small_dimension():
    with pytest.raises(ConfigurationError):
        rosenbrock_problem(4)


@pytest.mark.parametrize(
    "factory", [quadratic_problem, powell_problem, exp_fit_problem, rosenbrock_problem]
)
def test_problem_gradients_match_finite_differences(factory):
    problem = factory()
    point = problem.bounds.project(problem.x0) + 0.1
    assert check_gradient(problem.objective(), point) < 1e-4
