import math

import numpy as np
import pytest
import torch

from jetopt import dual
from jetopt.dual import Dual, seed
from jetopt.errors import DomainError

NAMES = ["exp", "log", "log10", "sqrt", "sin", "cos", "tan", "arctan", "sinh", "cosh", "tanh"]


@pytest.mark.parametrize("name", NAMES)
def test_real_and_dual_values_agree(name):
    fn = getattr(dual, name)
    real = fn(0.8)
    assert isinstance(real, float)
    (x,) = seed([0.8])
    out = fn(x)
    assert isinstance(out, Dual)
    assert out.value == pytest.approx(real)


@pytest.mark.parametrize("name", NAMES)
def test_numpy_arrays_dispatch_to_numpy(name):
    fn = getattr(dual, name)
    arr = np.array([0.3, 0.8])
    assert np.allclose(fn(arr), getattr(np, name)(arr))


@pytest.mark.parametrize("name", NAMES)
def test_tensors_dispatch_to_torch(name):
    fn = getattr(dual, name)
    t = torch.tensor([0.3, 0.8], dtype=torch.float64)
    out = fn(t)
    assert isinstance(out, torch.Tensor)
    assert np.allclose(out.numpy(), getattr(np, name)(t.numpy()))


def test_object_arrays_of_duals():
    x = seed([0.1, 0.2])
    out = dual.exp(x)
    assert out.dtype == object
    assert out[1].derivatives.tolist() == pytest.approx([0.0, math.exp(0.2)])


@pytest.mark.parametrize(
    "call",
    [
        lambda: dual.log(-1.0),
        lambda: dual.sqrt(-4.0),
        lambda: dual.exp(1000.0),
        lambda: dual.power(-8.0, 1.0 / 3.0),
    ],
)
def test_real_domain_errors(call):
    with pytest.raises(DomainError):
        call()


def test_power_dispatch():
    assert dual.power(2.0, 3) == 8.0
    (x,) = seed([2.0])
    out = dual.power(x, 3)
    assert out.derivatives.tolist() == [12.0]
