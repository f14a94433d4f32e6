import math

import numpy as np
import pytest

from jetopt.dual import Dual, dual_type, seed
from jetopt.errors import ConfigurationError, DomainError


@pytest.mark.parametrize("n", [1, 2, 5, 25])
def test_seed_gives_standard_basis(n, rng):
    x = rng.normal(size=n)
    duals = seed(x)
    assert duals.shape == (n,)
    for i, d in enumerate(duals):
        assert d.value == x[i]
        assert np.array_equal(d.derivatives, np.eye(n)[i])


def test_seed_rejects_dimension_mismatch():
    with pytest.raises(ConfigurationError):
        seed([1.0, 2.0], n=3)


def test_dual_is_immutable():
    d = Dual(1.0, [1.0, 0.0])
    with pytest.raises(ValueError):
        d.derivatives[0] = 5.0
    with pytest.raises(AttributeError):
        d.value = 2.0


def test_constructor_copies_input():
    derivs = np.array([1.0, 2.0])
    d = Dual(3.0, derivs)
    derivs[0] = 10.0
    assert d.derivatives.tolist() == [1.0, 2.0]


def test_product_and_quotient_rules():
    x, y = seed([3.0, 2.0])
    prod = x * y
    assert prod.value == 6.0
    assert prod.derivatives.tolist() == [2.0, 3.0]
    quot = x / y
    assert quot.value == 1.5
    assert np.allclose(quot.derivatives, [0.5, -0.75])


def test_mixed_real_operands():
    (x,) = seed([2.0])
    assert (x + 1).value == 3.0
    assert (1 - x).value == -1.0
    assert (1 - x).derivatives.tolist() == [-1.0]
    assert (3.0 * x).derivatives.tolist() == [3.0]
    rdiv = 4.0 / x
    assert rdiv.value == 2.0
    assert rdiv.derivatives.tolist() == [-1.0]
    assert (-x).derivatives.tolist() == [-1.0]


def test_numpy_scalar_operands():
    (x,) = seed([2.0])
    left = np.float64(3.0) * x
    assert isinstance(left, Dual)
    assert left.derivatives.tolist() == [3.0]
    right = x - np.float64(1.0)
    assert isinstance(right, Dual)
    assert right.value == 1.0
    assert isinstance(np.int64(2) + x, Dual)


def test_integer_and_real_powers():
    (x,) = seed([-2.0])
    cube = x**3
    assert cube.value == -8.0
    assert cube.derivatives.tolist() == [12.0]
    assert (x**0).derivatives.tolist() == [0.0]
    (y,) = seed([4.0])
    half = y**0.5
    assert half.value == 2.0
    assert half.derivatives.tolist() == [0.25]


def test_dual_exponent():
    a, b = seed([2.0, 3.0])
    p = a**b
    assert p.value == pytest.approx(8.0)
    assert p.derivatives[0] == pytest.approx(12.0)
    assert p.derivatives[1] == pytest.approx(8.0 * math.log(2.0))
    r = 2.0**b
    assert r.value == pytest.approx(8.0)
    assert r.derivatives[1] == pytest.approx(8.0 * math.log(2.0))


def test_elementary_functions_match_derivatives():
    (x,) = seed([0.7])
    cases = {
        "exp": math.exp(0.7),
        "log": 1 / 0.7,
        "log10": 1 / (0.7 * math.log(10.0)),
        "sqrt": 0.5 / math.sqrt(0.7),
        "sin": math.cos(0.7),
        "cos": -math.sin(0.7),
        "tan": 1 / math.cos(0.7) ** 2,
        "arctan": 1 / (1 + 0.49),
        "sinh": math.cosh(0.7),
        "cosh": math.sinh(0.7),
        "tanh": 1 - math.tanh(0.7) ** 2,
    }
    for name, slope in cases.items():
        out = getattr(x, name)()
        assert out.derivatives[0] == pytest.approx(slope), name


def test_abs_derivative():
    (x,) = seed([-3.0])
    assert abs(x).value == 3.0
    assert abs(x).derivatives.tolist() == [-1.0]
    (z,) = seed([0.0])
    assert abs(z).derivatives.tolist() == [0.0]


def test_comparisons_use_value():
    a, b = seed([1.0, 2.0])
    assert a < b
    assert b >= 2.0
    assert a == 1.0
    assert a != b
    assert max(a, b) is b


def test_dimension_mismatch_is_configuration_error():
    a = Dual(1.0, [1.0, 0.0])
    b = Dual(2.0, [1.0, 0.0, 0.0])
    with pytest.raises(ConfigurationError):
        a + b


@pytest.mark.parametrize(
    "expr",
    [
        lambda x: (-x).log(),
        lambda x: (-x).sqrt(),
        lambda x: x / (x - x.value),
        lambda x: 1.0 / (x - x.value),
        lambda x: (x * 1000.0).exp(),
        lambda x: (-x) ** 0.5,
    ],
)
def test_domain_errors(expr):
    (x,) = seed([1.0])
    with pytest.raises(DomainError):
        expr(x)


def test_division_by_zero_scalar():
    (x,) = seed([1.0])
    with pytest.raises(DomainError):
        x / 0.0


def test_sqrt_at_zero_of_constant_is_defined():
    c = Dual.constant(0.0, 2)
    assert c.sqrt().derivatives.tolist() == [0.0, 0.0]
    (x,) = seed([0.0])
    with pytest.raises(DomainError):
        x.sqrt()


def test_numpy_ufuncs_on_dual_scalars():
    (x,) = seed([1.5])
    out = np.exp(x)
    assert isinstance(out, Dual)
    assert out.derivatives[0] == pytest.approx(math.exp(1.5))
    assert np.sqrt(x).value == pytest.approx(math.sqrt(1.5))


def test_object_array_operations():
    x = seed([1.0, 2.0, 3.0])
    target = np.array([0.5, 0.5, 0.5])
    total = np.sum((x - target) ** 2)
    assert isinstance(total, Dual)
    assert total.value == pytest.approx(0.25 + 2.25 + 6.25)
    assert np.allclose(total.derivatives, 2 * (np.array([1.0, 2.0, 3.0]) - target))
    scaled = target * x[0]
    assert scaled.dtype == object
    assert scaled[1].derivatives.tolist() == [0.5, 0.0, 0.0]


def test_fixed_size_dual_type():
    Dual2 = dual_type(2)
    assert Dual2 is dual_type(2)
    assert Dual2.__name__ == "Dual2"
    m, c = seed([0.3, 0.1], dual_cls=Dual2)
    out = (m * 2.0 + c).exp()
    assert isinstance(out, Dual2)
    assert out.derivatives.shape == (2,)
    with pytest.raises(ConfigurationError):
        Dual2(1.0, [1.0, 0.0, 0.0])
    with pytest.raises(ConfigurationError):
        seed([1.0, 2.0, 3.0], dual_cls=Dual2)
    assert Dual2.constant(4.0).derivatives.tolist() == [0.0, 0.0]


def test_dynamic_constant_requires_dimension():
    with pytest.raises(ConfigurationError):
        Dual.constant(1.0)


@pytest.mark.parametrize("v", [1e200, -1e200, 3.0])
def test_arctan_slope_for_large_arguments(v):
    (x,) = seed([v])
    out = x.arctan()
    assert out.value == pytest.approx(math.atan(v))
    assert out.derivatives[0] == pytest.approx(1.0 / (1.0 + v * v) if abs(v) < 1e100 else 0.0)
