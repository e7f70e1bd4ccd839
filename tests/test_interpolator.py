import math

import pytest

from pawdft.interpolator import PAWBasisEvaluator, RadialInterpolator
from pawdft.paw_setup import RadialFunction
from pawdft.structure import make_atom

PI = 3.141592653589793238462643383279502884


@pytest.fixture
def evaluator():
    radial = RadialInterpolator([0.0, 1.0, 2.0], [2.0, 2.0, 2.0])
    atom = make_atom("X", 1)
    atom.set_position(0, [0.0, 0.0, 0.0])
    return PAWBasisEvaluator.from_atom(atom, radial)


def test_s_value_at_origin(evaluator):
    expected_y00 = 1.0 / (2.0 * math.sqrt(PI))
    assert evaluator.evaluate(0, 0, [0.0, 0.0, 0.0]) == pytest.approx(2.0 * expected_y00, abs=1e-12)


def test_pz_on_z_axis(evaluator):
    expected_y10 = math.sqrt(3.0 / (4.0 * PI))
    assert evaluator.evaluate(1, 0, [0.0, 0.0, 1.0]) == pytest.approx(2.0 * expected_y10, abs=1e-12)


def test_px_on_x_axis(evaluator):
    expected_y11 = -math.sqrt(3.0 / (4.0 * PI))
    assert evaluator.evaluate(1, 1, [1.0, 0.0, 0.0]) == pytest.approx(2.0 * expected_y11, abs=1e-12)


def test_vanishes_outside_cutoff(evaluator):
    assert evaluator.evaluate(0, 0, [0.0, 0.0, 3.0]) == pytest.approx(0.0, abs=1e-12)


def test_non_s_vanishes_at_origin(evaluator):
    assert evaluator.evaluate(1, 0, [0.0, 0.0, 0.0]) == 0.0


def test_evaluate_uses_centre_offset():
    radial = RadialInterpolator([0.0, 1.0, 2.0], [2.0, 2.0, 2.0])
    shifted = PAWBasisEvaluator([1.0, 1.0, 1.0], radial)
    direct = shifted.evaluate(1, 0, [1.0, 1.0, 2.0])
    from_displacement = shifted.evaluate_from_displacement(1, 0, [0.0, 0.0, 1.0])
    assert direct == pytest.approx(from_displacement)


def test_center_is_copied():
    radial = RadialInterpolator([0.0, 1.0], [1.0, 1.0])
    evaluator = PAWBasisEvaluator([0.5, 0.25, 0.0], radial)
    center = evaluator.center
    center[0] = 9.0
    assert evaluator.center[0] == 0.5


@pytest.fixture
def radial_function():
    radii = [0.001 * 1.05**index for index in range(30)]
    values = [math.exp(-radius) * math.cos(3 * radius) for radius in radii]
    return RadialFunction(radii=radii, values=values)


def test_reproduces_first_knot(radial_function):
    interpolator = RadialInterpolator.from_radial_function(radial_function)
    assert abs(interpolator.evaluate(radial_function.radii[0]) - radial_function.values[0]) <= 1e-14


def test_reproduces_second_knot(radial_function):
    interpolator = RadialInterpolator.from_radial_function(radial_function)
    assert abs(interpolator.evaluate(radial_function.radii[1]) - radial_function.values[1]) <= 1e-14


def test_linear_midpoint(radial_function):
    interpolator = RadialInterpolator.from_radial_function(radial_function)
    mid_r = 0.5 * (radial_function.radii[0] + radial_function.radii[1])
    expected = 0.5 * (radial_function.values[0] + radial_function.values[1])
    assert abs(interpolator.evaluate(mid_r) - expected) <= 1e-12


def test_clamps_outside_grid():
    interpolator = RadialInterpolator([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
    assert interpolator.evaluate(0.0) == 4.0
    assert interpolator.evaluate(10.0) == 6.0


def test_exposes_grid():
    interpolator = RadialInterpolator([1.0, 2.0], [3.0, 4.0])
    assert interpolator.radii == [1.0, 2.0]
    assert interpolator.values == [3.0, 4.0]


@pytest.mark.parametrize(
    ("radii", "values", "message"),
    [
        ([], [], "non-empty"),
        ([0.0, 1.0], [1.0], "size mismatch"),
        ([0.0], [1.0], "at least two"),
        ([0.0, 1.0, 1.0], [1.0, 2.0, 3.0], "strictly increasing"),
    ],
)
def test_invalid_grids_rejected(radii, values, message):
    with pytest.raises(ValueError, match=message):
        RadialInterpolator(radii, values)