import math

import numpy as np
import pytest

from pawdft.coulomb_correction import (
    build_two_index_coulomb_correction,
    coulomb_inner_product_spherical,
    radial_moment_integral,
    trapezoid_weights,
)
from pawdft.paw_setup import PAWSetup, PAWState, RadialFunction, XmlAttributeMap

GRID = [0.05 * index for index in range(41)]


def _radial(function):
    return RadialFunction(radii=list(GRID), values=[function(r) for r in GRID])


def _make_setup(identical_waves=False, atomic_number=6.0, shape_type="sinc"):
    ae_waves = [
        _radial(lambda r: r * math.exp(-r)),
        _radial(lambda r: r * r * math.exp(-2 * r)),
        _radial(lambda r: r * math.exp(-0.5 * r)),
    ]
    if identical_waves:
        pseudo_waves = [RadialFunction(list(w.radii), list(w.values)) for w in ae_waves]
    else:
        pseudo_waves = [
            _radial(lambda r: 0.9 * r * math.exp(-r)),
            _radial(lambda r: 0.8 * r * r * math.exp(-2 * r)),
            _radial(lambda r: 1.1 * r * math.exp(-0.5 * r)),
        ]
    ae_core = _radial(lambda r: math.exp(-3 * r))
    pseudo_core = ae_core if identical_waves else _radial(lambda r: 0.5 * math.exp(-2 * r))
    return PAWSetup(
        symbol="C",
        valence_charge=4.0,
        cutoff_radius=1.5,
        atomic_number=atomic_number,
        metadata_blocks={"shape_function": XmlAttributeMap({"type": shape_type, "rc": "1.0"})},
        named_radial_functions={"ae_core_density": ae_core, "pseudo_core_density": pseudo_core},
        states=[PAWState(id="s1", l=0), PAWState(id="s2", l=0), PAWState(id="p1", l=1)],
        all_electron_partial_waves_by_state=ae_waves,
        pseudo_partial_waves_by_state=pseudo_waves,
    )


def test_trapezoid_weights_uniform_grid():
    assert trapezoid_weights([0.0, 1.0, 2.0]).tolist() == [0.5, 1.0, 0.5]


def test_trapezoid_weights_sum_to_span():
    radii = [0.01 * 1.1**k for k in range(25)]
    assert trapezoid_weights(radii).sum() == pytest.approx(radii[-1] - radii[0])


def test_trapezoid_weights_need_two_points():
    with pytest.raises(ValueError, match="at least two"):
        trapezoid_weights([1.0])


def test_radial_moment_integral_is_linear():
    f = _radial(lambda r: math.exp(-r))
    g = _radial(lambda r: 3.0 * math.exp(-r))
    assert radial_moment_integral(g) == pytest.approx(3.0 * radial_moment_integral(f))


def test_coulomb_inner_product_is_symmetric():
    f = _radial(lambda r: math.exp(-r))
    g = _radial(lambda r: r * math.exp(-2 * r))
    assert coulomb_inner_product_spherical(f, g) == pytest.approx(coulomb_inner_product_spherical(g, f))


def test_coulomb_self_energy_positive():
    f = _radial(lambda r: math.exp(-r))
    assert coulomb_inner_product_spherical(f, f) > 0.0


def test_coulomb_inner_product_mismatch():
    f = _radial(lambda r: 1.0)
    g = RadialFunction(radii=[0.0, 1.0], values=[1.0, 1.0])
    with pytest.raises(ValueError, match="matched radial grids"):
        coulomb_inner_product_spherical(f, g)


def test_correction_shape_and_symmetry():
    correction = build_two_index_coulomb_correction(_make_setup())
    assert correction.shape == (3, 3)
    assert np.allclose(correction, correction.T)


def test_correction_zero_between_different_l():
    correction = build_two_index_coulomb_correction(_make_setup())
    assert correction[0, 2] == 0.0
    assert correction[2, 1] == 0.0
    assert correction[0, 0] != 0.0


def test_correction_vanishes_without_augmentation():
    correction = build_two_index_coulomb_correction(_make_setup(identical_waves=True, atomic_number=0.0))
    assert np.allclose(correction, 0.0)


def test_missing_shape_function():
    setup = _make_setup()
    setup.metadata_blocks = {}
    with pytest.raises(ValueError, match="shape_function"):
        build_two_index_coulomb_correction(setup)


def test_unsupported_shape_function():
    with pytest.raises(ValueError, match="Only sinc"):
        build_two_index_coulomb_correction(_make_setup(shape_type="gauss"))


def test_shape_function_missing_attribute():
    setup = _make_setup()
    setup.metadata_blocks = {"shape_function": XmlAttributeMap({"type": "sinc"})}
    with pytest.raises(ValueError, match="missing required attributes"):
        build_two_index_coulomb_correction(setup)


def test_missing_core_density():
    setup = _make_setup()
    del setup.named_radial_functions["ae_core_density"]
    with pytest.raises(KeyError):
        build_two_index_coulomb_correction(setup)