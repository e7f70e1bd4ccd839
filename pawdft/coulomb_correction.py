"""Static two-index Coulomb correction of a PAW setup."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from pawdft.paw_setup import PAWSetup, RadialFunction, XmlAttributeMap

__all__ = [
    "trapezoid_weights",
    "radial_moment_integral",
    "coulomb_inner_product_spherical",
    "build_two_index_coulomb_correction",
]

_PI = 3.141592653589793238462643383279502884
_SQRT_FOUR_PI = 3.5449077018110318
_ORIGIN_TOLERANCE = 1e-14


def trapezoid_weights(radii: Sequence[float]) -> np.ndarray:
    """Trapezoidal quadrature weights on a (possibly non-uniform) radial grid."""
    r = np.asarray(radii, dtype=float)
    if r.size < 2:
        raise ValueError("Need at least two radial grid points for quadrature")
    weights = np.zeros_like(r)
    weights[0] = 0.5 * (r[1] - r[0])
    weights[1:-1] = 0.5 * (r[2:] - r[:-2])
    weights[-1] = 0.5 * (r[-1] - r[-2])
    return weights


def _arrays(radial_function: RadialFunction) -> tuple[np.ndarray, np.ndarray]:
    return np.asarray(radial_function.radii, dtype=float), np.asarray(radial_function.values, dtype=float)


def radial_moment_integral(radial_function: RadialFunction) -> float:
    """Integral of r^2 f(r) dr by the trapezoidal rule."""
    radii, values = _arrays(radial_function)
    weights = trapezoid_weights(radii)
    return float(np.sum(weights * radii * radii * values))


def coulomb_inner_product_spherical(left: RadialFunction, right: RadialFunction) -> float:
    """Coulomb interaction of two spherical densities, kernel 1/max(r, r')."""
    if len(left) != len(right):
        raise ValueError("Coulomb inner product requires matched radial grids")
    left_radii, left_values = _arrays(left)
    right_radii, right_values = _arrays(right)
    weights = trapezoid_weights(left_radii)

    left_term = weights * left_radii * left_radii * left_values
    right_term = weights * right_radii * right_radii * right_values
    max_radius = np.maximum.outer(left_radii, right_radii)
    kernel = np.divide(1.0, max_radius, out=np.zeros_like(max_radius), where=max_radius != 0.0)
    return float(left_term @ kernel @ right_term)


def _multiply(left: RadialFunction, right: RadialFunction) -> RadialFunction:
    if len(left) != len(right):
        raise ValueError("multiply_radial_functions requires matched radial grids")
    values = np.asarray(left.values, dtype=float) * np.asarray(right.values, dtype=float)
    return RadialFunction(radii=list(left.radii), values=values.tolist())


def _subtract(left: RadialFunction, right: RadialFunction) -> RadialFunction:
    if len(left) != len(right):
        raise ValueError("subtract_radial_functions requires matched radial grids")
    values = np.asarray(left.values, dtype=float) - np.asarray(right.values, dtype=float)
    return RadialFunction(radii=list(left.radii), values=values.tolist())


def _integral_phi_phi_over_r(left: RadialFunction, right: RadialFunction) -> float:
    radii, left_values = _arrays(left)
    right_values = np.asarray(right.values, dtype=float)
    weights = trapezoid_weights(radii)
    return float(np.sum(weights * radii * left_values * right_values))


def _normalized_shape_function_00(attributes: XmlAttributeMap, radial_grid: Sequence[float]) -> RadialFunction:
    if not attributes.has("type") or not attributes.has("rc"):
        raise ValueError("shape_function is missing required attributes")
    if attributes.get_string("type") != "sinc":
        raise ValueError("Only sinc shape_function is currently implemented for static Coulomb correction")

    cutoff_radius = attributes.get_double("rc")
    radii = np.asarray(radial_grid, dtype=float)
    x = _PI * radii / cutoff_radius
    small = np.abs(x) < _ORIGIN_TOLERANCE
    safe_x = np.where(small, 1.0, x)
    values = np.where(small, 1.0, np.sin(safe_x) / safe_x)
    values = np.where(radii > cutoff_radius, 0.0, values)

    shape_function = RadialFunction(radii=radii.tolist(), values=values.tolist())
    moment = radial_moment_integral(shape_function)
    if moment <= 0.0:
        raise ValueError("Failed to normalize shape_function")

    normalization = 1.0 / (_SQRT_FOUR_PI * moment)
    shape_function.values = (values * normalization).tolist()
    return shape_function


def _named_function(setup: PAWSetup, name: str) -> RadialFunction:
    try:
        return setup.named_radial_functions[name]
    except KeyError:
        raise KeyError(f"PAW setup is missing radial function: {name}") from None


def build_two_index_coulomb_correction(setup: PAWSetup) -> np.ndarray:
    """Static Coulomb correction between valence states, one row/column per state."""
    shape_attributes = setup.metadata_blocks.get("shape_function")
    if shape_attributes is None:
        raise ValueError("PAW XML is missing shape_function metadata")

    ae_core_density = _named_function(setup, "ae_core_density")
    pseudo_core_density = _named_function(setup, "pseudo_core_density")
    shape_function = _normalized_shape_function_00(shape_attributes, ae_core_density.radii)

    delta_a = (
        radial_moment_integral(_subtract(ae_core_density, pseudo_core_density))
        - setup.atomic_number / _SQRT_FOUR_PI
    )
    nc_tilde_g00 = coulomb_inner_product_spherical(pseudo_core_density, shape_function)
    g00_self = coulomb_inner_product_spherical(shape_function, shape_function)

    state_count = len(setup.states)
    correction = np.zeros((state_count, state_count))
    ae_waves = setup.all_electron_partial_waves_by_state
    pseudo_waves = setup.pseudo_partial_waves_by_state

    for i, left_state in enumerate(setup.states):
        for j, right_state in enumerate(setup.states):
            if left_state.l != right_state.l:
                continue

            ae_pair = _multiply(ae_waves[i], ae_waves[j])
            pseudo_pair = _multiply(pseudo_waves[i], pseudo_waves[j])
            delta_pair = _subtract(ae_pair, pseudo_pair)

            delta_00_ij = radial_moment_integral(delta_pair) / _SQRT_FOUR_PI
            ae_core_term = coulomb_inner_product_spherical(ae_pair, ae_core_density)
            pseudo_core_term = coulomb_inner_product_spherical(pseudo_pair, pseudo_core_density)
            nuclear_term = setup.atomic_number * _integral_phi_phi_over_r(ae_waves[i], ae_waves[j])
            shape_term = delta_a * coulomb_inner_product_spherical(pseudo_pair, shape_function)
            delta_term = delta_00_ij * (delta_a * nc_tilde_g00 + g00_self)

            correction[i, j] = ae_core_term - pseudo_core_term - nuclear_term - shape_term - delta_term

    return correction