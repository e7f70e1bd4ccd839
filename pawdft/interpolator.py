"""Linear radial interpolation and PAW basis functions built on it."""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Sequence

import numpy as np

from pawdft.paw_setup import RadialFunction
from pawdft.spherical_harmonics import (
    evaluate_real_spherical_harmonic,
    evaluate_real_spherical_harmonic_from_angles,
)
from pawdft.structure import Atom

__all__ = ["RadialInterpolator", "PAWBasisEvaluator"]


class RadialInterpolator:
    """Piecewise-linear interpolation of a function on a strictly increasing radial grid.

    Outside the grid the function is held at its end values.
    """

    def __init__(self, radii: Sequence[float], values: Sequence[float]) -> None:
        self._radii = [float(radius) for radius in radii]
        self._values = [float(value) for value in values]
        self._validate()

    @classmethod
    def from_radial_function(cls, radial_function: RadialFunction) -> RadialInterpolator:
        return cls(radial_function.radii, radial_function.values)

    @property
    def radii(self) -> list[float]:
        return list(self._radii)

    @property
    def values(self) -> list[float]:
        return list(self._values)

    @property
    def max_radius(self) -> float:
        return self._radii[-1]

    def _validate(self) -> None:
        if not self._radii or not self._values:
            raise ValueError("RadialInterpolator requires non-empty radial data")
        if len(self._radii) != len(self._values):
            raise ValueError("RadialInterpolator radial grid/value size mismatch")
        if len(self._radii) < 2:
            raise ValueError("RadialInterpolator requires at least two grid points")
        if any(not upper > lower for lower, upper in zip(self._radii, self._radii[1:])):
            raise ValueError("RadialInterpolator requires a strictly increasing radial grid")

    def evaluate(self, radius: float) -> float:
        """Return the interpolated value at ``radius``."""
        if radius <= self._radii[0]:
            return self._values[0]
        if radius >= self._radii[-1]:
            return self._values[-1]

        upper = bisect_right(self._radii, radius)
        lower = upper - 1
        r0, r1 = self._radii[lower], self._radii[upper]
        v0, v1 = self._values[lower], self._values[upper]
        fraction = (radius - r0) / (r1 - r0)
        return (1.0 - fraction) * v0 + fraction * v1

    __call__ = evaluate


class PAWBasisEvaluator:
    """A radial function times a real spherical harmonic, centred on an atom."""

    def __init__(self, center, radial_interpolator: RadialInterpolator) -> None:
        point = np.array(center, dtype=float).reshape(-1)
        if point.shape[0] != 3:
            raise ValueError("Basis centre must have three components")
        self._center = point
        self._radial_interpolator = radial_interpolator

    @classmethod
    def from_atom(
        cls, atom: Atom, radial_interpolator: RadialInterpolator, position_index: int = 0
    ) -> PAWBasisEvaluator:
        return cls(atom.position(position_index), radial_interpolator)

    @property
    def center(self) -> np.ndarray:
        return self._center.copy()

    @property
    def radial_interpolator(self) -> RadialInterpolator:
        return self._radial_interpolator

    def evaluate(self, l: int, m: int, point) -> float:
        """Value of the (l, m) basis function at a point in space."""
        displacement = np.asarray(point, dtype=float).reshape(-1)[:3] - self._center
        return self.evaluate_from_displacement(l, m, displacement)

    def evaluate_from_displacement(self, l: int, m: int, displacement) -> float:
        """Value of the (l, m) basis function at a displacement from the centre."""
        dx, dy, dz = (float(component) for component in np.asarray(displacement, dtype=float).reshape(-1)[:3])
        radius = math.sqrt(dx * dx + dy * dy + dz * dz)

        if radius == 0.0:
            if l == 0 and m == 0:
                return self._radial_interpolator.evaluate(0.0) * evaluate_real_spherical_harmonic_from_angles(
                    0, 0, 0.0, 0.0
                )
            return 0.0

        if radius > self._radial_interpolator.max_radius:
            return 0.0

        radial_value = self._radial_interpolator.evaluate(radius)
        return radial_value * evaluate_real_spherical_harmonic(l, m, dx, dy, dz)