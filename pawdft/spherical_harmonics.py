"""Real spherical harmonics and associated Legendre polynomials."""

from __future__ import annotations

import math

_PI = 3.141592653589793238462643383279502884


def _double_factorial(n: int) -> float:
    result = 1.0
    for value in range(n, 0, -2):
        result *= float(value)
    return result


def factorial(n: int) -> float:
    """Return n! as a float."""
    if n < 0:
        raise ValueError("Factorial is undefined for negative integers")
    result = 1.0
    for value in range(2, n + 1):
        result *= float(value)
    return result


def _normalization_constant(l: int, absolute_m: int) -> float:
    numerator = (2.0 * l + 1.0) * factorial(l - absolute_m)
    denominator = 4.0 * _PI * factorial(l + absolute_m)
    return math.sqrt(numerator / denominator)


def cartesian_to_spherical_angles(x: float, y: float, z: float) -> tuple[float, float]:
    """Return the polar and azimuthal angles (theta, phi) of a point."""
    radius = math.sqrt(x * x + y * y + z * z)
    if radius == 0.0:
        raise ValueError("Spherical angles are undefined at the origin")
    cos_theta = min(max(z / radius, -1.0), 1.0)
    return math.acos(cos_theta), math.atan2(y, x)


def associated_legendre_polynomial(l: int, m: int, x: float) -> float:
    """Associated Legendre polynomial P_l^m(x) with the Condon-Shortley phase."""
    if l < 0:
        raise ValueError("Associated Legendre polynomial requires l >= 0")
    if abs(m) > l:
        raise ValueError("Associated Legendre polynomial requires |m| <= l")
    if x < -1.0 or x > 1.0:
        raise ValueError("Associated Legendre polynomial requires x in [-1, 1]")

    absolute_m = abs(m)

    p_mm = 1.0
    if absolute_m > 0:
        sin_theta = math.sqrt(max(0.0, 1.0 - x * x))
        p_mm = (-1.0) ** absolute_m * _double_factorial(2 * absolute_m - 1) * sin_theta**absolute_m

    if l == absolute_m:
        value = p_mm
    else:
        p_previous = p_mm
        value = x * (2 * absolute_m + 1) * p_mm
        for ell in range(absolute_m + 2, l + 1):
            p_previous, value = value, (
                (2.0 * ell - 1.0) * x * value - (ell + absolute_m - 1.0) * p_previous
            ) / (ell - absolute_m)

    if m >= 0:
        return value

    sign = 1.0 if absolute_m % 2 == 0 else -1.0
    return sign * factorial(l - absolute_m) / factorial(l + absolute_m) * value


def evaluate_real_spherical_harmonic_from_angles(l: int, m: int, theta: float, phi: float) -> float:
    """Real spherical harmonic Y_lm at polar angle theta and azimuth phi."""
    if l < 0:
        raise ValueError("Real spherical harmonics require l >= 0")
    if abs(m) > l:
        raise ValueError("Real spherical harmonics require |m| <= l")

    absolute_m = abs(m)
    legendre = associated_legendre_polynomial(l, absolute_m, math.cos(theta))
    normalization = _normalization_constant(l, absolute_m)

    if m == 0:
        return normalization * legendre
    if m > 0:
        return math.sqrt(2.0) * normalization * legendre * math.cos(absolute_m * phi)
    return math.sqrt(2.0) * normalization * legendre * math.sin(absolute_m * phi)


def evaluate_real_spherical_harmonic(l: int, m: int, x: float, y: float, z: float) -> float:
    """Real spherical harmonic Y_lm in the direction of the point (x, y, z)."""
    theta, phi = cartesian_to_spherical_angles(x, y, z)
    return evaluate_real_spherical_harmonic_from_angles(l, m, theta, phi)