"""Reshaping of tabulated PAW kinetic-energy differences."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

__all__ = ["build_full_kinetic_diff_matrix"]


def build_full_kinetic_diff_matrix(flat_values: Sequence[float], state_count: int) -> np.ndarray:
    """Turn a row-major list of ``state_count**2`` values into a square matrix."""
    values = np.asarray(flat_values, dtype=float).reshape(-1)
    expected = state_count * state_count
    if values.size != expected:
        raise ValueError(f"kinetic_energy_differences: expected {expected} entries, got {values.size}")
    return values.reshape(state_count, state_count).copy()