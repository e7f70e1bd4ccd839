"""Fixed PAW Hamiltonian corrections expanded over magnetic channels."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from pawdft.coulomb_correction import build_two_index_coulomb_correction
from pawdft.kinetic_diff import build_full_kinetic_diff_matrix
from pawdft.paw_setup import PAWSetup, PAWState

__all__ = [
    "HamCorrection",
    "magnetic_channel_count",
    "expand_magnetic_matrix",
    "build_ham_correction",
]


def _empty_matrix() -> np.ndarray:
    return np.zeros((0, 0))


def magnetic_channel_count(states: Sequence[PAWState]) -> int:
    """Total number of (state, m) channels: the sum of 2l + 1 over the states."""
    return sum(2 * state.l + 1 for state in states)


def _is_square(matrix: np.ndarray, extent: int) -> bool:
    return matrix.ndim == 2 and matrix.shape == (extent, extent)


@dataclass
class HamCorrection:
    """Kinetic, static Coulomb and combined fixed nonlocal PAW corrections."""

    kinetic_energy_differences: np.ndarray = field(default_factory=_empty_matrix)
    static_coulomb_correction: np.ndarray = field(default_factory=_empty_matrix)
    fixed_nonlocal_correction: np.ndarray = field(default_factory=_empty_matrix)

    def validate(self, setup: PAWSetup) -> None:
        """Check that every matrix is square with one row per magnetic channel."""
        extent = magnetic_channel_count(setup.states)
        if not all(
            _is_square(np.asarray(matrix), extent)
            for matrix in (
                self.kinetic_energy_differences,
                self.static_coulomb_correction,
                self.fixed_nonlocal_correction,
            )
        ):
            raise ValueError("Hamiltonian correction matrices must match the magnetic-channel count")


def expand_magnetic_matrix(radial_matrix, states: Sequence[PAWState]) -> np.ndarray:
    """Expand a state-by-state matrix to channels, coupling only equal m."""
    radial = np.asarray(radial_matrix, dtype=float)
    if radial.ndim != 2 or radial.shape[0] != len(states) or radial.shape[1] != len(states):
        raise ValueError("Full radial correction matrix must match the number of states")

    offsets: list[int] = []
    offset = 0
    for state in states:
        offsets.append(offset)
        offset += 2 * state.l + 1

    extent = magnetic_channel_count(states)
    expanded = np.zeros((extent, extent))
    for row_state, (row_offset, row_info) in enumerate(zip(offsets, states)):
        for m in range(-row_info.l, row_info.l + 1):
            row = row_offset + m + row_info.l
            for column_state, (column_offset, column_info) in enumerate(zip(offsets, states)):
                if abs(m) > column_info.l:
                    continue
                column = column_offset + m + column_info.l
                expanded[row, column] = radial[row_state, column_state]
    return expanded


def build_ham_correction(setup: PAWSetup) -> HamCorrection:
    """Build the fixed Hamiltonian corrections of a PAW setup."""
    radial_kinetic = build_full_kinetic_diff_matrix(setup.kinetic_difference_values, len(setup.states))
    radial_coulomb = build_two_index_coulomb_correction(setup)
    if radial_kinetic.shape != radial_coulomb.shape:
        raise ValueError("fixed_nonlocal_correction: matrix size mismatch")
    radial_fixed = radial_kinetic + radial_coulomb

    correction = HamCorrection(
        kinetic_energy_differences=expand_magnetic_matrix(radial_kinetic, setup.states),
        static_coulomb_correction=expand_magnetic_matrix(radial_coulomb, setup.states),
        fixed_nonlocal_correction=expand_magnetic_matrix(radial_fixed, setup.states),
    )
    correction.validate(setup)
    return correction