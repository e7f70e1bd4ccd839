"""Atoms, periodic crystal structures and unit conversion constants."""

from __future__ import annotations

import copy
from enum import Enum

import numpy as np

ANG_TO_BOHR = 1.88972612546
BOHR_TO_ANG = 0.52917721067
PI = 3.141592653589793238462643383279502884

_SPATIAL_DIMENSION = 3


def _as_position_list(positions) -> np.ndarray:
    array = np.array(positions, dtype=float)
    if array.ndim == 1 and array.size == 0:
        array = array.reshape(0, _SPATIAL_DIMENSION)
    if array.ndim != 2 or array.shape[1] != _SPATIAL_DIMENSION:
        raise ValueError("Atom position list must have shape (n, 3)")
    return array


def _check_index(index: int, count: int) -> int:
    if index < 0 or index >= count:
        raise IndexError("Atom position index out of range")
    return index


def read_atomic_position(position_list, position_index: int) -> np.ndarray:
    """Return a copy of row ``position_index`` of an (n, 3) position list."""
    positions = _as_position_list(position_list)
    _check_index(position_index, positions.shape[0])
    return positions[position_index].copy()


class Atom:
    """One chemical species with all of its positions in the cell."""

    def __init__(self, symbol: str = "", positions=None, charge: float = 0.0) -> None:
        self.symbol = symbol
        if positions is None:
            positions = np.zeros((0, _SPATIAL_DIMENSION))
        self.positions = _as_position_list(positions)
        self.charge = float(charge)

    def __repr__(self) -> str:
        return f"Atom(symbol={self.symbol!r}, num_positions={self.num_positions()}, charge={self.charge})"

    def num_positions(self) -> int:
        return int(self.positions.shape[0])

    def position(self, index: int = 0) -> np.ndarray:
        """Return a copy of the position with the given index."""
        return read_atomic_position(self.positions, index)

    def set_position(self, position_index: int, atomic_position) -> None:
        _check_index(position_index, self.num_positions())
        point = np.asarray(atomic_position, dtype=float).reshape(-1)
        if point.shape[0] < _SPATIAL_DIMENSION:
            raise ValueError("Atomic position must have three components")
        self.positions[position_index] = point[:_SPATIAL_DIMENSION]


def make_atom(symbol: str, num_positions: int, charge: float = 0.0) -> Atom:
    """Create an atom with ``num_positions`` positions, all at the origin."""
    if num_positions < 0:
        raise ValueError("Number of positions must be non-negative")
    return Atom(symbol, np.zeros((num_positions, _SPATIAL_DIMENSION)), charge)


class CoordType(Enum):
    CARTESIAN = "cartesian"
    FRACTIONAL = "fractional"


class Structure:
    """A periodic cell given by lattice vectors (rows) and its atoms."""

    def __init__(self, lattice=None, coord_type: CoordType = CoordType.FRACTIONAL) -> None:
        if lattice is None:
            lattice = np.eye(_SPATIAL_DIMENSION)
        self.lattice = lattice
        self.coord_type = coord_type
        self.atoms: list[Atom] = []

    @property
    def lattice(self) -> np.ndarray:
        return self._lattice

    @lattice.setter
    def lattice(self, value) -> None:
        array = np.array(value, dtype=float)
        if array.shape != (_SPATIAL_DIMENSION, _SPATIAL_DIMENSION):
            raise ValueError("Lattice vectors must have shape (3, 3)")
        self._lattice = array

    def num_atoms(self) -> int:
        """Total number of atomic positions over all species."""
        return sum(atom.num_positions() for atom in self.atoms)

    def num_species(self) -> int:
        return len(self.atoms)

    def add_atom(self, atom: Atom) -> None:
        """Add a species, merging its positions into an existing one of the same symbol."""
        for index, existing in enumerate(self.atoms):
            if existing.symbol == atom.symbol:
                self.atoms[index] = Atom(
                    existing.symbol,
                    np.vstack([existing.positions, atom.positions]),
                    existing.charge,
                )
                return
        self.atoms.append(copy.deepcopy(atom))

    def clear_atoms(self) -> None:
        self.atoms.clear()