# pawdft

Building blocks for density-functional calculations with projector
augmented-wave (PAW) datasets, written with numpy and the standard library.

## Modules

- `pawdft.structure`: `Atom`, `Structure` and `CoordType` for periodic
  crystal structures, plus `make_atom`, `read_atomic_position` and the
  constants `ANG_TO_BOHR`, `BOHR_TO_ANG` and `PI`. A `Structure` holds a
  3x3 lattice (one lattice vector per row, identity by default), a
  coordinate type (fractional by default) and a list of atomic species;
  `add_atom` merges the positions of an atom into an existing species with
  the same symbol.
- `pawdft.spherical_harmonics`: `factorial`,
  `cartesian_to_spherical_angles`, `associated_legendre_polynomial`
  (with the Condon-Shortley phase), `evaluate_real_spherical_harmonic` and
  `evaluate_real_spherical_harmonic_from_angles`.
- `pawdft.paw_setup`: the PAW data model (`PAWSetup`, `PAWState`,
  `PAWChannel`, `RadialFunction`, `XmlAttributeMap`), XML reading with
  `load_paw_setup_xml(filename)` and `parse_paw_setup(text)`, and a
  `PAWSetupRegistry` keyed by element symbol. Malformed or inconsistent
  datasets raise `PAWSetupError` (a `ValueError`); a missing symbol in the
  registry raises `KeyError`.
- `pawdft.interpolator`: `RadialInterpolator`, piecewise-linear
  interpolation on a strictly increasing radial grid (held at its end
  values outside the grid), and `PAWBasisEvaluator`, an atom-centred
  function `f(r) Y_lm(r̂)` that is zero beyond the last grid radius.
- `pawdft.kinetic_diff`: `build_full_kinetic_diff_matrix` reshapes the
  tabulated kinetic-energy differences into a square matrix.
- `pawdft.coulomb_correction`: trapezoidal radial quadrature helpers and
  `build_two_index_coulomb_correction`, the static Coulomb correction
  between valence states (requires a `sinc` shape function in the
  dataset).
- `pawdft.ham_correction`: `HamCorrection` and `build_ham_correction`,
  which add the kinetic and Coulomb terms and expand all three matrices
  over magnetic channels (`magnetic_channel_count`,
  `expand_magnetic_matrix`).

## Installation

```
pip install .
```

## Examples

Loading a PAW dataset and building its fixed Hamiltonian correction:

```python
from pawdft.paw_setup import PAWSetupRegistry, load_paw_setup_xml
from pawdft.ham_correction import build_ham_correction

registry = PAWSetupRegistry()
registry.add(load_paw_setup_xml("C.GGA_PBE-JTH.xml"))

setup = registry.get("C")
correction = build_ham_correction(setup)
print(setup.num_channels(), setup.num_projectors())
print(correction.fixed_nonlocal_correction.shape)
```

Building a structure in code:

```python
from pawdft.structure import CoordType, Structure, make_atom

structure = Structure([[3.57, 0, 0], [0, 3.57, 0], [0, 0, 3.57]], CoordType.FRACTIONAL)
carbon = make_atom("C", 2)
carbon.set_position(1, [0.25, 0.25, 0.25])
structure.add_atom(carbon)
print(structure.num_atoms(), structure.num_species())
```

Evaluating a real spherical harmonic and an atom-centred basis function:

```python
from pawdft.interpolator import PAWBasisEvaluator, RadialInterpolator
from pawdft.spherical_harmonics import evaluate_real_spherical_harmonic

print(evaluate_real_spherical_harmonic(1, 0, 0.0, 0.0, 1.0))  # sqrt(3 / 4pi)

radial = RadialInterpolator([0.0, 1.0, 2.0], [2.0, 2.0, 2.0])
basis = PAWBasisEvaluator([0.0, 0.0, 0.0], radial)
print(basis.evaluate(1, 0, [0.0, 0.0, 1.0]))
```

## What it does not do

The package works on single PAW datasets and on structures held in
memory. It does not read structure files (a `Structure` is built in
code), does not build real-space meshes or finite-element spaces, and does
not assemble kinetic operators or project the PAW corrections onto grid
points. There is no command-line program.

## Tests

```
pip install .[test]
pytest
```