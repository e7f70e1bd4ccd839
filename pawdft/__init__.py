"""PAW datasets, crystal structures, real spherical harmonics and one-centre Hamiltonian corrections."""

__version__ = "0.1.0"