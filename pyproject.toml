[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pawdft"
version = "0.1.0"
description = "PAW dataset loading, real spherical harmonics and one-centre Hamiltonian corrections for real-space DFT"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["dft", "paw", "electronic-structure", "spherical-harmonics", "pseudopotential"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pawdft"]

[tool.pytest.ini_options]
addopts = "-ra"
