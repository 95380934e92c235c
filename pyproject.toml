[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadcone"
version = "3.2.2"
description = "Building blocks for a splitting conic solver: sparse KKT assembly and a preconditioned conjugate gradient linear system solver"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "optimization",
    "conic programming",
    "quadratic programming",
    "sparse",
    "linear systems",
    "conjugate gradient",
    "KKT",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["quadcone"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
