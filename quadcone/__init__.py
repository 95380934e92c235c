"""Problem types, sparse KKT assembly and a conjugate gradient KKT solver for quadratic cone programs."""

__version__ = "3.2.2"

__all__ = ["__version__"]