"""Interface shared by the linear system solvers.

Each solver handles the quasi-definite system
``[[R_x + P, A'], [A, -R_y]] z = b`` where ``diag(R_x, R_y) = diag_r``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike


class LinearSystemError(RuntimeError):
    """Raised when a linear system cannot be set up, factored or solved."""


class LinearSystemSolver(ABC):
    """Base class for solvers of the KKT system of an ``m x n`` problem."""

    def __init__(self, n: int, m: int) -> None:
        if n < 0 or m < 0:
            raise ValueError("dimensions must be non-negative")
        self.n = int(n)
        self.m = int(m)

    @property
    def size(self) -> int:
        """Dimension ``n + m`` of the linear system."""
        return self.n + self.m

    def _rhs(self, b: ArrayLike) -> np.ndarray:
        vec = np.array(b, dtype=float).reshape(-1)
        if vec.size != self.size:
            raise ValueError(
                f"right-hand side must have length {self.size}, got {vec.size}"
            )
        return vec

    def _diag_r(self, diag_r: ArrayLike) -> np.ndarray:
        vec = np.array(diag_r, dtype=float).reshape(-1)
        if vec.size != self.size:
            raise ValueError(f"diag_r must have length {self.size}, got {vec.size}")
        return vec

    @abstractmethod
    def solve(
        self, b: ArrayLike, warm_start: Optional[ArrayLike] = None, tol: float = 0.0
    ) -> np.ndarray:
        """Return the solution of the system for right-hand side ``b``."""

    @abstractmethod
    def update_diag_r(self, diag_r: ArrayLike) -> None:
        """Replace the diagonal ``R`` and refresh any factorization."""

    @abstractmethod
    def method_name(self) -> str:
        """Name of the linear solver method."""