"""Indirect solver: preconditioned conjugate gradient on the reduced system.

The KKT system ``[[R_x + P, A'], [A, -R_y]] [x; y] = [rx; ry]`` is reduced to

    x = (R_x + P + A' R_y^{-1} A)^{-1} (rx + A' R_y^{-1} ry)
    y = R_y^{-1} (A x - ry)

and the first equation is solved by conjugate gradient with a diagonal
(Jacobi) preconditioner.
"""

from __future__ import annotations

import warnings
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from .csparse import CscMatrix
from .linalg import norm_inf
from .linsys import LinearSystemSolver

# Below this infinity norm the right-hand side is treated as zero.
_ZERO_RHS_TOL = 1e-12
# Conjugate gradient never aims for a residual below this on entry.
_MIN_CG_TOL = 1e-12


class IndirectSolver(LinearSystemSolver):
    """Solves the KKT system by preconditioned conjugate gradient."""

    def __init__(
        self, A: CscMatrix, P: Optional[CscMatrix], diag_r: ArrayLike
    ) -> None:
        super().__init__(A.n, A.m)
        if P is not None and (P.m != self.n or P.n != self.n):
            raise ValueError(f"P must be {self.n} x {self.n}")
        self.A = A
        self.P = P
        self._at = A.transpose()
        self._a_cols = np.repeat(np.arange(A.n, dtype=np.int64), np.diff(A.indptr))
        self._p_diag = self._diagonal_of(P)
        self.diag_r = self._diag_r(diag_r)
        self.tot_cg_its = 0
        self._m_inv = self._build_preconditioner()

    def _diagonal_of(self, P: Optional[CscMatrix]) -> np.ndarray:
        """First stored diagonal entry of each column of ``P`` (zero if none)."""
        diag = np.zeros(self.n)
        if P is None or P.nnz == 0:
            return diag
        cols = np.repeat(np.arange(P.n, dtype=np.int64), np.diff(P.indptr))
        on_diag = np.flatnonzero(P.indices == cols)
        if on_diag.size:
            diag_cols, first = np.unique(cols[on_diag], return_index=True)
            diag[diag_cols] = P.data[on_diag[first]]
        return diag

    def _build_preconditioner(self) -> np.ndarray:
        """Return ``1 / diag(R_x + P + A' R_y^{-1} A)``."""
        r_x = self.diag_r[: self.n]
        r_y = self.diag_r[self.n :]
        a = self.A
        weights = a.data * a.data / r_y[a.indices]
        at_ry_a = np.bincount(self._a_cols, weights=weights, minlength=self.n)
        return 1.0 / (r_x + at_ry_a.astype(float) + self._p_diag)

    def preconditioner(self) -> np.ndarray:
        """Return a copy of the inverse diagonal preconditioner."""
        return self._m_inv.copy()

    def _mat_vec(self, x: np.ndarray) -> np.ndarray:
        """Return ``(R_x + P + A' R_y^{-1} A) x``."""
        y = self.diag_r[: self.n] * x
        if self.P is not None:
            y += self.P.sym_upper_matvec(x)
        z = self._at.rmatvec(x) / self.diag_r[self.n :]
        y += self.A.rmatvec(z)
        return y

    def _pcg(
        self, b: np.ndarray, warm: Optional[np.ndarray], max_its: int, tol: float
    ) -> tuple[np.ndarray, int]:
        if warm is None:
            r = b.copy()
            x = np.zeros(self.n)
        else:
            x = warm.copy()
            r = b - self._mat_vec(x)

        if norm_inf(r) < max(tol, _MIN_CG_TOL):
            return x, 0

        z = self._m_inv * r
        ztr = float(z @ r)
        p = z.copy()
        for i in range(max_its):
            gp = self._mat_vec(p)
            alpha = ztr / float(p @ gp)
            x += alpha * p
            r -= alpha * gp
            if norm_inf(r) < tol:
                return x, i + 1
            z = self._m_inv * r
            ztr_prev = ztr
            ztr = float(z @ r)
            p = z + (ztr / ztr_prev) * p
        return x, max_its

    def _warm(self, warm_start: Optional[ArrayLike]) -> Optional[np.ndarray]:
        if warm_start is None:
            return None
        vec = np.asarray(warm_start, dtype=float).reshape(-1)
        if vec.size not in (self.n, self.size):
            raise ValueError(
                f"warm start must have length {self.n} or {self.size}, "
                f"got {vec.size}"
            )
        return vec[: self.n]

    def solve(
        self, b: ArrayLike, warm_start: Optional[ArrayLike] = None, tol: float = 0.0
    ) -> np.ndarray:
        """Return ``[x; y]`` solving the KKT system to CG tolerance ``tol``.

        ``warm_start`` seeds the ``x`` part of the conjugate gradient.
        """
        rhs = self._rhs(b)
        warm = self._warm(warm_start)
        if tol <= 0.0:
            warnings.warn(
                f"conjugate gradient tolerance {tol} <= 0", RuntimeWarning,
                stacklevel=2,
            )
        if norm_inf(rhs) <= _ZERO_RHS_TOL:
            return np.zeros(self.size)

        rx = rhs[: self.n]
        ry = rhs[self.n :]
        r_y = self.diag_r[self.n :]
        reduced = rx + self.A.rmatvec(ry / r_y)
        x, its = self._pcg(reduced, warm, 10 * self.n, tol)
        y = (self._at.rmatvec(x) - ry) / r_y
        self.tot_cg_its += its
        return np.concatenate((x, y))

    def update_diag_r(self, diag_r: ArrayLike) -> None:
        self.diag_r = self._diag_r(diag_r)
        self._m_inv = self._build_preconditioner()

    def method_name(self) -> str:
        return "sparse-indirect-scs"