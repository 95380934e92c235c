"""Compressed sparse column matrices and KKT matrix assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike


@dataclass
class CscMatrix:
    """Sparse matrix in compressed sparse column form with zero-based indices."""

    m: int
    n: int
    indptr: np.ndarray
    indices: np.ndarray
    data: np.ndarray

    def __post_init__(self) -> None:
        self.m = int(self.m)
        self.n = int(self.n)
        if self.m < 0 or self.n < 0:
            raise ValueError("matrix dimensions must be non-negative")
        self.indptr = np.asarray(self.indptr, dtype=np.int64).reshape(-1)
        self.indices = np.asarray(self.indices, dtype=np.int64).reshape(-1)
        self.data = np.asarray(self.data, dtype=float).reshape(-1)
        if self.indptr.size != self.n + 1:
            raise ValueError(
                f"column pointers must have length {self.n + 1}, "
                f"got {self.indptr.size}"
            )
        if self.indptr[0] != 0 or np.any(np.diff(self.indptr) < 0):
            raise ValueError("column pointers must start at 0 and not decrease")
        nnz = int(self.indptr[-1])
        if self.indices.size != nnz or self.data.size != nnz:
            raise ValueError(
                f"expected {nnz} row indices and values, "
                f"got {self.indices.size} and {self.data.size}"
            )
        if nnz and (self.indices.min() < 0 or self.indices.max() >= self.m):
            raise ValueError("row index out of range")

    @property
    def nnz(self) -> int:
        return int(self.indptr[-1])

    @property
    def shape(self) -> tuple[int, int]:
        return self.m, self.n

    def _column_of_entries(self) -> np.ndarray:
        return np.repeat(np.arange(self.n, dtype=np.int64), np.diff(self.indptr))

    @classmethod
    def from_dense(cls, dense: ArrayLike) -> "CscMatrix":
        """Build from a dense 2-D array, keeping only non-zero entries."""
        arr = np.asarray(dense, dtype=float)
        if arr.ndim != 2:
            raise ValueError("dense matrix must be two-dimensional")
        m, n = arr.shape
        cols, rows = np.nonzero(arr.T)
        indptr = cumsum(np.bincount(cols, minlength=n)) if n else np.zeros(1)
        return cls(m, n, indptr, rows, arr[rows, cols])

    def to_dense(self) -> np.ndarray:
        """Return the matrix as a dense array; duplicate entries are summed."""
        out = np.zeros((self.m, self.n))
        np.add.at(out, (self.indices, self._column_of_entries()), self.data)
        return out

    def transpose(self) -> "CscMatrix":
        """Return the transpose, with row indices sorted within each column."""
        result, _ = compress(
            self.n, self.m, self._column_of_entries(), self.indices, self.data
        )
        return result

    def matvec(self, x: ArrayLike) -> np.ndarray:
        """Return ``A @ x``."""
        v = _vector(x, self.n)
        weights = self.data * v[self._column_of_entries()]
        return np.bincount(self.indices, weights=weights, minlength=self.m).astype(
            float
        )

    def rmatvec(self, x: ArrayLike) -> np.ndarray:
        """Return ``A.T @ x``."""
        v = _vector(x, self.m)
        weights = self.data * v[self.indices]
        return np.bincount(
            self._column_of_entries(), weights=weights, minlength=self.n
        ).astype(float)

    def sym_upper_matvec(self, x: ArrayLike) -> np.ndarray:
        """Return ``P @ x`` for symmetric ``P`` stored by its upper triangle.

        Entries below the diagonal are ignored.
        """
        if self.m != self.n:
            raise ValueError("symmetric product needs a square matrix")
        v = _vector(x, self.n)
        cols = self._column_of_entries()
        rows = self.indices
        upper = rows <= cols
        strict = rows < cols
        y = np.bincount(
            rows[upper], weights=self.data[upper] * v[cols[upper]], minlength=self.n
        ).astype(float)
        y += np.bincount(
            cols[strict], weights=self.data[strict] * v[rows[strict]], minlength=self.n
        )
        return y


@dataclass
class KktMatrix:
    """Triangular part of the KKT matrix with bookkeeping for updating ``R``.

    ``diag_p`` holds the diagonal of ``P``; ``diag_r_idxs[k]`` is the position
    in ``matrix.data`` of the entry that carries ``diag_r[k]``.
    """

    matrix: CscMatrix
    diag_p: np.ndarray
    diag_r_idxs: np.ndarray


def _vector(x: ArrayLike, length: int) -> np.ndarray:
    v = np.asarray(x, dtype=float).reshape(-1)
    if v.size != length:
        raise ValueError(f"vector must have length {length}, got {v.size}")
    return v


def cumsum(counts: ArrayLike) -> np.ndarray:
    """Return column pointers ``[0, c0, c0 + c1, ...]`` for the given counts."""
    c = np.asarray(counts, dtype=np.int64).reshape(-1)
    return np.concatenate(([0], np.cumsum(c))).astype(np.int64)


def compress(
    m: int, n: int, rows: ArrayLike, cols: ArrayLike, values: ArrayLike
) -> tuple[CscMatrix, np.ndarray]:
    """Compress a triplet matrix to CSC form.

    Entries keep their triplet order within each column. Returns the matrix
    and the mapping from triplet position to position in the result.
    """
    r = np.asarray(rows, dtype=np.int64).reshape(-1)
    c = np.asarray(cols, dtype=np.int64).reshape(-1)
    v = np.asarray(values, dtype=float).reshape(-1)
    if not (r.size == c.size == v.size):
        raise ValueError("rows, cols and values must have the same length")
    if r.size:
        if r.min() < 0 or r.max() >= m:
            raise ValueError("row index out of range")
        if c.min() < 0 or c.max() >= n:
            raise ValueError("column index out of range")
    order = np.argsort(c, kind="stable")
    mapping = np.empty(r.size, dtype=np.int64)
    mapping[order] = np.arange(r.size, dtype=np.int64)
    indptr = cumsum(np.bincount(c, minlength=n)[:n] if n else [])
    return CscMatrix(m, n, indptr, r[order], v[order]), mapping


def form_kkt(
    A: CscMatrix, P: Optional[CscMatrix], diag_r: ArrayLike, upper: bool
) -> KktMatrix:
    """Assemble the upper or lower triangle of ``[[R_x + P, A'], [A, -R_y]]``.

    ``P`` is given by its upper triangle (or ``None`` for zero).
    """
    n, m = A.n, A.m
    r = _vector(diag_r, n + m)
    if P is not None and (P.m != n or P.n != n):
        raise ValueError(f"P must be {n} x {n}")
    rows: list[int] = []
    cols: list[int] = []
    vals: list[float] = []
    diag_p = np.zeros(n)
    diag_r_idxs = np.zeros(n + m, dtype=np.int64)

    def add(row: int, col: int, value: float) -> None:
        rows.append(row)
        cols.append(col)
        vals.append(value)

    if P is not None:
        pp = P.indptr.tolist()
        pi = P.indices.tolist()
        px = P.data.tolist()
        for j in range(n):
            start, end = pp[j], pp[j + 1]
            if start == end:
                diag_r_idxs[j] = len(vals)
                add(j, j, r[j])
            for h in range(start, end):
                i = pi[h]
                if i > j:
                    break
                value = px[h]
                if i == j:
                    diag_p[j] = value
                    value += r[j]
                    diag_r_idxs[j] = len(vals)
                if upper:
                    add(i, j, value)
                else:
                    add(j, i, value)
                if i < j and (h + 1 == end or pi[h + 1] > j):
                    diag_r_idxs[j] = len(vals)
                    add(j, j, r[j])
    else:
        for j in range(n):
            diag_r_idxs[j] = len(vals)
            add(j, j, r[j])

    ap = A.indptr.tolist()
    ai = A.indices.tolist()
    ax = A.data.tolist()
    for j in range(n):
        for h in range(ap[j], ap[j + 1]):
            if upper:
                add(j, ai[h] + n, ax[h])
            else:
                add(ai[h] + n, j, ax[h])

    for j in range(m):
        diag_r_idxs[j + n] = len(vals)
        add(j + n, j + n, -r[j + n])

    matrix, mapping = compress(n + m, n + m, rows, cols, vals)
    return KktMatrix(matrix, diag_p, mapping[diag_r_idxs])