"""Dense vector helpers used throughout the solver."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def _vec(v: ArrayLike) -> np.ndarray:
    return np.asarray(v, dtype=float).reshape(-1)


def _pair(a: ArrayLike, b: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    x, y = _vec(a), _vec(b)
    if x.shape != y.shape:
        raise ValueError(f"length mismatch: {x.size} and {y.size}")
    return x, y


def dot(x: ArrayLike, y: ArrayLike) -> float:
    """Inner product of two vectors."""
    a, b = _pair(x, y)
    return float(a @ b)


def norm_sq(v: ArrayLike) -> float:
    """Squared Euclidean norm."""
    a = _vec(v)
    return float(a @ a)


def norm_2(v: ArrayLike) -> float:
    """Euclidean norm."""
    return float(np.sqrt(norm_sq(v)))


def norm_inf(v: ArrayLike) -> float:
    """Maximum absolute entry; zero for an empty vector."""
    a = _vec(v)
    return float(np.max(np.abs(a))) if a.size else 0.0


def norm_diff(a: ArrayLike, b: ArrayLike) -> float:
    """Euclidean norm of ``a - b``."""
    x, y = _pair(a, b)
    return norm_2(x - y)


def norm_inf_diff(a: ArrayLike, b: ArrayLike) -> float:
    """Maximum absolute entry of ``a - b``."""
    x, y = _pair(a, b)
    return norm_inf(x - y)


def mean(x: ArrayLike) -> float:
    """Arithmetic mean; NaN for an empty vector."""
    a = _vec(x)
    if a.size == 0:
        return float("nan")
    return float(a.sum() / a.size)


def add_scaled(a: ArrayLike, b: ArrayLike, scale: float) -> np.ndarray:
    """Return ``a + scale * b`` as a new array."""
    x, y = _pair(a, b)
    return x + scale * y