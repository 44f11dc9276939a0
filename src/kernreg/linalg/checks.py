from __future__ import annotations

import math

import numpy as np

from ..errors import InvalidParameter, ShapeMismatch


def as_matrix(X, name: str = "X") -> np.ndarray:
    """Coerce samples to a float (n, d) matrix; a 1-D array becomes (n, 1)."""
    arr = np.asarray(X, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ShapeMismatch(f"{name} must be 1-D or 2-D, got shape {arr.shape}")
    if arr.shape[1] == 0:
        raise ShapeMismatch(f"{name} has no feature columns")
    return arr


def as_vector(y, name: str = "y") -> np.ndarray:
    """Coerce targets to a float (n,) vector; an (n, 1) column is flattened."""
    arr = np.asarray(y, dtype=float)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1:
        raise ShapeMismatch(f"{name} must be a vector, got shape {arr.shape}")
    return arr


def require_square(A: np.ndarray, name: str = "A") -> int:
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ShapeMismatch(f"{name} must be square, got shape {A.shape}")
    return int(A.shape[0])


def require_length(v: np.ndarray, n: int, name: str) -> None:
    if v.shape[0] != n:
        raise ShapeMismatch(f"{name} has length {v.shape[0]}, expected {n}")


def positive(value: float, name: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidParameter(f"{name} must be a finite positive number, got {value!r}")
    return v


def non_negative(value: float, name: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v < 0.0:
        raise InvalidParameter(f"{name} must be a finite non-negative number, got {value!r}")
    return v


def frozen(arr: np.ndarray) -> np.ndarray:
    # results are handed out read-only; callers copy if they need to mutate
    out = np.array(arr, dtype=float, copy=True)
    out.setflags(write=False)
    return out
