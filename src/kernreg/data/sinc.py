from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import InvalidParameter, ShapeMismatch
from ..linalg.checks import as_matrix, as_vector, frozen, non_negative


@dataclass(frozen=True)
class Dataset:
    X: np.ndarray  # (n, 1)
    Y: np.ndarray  # (n,)

    def __post_init__(self) -> None:
        X = frozen(as_matrix(self.X, "X"))
        Y = frozen(as_vector(self.Y, "Y"))
        if X.shape[0] != Y.shape[0]:
            raise ShapeMismatch(f"X has {X.shape[0]} rows but Y has {Y.shape[0]} entries")
        object.__setattr__(self, "X", X)
        object.__setattr__(self, "Y", Y)

    def __len__(self) -> int:
        return int(self.Y.shape[0])


def sinc(x) -> np.ndarray:
    """Plain sin(x)/x. Refuses zeros instead of producing NaN; see safe_sinc."""
    x = np.asarray(x, dtype=float)
    if np.any(x == 0.0):
        raise InvalidParameter("sinc is undefined at 0; use safe_sinc")
    return np.sin(x) / x


def safe_sinc(x) -> np.ndarray:
    """sin(x)/x with safe_sinc(0) == 1.

    Zero entries get 1 added to the denominator (sin(0)/1 = 0) and then 1
    added to the result, so no division by zero ever happens.
    """
    x = np.asarray(x, dtype=float)
    is_zero = (x == 0.0).astype(float)
    return np.sin(x) / (x + is_zero) + is_zero


def _check_range(n: int, low: float, high: float) -> None:
    if int(n) != n or n < 1:
        raise InvalidParameter(f"n must be a positive integer, got {n!r}")
    if not (np.isfinite(low) and np.isfinite(high)) or low >= high:
        raise InvalidParameter(f"need finite low < high, got [{low}, {high}]")


def uniform_points(
    n: int, seed: int | None = None, low: float = -4.0, high: float = 4.0
) -> np.ndarray:
    """n points drawn uniformly from [low, high), shaped (n, 1)."""
    _check_range(n, low, high)
    rng = np.random.default_rng(seed)
    return frozen(rng.uniform(low, high, size=(int(n), 1)))


def sinc_dataset(
    n: int,
    noise: float = 0.1,
    seed: int | None = None,
    low: float = -4.0,
    high: float = 4.0,
) -> Dataset:
    """X ~ U(low, high), Y = sinc(X) + noise * N(0, 1).

    Determinism is controlled by seed.
    """
    _check_range(n, low, high)
    noise = non_negative(noise, "noise")
    rng = np.random.default_rng(seed)
    X = rng.uniform(low, high, size=(int(n), 1))
    Y = safe_sinc(X[:, 0]) + noise * rng.standard_normal(int(n))
    return Dataset(X=X, Y=Y)
