from __future__ import annotations

import numpy as np

from ..errors import ShapeMismatch
from ..linalg.checks import as_vector


def mse(y_hat, y) -> float:
    """Mean squared error between two equal-length vectors."""
    y_hat = as_vector(y_hat, "y_hat")
    y = as_vector(y, "y")
    if y_hat.shape[0] != y.shape[0]:
        raise ShapeMismatch(f"length mismatch: {y_hat.shape[0]} vs {y.shape[0]}")
    if y.shape[0] == 0:
        raise ShapeMismatch("mse of empty vectors is undefined")
    diff = y_hat - y
    return float(np.mean(diff**2))
