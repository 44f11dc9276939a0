from __future__ import annotations

import numpy as np

from ..errors import ShapeMismatch
from ..linalg.checks import as_matrix


def same_points(X: np.ndarray, Z: np.ndarray) -> bool:
    return X is Z or (X.shape == Z.shape and np.array_equal(X, Z))


def pairwise_sq_distances(X, Z) -> np.ndarray:
    """Squared Euclidean distances between the rows of X (n, d) and Z (m, d).

    Uses ||x||^2 + ||z||^2 - 2 x·z; cancellation can leave tiny negatives,
    which are clamped to zero. When X and Z hold the same points the result
    is made exactly symmetric with a zero diagonal. Returns an (n, m) matrix.
    """
    X = as_matrix(X, "X")
    Z = as_matrix(Z, "Z")
    if X.shape[1] != Z.shape[1]:
        raise ShapeMismatch(
            f"feature dimensions differ: X has {X.shape[1]}, Z has {Z.shape[1]}"
        )
    x_norm = np.sum(X**2, axis=1)[:, None]  # (n, 1)
    z_norm = np.sum(Z**2, axis=1)[None, :]  # (1, m)
    D = x_norm + z_norm - 2.0 * (X @ Z.T)
    if same_points(X, Z):
        # BLAS and the row sums round differently for d > 1
        D = 0.5 * (D + D.T)
        np.fill_diagonal(D, 0.0)
    return np.maximum(D, 0.0)
