from __future__ import annotations

import numpy as np

from ..linalg.checks import as_matrix, frozen, non_negative, positive
from .distance import pairwise_sq_distances, same_points


def gaussian_kernel(w: float, X, Z=None) -> np.ndarray:
    """Gaussian kernel K[i, j] = exp(-||X_i - Z_j||^2 / w).

    With Z omitted or equal to X the kernel of X against itself is returned,
    symmetric with an exact unit diagonal. Small w may underflow off-diagonal
    entries to 0.
    """
    w = positive(w, "kernel width w")
    X = as_matrix(X, "X")
    if Z is not None:
        Z = as_matrix(Z, "Z")
    if Z is None or same_points(X, Z):
        K = np.exp(-pairwise_sq_distances(X, X) / w)
        K = 0.5 * (K + K.T)
        np.fill_diagonal(K, 1.0)
        return frozen(K)
    return frozen(np.exp(-pairwise_sq_distances(X, Z) / w))


def regularized_kernel(w: float, lam: float, X) -> np.ndarray:
    """A = K(X, X) + lam * I, the KRR normal-equation matrix."""
    lam = non_negative(lam, "regularization lambda")
    K = gaussian_kernel(w, X)
    return frozen(K + lam * np.eye(K.shape[0]))
