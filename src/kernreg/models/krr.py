from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import ShapeMismatch
from ..kernels.gaussian import gaussian_kernel
from ..linalg.checks import as_matrix, as_vector, frozen, non_negative, positive
from ..linalg.solve import solve_spd


def train_krr(X, Y, w: float, lam: float) -> np.ndarray:
    """Dual coefficients alpha = (K + lam I)^-1 Y for a Gaussian kernel of width w.

    lam == 0 is allowed, but duplicate rows in X then make the system singular
    and SingularSystem is raised.
    """
    w = positive(w, "kernel width w")
    lam = non_negative(lam, "regularization lambda")
    X = as_matrix(X, "X")
    Y = as_vector(Y, "Y")
    n = X.shape[0]
    if Y.shape[0] != n:
        raise ShapeMismatch(f"X has {n} rows but Y has {Y.shape[0]} entries")
    K = gaussian_kernel(w, X, X)
    A = K + lam * np.eye(n)
    return frozen(solve_spd(A, Y))


def predict_krr(X_new, X_train, w: float, alpha) -> np.ndarray:
    """Predictions K(X_new, X_train) @ alpha."""
    X_train = as_matrix(X_train, "X_train")
    alpha = as_vector(alpha, "alpha")
    if alpha.shape[0] != X_train.shape[0]:
        raise ShapeMismatch(
            f"alpha has {alpha.shape[0]} entries for {X_train.shape[0]} training rows"
        )
    K = gaussian_kernel(w, X_new, X_train)
    return frozen(K @ alpha)


@dataclass(frozen=True)
class KRRModel:
    X_train: np.ndarray
    w: float
    lam: float
    alpha: np.ndarray

    @classmethod
    def fit(cls, X, Y, w: float, lam: float) -> KRRModel:
        X = frozen(as_matrix(X, "X"))
        alpha = train_krr(X, Y, w, lam)
        return cls(X_train=X, w=float(w), lam=float(lam), alpha=alpha)

    def predict(self, X_new) -> np.ndarray:
        return predict_krr(X_new, self.X_train, self.w, self.alpha)
