from __future__ import annotations

import enum
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np

from ..errors import DegenerateDirection, InvalidParameter, MaxIterationsExceeded
from ..linalg.checks import as_vector, frozen, positive, require_length, require_square

ProgressFn = Callable[[int, float], None]

# slack over the exact-arithmetic bound of n iterations
MAX_ITER_FACTOR = 10


class CGState(enum.Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"


@dataclass(frozen=True)
class CGResult:
    x: np.ndarray
    iterations: int
    residual_norm: float
    residuals: tuple[float, ...]
    state: CGState = CGState.CONVERGED


def _check_symmetric(A: np.ndarray) -> None:
    if not np.allclose(A, A.T, rtol=1e-10, atol=1e-12):
        raise InvalidParameter("conjugate gradients requires a symmetric matrix")


def default_max_iter(n: int) -> int:
    return MAX_ITER_FACTOR * max(n, 1)


def conjugate_gradient(
    A,
    b,
    x0=None,
    thresh: float = 1e-6,
    max_iter: int | None = None,
    callback: ProgressFn | None = None,
) -> CGResult:
    """Solve A x = b for symmetric positive-definite A by conjugate gradients.

    Iterates until the 2-norm of the residual drops below thresh. The residual
    norm of every iteration is passed to callback(iteration, norm) and kept in
    the result. Raises DegenerateDirection on a search direction with
    non-positive curvature and MaxIterationsExceeded once max_iter (default
    10 * n) iterations have run without convergence.
    """
    A = np.asarray(A, dtype=float)
    n = require_square(A)
    _check_symmetric(A)
    b = as_vector(b, "b")
    require_length(b, n, "b")
    x = np.zeros(n) if x0 is None else as_vector(x0, "x0").copy()
    require_length(x, n, "x0")
    thresh = positive(thresh, "thresh")
    if max_iter is None:
        max_iter = default_max_iter(n)
    if int(max_iter) != max_iter or max_iter < 1:
        raise InvalidParameter(f"max_iter must be a positive integer, got {max_iter!r}")

    r = b - A @ x
    p = r.copy()
    rr = float(r @ r)
    if math.sqrt(rr) < thresh:
        return CGResult(frozen(x), 0, math.sqrt(rr), (), CGState.CONVERGED)

    residuals: list[float] = []
    for k in range(1, int(max_iter) + 1):
        Ap = A @ p
        pAp = float(p @ Ap)
        if not math.isfinite(pAp) or pAp <= 0.0:
            raise DegenerateDirection(k, pAp)
        alpha = rr / pAp
        x = x + alpha * p
        r_new = r - alpha * Ap
        rr_new = float(r_new @ r_new)
        error = math.sqrt(rr_new)
        residuals.append(error)
        if callback is not None:
            callback(k, error)
        if error < thresh:
            return CGResult(frozen(x), k, error, tuple(residuals), CGState.CONVERGED)
        beta = rr_new / rr
        p = r_new + beta * p
        r, rr = r_new, rr_new

    raise MaxIterationsExceeded(
        len(residuals), residuals[-1], thresh, state=CGState.MAX_ITERATIONS_EXCEEDED
    )


def residual_increases(residuals: Sequence[float], rel_tol: float = 1e-8) -> int:
    """Count steps where the residual grew by more than rel_tol over the previous one."""
    count = 0
    for prev, cur in zip(residuals, residuals[1:]):
        if cur > prev * (1.0 + rel_tol):
            count += 1
    return count
