from __future__ import annotations

import numpy as np

from ..errors import SingularSystem
from .checks import as_vector, require_length, require_square


def _cholesky_solve(A: np.ndarray, b: np.ndarray, rcond: float) -> np.ndarray:
    L = np.linalg.cholesky(A)
    d = np.diag(L)
    # cond(A) >= (max/min pivot)^2, so a tiny ratio means A is singular
    ratio = (d.min() / d.max()) ** 2
    if ratio < rcond:
        raise SingularSystem(f"matrix is numerically singular (pivot ratio {ratio:.3e})")
    return np.linalg.solve(L.T, np.linalg.solve(L, b))


def _general_solve(A: np.ndarray, b: np.ndarray, rcond: float) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        cond = np.linalg.cond(A)
    if not np.isfinite(cond) or 1.0 / cond < rcond:
        raise SingularSystem(f"matrix is numerically singular (condition number {cond:.3e})")
    try:
        return np.linalg.solve(A, b)
    except np.linalg.LinAlgError as e:
        raise SingularSystem(f"matrix is singular: {e}") from e


def solve_spd(A, b, rcond: float = 1e-12) -> np.ndarray:
    """Solve A x = b for symmetric (ideally positive-definite) A.

    Cholesky first, with singularity read off the factor's pivots; if the
    factorization fails, falls back to a condition-checked LU solve. Raises
    SingularSystem when A is numerically singular or the solve yields
    non-finite values.
    """
    A = np.asarray(A, dtype=float)
    n = require_square(A)
    b = as_vector(b, "b")
    require_length(b, n, "b")
    if n == 0:
        return np.zeros(0)

    # symmetrize away round-off from kernel construction
    A = 0.5 * (A + A.T)
    if not np.all(np.isfinite(A)) or not np.all(np.isfinite(b)):
        raise SingularSystem("system contains non-finite entries")

    try:
        x = _cholesky_solve(A, b, rcond)
    except np.linalg.LinAlgError:
        x = _general_solve(A, b, rcond)

    if not np.all(np.isfinite(x)):
        raise SingularSystem("solve produced non-finite values")
    return x
