from __future__ import annotations

import numpy as np
import pytest

from kernreg.data.sinc import sinc_dataset
from kernreg.errors import (
    DegenerateDirection,
    InvalidParameter,
    MaxIterationsExceeded,
    ShapeMismatch,
)
from kernreg.kernels.gaussian import regularized_kernel
from kernreg.linalg.solve import solve_spd
from kernreg.models.cg import CGState, conjugate_gradient, residual_increases


def test_small_spd_system():
    A = np.array([[4.0, 1.0], [1.0, 3.0]])
    b = np.array([1.0, 2.0])
    res = conjugate_gradient(A, b, thresh=1e-10)
    assert res.state is CGState.CONVERGED
    assert res.iterations <= 2
    assert np.allclose(res.x, [1.0 / 11.0, 7.0 / 11.0])
    assert len(res.residuals) == res.iterations
    assert res.residual_norm == res.residuals[-1]


def test_agrees_with_direct_solve():
    ds = sinc_dataset(60, noise=0.1, seed=0)
    A = regularized_kernel(1.0, 1e-2, ds.X)
    res = conjugate_gradient(A, ds.Y, thresh=1e-8)
    x_direct = solve_spd(A, ds.Y)
    assert np.linalg.norm(A @ res.x - ds.Y) < 1e-6
    assert np.max(np.abs(res.x - x_direct)) < 1e-3


def test_sinc_scenario_converges_within_cap():
    n = 100
    ds = sinc_dataset(n, noise=0.1, seed=0)
    A = regularized_kernel(1.0, 1e-6, ds.X)
    res = conjugate_gradient(A, ds.Y, thresh=1e-6)
    assert res.residual_norm < 1e-6
    assert res.iterations <= 10 * n
    assert np.linalg.norm(A @ res.x - ds.Y) < 1e-4


def test_residuals_decrease_on_well_conditioned_system():
    ds = sinc_dataset(50, noise=0.1, seed=4)
    A = regularized_kernel(1.0, 1.0, ds.X)
    res = conjugate_gradient(A, ds.Y, thresh=1e-10)
    assert res.residuals[-1] < res.residuals[0]
    assert residual_increases(res.residuals) <= len(res.residuals) // 2


def test_callback_receives_every_iteration():
    A = np.diag([1.0, 2.0, 3.0, 4.0])
    b = np.ones(4)
    seen: list[tuple[int, float]] = []
    res = conjugate_gradient(A, b, thresh=1e-10, callback=lambda k, r: seen.append((k, r)))
    assert [k for k, _ in seen] == list(range(1, res.iterations + 1))
    assert tuple(r for _, r in seen) == res.residuals


def test_initial_guess_untouched_and_result_read_only():
    A = np.array([[2.0, 0.5], [0.5, 1.0]])
    b = np.array([1.0, 1.0])
    x0 = np.array([0.3, -0.2])
    res = conjugate_gradient(A, b, x0=x0, thresh=1e-10)
    assert np.array_equal(x0, [0.3, -0.2])
    with pytest.raises(ValueError):
        res.x[0] = 1.0


def test_exact_initial_guess_needs_no_iterations():
    A = np.array([[2.0, 0.0], [0.0, 4.0]])
    b = np.array([2.0, 4.0])
    res = conjugate_gradient(A, b, x0=np.ones(2))
    assert res.iterations == 0
    assert res.residuals == ()
    assert np.array_equal(res.x, np.ones(2))


def test_indefinite_matrix_is_degenerate():
    A = np.array([[1.0, 0.0], [0.0, -1.0]])
    with pytest.raises(DegenerateDirection) as exc:
        conjugate_gradient(A, np.array([0.0, 1.0]))
    assert exc.value.iteration == 1


def test_zero_matrix_is_degenerate():
    with pytest.raises(DegenerateDirection):
        conjugate_gradient(np.zeros((2, 2)), np.ones(2))


def test_iteration_cap():
    A = np.diag(np.arange(1.0, 11.0))
    with pytest.raises(MaxIterationsExceeded) as exc:
        conjugate_gradient(A, np.ones(10), thresh=1e-12, max_iter=1)
    assert exc.value.iterations == 1
    assert exc.value.residual_norm > 1e-12
    assert exc.value.state is CGState.MAX_ITERATIONS_EXCEEDED


def test_duplicate_points_without_ridge_do_not_converge():
    X = np.array([0.0, 0.0, 1.0, 2.0])
    b = np.array([1.0, -1.0, 0.5, 0.2])
    A = regularized_kernel(1.0, 0.0, X)
    with pytest.raises((DegenerateDirection, MaxIterationsExceeded)):
        conjugate_gradient(A, b, thresh=1e-6)


def test_argument_validation():
    A = np.eye(3)
    with pytest.raises(InvalidParameter):
        conjugate_gradient(np.array([[1.0, 2.0], [0.0, 1.0]]), np.ones(2))
    with pytest.raises(InvalidParameter):
        conjugate_gradient(A, np.ones(3), thresh=0.0)
    with pytest.raises(InvalidParameter):
        conjugate_gradient(A, np.ones(3), max_iter=0)
    with pytest.raises(ShapeMismatch):
        conjugate_gradient(A, np.ones(2))
    with pytest.raises(ShapeMismatch):
        conjugate_gradient(A, np.ones(3), x0=np.zeros(4))


def test_residual_increases_counts_growth():
    assert residual_increases([1.0, 0.5, 0.6, 0.3, 0.4]) == 2
    assert residual_increases([1.0, 0.5, 0.25]) == 0
    assert residual_increases([]) == 0
