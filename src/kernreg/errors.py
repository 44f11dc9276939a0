from __future__ import annotations


class KernRegError(Exception):
    """Base class for all errors raised by kernreg."""


class InvalidParameter(KernRegError, ValueError):
    pass


class ShapeMismatch(KernRegError, ValueError):
    pass


class SingularSystem(KernRegError, ArithmeticError):
    pass


class DegenerateDirection(KernRegError, ArithmeticError):
    """Conjugate gradients hit a search direction with p·Ap <= 0."""

    def __init__(self, iteration: int, curvature: float) -> None:
        super().__init__(
            f"degenerate search direction at iteration {iteration} (p·Ap = {curvature!r}); "
            "matrix is not positive definite or the residual already vanished"
        )
        self.iteration = iteration
        self.curvature = curvature


class MaxIterationsExceeded(KernRegError, ArithmeticError):
    def __init__(
        self, iterations: int, residual_norm: float, thresh: float, state: object = None
    ) -> None:
        super().__init__(
            f"no convergence after {iterations} iterations "
            f"(residual {residual_norm:.3e} >= threshold {thresh:.3e})"
        )
        self.iterations = iterations
        self.residual_norm = residual_norm
        self.thresh = thresh
        # terminal CGState of the failed run
        self.state = state
