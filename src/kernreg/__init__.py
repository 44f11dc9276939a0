"""kernreg: kernel ridge regression and conjugate gradients on synthetic data.

Gaussian-kernel KRR solved directly via Cholesky, and the same regularized
system solved iteratively with conjugate gradients.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
