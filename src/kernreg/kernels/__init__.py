from .distance import pairwise_sq_distances
from .gaussian import gaussian_kernel, regularized_kernel

__all__ = ["gaussian_kernel", "pairwise_sq_distances", "regularized_kernel"]
