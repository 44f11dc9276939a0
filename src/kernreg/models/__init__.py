from .cg import CGResult, CGState, conjugate_gradient, residual_increases
from .krr import KRRModel, predict_krr, train_krr
from .metrics import mse

__all__ = [
    "CGResult",
    "CGState",
    "KRRModel",
    "conjugate_gradient",
    "mse",
    "predict_krr",
    "residual_increases",
    "train_krr",
]
