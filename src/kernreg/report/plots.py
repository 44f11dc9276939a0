from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np


def _pyplot():
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except Exception as e:  # pragma: no cover
        raise RuntimeError("matplotlib not installed. Install extras: '.[plot]'") from e
    return plt


def plot_residual_history(
    residuals: Sequence[float],
    out_path: str | Path,
    thresh: float | None = None,
    title: str = "Conjugate gradient residuals",
) -> None:
    plt = _pyplot()
    fig, ax = plt.subplots(figsize=(5, 4), dpi=150)
    ax.semilogy(range(1, len(residuals) + 1), list(residuals), marker=".", lw=1)
    if thresh is not None:
        ax.axhline(thresh, color="k", ls="--", lw=1, label="threshold")
        ax.legend()
    ax.set_xlabel("iteration")
    ax.set_ylabel("||r||_2")
    ax.set_title(title)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)


def plot_krr_fit(
    X: np.ndarray,
    Y: np.ndarray,
    X_grid: np.ndarray,
    Y_grid: np.ndarray,
    out_path: str | Path,
    truth: np.ndarray | None = None,
    title: str = "Kernel ridge regression",
) -> None:
    plt = _pyplot()
    order = np.argsort(X_grid[:, 0])
    fig, ax = plt.subplots(figsize=(6, 4), dpi=150)
    ax.scatter(X[:, 0], Y, s=4, alpha=0.4, label="samples")
    if truth is not None:
        ax.plot(X_grid[order, 0], truth[order], "k--", lw=1, label="sinc")
    ax.plot(X_grid[order, 0], Y_grid[order], lw=1.5, label="KRR")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(title)
    ax.legend()
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
