from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np

from .config.models import ExperimentConfig
from .data.sinc import Dataset, safe_sinc, sinc_dataset, uniform_points
from .errors import KernRegError
from .kernels.gaussian import regularized_kernel
from .linalg.solve import solve_spd
from .models.cg import conjugate_gradient, residual_increases
from .models.krr import KRRModel
from .models.metrics import mse
from .utils.run import log_event, new_run_id, run_dir, snapshot_config, write_results

LogFn = Callable[..., None]


def _noop(event: str, **fields: Any) -> None:
    return None


def make_dataset(cfg: ExperimentConfig) -> Dataset:
    d = cfg.dataset
    return sinc_dataset(d.n, noise=d.noise, seed=d.seed, low=d.low, high=d.high)


def run_krr(cfg: ExperimentConfig, dataset: Dataset, log: LogFn | None = None) -> dict[str, Any]:
    """Train KRR directly; report training MSE and, if n_eval > 0, noise-free test MSE."""
    log = log or _noop
    model = KRRModel.fit(dataset.X, dataset.Y, cfg.kernel.width, cfg.kernel.lam)
    train_mse = mse(model.predict(dataset.X), dataset.Y)
    log("krr_trained", n=len(dataset), width=model.w, lam=model.lam)
    out: dict[str, Any] = {
        "train_mse": train_mse,
        "alpha_norm": float(np.linalg.norm(model.alpha)),
    }
    if cfg.n_eval > 0:
        # shifted seed gives a fresh draw independent of the training sample
        seed = None if cfg.dataset.seed is None else cfg.dataset.seed + 1
        X_eval = uniform_points(
            cfg.n_eval, seed=seed, low=cfg.dataset.low, high=cfg.dataset.high
        )
        out["test_mse"] = mse(model.predict(X_eval), safe_sinc(X_eval[:, 0]))
    log("krr_evaluated", **out)
    out["model"] = model
    return out


def run_cg(
    cfg: ExperimentConfig,
    dataset: Dataset,
    log: LogFn | None = None,
    callback: Callable[[int, float], None] | None = None,
) -> dict[str, Any]:
    """Solve (K + lam I) x = Y by CG from zero and compare with the direct solve."""
    log = log or _noop

    def _progress(k: int, norm: float) -> None:
        log("cg_iteration", iteration=k, residual_norm=norm)
        if callback is not None:
            callback(k, norm)

    A = regularized_kernel(cfg.kernel.width, cfg.kernel.lam, dataset.X)
    b = dataset.Y
    res = conjugate_gradient(
        A, b, thresh=cfg.cg.thresh, max_iter=cfg.cg.max_iter, callback=_progress
    )
    log("cg_converged", iterations=res.iterations, residual_norm=res.residual_norm)
    out: dict[str, Any] = {
        "iterations": res.iterations,
        "residual_norm": res.residual_norm,
        "true_residual_norm": float(np.linalg.norm(A @ res.x - b)),
        "residual_increases": residual_increases(res.residuals),
        "state": res.state.value,
    }
    try:
        x_direct = solve_spd(A, b)
    except KernRegError as e:
        log("cg_compared", skipped=str(e))
    else:
        out["max_abs_diff_direct"] = float(np.max(np.abs(res.x - x_direct)))
        log("cg_compared", max_abs_diff_direct=out["max_abs_diff_direct"])
    out["residuals"] = list(res.residuals)
    return out


def _jsonable(section: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in section.items() if k != "model"}


def run_experiment(
    cfg: ExperimentConfig,
    run_id: str | None = None,
    plot: bool = False,
    payload: dict[str, Any] | None = None,
) -> tuple[str, dict[str, Any]]:
    """Run the configured solvers, writing config, JSONL log and results under artifacts_dir."""
    run_id = run_id or new_run_id()
    root = Path(cfg.artifacts_dir)
    out_dir = run_dir(run_id, root)
    snapshot_config(run_id, payload if payload is not None else cfg.model_dump(), root)

    def log(event: str, **fields: Any) -> None:
        log_event(run_id, event, root=root, **fields)

    log("run_start", name=cfg.name, method=cfg.method)
    log("config_validated", n=cfg.dataset.n, width=cfg.kernel.width, lam=cfg.kernel.lam)
    results: dict[str, Any] = {"name": cfg.name, "run_id": run_id}
    try:
        dataset = make_dataset(cfg)
        log("dataset_generated", n=len(dataset), noise=cfg.dataset.noise, seed=cfg.dataset.seed)
        if cfg.method in {"krr", "both"}:
            krr = run_krr(cfg, dataset, log=log)
            results["krr"] = _jsonable(krr)
            if plot:
                from .report.plots import plot_krr_fit

                X_grid = np.linspace(cfg.dataset.low, cfg.dataset.high, 400).reshape(-1, 1)
                plot_krr_fit(
                    dataset.X,
                    dataset.Y,
                    X_grid,
                    krr["model"].predict(X_grid),
                    out_dir / "krr_fit.png",
                    truth=safe_sinc(X_grid[:, 0]),
                )
        if cfg.method in {"cg", "both"}:
            cg = run_cg(cfg, dataset, log=log)
            results["cg"] = cg
            if plot:
                from .report.plots import plot_residual_history

                plot_residual_history(cg["residuals"], out_dir / "cg_residuals.png", cfg.cg.thresh)
    except KernRegError as e:
        log("error", kind=type(e).__name__, message=str(e))
        raise
    write_results(run_id, results, root)
    log("run_end", status="ok")
    return run_id, results
