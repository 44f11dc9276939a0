from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from . import __version__
from .config.models import ExperimentConfig, validate_config_payload
from .data.sinc import sinc_dataset
from .errors import KernRegError
from .kernels.gaussian import regularized_kernel
from .linalg.solve import solve_spd
from .models.cg import conjugate_gradient
from .models.krr import predict_krr, train_krr
from .models.metrics import mse
from .pipeline import run_experiment
from .utils.io import dump_json, load_yaml_or_json

KRR_USAGE = "Usage: kernreg krr kernel-width lambda"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kernreg",
        description=(
            "Kernel ridge regression and conjugate gradients on synthetic sinc data."
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"kernreg {__version__}",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    krr_parser = subparsers.add_parser(
        "krr", help="Train KRR by direct solve and print the training MSE"
    )
    krr_parser.add_argument("width", type=float, nargs="?", help="Gaussian kernel width w")
    krr_parser.add_argument("lam", type=float, nargs="?", help="Regularization lambda")
    krr_parser.add_argument("--n", type=int, default=1000, help="Number of samples")
    krr_parser.add_argument("--noise", type=float, default=0.1, help="Target noise std")
    krr_parser.add_argument("--seed", type=int, default=0, help="Random seed")

    cg_parser = subparsers.add_parser(
        "cg", help="Solve the KRR system with conjugate gradients"
    )
    cg_parser.add_argument("--n", type=int, default=100, help="Number of samples")
    cg_parser.add_argument("--width", type=float, default=1.0, help="Gaussian kernel width w")
    cg_parser.add_argument("--lam", type=float, default=1e-6, help="Regularization lambda")
    cg_parser.add_argument(
        "--thresh", type=float, default=1e-6, help="Residual-norm convergence threshold"
    )
    cg_parser.add_argument(
        "--max-iter", type=int, default=None, help="Iteration cap (default: 10 * n)"
    )
    cg_parser.add_argument("--noise", type=float, default=0.1, help="Target noise std")
    cg_parser.add_argument("--seed", type=int, default=0, help="Random seed")
    cg_parser.add_argument(
        "--quiet", action="store_true", help="Do not print the per-iteration residual"
    )

    run_parser = subparsers.add_parser(
        "run", help="Run an experiment from a config file and save artifacts"
    )
    run_parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to experiment YAML/JSON",
    )
    run_parser.add_argument(
        "--plot", action="store_true", help="Also write PNG plots (needs matplotlib)"
    )

    schema_parser = subparsers.add_parser("schema", help="Print the experiment JSON Schema")
    schema_parser.add_argument(
        "--out",
        type=str,
        required=False,
        help="Optional path to write the JSON schema",
    )

    return parser


def _cmd_krr(width: float | None, lam: float | None, n: int, noise: float, seed: int | None) -> int:
    if width is None or lam is None:
        sys.stdout.write(KRR_USAGE + "\n")
        return 0
    ds = sinc_dataset(n, noise=noise, seed=seed)
    alpha = train_krr(ds.X, ds.Y, width, lam)
    y_hat = predict_krr(ds.X, ds.X, width, alpha)
    sys.stdout.write(f"Mean squared error = {mse(y_hat, ds.Y):.5f}\n")
    return 0


def _cmd_cg(
    n: int,
    width: float,
    lam: float,
    thresh: float,
    max_iter: int | None,
    noise: float,
    seed: int | None,
    quiet: bool,
) -> int:
    ds = sinc_dataset(n, noise=noise, seed=seed)
    A = regularized_kernel(width, lam, ds.X)

    def _report(k: int, norm: float) -> None:
        sys.stdout.write(f"Residual error = {norm:f}\n")

    res = conjugate_gradient(
        A, ds.Y, thresh=thresh, max_iter=max_iter, callback=None if quiet else _report
    )
    sys.stdout.write(f"Converged after {res.iterations} iterations\n")
    try:
        x_direct = solve_spd(A, ds.Y)
    except KernRegError as e:
        sys.stdout.write(f"Max deviation from direct solve = n/a ({e})\n")
    else:
        diff = float(np.max(np.abs(res.x - x_direct)))
        sys.stdout.write(f"Max deviation from direct solve = {diff:.3e}\n")
    return 0


def _cmd_run(config_path: str, plot: bool) -> int:
    payload = load_yaml_or_json(config_path)
    cfg = validate_config_payload(payload)
    run_id, _ = run_experiment(cfg, plot=plot, payload=payload)
    sys.stdout.write(dump_json({"run_id": run_id}) + "\n")
    return 0


def _cmd_schema(out: str | None) -> int:
    schema = ExperimentConfig.json_schema()
    data = dump_json(schema)
    if out:
        Path(out).write_text(data, encoding="utf-8")
        sys.stdout.write(f"Wrote schema to {out}\n")
    else:
        sys.stdout.write(data + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "krr":
            return _cmd_krr(args.width, args.lam, args.n, args.noise, args.seed)
        if args.command == "cg":
            return _cmd_cg(
                n=args.n,
                width=args.width,
                lam=args.lam,
                thresh=args.thresh,
                max_iter=args.max_iter,
                noise=args.noise,
                seed=args.seed,
                quiet=args.quiet,
            )
        if args.command == "run":
            return _cmd_run(args.config, args.plot)
        if args.command == "schema":
            return _cmd_schema(args.out)
    except (KernRegError, ValueError, FileNotFoundError) as e:
        sys.stderr.write(f"{type(e).__name__}: {e}\n")
        return 2
    # Default: print help
    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
