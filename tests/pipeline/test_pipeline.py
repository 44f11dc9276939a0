from __future__ import annotations

import json
from pathlib import Path

import pytest

from kernreg.config.models import validate_config_payload
from kernreg.errors import MaxIterationsExceeded
from kernreg.pipeline import make_dataset, run_cg, run_experiment, run_krr


def _cfg(tmp_path: Path, **overrides) -> object:
    payload = {
        "name": "t",
        "dataset": {"n": 80, "seed": 0},
        "kernel": {"width": 1.0, "lam": 1e-2},
        "cg": {"thresh": 1e-8},
        "n_eval": 100,
        "artifacts_dir": str(tmp_path),
    }
    payload.update(overrides)
    return validate_config_payload(payload)


def _events(tmp_path: Path, run_id: str) -> list[dict]:
    log = tmp_path / run_id / "logs" / "run.jsonl"
    return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]


def test_run_krr_and_cg_sections(tmp_path: Path):
    cfg = _cfg(tmp_path)
    ds = make_dataset(cfg)
    krr = run_krr(cfg, ds)
    assert {"train_mse", "test_mse", "alpha_norm", "model"} <= set(krr)
    assert krr["test_mse"] < 0.05
    cg = run_cg(cfg, ds)
    assert cg["state"] == "converged"
    assert cg["iterations"] == len(cg["residuals"])
    assert cg["max_abs_diff_direct"] < 1e-3


def test_run_experiment_writes_artifacts(tmp_path: Path):
    cfg = _cfg(tmp_path)
    run_id, results = run_experiment(cfg)
    out = tmp_path / run_id
    assert (out / "config.json").exists()
    saved = json.loads((out / "results.json").read_text(encoding="utf-8"))
    assert saved["run_id"] == run_id
    assert "krr" in saved and "cg" in saved
    assert "model" not in saved["krr"]
    names = [e["event"] for e in _events(tmp_path, run_id)]
    assert names[0] == "run_start"
    assert names[-1] == "run_end"
    assert "cg_iteration" in names
    assert names.count("cg_iteration") == results["cg"]["iterations"]


def test_method_selection(tmp_path: Path):
    _, results = run_experiment(_cfg(tmp_path, method="krr"))
    assert "krr" in results and "cg" not in results


def test_failure_is_logged_and_raised(tmp_path: Path):
    cfg = _cfg(tmp_path, method="cg", cg={"thresh": 1e-12, "max_iter": 1})
    with pytest.raises(MaxIterationsExceeded):
        run_experiment(cfg, run_id="run-fail")
    events = _events(tmp_path, "run-fail")
    assert events[-1]["event"] == "error"
    assert events[-1]["kind"] == "MaxIterationsExceeded"
    assert not (tmp_path / "run-fail" / "results.json").exists()


def test_plots(tmp_path: Path):
    pytest.importorskip("matplotlib")
    run_id, _ = run_experiment(_cfg(tmp_path), plot=True)
    assert (tmp_path / run_id / "krr_fit.png").exists()
    assert (tmp_path / run_id / "cg_residuals.png").exists()
