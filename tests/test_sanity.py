from __future__ import annotations

import subprocess
import sys

import kernreg


def test_version_string():
    assert isinstance(kernreg.__version__, str) and len(kernreg.__version__) >= 5


def test_cli_help_exits_zero():
    out = subprocess.run([sys.executable, "-m", "kernreg", "--help"], capture_output=True)
    assert out.returncode == 0
    assert b"Kernel ridge regression" in out.stdout + out.stderr
