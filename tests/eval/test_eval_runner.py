"""Test eval runner execution."""

import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_eval() -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "eval/runner.py"],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        env={**os.environ, "PYTHONPATH": str(REPO_ROOT)},
    )


def test_eval_runner_executes() -> None:
    """Test that eval runner runs every scenario."""
    result = run_eval()

    assert "Scenario: weight_squared_selection" in result.stdout
    assert "Scenario: pure_location_happy" in result.stdout
    assert "Scenario: block_mode_without_location" in result.stdout
    assert "Scenario: theme_gates_providers" in result.stdout
    assert "=== Summary ===" in result.stdout


def test_all_predicates_pass() -> None:
    """Test that every scenario predicate holds."""
    result = run_eval()

    assert result.returncode == 0, result.stdout + result.stderr
    assert "FAIL" not in result.stdout
    assert "ERROR" not in result.stdout
