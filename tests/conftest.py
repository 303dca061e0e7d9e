"""Shared pytest fixtures for CLI integration checks."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

_CONFIG_ENV_VARS = (
    "PROMPT_UTILS_CONFIG",
    "PROMPT_UTILS_COLOR",
    "PROMPT_UTILS_PATH_WIDTH",
    "PROMPT_UTILS_SEGMENTS",
    "PROMPT_UTILS_GIT_MODE",
    "PROMPT_UTILS_MIN_DURATION_MS",
)


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def cli_env(package_root: Path, tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}{os.pathsep}{existing}"
    env["XDG_CONFIG_HOME"] = str(tmp_path / "xdg-config")
    env["PYTHONIOENCODING"] = "utf-8"
    env.pop("NO_COLOR", None)
    for name in ("SSH_CONNECTION", "SSH_CLIENT", "SSH_TTY", "VIRTUAL_ENV", "CONDA_DEFAULT_ENV"):
        env.pop(name, None)
    return env


@pytest.fixture
def run_prompt_utils(package_root: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(
        args: list[str],
        timeout: float = 15.0,
        env: dict[str, str] | None = None,
    ) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "prompt_utils", *args],
            cwd=package_root,
            env=cli_env if env is None else env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
