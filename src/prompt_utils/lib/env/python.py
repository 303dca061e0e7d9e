"""Active Python virtual environment detection."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath
from typing import Literal


@dataclass(frozen=True, slots=True)
class Interpreter:
    kind: str
    active_env_name: str | None = None
    fact: Literal["interpreter"] = "interpreter"


def query_venv(environ: Mapping[str, str]) -> str | None:
    """Return the name of the active venv, if any."""

    root = environ.get("VIRTUAL_ENV")
    if not root:
        return None
    prompt = environ.get("VIRTUAL_ENV_PROMPT", "").strip()
    if prompt:
        # Older venv activators store the decorated "(name) " form.
        return prompt.strip("() ") or None
    return PurePath(root).name or None


def query_conda_env(environ: Mapping[str, str]) -> str | None:
    return environ.get("CONDA_DEFAULT_ENV") or None


def query_interpreter(environ: Mapping[str, str] | None = None) -> Interpreter | None:
    """Return the active virtual environment; a venv wins over conda."""

    env = os.environ if environ is None else environ
    venv = query_venv(env)
    if venv is not None:
        return Interpreter(kind="venv", active_env_name=venv)
    conda = query_conda_env(env)
    if conda is not None:
        return Interpreter(kind="conda", active_env_name=conda)
    return None
