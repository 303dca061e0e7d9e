"""Session kind (local or remote) plus user and host names."""

from __future__ import annotations

import getpass
import os
import socket
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

import structlog

logger = structlog.get_logger(__name__)

REMOTE_MARKERS: tuple[str, ...] = ("SSH_CONNECTION", "SSH_CLIENT", "SSH_TTY")


class SessionKind(StrEnum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class Session:
    kind: SessionKind
    user: str | None = None
    host: str | None = None
    fact: Literal["session"] = "session"

    @property
    def is_remote(self) -> bool:
        return self.kind == SessionKind.REMOTE


def session_kind(environ: Mapping[str, str], *, platform: str | None = None) -> SessionKind:
    """Infer the session kind from remote-login markers in `environ`."""

    if any(environ.get(name) for name in REMOTE_MARKERS):
        return SessionKind.REMOTE
    if (platform or sys.platform) == "win32":
        # Remote Desktop sessions are named RDP-Tcp#N.
        if environ.get("SESSIONNAME", "").upper().startswith("RDP-"):
            return SessionKind.REMOTE
    return SessionKind.LOCAL


def query_username() -> str | None:
    try:
        name = getpass.getuser()
    except (OSError, KeyError, ImportError) as exc:
        logger.debug("Username lookup failed.", error=str(exc))
        return None
    return name or None


def query_hostname() -> str | None:
    try:
        name = socket.gethostname()
    except OSError as exc:
        logger.debug("Hostname lookup failed.", error=str(exc))
        return None
    return name.split(".", 1)[0] or None


def query_session(environ: Mapping[str, str] | None = None) -> Session:
    env = os.environ if environ is None else environ
    return Session(
        kind=session_kind(env),
        user=query_username(),
        host=query_hostname(),
    )
