"""Process elevation: root on POSIX, an elevated token on Windows."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

import structlog

logger = structlog.get_logger(__name__)


class ElevationState(StrEnum):
    ELEVATED = "elevated"
    NOT_ELEVATED = "not_elevated"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Elevation:
    """Whether the current process runs with administrative privileges.

    `UNKNOWN` means the check could not be made; it is never treated as
    elevated.
    """

    state: ElevationState
    fact: Literal["elevation"] = "elevation"

    @property
    def is_elevated(self) -> bool:
        return self.state == ElevationState.ELEVATED


def _posix_state() -> ElevationState:
    return ElevationState.ELEVATED if os.geteuid() == 0 else ElevationState.NOT_ELEVATED


def _windows_state() -> ElevationState:
    from prompt_utils.lib.env._win32 import token_is_elevated

    try:
        elevated = token_is_elevated()
    except OSError as exc:
        logger.debug("Token elevation query failed.", error=str(exc))
        return ElevationState.UNKNOWN
    return ElevationState.ELEVATED if elevated else ElevationState.NOT_ELEVATED


def query_elevation() -> Elevation:
    """Return the elevation state of the current process."""

    if sys.platform == "win32":
        return Elevation(state=_windows_state())
    if hasattr(os, "geteuid"):
        return Elevation(state=_posix_state())
    logger.debug("No elevation check for platform.", platform=sys.platform)
    return Elevation(state=ElevationState.UNKNOWN)
