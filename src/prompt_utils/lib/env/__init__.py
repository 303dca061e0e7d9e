"""Environment facts gathered for each prompt render.

Every collector fails soft: a fact that cannot be determined is `None`, never
an exception.
"""

from prompt_utils.lib.env.access_rights import Elevation, ElevationState, query_elevation
from prompt_utils.lib.env.command_result import CommandResult, Duration, HumanDuration
from prompt_utils.lib.env.git import ChangeSummary, RepoStatus, ScanMode, query_repo_status
from prompt_utils.lib.env.path import PathFact, query_path
from prompt_utils.lib.env.python import Interpreter, query_interpreter
from prompt_utils.lib.env.session import Session, SessionKind, query_session

type EnvFact = Elevation | Session | PathFact | CommandResult | Interpreter | RepoStatus

__all__ = [
    "ChangeSummary",
    "CommandResult",
    "Duration",
    "Elevation",
    "ElevationState",
    "EnvFact",
    "HumanDuration",
    "Interpreter",
    "PathFact",
    "RepoStatus",
    "ScanMode",
    "Session",
    "SessionKind",
    "query_elevation",
    "query_interpreter",
    "query_path",
    "query_repo_status",
    "query_session",
]
