"""Process execution, environment checks and HTTP transport."""

from .env import EnvError, ensure_commands, ensure_env_vars, set_env_vars
from .process import ProcessError, RunError, Runner, run

__all__ = [
    "EnvError",
    "ProcessError",
    "RunError",
    "Runner",
    "ensure_commands",
    "ensure_env_vars",
    "run",
    "set_env_vars",
]
