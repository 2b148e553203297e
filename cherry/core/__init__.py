"""Core domain types: results, cancellation, config, exit codes."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .context import Cancelled, Context
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # context
    "Cancelled",
    "Context",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
