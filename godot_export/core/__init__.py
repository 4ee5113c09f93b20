"""Core types: configuration, results and exit codes."""

from .config import ActionConfig, ConfigError, RepositoryInfo, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ActionConfig",
    "ConfigError",
    "RepositoryInfo",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
