"""vgpuload utilities - shared helper functions and utilities."""

from vgpuload.utils.env import (
    EnvVarError,
    EnvVarTypeError,
    get_env,
)
from vgpuload.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "get_env",
    # Logger
    "LogLevel",
    "Logger",
    "LoggerNotConfiguredError",
]
