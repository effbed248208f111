"""Core types shared by every layer."""

from .config import ConfigError, PublishSettings, load_settings
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "PublishSettings",
    "load_settings",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
