"""Util functions and classes implementation."""

from relay.core.utils.config import Config
from relay.core.utils.logger import setup_logging

__all__ = [
    "Config",
    "setup_logging"
]
