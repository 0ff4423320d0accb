"""Shared helpers: structured logging and request identifiers."""

from .ids import new_request_id
from .logging import JsonLogger, get_logger

__all__ = ["JsonLogger", "get_logger", "new_request_id"]
