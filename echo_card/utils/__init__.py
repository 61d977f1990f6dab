"""Utility modules for Echo Card."""

from .logging_config import get_logger, setup_logging
from .retry import openai_retry

__all__ = ["get_logger", "setup_logging", "openai_retry"]
