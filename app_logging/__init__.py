"""Logging package."""
from .setup import COMPONENTS, log_file_path, reset_logging, setup_logging

__all__ = ["COMPONENTS", "log_file_path", "reset_logging", "setup_logging"]
