"""Logging utilities for the EXCLURAD explorer."""

from exclurad_explorer.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
