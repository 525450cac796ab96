"""Command line utilities for the EXCLURAD explorer."""

from exclurad_explorer.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
