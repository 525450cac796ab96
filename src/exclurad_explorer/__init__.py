"""Top-level package for the EXCLURAD RC explorer.

This package loads EXCLURAD radiative-correction tables, drives the
:mod:`exclurad_core` query engine through an interactive session, renders
the resulting curves and runs the batch tooling that produces the inputs.
"""

from ._version import __version__
from .ingestion import DatasetMetadata, DatasetSettings, load_metadata, load_table
from .session import ExplorerSession, SelectionOutcome

__all__ = [
    "__version__",
    "DatasetMetadata",
    "DatasetSettings",
    "ExplorerSession",
    "SelectionOutcome",
    "load_metadata",
    "load_table",
]
