"""Dataset ingestion helpers."""

from exclurad_explorer.ingestion.datasets import (
    DATASET_KINDS,
    DatasetSettings,
    load_table,
    read_frame,
)
from exclurad_explorer.ingestion.metadata import DatasetMetadata, load_metadata

__all__ = [
    "DATASET_KINDS",
    "DatasetSettings",
    "load_table",
    "read_frame",
    "DatasetMetadata",
    "load_metadata",
]
