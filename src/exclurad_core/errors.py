"""Error taxonomy shared by the query engine and its loaders."""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = [
    "ExplorerError",
    "MissingColumnError",
    "TransportError",
    "InvalidSelectionError",
    "SimulationError",
]


class ExplorerError(Exception):
    """Base class for every error raised by the explorer packages."""

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})


class MissingColumnError(ExplorerError):
    """A required column is absent from a decoded table."""

    def __init__(self, column: str, *, available: Optional[tuple[str, ...]] = None) -> None:
        super().__init__(
            f"Missing column: {column}",
            context={"column": column, "available": ", ".join(available or ())},
        )
        self.column = column


class TransportError(ExplorerError):
    """Dataset bytes could not be fetched or decoded."""


class InvalidSelectionError(ExplorerError, ValueError):
    """The requested axis assignment cannot produce a plot."""


class SimulationError(ExplorerError):
    """The external simulation executable failed during a batch run."""

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        payload = dict(context or {})
        payload.setdefault("returncode", returncode)
        super().__init__(message, context=payload)
        self.returncode = returncode
