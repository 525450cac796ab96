"""Exit codes and structured error reporting for ``exclurad-explorer``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from exclurad_core.errors import (
    ExplorerError,
    InvalidSelectionError,
    MissingColumnError,
    SimulationError,
    TransportError,
)

__all__ = [
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "cli_error_from",
    "log_cli_error",
]

#: Process exit status per error category.
EXIT_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
}

_FALLBACK = "runtime"
_LOGGER_NAME = "exclurad_explorer.cli"


def _is_missing_dataset(exc: BaseException) -> bool:
    return isinstance(exc, TransportError) and exc.context.get("reason") == "not_found"


# First match wins; subclasses come before their bases.
_CATEGORY_RULES: tuple[tuple[Callable[[BaseException], bool], str], ...] = (
    (lambda exc: isinstance(exc, InvalidSelectionError), "usage"),
    (_is_missing_dataset, "not_found"),
    (lambda exc: isinstance(exc, (MissingColumnError, TransportError)), "io"),
    (lambda exc: isinstance(exc, SimulationError), "runtime"),
    (lambda exc: isinstance(exc, FileNotFoundError), "not_found"),
    (lambda exc: isinstance(exc, OSError), "io"),
    (lambda exc: isinstance(exc, ValueError), "usage"),
)


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What gets logged and reported for one failed command."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _json_safe(context: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    scalars = (str, int, float, bool, type(None))
    return {
        str(key): value if isinstance(value, scalars) else str(value)
        for key, value in (context or {}).items()
    }


def build_error_payload(
    message: str,
    *,
    category: str = _FALLBACK,
    status_code: Optional[int] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Resolve ``category`` to an exit status; unknown categories count as runtime."""

    if category not in EXIT_CODES:
        category = _FALLBACK
    return ErrorPayload(
        status_code=EXIT_CODES[category] if status_code is None else status_code,
        category=category,
        message=message,
        context=_json_safe(context),
    )


def log_cli_error(
    payload: ErrorPayload,
    *,
    logger: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    (logger or logging.getLogger(_LOGGER_NAME)).error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=exc_info,
    )


class CliError(RuntimeError):
    """A command failure carrying its category and exit status."""

    def __init__(
        self,
        message: str,
        *,
        category: str = _FALLBACK,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
        logged: bool = False,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(
            message, category=category, status_code=status_code, context=context
        )
        self.logged = logged

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> Mapping[str, Any]:
        return self.payload.context


def cli_error_from(exc: BaseException) -> CliError:
    """Translate an engine, dataset or batch exception into a :class:`CliError`."""

    category = next((name for matches, name in _CATEGORY_RULES if matches(exc)), _FALLBACK)
    if isinstance(exc, ExplorerError):
        return CliError(exc.message, category=category, context=exc.context)
    return CliError(str(exc), category=category, context={"error": type(exc).__name__})
