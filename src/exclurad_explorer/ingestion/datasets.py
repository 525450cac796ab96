"""Dataset transport: locate, read and decode tabular dataset files."""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, BinaryIO, Mapping

from exclurad_core.errors import MissingColumnError, TransportError
from exclurad_core.table import KinematicTable, materialize

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only.
    import pandas as pd

__all__ = [
    "DATASET_KINDS",
    "DatasetSettings",
    "read_frame",
    "load_table",
]

logger = logging.getLogger(__name__)

DATASET_KINDS: tuple[str, ...] = ("full", "sample")

_DEFAULT_FILES: Mapping[str, str] = MappingProxyType(
    {
        "full": "exclurad_eta_web.feather",
        "sample": "exclurad_eta_web_sample.feather",
    }
)
_DEFAULT_META = "meta.json"
_FEATHER_SUFFIXES = frozenset({".feather", ".arrow", ".ipc"})

_PANDAS: Any | None = None


def _get_pandas() -> Any:
    global _PANDAS
    if _PANDAS is None:
        import pandas as _pd

        _PANDAS = _pd
    return _PANDAS


@dataclass(frozen=True, slots=True)
class DatasetSettings:
    """Where the dataset variants and their metadata sidecar live."""

    root: Path = Path("data")
    files: Mapping[str, str] = field(default_factory=lambda: dict(_DEFAULT_FILES))
    meta: str = _DEFAULT_META
    default: str = "sample"

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None = None,
        *,
        base_dir: Path | None = None,
    ) -> "DatasetSettings":
        """Read ``[datasets]``; relative roots resolve against ``base_dir``."""

        section = config.get("datasets") if config else None
        if not isinstance(section, ABCMapping):
            section = {}
        root = Path(str(section.get("root", "data"))).expanduser()
        if not root.is_absolute() and base_dir is not None:
            root = base_dir / root
        files = dict(_DEFAULT_FILES)
        for kind in DATASET_KINDS:
            value = section.get(kind)
            if isinstance(value, str) and value.strip():
                files[kind] = value.strip()
        default = str(section.get("default", "sample"))
        if default not in files:
            default = "sample"
        meta = section.get("meta", _DEFAULT_META)
        return cls(
            root=root,
            files=files,
            meta=str(meta) if meta else _DEFAULT_META,
            default=default,
        )

    def path_for(self, kind: str) -> Path:
        try:
            name = self.files[kind]
        except KeyError:
            raise TransportError(
                f"Unknown dataset variant {kind!r}",
                context={"kind": kind, "known": ", ".join(sorted(self.files))},
            ) from None
        path = Path(name).expanduser()
        return path if path.is_absolute() else self.root / path

    @property
    def meta_path(self) -> Path:
        path = Path(self.meta).expanduser()
        return path if path.is_absolute() else self.root / path


def _infer_format(source: Path) -> str:
    suffix = source.suffix.lower()
    if suffix in _FEATHER_SUFFIXES:
        return "feather"
    if suffix == ".parquet":
        return "parquet"
    if suffix == ".csv":
        return "csv"
    raise TransportError(
        f"Unsupported dataset format: {source}",
        context={"path": str(source), "suffix": suffix},
    )


def read_frame(
    source: Path | str | bytes | BinaryIO,
    *,
    fmt: str | None = None,
) -> "pd.DataFrame":
    """Decode ``source`` into a pandas ``DataFrame``.

    Paths pick their decoder from the suffix; raw bytes and file objects are
    read as Feather (Arrow IPC) unless ``fmt`` says otherwise.
    """

    origin: str
    if isinstance(source, (str, Path)):
        path = Path(source).expanduser()
        if not path.exists():
            raise TransportError(
                f"Dataset {path} does not exist",
                context={"path": str(path), "reason": "not_found"},
            )
        resolved_fmt = fmt or _infer_format(path)
        handle: Any = path
        origin = str(path)
    else:
        resolved_fmt = fmt or "feather"
        handle = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
        origin = "<buffer>"

    pd = _get_pandas()
    try:
        if resolved_fmt == "feather":
            return pd.read_feather(handle)
        if resolved_fmt == "parquet":
            return pd.read_parquet(handle)
        if resolved_fmt == "csv":
            return pd.read_csv(handle)
    except ImportError as exc:
        raise TransportError(
            "Reading Feather/Parquet datasets requires the 'pyarrow' package.",
            context={"path": origin, "format": resolved_fmt},
        ) from exc
    except (OSError, ValueError) as exc:
        raise TransportError(
            f"Could not decode dataset {origin}: {exc}",
            context={"path": origin, "format": resolved_fmt},
        ) from exc
    raise TransportError(
        f"Unsupported dataset format {resolved_fmt!r}",
        context={"path": origin, "format": resolved_fmt},
    )


def load_table(
    source: Path | str | bytes | BinaryIO,
    *,
    fmt: str | None = None,
    kind: str | None = None,
) -> KinematicTable:
    """Read and materialise ``source`` into a validated table snapshot."""

    frame = read_frame(source, fmt=fmt)
    origin = str(source) if isinstance(source, (str, Path)) else "<buffer>"
    try:
        table = materialize(frame, origin=origin, metadata={"kind": kind} if kind else None)
    except MissingColumnError:
        logger.warning(
            "Dataset rejected: missing required column",
            extra={"event": "dataset.rejected", "source": origin},
        )
        raise
    logger.info(
        "Loaded dataset",
        extra={"event": "dataset.loaded", "source": origin, "rows": table.row_count, "kind": kind},
    )
    return table
