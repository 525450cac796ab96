"""Argument parsing helpers for the EXCLURAD explorer CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from exclurad_core.axes import Axis
from exclurad_explorer.ingestion.datasets import DATASET_KINDS

from .workflows import (
    DEFAULT_EXECUTABLE,
    DEFAULT_INPUT_DIR,
    _handle_domains,
    _handle_generate_inputs,
    _handle_info,
    _handle_query,
    _handle_run_batch,
)

_AXIS_CHOICES = tuple(axis.value for axis in Axis)


def _section(config: Mapping[str, Any], name: str) -> dict[str, Any]:
    raw = config.get(name, {})
    return dict(raw) if isinstance(raw, Mapping) else {}


def _add_dataset_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--dataset",
        choices=DATASET_KINDS,
        default=None,
        help="Configured dataset variant to load (default: datasets.default).",
    )
    source.add_argument(
        "--data",
        dest="data_path",
        type=Path,
        default=None,
        help="Explicit Feather, Parquet or CSV file to load instead of a variant.",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = _section(config, "logging")
    query_cfg = _section(config, "query")

    parser = argparse.ArgumentParser(
        description="EXCLURAD RC explorer: slice radiative-correction tables into curves"
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the TOML configuration file to load.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser(
        "query",
        help="Build the overlay curves for one axis assignment and slider state.",
    )
    _add_dataset_arguments(query_parser)
    query_parser.add_argument(
        "--x",
        dest="x_axis",
        choices=_AXIS_CHOICES,
        default=str(query_cfg.get("x", Axis.W.value)),
        help="Axis plotted horizontally (default: W).",
    )
    query_parser.add_argument(
        "--overlay",
        dest="overlay_axis",
        choices=_AXIS_CHOICES,
        default=str(query_cfg.get("overlay", Axis.Q2.value)),
        help="Axis whose values become separate curves (default: Q2).",
    )
    query_parser.add_argument(
        "--y",
        dest="y_metric",
        default=str(query_cfg.get("y", "delta")),
        help="Plotted quantity: delta (σ_obs/σ₀) or asym (A_RC/A_Born).",
    )
    query_parser.add_argument(
        "--fix",
        dest="fixed",
        action="append",
        default=[],
        metavar="AXIS=VALUE",
        help="Pin a fixed axis; the value snaps to the nearest domain value. Repeatable.",
    )
    query_parser.add_argument(
        "--min-support",
        dest="min_support",
        type=int,
        default=None,
        help="Minimum number of points per curve (default: query.min_support or 4).",
    )
    query_parser.add_argument(
        "--max-traces",
        dest="max_traces",
        type=int,
        default=None,
        help="Maximum number of curves (default: query.max_traces or 8).",
    )
    query_parser.add_argument(
        "--format",
        dest="output_format",
        choices=("json", "text", "html"),
        default="json",
        help="Output format (html requires --output).",
    )
    query_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the rendered result to this file instead of stdout.",
    )
    query_parser.set_defaults(handler=_handle_query)

    domains_parser = subparsers.add_parser(
        "domains",
        help="List the distinct values of every kinematic axis.",
    )
    _add_dataset_arguments(domains_parser)
    domains_parser.add_argument(
        "--format",
        dest="output_format",
        choices=("json", "text"),
        default="text",
        help="Output format (default: text).",
    )
    domains_parser.set_defaults(handler=_handle_domains)

    info_parser = subparsers.add_parser(
        "info",
        help="Print the dataset status line.",
    )
    _add_dataset_arguments(info_parser)
    info_parser.set_defaults(handler=_handle_info)

    generate_parser = subparsers.add_parser(
        "generate-inputs",
        help="Write input_<n>.dat files for every W × Q² × cosθ* grid point.",
    )
    generate_parser.add_argument(
        "--grid",
        type=Path,
        required=True,
        help="YAML file with a 'grid' mapping and optional run 'parameters'.",
    )
    generate_parser.add_argument(
        "--output-dir",
        dest="output_dir",
        type=Path,
        default=Path(DEFAULT_INPUT_DIR),
        help=f"Destination directory (default: {DEFAULT_INPUT_DIR}).",
    )
    generate_parser.set_defaults(handler=_handle_generate_inputs)

    batch_parser = subparsers.add_parser(
        "run-batch",
        help="Run the EXCLURAD executable once per input file and collect outputs.",
    )
    batch_parser.add_argument(
        "--input-dir",
        dest="input_dir",
        type=Path,
        default=Path(DEFAULT_INPUT_DIR),
        help=f"Directory holding input_<n>.dat files (default: {DEFAULT_INPUT_DIR}).",
    )
    batch_parser.add_argument(
        "--executable",
        default=DEFAULT_EXECUTABLE,
        help=f"Simulation executable, relative to --workdir (default: {DEFAULT_EXECUTABLE}).",
    )
    batch_parser.add_argument(
        "--workdir",
        type=Path,
        default=Path("."),
        help="Directory the executable runs in.",
    )
    batch_parser.add_argument(
        "--results-dir",
        dest="results_dir",
        type=Path,
        default=None,
        help="Where outputs are collected (default: results_<timestamp> in --workdir).",
    )
    batch_parser.add_argument(
        "--keep-going",
        dest="keep_going",
        action="store_true",
        help="Record failing runs and continue instead of aborting.",
    )
    batch_parser.set_defaults(handler=_handle_run_batch)

    return parser
