"""Sub-command handlers for the EXCLURAD explorer CLI."""

from __future__ import annotations

import argparse
import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from exclurad_core.axes import CANONICAL_AXES, Axis, format_axis_value, parse_axis
from exclurad_core.query import QueryOptions
from exclurad_explorer.batch import generate_inputs, load_grid_file, run_batch
from exclurad_explorer.ingestion.datasets import DatasetSettings
from exclurad_explorer.render import render_curve_set, write_figure_html
from exclurad_explorer.session import ExplorerSession

from .errors import CliError
from .io import config_base_dir

__all__ = [
    "DEFAULT_EXECUTABLE",
    "DEFAULT_INPUT_DIR",
    "build_session",
    "parse_fixed_argument",
]

DEFAULT_INPUT_DIR = "input_files"
DEFAULT_EXECUTABLE = "./build/exclurad.exe"


def parse_fixed_argument(raw: str) -> Tuple[Axis, float]:
    """Split ``AXIS=VALUE`` into an axis and a float."""

    name, sep, value = raw.partition("=")
    if not sep or not name.strip() or not value.strip():
        raise CliError(
            f"Invalid --fix value {raw!r}; expected AXIS=VALUE.",
            category="usage",
            context={"argument": raw},
        )
    try:
        return parse_axis(name.strip()), float(value)
    except ValueError as exc:
        raise CliError(str(exc), category="usage", context={"argument": raw}) from exc


def build_session(namespace: argparse.Namespace, config: Mapping[str, Any]) -> ExplorerSession:
    """Create a session from configuration and load the requested dataset."""

    settings = DatasetSettings.from_config(config, base_dir=config_base_dir(config))
    options = QueryOptions.from_config(config)
    overrides: Dict[str, int] = {}
    for name in ("min_support", "max_traces"):
        value = getattr(namespace, name, None)
        if value is not None:
            overrides[name] = value
    if overrides:
        options = dataclasses.replace(options, **overrides)

    session = ExplorerSession(
        settings,
        options=options,
        y_metric=getattr(namespace, "y_metric", "delta"),
    )
    data_path = getattr(namespace, "data_path", None)
    session.load(data_path if data_path is not None else (namespace.dataset or settings.default))
    return session


def _write_or_return(text: str, output: Path | None) -> str:
    if output is None:
        return text
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf8")
    return f"Wrote {output}"


def _handle_query(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    if namespace.output_format == "html" and namespace.output is None:
        raise CliError("--format html requires --output.", category="usage")

    fixed = [parse_fixed_argument(raw) for raw in namespace.fixed]
    session = build_session(namespace, config)
    session.set_x_axis(namespace.x_axis)
    outcome = session.request_overlay(namespace.overlay_axis)
    if not outcome.accepted:
        raise CliError(
            outcome.message or "Invalid overlay axis.",
            category="usage",
            context={"x": namespace.x_axis, "overlay": namespace.overlay_axis},
        )
    for axis, value in fixed:
        if axis not in session.roles.fixed_axes:
            raise CliError(
                f"Axis {axis.value} is not fixed in this selection.",
                category="usage",
                context={"axis": axis.value},
            )
        session.snap_slider(axis, value)

    result = session.redraw()
    if namespace.output_format == "html":
        path = write_figure_html(result, namespace.output)
        return f"Wrote {path}"
    if namespace.output_format == "text":
        rendered = render_curve_set(result)
    else:
        rendered = json.dumps(result.as_dict(), indent=2, ensure_ascii=False)
    return _write_or_return(rendered, namespace.output)


def _handle_domains(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    session = build_session(namespace, config)
    domains = session.domains or {}
    if namespace.output_format == "json":
        payload = {axis.value: [float(v) for v in domains[axis]] for axis in CANONICAL_AXES}
        return json.dumps(payload, indent=2)
    lines = []
    for axis in CANONICAL_AXES:
        values = ", ".join(format_axis_value(axis, float(v)) for v in domains[axis])
        lines.append(f"{axis.label} ({len(domains[axis])}): {values}")
    return "\n".join(lines)


def _handle_info(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    session = build_session(namespace, config)
    return session.status_line()


def _handle_generate_inputs(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    grid_file = load_grid_file(namespace.grid)
    written = generate_inputs(
        grid_file.grid,
        namespace.output_dir,
        parameters=grid_file.parameters,
    )
    return f"Generated {len(written)} input files in {namespace.output_dir}."


def _handle_run_batch(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    report = run_batch(
        namespace.input_dir,
        executable=namespace.executable,
        workdir=namespace.workdir,
        results_dir=namespace.results_dir,
        keep_going=namespace.keep_going,
    )
    return json.dumps(report.as_dict(), indent=2)
