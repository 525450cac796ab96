"""Batch collaborators: input-file generation and the executable driver."""

from exclurad_explorer.batch.driver import (
    OUTPUT_FILES,
    BatchReport,
    RunRecord,
    default_results_dir,
    discover_inputs,
    run_batch,
)
from exclurad_explorer.batch.inputs import (
    DEFAULT_PHI_VALUES,
    GridFile,
    KinematicGrid,
    RunParameters,
    generate_inputs,
    load_grid_file,
    render_input,
)

__all__ = [
    "OUTPUT_FILES",
    "BatchReport",
    "RunRecord",
    "default_results_dir",
    "discover_inputs",
    "run_batch",
    "DEFAULT_PHI_VALUES",
    "GridFile",
    "KinematicGrid",
    "RunParameters",
    "generate_inputs",
    "load_grid_file",
    "render_input",
]
