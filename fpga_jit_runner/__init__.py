"""Ephemeral GitHub Actions JIT runner tokens for FPGA CI."""

from fpga_jit_runner.errors import RunnerTokenError
from fpga_jit_runner.stages import CiCredentials, Stage, resolve_stage
from fpga_jit_runner.targets import FpgaTarget, board_type, resolve_labels

__all__ = [
    "CiCredentials",
    "FpgaTarget",
    "RunnerTokenError",
    "Stage",
    "board_type",
    "resolve_labels",
    "resolve_stage",
]
