"""Target registry: FPGA target type to runner labels and board family."""

from __future__ import annotations

from enum import Enum

from fpga_jit_runner.constants import FPGA_TARGETS, STAGING_SUFFIX
from fpga_jit_runner.errors import ArgumentError


class FpgaTarget(Enum):
    ZCU104 = "zcu104"
    ZCU104_NIGHTLY = "zcu104-nightly"
    VCK190 = "vck190"

    @classmethod
    def parse(cls, text: str) -> "FpgaTarget":
        value = text.strip().lower()
        for target in cls:
            if target.value == value:
                return target
        accepted = ", ".join(f"'{target.value}'" for target in cls)
        raise ArgumentError(f"Invalid fpga: '{text}'. Must be one of {accepted}.")


def board_type(target: FpgaTarget) -> str:
    """Board family token; nightly and stable variants share it."""
    return FPGA_TARGETS[target.value]["board"]


def resolve_labels(target: FpgaTarget, dry_run: bool = False) -> tuple[str, ...]:
    """
    Return the ordered runner labels for a target.

    Args:
        target: FPGA target type
        dry_run: Suffix labels with -staging where the target supports it

    Returns:
        Tuple of labels, in registration order
    """
    entry = FPGA_TARGETS[target.value]
    labels = list(entry["labels"])
    if dry_run and entry["staging_suffix"]:
        labels = [f"{label}{STAGING_SUFFIX}" for label in labels]
    return tuple(labels)
