"""
Runner identity

Builds runner names of the form
    {board_type}-{location}-{identifier}-{nonce}-{YYYY-MM-DD}

The 16 hex digit nonce keeps names apart when a crashed runner was never
cleaned up. Uniqueness is probabilistic; there is no coordination service.
"""

from __future__ import annotations

import datetime
import random
import re

from fpga_jit_runner.constants import NONCE_BITS
from fpga_jit_runner.errors import ArgumentError
from fpga_jit_runner.targets import FpgaTarget, board_type

NAME_PART_PATTERN = re.compile(r"^\S+$")


def _check_part(kind: str, value: str) -> str:
    if not value or not NAME_PART_PATTERN.match(value):
        raise ArgumentError(f"Invalid {kind}: '{value}'. Must be non-empty with no whitespace.")
    return value


def random_nonce(rng=None) -> str:
    """Return 16 uppercase hex digits drawn from 64 random bits."""
    rng = rng or random
    return f"{rng.getrandbits(NONCE_BITS):0{NONCE_BITS // 4}X}"


def generate_runner_name(
    target: FpgaTarget,
    identifier: str,
    location: str,
    *,
    rng=None,
    today: datetime.date | None = None,
) -> str:
    """
    Generate a runner name for one registration.

    Args:
        target: FPGA target type, reduced to its board family
        identifier: Number distinguishing boards of the same family in CI
        location: Physical location of the runner, e.g. "kir"
        rng: Random source with getrandbits(); defaults to the random module
        today: Date to stamp; defaults to the local calendar date

    Returns:
        Runner name string
    """
    identifier = _check_part("fpga identifier", identifier)
    location = _check_part("location", location)
    date = (today or datetime.date.today()).isoformat()
    return f"{board_type(target)}-{location}-{identifier}-{random_nonce(rng)}-{date}"
