"""Tests for runner name generation."""

import datetime
import re

import pytest

from fpga_jit_runner.errors import ArgumentError
from fpga_jit_runner.identity import generate_runner_name, random_nonce
from fpga_jit_runner.targets import FpgaTarget

NAME_RE = re.compile(r"^caliptra-fpga-kir-5-[0-9A-F]{16}-\d{4}-\d{2}-\d{2}$")


class FixedBits:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, k):
        assert k == 64
        return self.value


def test_exact_format_with_fixed_nonce_and_date():
    name = generate_runner_name(
        FpgaTarget.VCK190,
        "5",
        "site1",
        rng=FixedBits(0xDEADBEEF00C0FFEE),
        today=datetime.date(2024, 3, 7),
    )
    assert name == "vck190-site1-5-DEADBEEF00C0FFEE-2024-03-07"


def test_nonce_is_zero_padded():
    assert random_nonce(FixedBits(1)) == "0000000000000001"
    assert random_nonce(FixedBits(2**64 - 1)) == "F" * 16


def test_default_name_uses_local_date():
    name = generate_runner_name(FpgaTarget.ZCU104, "5", "kir")
    assert NAME_RE.match(name)
    assert name[-10:] in {
        datetime.date.today().isoformat(),
        (datetime.date.today() - datetime.timedelta(days=1)).isoformat(),
    }


def test_nightly_and_stable_share_board_token():
    nightly = generate_runner_name(FpgaTarget.ZCU104_NIGHTLY, "5", "kir")
    assert NAME_RE.match(nightly)


def test_names_are_unique_across_many_calls():
    names = {generate_runner_name(FpgaTarget.ZCU104, "5", "kir") for _ in range(10000)}
    assert len(names) == 10000


def test_every_hex_digit_appears():
    digits = set("".join(random_nonce() for _ in range(200)))
    assert digits == set("0123456789ABCDEF")


@pytest.mark.parametrize("identifier, location", [("", "kir"), ("5", ""), ("5 6", "kir")])
def test_rejects_empty_or_spaced_parts(identifier, location):
    with pytest.raises(ArgumentError):
        generate_runner_name(FpgaTarget.ZCU104, identifier, location)
