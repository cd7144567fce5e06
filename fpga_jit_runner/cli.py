"""
Print a single-use JIT runner config for an FPGA runner to stdout.

  fpga-jit-runner -s prod -f zcu104 -i 5 -l kir -k app.pem

stdout carries only the encoded config; diagnostics go to stderr.
"""

import argparse
import logging
import math
import os
import sys
from importlib.metadata import PackageNotFoundError, version as get_version

from fpga_jit_runner.constants import DEFAULT_API_URL, REQUEST_TIMEOUT
from fpga_jit_runner.credentials import build_client
from fpga_jit_runner.errors import ArgumentError, RunnerTokenError
from fpga_jit_runner.identity import generate_runner_name
from fpga_jit_runner.jit import exchange
from fpga_jit_runner.stages import Stage, resolve_stage
from fpga_jit_runner.targets import FpgaTarget, resolve_labels

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    # Argument errors share exit code 1 with every other failure.
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _enum_type(enum_cls):
    def parse(text):
        try:
            return enum_cls.parse(text)
        except ArgumentError as e:
            raise argparse.ArgumentTypeError(str(e)) from e
    parse.__name__ = enum_cls.__name__
    return parse


def _timeout(text):
    try:
        seconds = float(text)
    except ValueError:
        seconds = math.nan
    if not (math.isfinite(seconds) and seconds > 0):
        raise argparse.ArgumentTypeError(
            f"Invalid timeout: '{text}'. Must be a positive number of seconds."
        )
    return seconds


def build_parser():
    try:
        pkg_version = get_version("fpga-jit-runner")
    except PackageNotFoundError:
        pkg_version = "dev"

    parser = _ArgumentParser(
        prog="fpga-jit-runner",
        description="Create a GitHub Actions JIT runner config for an FPGA runner",
    )
    parser.add_argument("--version", action="version", version=f"fpga-jit-runner {pkg_version}")
    parser.add_argument(
        "-s", "--stage",
        type=_enum_type(Stage),
        required=True,
        metavar="STAGE",
        help="Deployment stage: " + ", ".join(s.value for s in Stage),
    )
    parser.add_argument(
        "-f", "--fpga-target",
        type=_enum_type(FpgaTarget),
        required=True,
        metavar="FPGA_TARGET",
        help="FPGA target: " + ", ".join(t.value for t in FpgaTarget),
    )
    parser.add_argument(
        "-i", "--fpga-identifier",
        required=True,
        metavar="FPGA_IDENTIFIER",
        help="Number distinguishing boards of the same type",
    )
    parser.add_argument(
        "-l", "--location",
        required=True,
        metavar="LOCATION",
        help="Physical location of the runner, e.g. kir",
    )
    parser.add_argument(
        "-k", "--key-path",
        required=True,
        metavar="KEY_PATH",
        help="GitHub App private key (PEM)",
    )
    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Register with -staging labels where the target supports them",
    )
    parser.add_argument(
        "--api-url",
        default=os.getenv("GITHUB_API_URL") or DEFAULT_API_URL,
        help="GitHub REST API base URL (default: $GITHUB_API_URL or %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=_timeout,
        default=REQUEST_TIMEOUT,
        help="Per-request timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def request_jit_token(stage, fpga_target, identifier, location, key_path,
                      dry_run=False, api_url=DEFAULT_API_URL, timeout=REQUEST_TIMEOUT,
                      session=None) -> str:
    """Run the whole provisioning sequence and return the encoded JIT config."""
    credentials = resolve_stage(stage, key_path)
    labels = resolve_labels(fpga_target, dry_run)
    name = generate_runner_name(fpga_target, identifier, location)
    client = build_client(credentials, api_url=api_url, timeout=timeout, session=session)
    return exchange(client, credentials.org_name, name, labels)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.info("Running for stage: %s", args.stage.value)

    try:
        token = request_jit_token(
            args.stage,
            args.fpga_target,
            args.fpga_identifier,
            args.location,
            args.key_path,
            dry_run=args.dry_run,
            api_url=args.api_url,
            timeout=args.timeout,
        )
    except RunnerTokenError as e:
        print(f"Failed to create runner config due to {e}", file=sys.stderr)
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
