"""
JIT token exchange

Creates an organization just-in-time runner configuration and returns its
encoded token. One request, no retry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable
from urllib.parse import quote

import jsonschema
from jsonschema import validate

from fpga_jit_runner.constants import DEFAULT_RUNNER_GROUP_ID, RUNNER_WORK_FOLDER
from fpga_jit_runner.credentials import InstallationClient
from fpga_jit_runner.errors import ApiRequestError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schema"
JIT_CONFIG_SCHEMA = "jit_config.schema.json"


def load_schema(schema_file):
    with open(SCHEMA_DIR / schema_file, "r") as f:
        return json.load(f)


def exchange(
    client: InstallationClient,
    org_name: str,
    runner_name: str,
    labels: Iterable[str],
    runner_group_id: int = DEFAULT_RUNNER_GROUP_ID,
) -> str:
    """Return the encoded JIT config for one runner registration."""
    payload = {
        "name": runner_name,
        "runner_group_id": runner_group_id,
        "labels": list(labels),
        "work_folder": RUNNER_WORK_FOLDER,
    }
    logger.info("Creating JIT config for runner %s in org %s", runner_name, org_name)
    logger.debug("Runner group %s, labels %s", runner_group_id, payload["labels"])

    data = client.post(f"orgs/{quote(org_name, safe='')}/actions/runners/generate-jitconfig", payload)
    try:
        validate(instance=data, schema=load_schema(JIT_CONFIG_SCHEMA))
    except jsonschema.exceptions.ValidationError as e:
        raise ApiRequestError(f"Unexpected JIT config response: {e.message}") from e
    return data["encoded_jit_config"]
