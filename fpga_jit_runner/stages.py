"""
Stage registry

Maps a deployment stage to the GitHub App installation that issues its
runner tokens. The table lives in constants.STAGE_APPS.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fpga_jit_runner.constants import STAGE_APPS, UNCONFIGURED_STAGES
from fpga_jit_runner.errors import ArgumentError, RegistryError, UnimplementedStageError


class Stage(Enum):
    DEVELOPMENT = "dev"
    STAGING = "staging"
    PRODUCTION = "prod"

    @classmethod
    def parse(cls, text: str) -> "Stage":
        """Parse a stage name, case-insensitively."""
        value = text.strip().lower()
        for stage in cls:
            if stage.value == value:
                return stage
        accepted = ", ".join(f"'{stage.value}'" for stage in cls)
        raise ArgumentError(f"Invalid stage: '{text}'. Must be one of {accepted}.")


@dataclass(frozen=True)
class CiCredentials:
    app_id: int
    installation_id: int
    org_name: str
    key_path: str


def resolve_stage(stage: Stage, key_path: str) -> CiCredentials:
    """
    Return the App credentials for a stage.

    Args:
        stage: Deployment stage
        key_path: Path of the App private key, passed through unchanged

    Raises:
        UnimplementedStageError: if the stage has no App configured
    """
    if stage.value in UNCONFIGURED_STAGES or stage.value not in STAGE_APPS:
        raise UnimplementedStageError(
            f"No GitHub App is configured for stage '{stage.value}'"
        )
    app = STAGE_APPS[stage.value]
    return CiCredentials(
        app_id=app["app_id"],
        installation_id=app["installation_id"],
        org_name=app["org_name"],
        key_path=key_path,
    )


def check_stage_registry(apps=None, unconfigured=None):
    """Check that every stage is accounted for and no two stages share an App."""
    apps = STAGE_APPS if apps is None else apps
    unconfigured = UNCONFIGURED_STAGES if unconfigured is None else unconfigured

    for stage in Stage:
        configured = stage.value in apps
        if configured == (stage.value in unconfigured):
            raise RegistryError(
                f"Stage '{stage.value}' must be either configured or listed as unconfigured"
            )

    seen_pairs = {}
    seen_orgs = {}
    for name, app in apps.items():
        pair = (app["app_id"], app["installation_id"])
        if pair in seen_pairs:
            raise RegistryError(
                f"Stages '{seen_pairs[pair]}' and '{name}' share App installation {pair}"
            )
        if app["org_name"] in seen_orgs:
            raise RegistryError(
                f"Stages '{seen_orgs[app['org_name']]}' and '{name}' share org '{app['org_name']}'"
            )
        seen_pairs[pair] = name
        seen_orgs[app["org_name"]] = name
