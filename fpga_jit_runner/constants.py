# Baked-in lookup tables for stages, FPGA targets and the GitHub API

# GitHub App per deployment stage
# Each stage talks to its own App installation; never share a pair between stages.
STAGE_APPS = {
    "dev": {
        "app_id": 1160975,
        "installation_id": 61798278,
        "org_name": "clundin25-testorg",
    },
    "prod": {
        "app_id": 379559,
        "installation_id": 40993215,
        "org_name": "chipsalliance",
    },
}

# Stages that exist but have no App yet
UNCONFIGURED_STAGES = {"staging"}

# FPGA targets grouped by board family
# Labels are matched verbatim by workflow `runs-on` selectors.
FPGA_TARGETS = {
    "zcu104": {
        "board": "caliptra-fpga",
        "labels": ["caliptra-fpga"],
        "staging_suffix": False,
    },
    "zcu104-nightly": {
        "board": "caliptra-fpga",
        "labels": ["caliptra-fpga", "caliptra-fpga-nightly"],
        "staging_suffix": False,
    },
    "vck190": {
        "board": "vck190",
        "labels": ["vck190"],
        "staging_suffix": True,
    },
}

STAGING_SUFFIX = "-staging"

# GitHub API
DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "fpga-jit-runner"
REQUEST_TIMEOUT = 15

# App JWT window, backdated to absorb clock skew
JWT_BACKDATE_SECONDS = 60
JWT_LIFETIME_SECONDS = 540

# Only one runner group is used
DEFAULT_RUNNER_GROUP_ID = 1
RUNNER_WORK_FOLDER = "_work"

NONCE_BITS = 64
