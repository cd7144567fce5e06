"""Tests for the JIT config exchange."""

import pytest

from fpga_jit_runner.credentials import InstallationClient
from fpga_jit_runner.errors import ApiAuthError, ApiRequestError
from fpga_jit_runner.jit import JIT_CONFIG_SCHEMA, exchange, load_schema

API = "https://api.github.test"


def _client(session):
    return InstallationClient(379559, 40993215, "app.jwt", api_url=API, session=session)


def test_returns_only_encoded_config(fake_session, response):
    session = fake_session(
        response(201, {"token": "t"}),
        response(201, {"runner": {"id": 23, "name": "r"}, "encoded_jit_config": "ENCODED=="}),
    )
    token = exchange(_client(session), "chipsalliance", "vck190-kir-5-AB-2024-01-01", ("vck190",))
    assert token == "ENCODED=="

    url, kwargs = session.calls[1]
    assert url == f"{API}/orgs/chipsalliance/actions/runners/generate-jitconfig"
    assert kwargs["json"] == {
        "name": "vck190-kir-5-AB-2024-01-01",
        "runner_group_id": 1,
        "labels": ["vck190"],
        "work_folder": "_work",
    }


def test_org_not_found_is_request_error(fake_session, response):
    session = fake_session(response(201, {"token": "t"}), response(404, {"message": "Not Found"}))
    with pytest.raises(ApiRequestError, match="Not Found") as exc:
        exchange(_client(session), "no-such-org", "name", ["vck190"])
    assert exc.value.status == 404
    assert len(session.calls) == 2


def test_duplicate_name_is_not_retried(fake_session, response):
    session = fake_session(
        response(201, {"token": "t"}),
        response(409, {"message": "Already exists - A runner with the name already exists."}),
    )
    with pytest.raises(ApiRequestError, match="Already exists"):
        exchange(_client(session), "chipsalliance", "name", ["vck190"])
    assert len(session.calls) == 2


def test_invalid_installation_surfaces_as_auth_error(fake_session, response):
    session = fake_session(response(404, {"message": "Not Found"}))
    with pytest.raises(ApiAuthError):
        exchange(_client(session), "chipsalliance", "name", ["vck190"])


@pytest.mark.parametrize(
    "body",
    [{"runner": {}}, {"encoded_jit_config": ""}, {"encoded_jit_config": 5}, ["x"]],
)
def test_malformed_response(fake_session, response, body):
    session = fake_session(response(201, {"token": "t"}), response(201, body))
    with pytest.raises(ApiRequestError, match="Unexpected JIT config response"):
        exchange(_client(session), "chipsalliance", "name", ["vck190"])


def test_schema_ships_with_package():
    schema = load_schema(JIT_CONFIG_SCHEMA)
    assert schema["required"] == ["encoded_jit_config"]
