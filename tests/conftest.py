import json

import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_response(status, body=None, text=None, reason=None):
    rsp = requests.Response()
    rsp.status_code = status
    rsp.reason = reason or ("OK" if status < 400 else "Error")
    rsp.url = "https://api.github.test/"
    if body is not None:
        rsp._content = json.dumps(body).encode()
    else:
        rsp._content = (text or "").encode()
    rsp.encoding = "utf-8"
    return rsp


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def response():
    return make_response


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def key_file(tmp_path, rsa_key):
    pem = rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    path = tmp_path / "app.pem"
    path.write_bytes(pem)
    return path
