"""
GitHub App credentials

Builds an API client scoped to one App installation:
  1. read the App private key (PEM) from disk
  2. sign a short-lived App JWT (RS256)
  3. narrow to the installation without checking it with GitHub

The installation access token is only requested by the first API call, so a
wrong installation ID surfaces there, as ApiAuthError.
"""

from __future__ import annotations

import logging
import math
import time
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import jwt
import requests
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from fpga_jit_runner.constants import (
    API_VERSION,
    DEFAULT_API_URL,
    JWT_BACKDATE_SECONDS,
    JWT_LIFETIME_SECONDS,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from fpga_jit_runner.errors import (
    ApiAuthError,
    ApiBuildError,
    ApiRequestError,
    KeyIoError,
    KeyParseError,
)
from fpga_jit_runner.stages import CiCredentials

logger = logging.getLogger(__name__)


def load_private_key(key_path: str) -> rsa.RSAPrivateKey:
    """Read and parse an unencrypted RSA private key in PEM format."""
    try:
        pem = Path(key_path).read_bytes()
    except OSError as e:
        raise KeyIoError(f"Cannot read private key {key_path}: {e.strerror or e}") from e

    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyParseError(f"Private key {key_path} is not a valid PEM key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyParseError(f"Private key {key_path} is not an RSA key")
    return key


def create_app_jwt(app_id: int, private_key: rsa.RSAPrivateKey, now: Optional[int] = None) -> str:
    now = int(time.time()) if now is None else now
    claims = {
        "iat": now - JWT_BACKDATE_SECONDS,
        "exp": now + JWT_LIFETIME_SECONDS,
        "iss": str(app_id),
    }
    try:
        return jwt.encode(claims, private_key, algorithm="RS256")
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise KeyParseError(f"Cannot sign App JWT for app {app_id}: {e}") from e


def _api_message(rsp: requests.Response) -> str:
    try:
        message = rsp.json().get("message", "")
    except (ValueError, AttributeError):
        message = ""
    return message if isinstance(message, str) else ""


def describe_response(rsp: requests.Response) -> str:
    """Short 'HTTP <status> <message>' text for an error response."""
    message = _api_message(rsp) or (rsp.text or "").strip() or (rsp.reason or "")
    return f"HTTP {rsp.status_code} {message}".strip()


def is_rate_limited(rsp: requests.Response) -> bool:
    """GitHub answers primary and secondary rate limits with 403 or 429."""
    if rsp.status_code == 429:
        return True
    if rsp.status_code != 403:
        return False
    if rsp.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in _api_message(rsp).lower()


class InstallationClient:
    """Minimal GitHub REST client acting as one App installation."""

    def __init__(
        self,
        app_id: int,
        installation_id: int,
        app_jwt: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.app_id = app_id
        self.installation_id = installation_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._app_jwt = app_jwt
        self._token: Optional[str] = None

    def _headers(self, authorization: str) -> Dict[str, str]:
        return {
            "Authorization": authorization,
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
        }

    def installation_token(self) -> str:
        """Exchange the App JWT for an installation token, once."""
        if self._token is not None:
            return self._token

        url = f"{self.api_url}/app/installations/{self.installation_id}/access_tokens"
        logger.debug("Requesting installation token for installation %s", self.installation_id)
        try:
            rsp = self.session.post(
                url, headers=self._headers(f"Bearer {self._app_jwt}"), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ApiAuthError(
                f"Installation token request for installation {self.installation_id} failed: {e}"
            ) from e

        if not rsp.ok:
            raise ApiAuthError(
                f"GitHub App {self.app_id} cannot act as installation "
                f"{self.installation_id}: {describe_response(rsp)}",
                status=rsp.status_code,
            )
        try:
            token = rsp.json()["token"]
        except (ValueError, KeyError, TypeError) as e:
            raise ApiAuthError(
                f"Installation token response for installation {self.installation_id} has no token"
            ) from e
        if not isinstance(token, str) or not token:
            raise ApiAuthError(
                f"Installation token response for installation {self.installation_id} has no token"
            )
        self._token = token
        return token

    def post(self, path: str, payload: Dict[str, Any]) -> Any:
        """POST a JSON payload as the installation and return the decoded body."""
        token = self.installation_token()
        path = path.lstrip("/")
        url = f"{self.api_url}/{path}"
        logger.debug("POST %s", url)
        try:
            rsp = self.session.post(
                url, json=payload, headers=self._headers(f"token {token}"), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ApiRequestError(f"POST /{path} failed: {e}") from e

        if is_rate_limited(rsp):
            raise ApiRequestError(
                f"POST /{path} was rate limited: {describe_response(rsp)}", status=rsp.status_code
            )
        if rsp.status_code in (401, 403):
            raise ApiAuthError(
                f"POST /{path} was rejected: {describe_response(rsp)}", status=rsp.status_code
            )
        if not rsp.ok:
            raise ApiRequestError(
                f"POST /{path} failed: {describe_response(rsp)}", status=rsp.status_code
            )
        try:
            return rsp.json()
        except ValueError as e:
            raise ApiRequestError(
                f"POST /{path} returned a non-JSON body", status=rsp.status_code
            ) from e


def build_client(
    credentials: CiCredentials,
    *,
    api_url: str = DEFAULT_API_URL,
    timeout: float = REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> InstallationClient:
    """
    Build an installation-scoped client from stage credentials.

    Args:
        credentials: App ID, installation ID and key path of the stage
        api_url: GitHub REST API base URL
        timeout: Per-request timeout in seconds
        session: requests session to send through; a new one by default

    Raises:
        KeyIoError, KeyParseError, ApiBuildError
    """
    key = load_private_key(credentials.key_path)
    app_jwt = create_app_jwt(credentials.app_id, key)

    parsed = urlparse(api_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ApiBuildError(f"Invalid GitHub API URL: '{api_url}'")
    if timeout is not None and not (math.isfinite(timeout) and timeout > 0):
        raise ApiBuildError(f"Request timeout must be a positive number of seconds, got {timeout}")

    # Installation ID is trusted as-is; saves a round trip.
    return InstallationClient(
        credentials.app_id,
        credentials.installation_id,
        app_jwt,
        api_url=api_url,
        timeout=timeout,
        session=session,
    )
