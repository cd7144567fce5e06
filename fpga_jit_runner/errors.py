"""Exceptions raised while provisioning a JIT runner token."""

from __future__ import annotations


class RunnerTokenError(RuntimeError):
    """Base class for every failure that ends an invocation."""


class ArgumentError(RunnerTokenError, ValueError):
    """Raised when a stage, target or name component is invalid."""


class UnimplementedStageError(RunnerTokenError):
    """Raised when a stage is known but has no GitHub App configured."""


class RegistryError(RunnerTokenError):
    """Raised when the baked-in stage table is inconsistent."""


class KeyIoError(RunnerTokenError):
    """Raised when the private key file cannot be read."""


class KeyParseError(RunnerTokenError):
    """Raised when the private key is not an unencrypted RSA PEM key."""


class ApiError(RunnerTokenError):
    """Base class for GitHub API failures; carries the HTTP status if any."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ApiBuildError(ApiError):
    """Raised when the API client cannot be configured."""


class ApiAuthError(ApiError):
    """Raised when GitHub rejects the App or installation credentials."""


class ApiRequestError(ApiError):
    """Raised when an authenticated API request fails."""
