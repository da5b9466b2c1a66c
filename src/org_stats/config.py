"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .github.client import API_URL


class ConfigError(ValueError):
    """Missing or malformed token/organization settings."""


def require_token(token: str | None) -> str:
    if not token or not token.strip():
        raise ConfigError("A GitHub token is required")
    return token.strip()


@dataclass(frozen=True)
class AnalysisConfig:
    token: str
    organization: str
    base_url: str = API_URL

    def validate(self) -> AnalysisConfig:
        require_token(self.token)
        if not self.organization or not self.organization.strip():
            raise ConfigError("An organization name is required")
        return self

    @classmethod
    def from_dict(cls, data: Any) -> AnalysisConfig:
        if not isinstance(data, dict):
            raise ConfigError("Missing required configuration")
        token = data.get("token")
        organization = data.get("organization")
        if not isinstance(token, str) or not isinstance(organization, str):
            raise ConfigError("Missing required configuration")
        return cls(token=token.strip(), organization=organization.strip()).validate()
