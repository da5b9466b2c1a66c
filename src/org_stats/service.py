"""Request/response envelope around the analysis.

A request is ``{"action": "validate" | "analyze" | "rate-limit", "config":
{"token": ..., "organization": ...}}``. :func:`handle_request` answers with an
HTTP-style status code and a JSON-serialisable body; transport framing is left
to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable

from .aggregator import perform_full_analysis
from .config import AnalysisConfig, ConfigError
from .github.client import GitHubClient
from .progress import ProgressChannel

logger = logging.getLogger(__name__)

ACTIONS = ("validate", "analyze", "rate-limit")

ClientFactory = Callable[[AnalysisConfig], GitHubClient]


def _default_client(config: AnalysisConfig) -> GitHubClient:
    return GitHubClient(config.token, config.organization, base_url=config.base_url)


async def validate_configuration(client: GitHubClient) -> bool:
    """Check the token, then make sure the organization is reachable.

    An organization lookup failure propagates to the caller.
    """
    valid = await client.validate_token()
    if valid:
        await client.get_organization()
    return valid


async def handle_request(
    payload: Any,
    client_factory: ClientFactory = _default_client,
    progress: ProgressChannel | None = None,
) -> tuple[int, Any]:
    if not isinstance(payload, dict):
        return 400, {"error": "Invalid request"}

    try:
        config = AnalysisConfig.from_dict(payload.get("config"))
    except ConfigError:
        return 400, {"error": "Missing required configuration"}

    action = payload.get("action")
    if action not in ACTIONS:
        return 400, {"error": "Invalid action"}

    try:
        async with client_factory(config) as client:
            if action == "validate":
                result: Any = {"valid": await validate_configuration(client)}
            elif action == "analyze":
                result = asdict(await perform_full_analysis(client, progress))
            else:
                quota = await client.get_rate_limit()
                result = asdict(quota) if quota is not None else None
    except Exception as e:
        logger.error("Error handling %s request: %s", action, e)
        if progress:
            progress.emit("error", f"Analysis failed: {e}", 0)
        return 500, {"error": str(e) or "Internal server error"}

    return 200, result
