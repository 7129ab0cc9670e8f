# Copyright (c) Microsoft. All rights reserved.

from collections.abc import AsyncIterable
from pathlib import Path
from typing import Any, Protocol

from agent_framework_copilotstudio import acquire_token
from microsoft_agents.copilotstudio.client import AgentType, ConnectionSettings, CopilotClient, PowerPlatformCloud
from msal import SerializableTokenCache

from ._logging import get_logger
from ._settings import CopilotStudioSettings
from .exceptions import ServiceInitializationError

logger = get_logger("copilotstudio_console.client")

__all__ = ["AgentClient", "create_copilot_client"]


class AgentClient(Protocol):
    """The part of ``CopilotClient`` the runner depends on.

    Both operations return lazily pulled streams of activities that end when the
    service finishes the turn.
    """

    def start_conversation(self, emit_start_conversation_event: bool = True) -> AsyncIterable[Any]: ...

    def ask_question(self, question: str, conversation_id: str | None = None) -> AsyncIterable[Any]: ...


def _load_token_cache(path: Path) -> SerializableTokenCache:
    cache = SerializableTokenCache()
    if path.exists():
        cache.deserialize(path.read_text(encoding="utf-8"))
    return cache


def _resolve_enum(enum_type: Any, name: str, setting: str) -> Any:
    try:
        return enum_type[name.upper()]
    except KeyError as ex:
        valid = ", ".join(member.name for member in enum_type)
        raise ServiceInitializationError(f"Invalid {setting} '{name}'. Valid values: {valid}") from ex


def create_copilot_client(
    settings: CopilotStudioSettings,
    *,
    token: str | None = None,
    username: str | None = None,
    token_cache_path: str | Path | None = None,
) -> CopilotClient:
    """Create a ``CopilotClient`` from settings.

    The token is requested for the Power Platform audience of the configured cloud.

    Args:
        settings: Connection settings.

    Keyword Args:
        token: A pre-acquired access token. When omitted, one is acquired with MSAL.
        username: Preferred cached account for silent token acquisition.
        token_cache_path: File used to persist the MSAL token cache between runs.

    Raises:
        ServiceInitializationError: If a required setting is missing or invalid.
    """
    if not settings.environmentid:
        raise ServiceInitializationError(
            "Copilot Studio environment ID is required. Set via 'environmentid' parameter "
            "or 'COPILOTSTUDIOAGENT__ENVIRONMENTID' environment variable."
        )
    if not settings.schemaname:
        raise ServiceInitializationError(
            "Copilot Studio agent identifier/schema name is required. Set via 'schemaname' parameter "
            "or 'COPILOTSTUDIOAGENT__SCHEMANAME' environment variable."
        )

    connection_settings = ConnectionSettings(
        environment_id=settings.environmentid,
        agent_identifier=settings.schemaname,
        cloud=_resolve_enum(PowerPlatformCloud, settings.cloud, "cloud"),
        copilot_agent_type=_resolve_enum(AgentType, settings.agenttype, "agent type"),
        custom_power_platform_cloud=None,
    )

    if token is None:
        if not settings.agentappid:
            raise ServiceInitializationError(
                "Copilot Studio client ID is required. Set via 'agentappid' parameter "
                "or 'COPILOTSTUDIOAGENT__AGENTAPPID' environment variable."
            )
        if not settings.tenantid:
            raise ServiceInitializationError(
                "Copilot Studio tenant ID is required. Set via 'tenantid' parameter "
                "or 'COPILOTSTUDIOAGENT__TENANTID' environment variable."
            )

        cache_path = Path(token_cache_path) if token_cache_path else None
        token_cache = _load_token_cache(cache_path) if cache_path else None
        token = acquire_token(
            client_id=settings.agentappid,
            tenant_id=settings.tenantid,
            username=username,
            token_cache=token_cache,
            scopes=[CopilotClient.scope_from_settings(connection_settings)],
        )
        if cache_path and token_cache is not None and token_cache.has_state_changed:
            cache_path.write_text(token_cache.serialize(), encoding="utf-8")
            logger.debug("Token cache written to %s", cache_path)

    return CopilotClient(settings=connection_settings, token=token)
