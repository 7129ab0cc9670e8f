# Copyright (c) Microsoft. All rights reserved.

from collections.abc import AsyncIterator, Callable
from types import SimpleNamespace
from typing import Any

import pytest

ADAPTIVE_CARD = "application/vnd.microsoft.card.adaptive"


class FakeAgentClient:
    """Agent client returning scripted activity streams."""

    def __init__(self, start: list[Any] | None = None, replies: list[list[Any]] | None = None) -> None:
        self.start_activities = list(start or [])
        self.replies = list(replies or [])
        self.questions: list[str] = []
        self.start_calls = 0
        self.start_turns_pulled = 0

    async def start_conversation(self, emit_start_conversation_event: bool = True) -> AsyncIterator[Any]:
        self.start_calls += 1
        for activity in self.start_activities:
            self.start_turns_pulled += 1
            yield activity

    async def ask_question(self, question: str, conversation_id: str | None = None) -> AsyncIterator[Any]:
        self.questions.append(question)
        reply = self.replies.pop(0) if self.replies else []
        for activity in reply:
            yield activity


class ScriptedInput:
    """Async console reader that answers prompts from a list, then raises EOFError."""

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.prompts: list[str] = []

    async def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def create_activity(
    activity_type: str = "message",
    text: str | None = None,
    conversation_id: str | None = None,
    attachments: list[Any] | None = None,
    suggested_actions: list[str] | None = None,
) -> SimpleNamespace:
    """Create a stand-in for an SDK activity."""
    return SimpleNamespace(
        type=activity_type,
        text=text,
        conversation=SimpleNamespace(id=conversation_id) if conversation_id else None,
        attachments=attachments or [],
        suggested_actions=(
            SimpleNamespace(actions=[SimpleNamespace(text=action, title=action) for action in suggested_actions])
            if suggested_actions
            else None
        ),
    )


def create_card_attachment(body: Any) -> SimpleNamespace:
    return SimpleNamespace(content_type=ADAPTIVE_CARD, content={"type": "AdaptiveCard", "body": body})


@pytest.fixture
def make_activity() -> Callable[..., SimpleNamespace]:
    return create_activity


@pytest.fixture
def make_card() -> Callable[[Any], SimpleNamespace]:
    return create_card_attachment


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeAgentClient]:
    return FakeAgentClient


@pytest.fixture
def scripted_input_factory() -> Callable[..., ScriptedInput]:
    return ScriptedInput


@pytest.fixture
def copilot_studio_exclude_list(request: Any) -> list[str]:
    """Fixture that returns a list of environment variables to exclude."""
    return request.param if hasattr(request, "param") else []


@pytest.fixture
def copilot_studio_override_env_param_dict(request: Any) -> dict[str, str]:
    """Fixture that returns a dict of environment variables to override."""
    return request.param if hasattr(request, "param") else {}


@pytest.fixture()
def copilot_studio_unit_test_env(monkeypatch, copilot_studio_exclude_list, copilot_studio_override_env_param_dict):  # type: ignore
    """Fixture to set environment variables for CopilotStudioSettings."""
    env_vars = {
        "COPILOTSTUDIOAGENT__ENVIRONMENTID": "test-environment-id",
        "COPILOTSTUDIOAGENT__SCHEMANAME": "test-schema-name",
        "COPILOTSTUDIOAGENT__AGENTAPPID": "test-client-id",
        "COPILOTSTUDIOAGENT__TENANTID": "test-tenant-id",
    }

    env_vars.update(copilot_studio_override_env_param_dict)  # type: ignore

    for key, value in env_vars.items():
        if key in copilot_studio_exclude_list:
            monkeypatch.delenv(key, raising=False)  # type: ignore
            continue
        monkeypatch.setenv(key, value)  # type: ignore

    return env_vars


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):  # type: ignore
    """Run every test in an empty directory so no stray .env or workbook is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
