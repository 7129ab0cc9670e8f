# Copyright (c) Microsoft. All rights reserved.

import os
from dataclasses import dataclass, fields
from typing import Any, ClassVar, TypeVar

from dotenv import load_dotenv

__all__ = ["ConsoleSettings", "CopilotStudioSettings"]

TSettings = TypeVar("TSettings", bound="_EnvLoaded")


class _EnvLoaded:
    """Mixin for dataclass settings read from ``<env_prefix><FIELD>`` variables."""

    env_prefix: ClassVar[str] = ""

    @classmethod
    def load(cls: type[TSettings], env_file_path: str | None = None, **overrides: Any) -> TSettings:
        """Build settings from overrides, then the environment, then a .env file, then defaults.

        Overrides that are None are ignored, so unset CLI options fall through to the environment.

        Raises:
            TypeError: If an override does not name a field.
        """
        names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        unknown = set(overrides) - names
        if unknown:
            raise TypeError(f"Unknown {cls.__name__} field(s): {', '.join(sorted(unknown))}")

        # Variables already in the environment win over the file
        load_dotenv(dotenv_path=env_file_path, encoding="utf-8")

        values: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            if overrides.get(f.name) is not None:
                values[f.name] = overrides[f.name]
                continue
            raw = os.getenv(f"{cls.env_prefix}{f.name.upper()}")
            if raw is not None:
                values[f.name] = float(raw) if isinstance(f.default, float) else raw
        return cls(**values)


@dataclass
class CopilotStudioSettings(_EnvLoaded):
    """Connection settings for a published Copilot Studio agent.

    Environment variables:
        COPILOTSTUDIOAGENT__ENVIRONMENTID, COPILOTSTUDIOAGENT__SCHEMANAME,
        COPILOTSTUDIOAGENT__AGENTAPPID, COPILOTSTUDIOAGENT__TENANTID,
        COPILOTSTUDIOAGENT__CLOUD (PROD, GOV, HIGH, ...), COPILOTSTUDIOAGENT__AGENTTYPE (PUBLISHED or PREBUILT)
    """

    env_prefix: ClassVar[str] = "COPILOTSTUDIOAGENT__"

    environmentid: str | None = None
    schemaname: str | None = None
    agentappid: str | None = None
    tenantid: str | None = None
    cloud: str = "PROD"
    agenttype: str = "PUBLISHED"


@dataclass
class ConsoleSettings(_EnvLoaded):
    """Settings for the console runner, read from ``COPILOTSTUDIOCONSOLE__*`` variables."""

    env_prefix: ClassVar[str] = "COPILOTSTUDIOCONSOLE__"

    questions_file: str = "questions.xlsx"
    questions_sheet: str = "Questions"
    output_dir: str = "."
    mode_timeout: float = 15.0
