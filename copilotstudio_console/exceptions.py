# Copyright (c) Microsoft. All rights reserved.


class CopilotConsoleException(Exception):
    """Base class for exceptions in the Copilot Studio console."""

    pass


class ServiceInitializationError(CopilotConsoleException):
    """An error occurred while building the agent client from settings."""

    pass


class ActivityStreamError(CopilotConsoleException):
    """The agent client produced a turn that the runner cannot process."""

    pass
