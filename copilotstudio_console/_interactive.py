# Copyright (c) Microsoft. All rights reserved.

import asyncio
import time

from aioconsole import ainput

from ._cards import InputFunc
from ._client import AgentClient
from ._logging import get_logger
from ._printer import ActivityPrinter
from .exceptions import ActivityStreamError

logger = get_logger("copilotstudio_console.interactive")

__all__ = ["run_interactive"]


async def run_interactive(
    client: AgentClient,
    *,
    input_func: InputFunc | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Chat with the agent from the console until stopped or input ends.

    Args:
        client: The agent client.

    Keyword Args:
        input_func: Async line reader taking a prompt. Defaults to ``aioconsole.ainput``.
        stop_event: When set, the loop ends before the next question or turn.

    Raises:
        ActivityStreamError: If the conversation start stream yields ``None``.
    """
    read = input_func or ainput
    printer = ActivityPrinter(client, input_func=read, stop_event=stop_event)

    print("\nUser> ", end="", flush=True)
    started = time.perf_counter()
    async for activity in client.start_conversation(emit_start_conversation_event=True):
        logger.debug("Start conversation turn after %.3fs", time.perf_counter() - started)
        started = time.perf_counter()
        if activity is None:
            raise ActivityStreamError("Activity is null")
        print(f"\nAgent> {activity.text or ''}")

    while stop_event is None or not stop_event.is_set():
        try:
            question = await read("\nUser> ")
        except EOFError:
            logger.debug("Console input closed; leaving interactive mode.")
            break

        if stop_event is not None and stop_event.is_set():
            break

        print("\nAgent>")
        started = time.perf_counter()
        await printer.print_stream(client.ask_question(question, None))
        logger.debug("Reply stream finished after %.3fs", time.perf_counter() - started)
