# Copyright (c) Microsoft. All rights reserved.

import asyncio
import json
import time
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any

from ._cards import ADAPTIVE_CARD_CONTENT_TYPE, InputFunc, resolve_adaptive_card
from ._client import AgentClient
from ._logging import get_logger

logger = get_logger("copilotstudio_console.printer")

__all__ = ["ActivityPrinter"]


@dataclass
class _PendingCard:
    content: Any


class ActivityPrinter:
    """Prints reply streams and resolves adaptive cards found in them.

    Answers to a card are sent back as a new question and the reply stream is
    printed before the remaining turns of the stream that carried the card. Open
    streams and unresolved cards are kept on an explicit stack, so a long chain
    of cards does not grow the call stack.
    """

    def __init__(
        self,
        client: AgentClient,
        *,
        input_func: InputFunc | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self._client = client
        self._input_func = input_func
        self._stop_event = stop_event

    async def print_stream(self, activities: AsyncIterable[Any]) -> None:
        """Print every activity of a reply stream, following up on adaptive cards."""
        stack: list[AsyncIterator[Any] | _PendingCard] = [activities.__aiter__()]
        started = time.perf_counter()
        try:
            while stack:
                if self._stop_event is not None and self._stop_event.is_set():
                    logger.debug("Stop requested; abandoning %d open stream(s).", len(stack))
                    break

                frame = stack[-1]
                if isinstance(frame, _PendingCard):
                    stack.pop()
                    follow_up = await self._answer_card(frame.content)
                    if follow_up is not None:
                        stack.append(follow_up.__aiter__())
                    continue

                try:
                    activity = await frame.__anext__()
                except StopAsyncIteration:
                    stack.pop()
                    continue
                if self._stop_event is not None and self._stop_event.is_set():
                    break

                logger.debug("Activity received after %.3fs", time.perf_counter() - started)
                started = time.perf_counter()
                cards = self.print_activity(activity)
                # Reversed so the first card is resolved first
                stack.extend(_PendingCard(content) for content in reversed(cards))
        finally:
            for frame in stack:
                if not isinstance(frame, _PendingCard) and hasattr(frame, "aclose"):
                    await frame.aclose()

    def print_activity(self, activity: Any) -> list[Any]:
        """Print a single activity.

        Returns:
            The contents of the adaptive cards attached to a message activity, in order.
        """
        activity_type = getattr(activity, "type", None)

        if activity_type == "message":
            print(getattr(activity, "text", None) or "")

            suggested = getattr(activity, "suggested_actions", None)
            actions = getattr(suggested, "actions", None) or []
            if actions:
                print("Suggested actions:\n")
                for action in actions:
                    print(f"\t{getattr(action, 'text', None) or getattr(action, 'title', None) or ''}")

            return [
                getattr(attachment, "content", None)
                for attachment in getattr(activity, "attachments", None) or []
                if getattr(attachment, "content_type", None) == ADAPTIVE_CARD_CONTENT_TYPE
            ]

        if activity_type == "typing":
            print(".", end="", flush=True)
        elif activity_type == "event":
            print("+", end="", flush=True)
        else:
            print(f"[{activity_type}]", end="", flush=True)
        return []

    async def _answer_card(self, content: Any) -> AsyncIterable[Any] | None:
        answers = await resolve_adaptive_card(content, self._input_func)
        if not answers:
            return None
        print("\nSending your inputs to the agent...\n")
        logger.debug("Submitting %d card input(s).", len(answers))
        return self._client.ask_question(json.dumps(answers), None)
