# Copyright (c) Microsoft. All rights reserved.

import asyncio
from enum import Enum

from aioconsole import ainput

from ._cards import InputFunc
from ._logging import get_logger

logger = get_logger("copilotstudio_console.mode")

DEFAULT_MODE_TIMEOUT = 15.0

__all__ = ["DEFAULT_MODE_TIMEOUT", "RunMode", "select_mode"]


class RunMode(str, Enum):
    INTERACTIVE = "interactive"
    BATCH = "batch"


async def select_mode(timeout: float = DEFAULT_MODE_TIMEOUT, input_func: InputFunc | None = None) -> RunMode:
    """Ask the operator for a run mode.

    Only an answer of ``1`` within ``timeout`` seconds selects interactive mode.
    Anything else, including no answer, selects batch mode.
    """
    read = input_func or ainput
    print("\nChoose an option:")
    print("1. Ask your own questions")
    print("2. Run batch from questions.xlsx")

    prompt = f"\nEnter your choice (defaulting to batch in {timeout:g} seconds): "
    try:
        choice = await asyncio.wait_for(read(prompt), timeout=timeout)
    except asyncio.TimeoutError:
        print()
        logger.debug("No mode selected within %ss.", timeout)
        return RunMode.BATCH
    except EOFError:
        return RunMode.BATCH

    return RunMode.INTERACTIVE if choice.strip() == "1" else RunMode.BATCH
