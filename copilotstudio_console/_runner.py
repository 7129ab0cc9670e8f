# Copyright (c) Microsoft. All rights reserved.

import asyncio
from datetime import datetime
from pathlib import Path

from ._batch import BatchOptions, run_batch
from ._cards import InputFunc
from ._client import AgentClient
from ._interactive import run_interactive
from ._logging import get_logger
from ._mode import DEFAULT_MODE_TIMEOUT, RunMode, select_mode

logger = get_logger("copilotstudio_console.runner")

__all__ = ["SessionRunner", "output_filename"]


def output_filename(now: datetime | None = None) -> str:
    """Name of the results workbook for a run started at ``now``."""
    return f"Response_{(now or datetime.now()):%Y-%m-%d_%H-%M-%S}.xlsx"


class SessionRunner:
    """Runs one console session against an agent, interactively or in batch.

    Examples:
        ```python
        runner = SessionRunner(client, batch_options=BatchOptions(output_path=Path(output_filename())))
        await runner.run()
        ```
    """

    def __init__(
        self,
        client: AgentClient,
        *,
        batch_options: BatchOptions,
        mode_timeout: float = DEFAULT_MODE_TIMEOUT,
        input_func: InputFunc | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self.client = client
        self.batch_options = batch_options
        self.mode_timeout = mode_timeout
        self._input_func = input_func
        self._stop_event = stop_event

    async def run(self, mode: RunMode | None = None) -> Path | None:
        """Run the session.

        Args:
            mode: The run mode. When omitted the operator is asked, defaulting to batch.

        Returns:
            The results workbook path for a batch run that wrote one, otherwise None.
        """
        if mode is None:
            mode = await select_mode(self.mode_timeout, self._input_func)
        logger.info("Selected %s mode.", mode.value)

        if mode is RunMode.BATCH:
            print("\nRunning batch mode...")
            return await run_batch(self.client, self.batch_options, stop_event=self._stop_event)

        print("\nRunning interactive mode...")
        await run_interactive(self.client, input_func=self._input_func, stop_event=self._stop_event)
        return None
