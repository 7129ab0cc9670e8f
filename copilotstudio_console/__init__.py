# Copyright (c) Microsoft. All rights reserved.

import importlib.metadata
from typing import Final

try:
    _version = importlib.metadata.version("copilotstudio-console")
except importlib.metadata.PackageNotFoundError:
    _version = "0.0.0"  # Fallback for development mode
__version__: Final[str] = _version

from ._batch import EXCEL_CELL_CHARACTER_LIMIT as EXCEL_CELL_CHARACTER_LIMIT
from ._batch import BatchOptions as BatchOptions
from ._batch import BatchResult as BatchResult
from ._batch import read_questions as read_questions
from ._batch import run_batch as run_batch
from ._batch import truncate_cell as truncate_cell
from ._cards import resolve_adaptive_card as resolve_adaptive_card
from ._client import AgentClient as AgentClient
from ._client import create_copilot_client as create_copilot_client
from ._interactive import run_interactive as run_interactive
from ._logging import get_logger as get_logger
from ._logging import setup_logging as setup_logging
from ._mode import RunMode as RunMode
from ._mode import select_mode as select_mode
from ._printer import ActivityPrinter as ActivityPrinter
from ._runner import SessionRunner as SessionRunner
from ._runner import output_filename as output_filename
from ._settings import ConsoleSettings as ConsoleSettings
from ._settings import CopilotStudioSettings as CopilotStudioSettings
