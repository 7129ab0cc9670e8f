# Copyright (c) Microsoft. All rights reserved.

"""Batch mode: ask every question from a workbook and save the replies to a new workbook."""

import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ._client import AgentClient
from ._logging import get_logger

logger = get_logger("copilotstudio_console.batch")

EXCEL_CELL_CHARACTER_LIMIT = 32767
RESULTS_SHEET_NAME = "Results"
RESULTS_HEADER = ("Question", "Response", "Conversation id", "Timestamp", "Response Log")
SYSTEM_START_QUESTION = "System Start"

__all__ = [
    "EXCEL_CELL_CHARACTER_LIMIT",
    "RESULTS_HEADER",
    "BatchOptions",
    "BatchResult",
    "read_questions",
    "run_batch",
    "serialize_activity",
    "truncate_cell",
    "write_results",
]


@dataclass(frozen=True)
class BatchOptions:
    """Where batch mode reads questions from and writes results to."""

    output_path: Path
    questions_path: Path = Path("questions.xlsx")
    questions_sheet: str = "Questions"


@dataclass
class BatchResult:
    """One output row."""

    question: str
    response: str = ""
    conversation_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    response_log: str = ""

    def to_row(self) -> list[Any]:
        return [
            _cell_text(self.question),
            _cell_text(self.response),
            _cell_text(self.conversation_id),
            self.timestamp,
            _cell_text(self.response_log),
        ]


def truncate_cell(value: str) -> str:
    """Cut a value to the number of characters a spreadsheet cell can hold."""
    if len(value) > EXCEL_CELL_CHARACTER_LIMIT:
        return value[:EXCEL_CELL_CHARACTER_LIMIT]
    return value


def _cell_text(value: str) -> str:
    # Characters openpyxl cannot store are dropped before measuring the length
    return truncate_cell(ILLEGAL_CHARACTERS_RE.sub("", value))


def serialize_activity(activity: Any) -> str:
    """Serialize an activity to indented JSON for the response log."""
    if hasattr(activity, "model_dump"):
        data = activity.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        data = vars(activity) if hasattr(activity, "__dict__") else activity
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _conversation_id(activity: Any) -> str | None:
    conversation = getattr(activity, "conversation", None)
    return getattr(conversation, "id", None) or None


def read_questions(path: Path, sheet_name: str) -> list[str]:
    """Read questions from column A, starting at row 1, up to the first blank cell.

    Raises:
        KeyError: If the workbook has no sheet named ``sheet_name``.
    """
    workbook = load_workbook(path, data_only=True)
    try:
        worksheet = workbook[sheet_name]
        questions: list[str] = []
        for (value,) in worksheet.iter_rows(min_row=1, min_col=1, max_col=1, values_only=True):
            text = "" if value is None else str(value)
            if not text.strip():
                break
            questions.append(text)
        return questions
    finally:
        workbook.close()


def write_results(results: list[BatchResult], path: Path) -> Path:
    """Write result rows, under a header row, to a new workbook."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = RESULTS_SHEET_NAME
    worksheet.append(list(RESULTS_HEADER))
    for result in results:
        worksheet.append(result.to_row())

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    logger.info("Wrote %d result row(s) to %s", len(results), path)
    return path


async def _first_start_activity(client: AgentClient) -> Any | None:
    # Only the first turn of the start stream is used
    stream = client.start_conversation(emit_start_conversation_event=True).__aiter__()
    try:
        return await stream.__anext__()
    except StopAsyncIteration:
        return None
    finally:
        if hasattr(stream, "aclose"):
            await stream.aclose()


async def _ask(client: AgentClient, question: str, stop_event: asyncio.Event | None = None) -> BatchResult:
    response = ""
    response_log = ""
    conversation_ids: list[str] = []

    async for activity in client.ask_question(question, None):
        if stop_event is not None and stop_event.is_set():
            logger.info("Stop requested; dropping the rest of the reply to %r.", question)
            break
        text = getattr(activity, "text", None)
        if text:
            print(f"Agent> {text}")
            response += text + "\n"
        response_log += serialize_activity(activity) + "\n"
        conversation_id = _conversation_id(activity)
        if conversation_id and conversation_id not in conversation_ids:
            conversation_ids.append(conversation_id)

    return BatchResult(
        question=question,
        response=response,
        conversation_id=", ".join(conversation_ids),
        response_log=response_log,
    )


async def run_batch(
    client: AgentClient,
    options: BatchOptions,
    *,
    stop_event: asyncio.Event | None = None,
) -> Path | None:
    """Ask every question from the questions workbook and save the replies.

    Args:
        client: The agent client.
        options: Input and output locations.

    Keyword Args:
        stop_event: When set, the current reply stops being read and no further questions are
            asked; rows collected so far are saved.

    Returns:
        The path of the saved workbook, or None when there was nothing to ask.
    """
    if not options.questions_path.is_file():
        print(f"Error: {options.questions_path} not found.")
        return None

    try:
        questions = read_questions(options.questions_path, options.questions_sheet)
    except KeyError:
        print(f"Error: sheet '{options.questions_sheet}' not found in {options.questions_path}.")
        return None

    if not questions:
        print("No questions found in the Excel file.")
        return None
    logger.info("Read %d question(s) from %s", len(questions), options.questions_path)

    results: list[BatchResult] = []

    start = await _first_start_activity(client)
    if start is not None:
        text = getattr(start, "text", None) or ""
        print(f"Agent> {text}")
        results.append(
            BatchResult(
                question=SYSTEM_START_QUESTION,
                response=text,
                conversation_id=_conversation_id(start) or "",
                response_log=serialize_activity(start),
            )
        )

    for index, question in enumerate(questions, start=1):
        if stop_event is not None and stop_event.is_set():
            logger.info("Stop requested after %d of %d question(s).", index - 1, len(questions))
            break
        print(f"\nAsking question {index} of {len(questions)}")
        print(f"User> {question}")
        results.append(await _ask(client, question, stop_event))

    path = write_results(results, options.output_path)
    print(f"\nResults saved to {path}")
    return path
