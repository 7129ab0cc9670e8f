# Copyright (c) Microsoft. All rights reserved.

import argparse
import asyncio
import logging
from pathlib import Path

from ._batch import BatchOptions
from ._client import create_copilot_client
from ._logging import get_logger, setup_logging
from ._mode import RunMode
from ._runner import SessionRunner, output_filename
from ._settings import ConsoleSettings, CopilotStudioSettings

logger = get_logger("copilotstudio_console.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilotstudio-console",
        description="Chat with a Copilot Studio agent or run a batch of questions from a workbook.",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in RunMode],
        help="Run mode. When omitted you are asked, defaulting to batch.",
    )
    parser.add_argument("--questions", help="Workbook holding the batch questions (default: questions.xlsx)")
    parser.add_argument("--sheet", help="Sheet holding the batch questions (default: Questions)")
    parser.add_argument("--output-dir", help="Directory for the results workbook (default: current directory)")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for the mode choice (default: 15)")
    parser.add_argument("--env-file", help="Path to a .env file with the agent settings")
    parser.add_argument("--token-cache", help="File used to persist the MSAL token cache")
    parser.add_argument("--username", help="Preferred cached account for silent sign-in")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level (default: WARNING)",
    )
    parser.add_argument("--no-pause", action="store_true", help="Exit without waiting for Enter")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    console_settings = ConsoleSettings.load(
        env_file_path=args.env_file,
        questions_file=args.questions,
        questions_sheet=args.sheet,
        output_dir=args.output_dir,
        mode_timeout=args.timeout,
    )
    agent_settings = CopilotStudioSettings.load(env_file_path=args.env_file)
    logger.debug("Using %r and %r", console_settings, agent_settings)

    client = create_copilot_client(agent_settings, username=args.username, token_cache_path=args.token_cache)
    batch_options = BatchOptions(
        output_path=Path(console_settings.output_dir) / output_filename(),
        questions_path=Path(console_settings.questions_file),
        questions_sheet=console_settings.questions_sheet,
    )
    runner = SessionRunner(client, batch_options=batch_options, mode_timeout=console_settings.mode_timeout)

    try:
        asyncio.run(runner.run(RunMode(args.mode) if args.mode else None))
    except KeyboardInterrupt:
        print("\nStopping.")
        return 130

    print("\nExecution completed. Press Enter to exit.")
    if not args.no_pause:
        try:
            input()
        except EOFError:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
