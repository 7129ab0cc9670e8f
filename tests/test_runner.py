# Copyright (c) Microsoft. All rights reserved.

from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

from openpyxl import Workbook

from copilotstudio_console.__main__ import main
from copilotstudio_console._batch import BatchOptions
from copilotstudio_console._mode import RunMode
from copilotstudio_console._runner import SessionRunner, output_filename


def test_output_filename() -> None:
    assert output_filename(datetime(2024, 3, 9, 14, 5, 7)) == "Response_2024-03-09_14-05-07.xlsx"


class TestSessionRunner:
    async def test_defaults_to_batch(self, tmp_path: Path, fake_client_factory, scripted_input_factory, capsys) -> None:
        options = BatchOptions(output_path=tmp_path / "out.xlsx", questions_path=tmp_path / "missing.xlsx")
        runner = SessionRunner(
            fake_client_factory(), batch_options=options, input_func=scripted_input_factory(["2"])
        )

        assert await runner.run() is None

        out = capsys.readouterr().out
        assert "Running batch mode..." in out
        assert "not found" in out

    async def test_interactive_choice(
        self, tmp_path: Path, fake_client_factory, scripted_input_factory, make_activity, capsys
    ) -> None:
        client = fake_client_factory(start=[make_activity(text="Hi")], replies=[[make_activity(text="Pong")]])
        runner = SessionRunner(
            client,
            batch_options=BatchOptions(output_path=tmp_path / "out.xlsx"),
            input_func=scripted_input_factory(["1", "Ping"]),
        )

        await runner.run()

        assert client.questions == ["Ping"]
        assert "Running interactive mode..." in capsys.readouterr().out

    async def test_explicit_mode_skips_prompt(
        self, tmp_path: Path, fake_client_factory, scripted_input_factory, make_activity
    ) -> None:
        questions = tmp_path / "questions.xlsx"
        workbook = Workbook()
        workbook.active.title = "Questions"
        workbook.active["A1"] = "Hello"
        workbook.save(questions)
        reader = scripted_input_factory([])
        client = fake_client_factory(start=[make_activity(text="Hi")], replies=[[make_activity(text="Hi there")]])
        options = BatchOptions(output_path=tmp_path / "out.xlsx", questions_path=questions)

        path = await SessionRunner(client, batch_options=options, input_func=reader).run(RunMode.BATCH)

        assert path == tmp_path / "out.xlsx"
        assert path.exists()
        assert reader.prompts == []

    async def test_mode_timeout_is_used_for_the_prompt(self, tmp_path: Path, fake_client_factory) -> None:
        runner = SessionRunner(
            fake_client_factory(),
            batch_options=BatchOptions(output_path=tmp_path / "out.xlsx", questions_path=tmp_path / "missing.xlsx"),
            mode_timeout=0.5,
        )

        with patch("copilotstudio_console._runner.select_mode", return_value=RunMode.BATCH) as mock_select:
            await runner.run()

        mock_select.assert_awaited_once_with(0.5, None)


class TestMain:
    def test_runs_batch_with_cli_options(self, tmp_path: Path, copilot_studio_unit_test_env, capsys) -> None:
        client = MagicMock()
        run = MagicMock(return_value=None)

        async def fake_run(self, mode=None):
            run(self, mode)

        with (
            patch("copilotstudio_console.__main__.create_copilot_client", return_value=client) as create_client,
            patch.object(SessionRunner, "run", fake_run),
        ):
            code = main(["--mode", "batch", "--questions", "q.xlsx", "--output-dir", str(tmp_path), "--no-pause"])

        assert code == 0
        create_client.assert_called_once()
        runner, mode = run.call_args.args
        assert mode is RunMode.BATCH
        assert runner.client is client
        assert runner.batch_options.questions_path == Path("q.xlsx")
        assert runner.batch_options.output_path.parent == tmp_path
        assert runner.batch_options.output_path.name.startswith("Response_")
        assert "Execution completed. Press Enter to exit." in capsys.readouterr().out

    def test_keyboard_interrupt_exits_130(self, copilot_studio_unit_test_env) -> None:
        async def interrupted(self, mode=None):
            raise KeyboardInterrupt

        with (
            patch("copilotstudio_console.__main__.create_copilot_client", return_value=MagicMock()),
            patch.object(SessionRunner, "run", interrupted),
        ):
            assert main(["--no-pause"]) == 130
