"""CLI argument handling tests.

Verifies how ``lazylauncher.cli.main`` resolves settings and when it
toggles a running instance instead of starting a new one.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazylauncher import cli


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        tmp = Path(self._tmp.name)
        patcher = mock.patch("lazylauncher.config.CONFIG_PATH", tmp / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_main_runs_launcher_with_defaults(self) -> None:
        with mock.patch("lazylauncher.cli.run_launcher") as run_launcher, mock.patch(
            "lazylauncher.cli.configure_logging"
        ) as configure_logging:
            cli.main([])

        configure_logging.assert_called_once_with(None)
        run_launcher.assert_called_once()
        settings = run_launcher.call_args.args[0]
        self.assertEqual(settings.backend_command, ("pop-launcher",))
        self.assertEqual(run_launcher.call_args.kwargs, {"no_color": False, "start_open": False})

    def test_main_passes_overrides(self) -> None:
        with mock.patch("lazylauncher.cli.run_launcher") as run_launcher, mock.patch(
            "lazylauncher.cli.configure_logging"
        ) as configure_logging:
            cli.main(
                [
                    "--backend",
                    "my-backend --verbose",
                    "--theme",
                    "ocean",
                    "--no-color",
                    "--open",
                    "--log-level",
                    "debug",
                ]
            )

        configure_logging.assert_called_once_with("debug")
        settings = run_launcher.call_args.args[0]
        self.assertEqual(settings.backend_command, ("my-backend", "--verbose"))
        self.assertEqual(settings.theme, "ocean")
        self.assertEqual(run_launcher.call_args.kwargs, {"no_color": True, "start_open": True})

    def test_toggle_signals_running_instance_without_starting(self) -> None:
        with mock.patch("lazylauncher.cli.send_toggle", return_value=True) as send_toggle, mock.patch(
            "lazylauncher.cli.run_launcher"
        ) as run_launcher:
            cli.main(["--toggle"])

        send_toggle.assert_called_once_with()
        run_launcher.assert_not_called()

    def test_toggle_without_running_instance_exits_with_message(self) -> None:
        with mock.patch("lazylauncher.cli.send_toggle", return_value=False), mock.patch(
            "lazylauncher.cli.run_launcher"
        ) as run_launcher:
            with self.assertRaises(SystemExit) as raised:
                cli.main(["--toggle"])

        self.assertIn("No running lazylauncher instance", str(raised.exception.code))
        run_launcher.assert_not_called()

    def test_parser_lists_themes_in_help(self) -> None:
        help_text = cli.build_parser().format_help()
        self.assertIn("ocean", help_text)
        self.assertIn("--toggle", help_text)


class LoggingSetupTests(unittest.TestCase):
    def test_configure_logging_writes_to_file(self) -> None:
        from lazylauncher.logger import configure_logging, logging

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "lazylauncher.log"
            self.assertEqual(configure_logging("info", path), path)
            logging.getLogger("lazylauncher.test").info("hello from test")
            package_logger = logging.getLogger("lazylauncher")
            for handler in list(package_logger.handlers):
                handler.flush()
                handler.close()
                package_logger.removeHandler(handler)
            self.assertIn("hello from test", path.read_text(encoding="utf-8"))

    def test_resolve_log_level(self) -> None:
        from lazylauncher.logger import LOG_LEVEL_ENV, logging, resolve_log_level

        self.assertEqual(resolve_log_level("debug"), logging.DEBUG)
        self.assertEqual(resolve_log_level("nonsense"), logging.INFO)
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "warning"}):
            self.assertEqual(resolve_log_level(None), logging.WARNING)


if __name__ == "__main__":
    unittest.main()
