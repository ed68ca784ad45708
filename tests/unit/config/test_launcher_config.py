"""Tests for config loading and settings resolution.

Malformed values must fall back to defaults; CLI overrides beat the file.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazylauncher import config


def _write_config(path: Path, data: dict[str, object]) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_or_malformed_config_loads_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazylauncher.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_theme_is_stripped_and_blank_theme_is_unset(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazylauncher.config.CONFIG_PATH", config_path):
                _write_config(config_path, {"theme": "  ocean "})
                self.assertEqual(config.load_settings().theme, "ocean")
                _write_config(config_path, {"theme": "   "})
                self.assertIsNone(config.load_settings().theme)
                _write_config(config_path, {"theme": 7})
                self.assertIsNone(config.load_settings().theme)

    def test_defaults_when_config_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazylauncher.config.CONFIG_PATH", Path(tmp) / "config.json"):
                settings = config.load_settings()

        self.assertEqual(settings, config.LauncherSettings())
        self.assertEqual(settings.backend_command, ("pop-launcher",))
        self.assertEqual(settings.request_buffer_size, 32)
        self.assertEqual(settings.event_buffer_size, 64)
        self.assertEqual(settings.restart_limit, 3)
        self.assertEqual(settings.restart_delay_seconds, 1.0)
        self.assertIsNone(settings.activation_token_command)

    def test_config_values_are_used_and_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazylauncher.config.CONFIG_PATH", config_path):
                _write_config(
                    config_path,
                    {
                        "backend_command": ["my-backend", "--flag"],
                        "theme": "ocean",
                        "request_buffer_size": 0,
                        "event_buffer_size": 128,
                        "restart_limit": True,
                        "restart_delay_seconds": 0,
                        "activation_token_command": "token-helper --once",
                    },
                )
                settings = config.load_settings()

        self.assertEqual(settings.backend_command, ("my-backend", "--flag"))
        self.assertEqual(settings.theme, "ocean")
        self.assertEqual(settings.request_buffer_size, 32)
        self.assertEqual(settings.event_buffer_size, 128)
        self.assertEqual(settings.restart_limit, 3)
        self.assertEqual(settings.restart_delay_seconds, 0.0)
        self.assertEqual(settings.activation_token_command, ("token-helper", "--once"))

    def test_cli_overrides_beat_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazylauncher.config.CONFIG_PATH", config_path):
                _write_config(config_path, {"backend_command": "from-config", "theme": "ocean"})
                settings = config.load_settings(backend_command="cli-backend --x", theme="default")

        self.assertEqual(settings.backend_command, ("cli-backend", "--x"))
        self.assertEqual(settings.theme, "default")

    def test_parse_command(self) -> None:
        self.assertEqual(config.parse_command("a 'b c'"), ("a", "b c"))
        self.assertEqual(config.parse_command(["a", "b"]), ("a", "b"))
        self.assertIsNone(config.parse_command(""))
        self.assertIsNone(config.parse_command("unterminated 'quote"))
        self.assertIsNone(config.parse_command(["a", 1]))
        self.assertIsNone(config.parse_command([]))
        self.assertIsNone(config.parse_command(42))


if __name__ == "__main__":
    unittest.main()
