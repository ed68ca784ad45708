"""Command-line front door for lazylauncher.

Parses CLI options, configures logging, and either signals a running
instance (``--toggle``) or starts the interactive launcher.
"""

from __future__ import annotations

import argparse

from .activation import send_toggle
from .config import load_settings
from .logger import configure_logging
from .runtime.app import run_launcher
from .ui_theme import available_theme_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazylauncher",
        description="Keyboard-driven application launcher backed by a pop-launcher style search service.",
    )
    parser.add_argument(
        "--backend",
        default=None,
        help="Backend command line (default: config value or 'pop-launcher').",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--open", action="store_true", help="Show the launcher immediately on startup.")
    parser.add_argument(
        "--toggle",
        action="store_true",
        help="Toggle the running launcher instance and exit.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR); defaults to $LAZYLAUNCHER_LOG_LEVEL or INFO.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run or toggle the launcher."""
    args = build_parser().parse_args(argv)

    if args.toggle:
        if not send_toggle():
            raise SystemExit("No running lazylauncher instance found.")
        return

    configure_logging(args.log_level)
    settings = load_settings(backend_command=args.backend, theme=args.theme)
    run_launcher(settings, no_color=args.no_color, start_open=args.open)


if __name__ == "__main__":
    main()
