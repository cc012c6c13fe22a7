#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
import sys

from secretforge.cli.passphrase_cli import main as passphrase_main
from secretforge.cli.pwgen_cli import main as password_main
from secretforge.core import __version__
from secretforge.core.error_dialect import format_error_text
from secretforge.core.settings_store import (
    MODE_PASSPHRASE,
    SETTINGS_ENV_VAR,
    Settings,
    default_settings_path,
    load_settings,
    save_settings,
    settings_to_dict,
)

_PASSWORD_ALIASES = frozenset({"password", "pass", "pw"})
_PASSPHRASE_ALIASES = frozenset({"passphrase", "phrase", "pp", "words"})
_SETTINGS_ALIASES = frozenset({"settings", "config"})


def _print_help() -> None:
    print(
        "secretforge unified CLI\n"
        "\n"
        "Usage:\n"
        "  secretforge [flags]                  (mode from stored settings, password by default)\n"
        "  secretforge password [password flags]\n"
        "  secretforge passphrase [passphrase flags]\n"
        "  secretforge settings [--settings PATH] [--reset | --path]\n"
        "  secretforge --version\n"
        "\n"
        "Examples:\n"
        "  secretforge -n 5 -l 24 --symbols\n"
        "  secretforge passphrase -w 6 --separator _ --capitalize first --add-digits\n"
        "  secretforge passphrase -w 6 --save-settings && secretforge -n 3\n"
    )


def _settings_path_from_args(args: list[str]) -> Path | None:
    for idx, arg in enumerate(args):
        if arg == "--settings" and idx + 1 < len(args):
            return Path(args[idx + 1]).expanduser()
        if arg.startswith("--settings="):
            return Path(arg.split("=", 1)[1]).expanduser()
    if os.environ.get(SETTINGS_ENV_VAR, "").strip():
        return default_settings_path()
    return None


def _stored_mode_main(args: list[str]):
    """Pick the generator for a command-less invocation from the stored mode."""
    path = _settings_path_from_args(args)
    if path is not None and load_settings(path).mode == MODE_PASSPHRASE:
        return passphrase_main
    return password_main


def _parse_settings_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="secretforge settings",
        description="Show or reset the stored generator settings (never any generated value).",
    )
    parser.add_argument("--settings", default="", help=f"settings file (default: ${SETTINGS_ENV_VAR} or ~/.secretforge)")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--reset", action="store_true", help="overwrite the file with default settings")
    action.add_argument("--path", action="store_true", help="print the resolved settings path only")
    return parser.parse_args(argv)


def settings_main(argv: list[str]) -> int:
    args = _parse_settings_args(argv)
    path = Path(args.settings).expanduser() if args.settings else default_settings_path()
    if args.path:
        print(path)
        return 0
    try:
        if args.reset:
            save_settings(Settings(), path)
        settings = load_settings(path)
    except ValueError as exc:
        print(format_error_text(exc), file=sys.stderr)
        return 2
    print(json.dumps(settings_to_dict(settings), indent=2, sort_keys=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return _stored_mode_main(args)([])

    command = args[0].lower()
    tail = args[1:]

    if command in ("-h", "--help", "help"):
        _print_help()
        return 0
    if command in ("--version", "version"):
        print(f"secretforge {__version__}")
        return 0
    if command in _PASSWORD_ALIASES:
        return password_main(tail)
    if command in _PASSPHRASE_ALIASES:
        return passphrase_main(tail)
    if command in _SETTINGS_ALIASES:
        return settings_main(tail)
    if command.startswith("-"):
        return _stored_mode_main(args)(args)
    print(
        f"unknown command: {args[0]!r}. Use 'secretforge --help' for usage.",
        file=sys.stderr,
    )
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
