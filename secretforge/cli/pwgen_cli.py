#!/usr/bin/env python3
from __future__ import annotations

import argparse
from dataclasses import replace
import logging
import os
from pathlib import Path
import sys

from secretforge.core.error_dialect import format_error_text
from secretforge.core.models import CharacterClasses, PasswordRequest
from secretforge.core.password_service import generate_passwords
from secretforge.core.validation import normalize_password_options
from secretforge.core.settings_store import (
    MODE_PASSWORD,
    SETTINGS_ENV_VAR,
    Settings,
    default_settings_path,
    load_settings,
    save_settings,
    settings_to_password_options,
)


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--count", type=int, default=1, help="number of outputs to print")
    parser.add_argument(
        "--show-meta",
        "--meta",
        action="store_true",
        help="Print estimated entropy metadata per output.",
    )
    parser.add_argument(
        "--settings",
        default="",
        help=f"settings file to use as defaults (also read from ${SETTINGS_ENV_VAR})",
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="store the effective options in the settings file (never the generated values)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log metadata-only debug output to stderr")


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="[%(name)s] %(message)s")


def resolve_settings_path(args: argparse.Namespace) -> Path | None:
    if args.settings:
        return Path(args.settings).expanduser()
    if os.environ.get(SETTINGS_ENV_VAR, "").strip():
        return default_settings_path()
    return None


def load_cli_settings(args: argparse.Namespace) -> Settings:
    path = resolve_settings_path(args)
    return load_settings(path) if path is not None else Settings()


def store_cli_settings(args: argparse.Namespace, settings: Settings) -> None:
    path = resolve_settings_path(args) or default_settings_path()
    save_settings(settings, path)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Password generator with unbiased selection (os.urandom)")

    parser.add_argument("-l", "--length", type=int, default=None, help="password length (clamped to 8..128)")
    parser.add_argument("--lower", action=argparse.BooleanOptionalAction, default=None, help="include a-z")
    parser.add_argument("--upper", action=argparse.BooleanOptionalAction, default=None, help="include A-Z")
    parser.add_argument("--digits", action=argparse.BooleanOptionalAction, default=None, help="include 0-9")
    parser.add_argument("--symbols", action=argparse.BooleanOptionalAction, default=None, help="include symbols")
    parser.add_argument(
        "--exclude-ambiguous",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="drop look-alike characters (I l 1 O 0)",
    )
    parser.add_argument(
        "--require-each-class",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="guarantee at least one character from every enabled class",
    )
    add_common_args(parser)
    return parser.parse_args(argv)


def _pick(value, fallback):
    return fallback if value is None else value


def apply_password_args(args: argparse.Namespace, settings: Settings) -> Settings:
    classes = CharacterClasses(
        lowercase=_pick(args.lower, settings.classes.lowercase),
        uppercase=_pick(args.upper, settings.classes.uppercase),
        digits=_pick(args.digits, settings.classes.digits),
        symbols=_pick(args.symbols, settings.classes.symbols),
    )
    return replace(
        settings,
        mode=MODE_PASSWORD,
        length=_pick(args.length, settings.length),
        classes=classes,
        exclude_ambiguous=_pick(args.exclude_ambiguous, settings.exclude_ambiguous),
        require_each_class=_pick(args.require_each_class, settings.require_each_class),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = apply_password_args(args, load_cli_settings(args))
        options = normalize_password_options(settings_to_password_options(settings))
        settings = replace(settings, length=options.length)
        request = PasswordRequest(count=args.count, options=options)
        result = generate_passwords(request)
        if args.save_settings:
            store_cli_settings(args, settings)
    except ValueError as exc:
        print(format_error_text(exc), file=sys.stderr)
        return 2
    for line in result.as_lines(show_meta=args.show_meta):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
