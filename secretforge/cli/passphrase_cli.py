#!/usr/bin/env python3
from __future__ import annotations

import argparse
from dataclasses import replace
import sys

from secretforge.cli.pwgen_cli import add_common_args, configure_logging, load_cli_settings, store_cli_settings
from secretforge.core.error_dialect import format_error_text
from secretforge.core.models import Capitalization, PassphraseRequest
from secretforge.core.password_service import generate_passphrases
from secretforge.core.settings_store import MODE_PASSPHRASE, Settings, settings_to_passphrase_options


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Passphrase generator drawing words from a fixed 2048-word list")

    parser.add_argument("-w", "--words", type=int, default=None, help="number of words (3..10)")
    parser.add_argument("--separator", default=None, help="text placed between words (may be empty)")
    parser.add_argument(
        "--capitalize",
        choices=[mode.value for mode in Capitalization],
        default=None,
        help="none, first (every word), or random (exactly one word)",
    )
    parser.add_argument("--add-digits", action=argparse.BooleanOptionalAction, default=None, help="append two digits")
    parser.add_argument("--add-symbol", action=argparse.BooleanOptionalAction, default=None, help="append one symbol")
    add_common_args(parser)
    return parser.parse_args(argv)


def apply_passphrase_args(args: argparse.Namespace, settings: Settings) -> Settings:
    updated = replace(settings, mode=MODE_PASSPHRASE)
    if args.words is not None:
        updated = replace(updated, word_count=args.words)
    if args.separator is not None:
        updated = replace(updated, separator=args.separator)
    if args.capitalize is not None:
        updated = replace(updated, capitalization=Capitalization(args.capitalize))
    if args.add_digits is not None:
        updated = replace(updated, add_digits=args.add_digits)
    if args.add_symbol is not None:
        updated = replace(updated, add_symbol=args.add_symbol)
    return updated


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = apply_passphrase_args(args, load_cli_settings(args))
        request = PassphraseRequest(count=args.count, options=settings_to_passphrase_options(settings))
        result = generate_passphrases(request)
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
