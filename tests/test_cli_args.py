from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from secretforge.cli.passphrase_cli import main as passphrase_main
from secretforge.cli.passphrase_cli import parse_args as parse_passphrase_args
from secretforge.cli.pwgen_cli import main as password_main
from secretforge.cli.pwgen_cli import parse_args as parse_password_args
from secretforge.cli.secretforge_cli import main as secretforge_main
from secretforge.core import __version__
from secretforge.core.settings_store import SETTINGS_ENV_VAR


def _run(entry, argv):
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        rc = entry(argv)
    lines = [line for line in stdout.getvalue().splitlines() if line.strip()]
    return rc, lines, stderr.getvalue()


@patch.dict(os.environ, {SETTINGS_ENV_VAR: ""})
class CliArgTests(unittest.TestCase):
    def test_password_cli_flags_default_to_unset(self) -> None:
        args = parse_password_args([])
        self.assertIsNone(args.length)
        self.assertIsNone(args.symbols)
        self.assertIsNone(args.exclude_ambiguous)

    def test_password_cli_negated_flags(self) -> None:
        args = parse_password_args(["--no-upper", "--symbols", "--no-exclude-ambiguous"])
        self.assertFalse(args.upper)
        self.assertTrue(args.symbols)
        self.assertFalse(args.exclude_ambiguous)

    def test_passphrase_cli_capitalize_choices(self) -> None:
        self.assertEqual(parse_passphrase_args(["--capitalize", "random"]).capitalize, "random")
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_passphrase_args(["--capitalize", "shout"])

    def test_password_cli_prints_requested_count(self) -> None:
        rc, lines, _ = _run(password_main, ["-n", "3", "-l", "12", "--no-upper", "--no-digits"])
        self.assertEqual(rc, 0)
        self.assertEqual(len(lines), 3)
        for line in lines:
            self.assertRegex(line, r"^[a-z]{12}$")

    def test_password_cli_clamps_length(self) -> None:
        rc, lines, _ = _run(password_main, ["-l", "4"])
        self.assertEqual(rc, 0)
        self.assertEqual(len(lines[0]), 8)

    def test_password_cli_show_meta(self) -> None:
        rc, lines, _ = _run(password_main, ["--show-meta"])
        self.assertEqual(rc, 0)
        self.assertIn("quality=excellent", lines[0])

    def test_password_cli_reports_coded_error(self) -> None:
        rc, lines, err = _run(password_main, ["--no-lower", "--no-upper", "--no-digits"])
        self.assertEqual(rc, 2)
        self.assertEqual(lines, [])
        self.assertIn("no_characters_available:", err)

    def test_password_cli_rejects_bad_count(self) -> None:
        rc, _, err = _run(password_main, ["-n", "0"])
        self.assertEqual(rc, 2)
        self.assertIn("invalid_request: count must be > 0", err)

    def test_passphrase_cli_generates_words(self) -> None:
        rc, lines, _ = _run(passphrase_main, ["-w", "4", "--separator", "."])
        self.assertEqual(rc, 0)
        self.assertEqual(len(lines[0].split(".")), 4)

    def test_passphrase_cli_reports_word_count_error(self) -> None:
        rc, lines, err = _run(passphrase_main, ["-w", "2"])
        self.assertEqual(rc, 2)
        self.assertEqual(lines, [])
        self.assertIn("invalid_configuration: Word count must be between 3 and 10", err)

    def test_secretforge_cli_defaults_to_password_mode(self) -> None:
        rc, lines, _ = _run(secretforge_main, ["-n", "1", "-l", "8", "--no-upper", "--no-lower"])
        self.assertEqual(rc, 0)
        self.assertEqual(len(lines), 1)
        self.assertEqual(len(lines[0]), 8)
        self.assertTrue(set(lines[0]).issubset(set("23456789")))

    def test_secretforge_cli_passphrase_subcommand_dispatch(self) -> None:
        rc, lines, _ = _run(secretforge_main, ["pp", "-n", "2", "-w", "3", "--separator", " "])
        self.assertEqual(rc, 0)
        self.assertEqual(len(lines), 2)
        self.assertEqual(len(lines[0].split(" ")), 3)

    def test_secretforge_cli_unknown_command(self) -> None:
        rc, _, err = _run(secretforge_main, ["pin"])
        self.assertEqual(rc, 2)
        self.assertIn("unknown command", err)

    def test_secretforge_cli_help(self) -> None:
        rc, lines, _ = _run(secretforge_main, ["--help"])
        self.assertEqual(rc, 0)
        self.assertIn("secretforge unified CLI", lines[0])

    def test_secretforge_cli_version(self) -> None:
        rc, lines, _ = _run(secretforge_main, ["--version"])
        self.assertEqual(rc, 0)
        self.assertEqual(lines, [f"secretforge {__version__}"])

    def test_command_less_run_follows_stored_passphrase_mode(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            rc, _, _ = _run(passphrase_main, ["-w", "4", "--separator", "+", "--settings", str(path), "--save-settings"])
            self.assertEqual(rc, 0)

            rc, lines, _ = _run(secretforge_main, ["-n", "2", "--settings", str(path)])
            self.assertEqual(rc, 0)
            self.assertEqual(len(lines), 2)
            self.assertEqual(len(lines[0].split("+")), 4)

            rc, lines, _ = _run(secretforge_main, ["password", "--settings", str(path)])
            self.assertEqual(rc, 0)
            self.assertEqual(len(lines[0]), 20)

    def test_settings_command_shows_and_resets(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text(json.dumps({"mode": "passphrase", "wordCount": 7.4}), encoding="utf-8")

            rc, lines, _ = _run(secretforge_main, ["settings", "--settings", str(path)])
            self.assertEqual(rc, 0)
            shown = json.loads("\n".join(lines))
            self.assertEqual(shown["mode"], "passphrase")
            self.assertEqual(shown["word_count"], 7)

            rc, lines, _ = _run(secretforge_main, ["settings", "--settings", str(path), "--reset"])
            self.assertEqual(rc, 0)
            self.assertEqual(json.loads("\n".join(lines))["mode"], "password")
            self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["word_count"], 5)

    def test_settings_command_path(self) -> None:
        with patch.dict(os.environ, {SETTINGS_ENV_VAR: "/tmp/sf-settings.json"}):
            rc, lines, _ = _run(secretforge_main, ["settings", "--path"])
        self.assertEqual(rc, 0)
        self.assertEqual(lines, [str(Path("/tmp/sf-settings.json"))])

    def test_save_settings_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            rc, _, _ = _run(password_main, ["-l", "300", "--symbols", "--settings", str(path), "--save-settings"])
            self.assertEqual(rc, 0)
            stored = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(stored["length"], 128)
            self.assertTrue(stored["classes"]["symbols"])

            rc, lines, _ = _run(password_main, ["--settings", str(path)])
            self.assertEqual(rc, 0)
            self.assertEqual(len(lines[0]), 128)

    def test_failed_run_does_not_save_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            rc, _, _ = _run(passphrase_main, ["-w", "20", "--settings", str(path), "--save-settings"])
            self.assertEqual(rc, 2)
            self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
