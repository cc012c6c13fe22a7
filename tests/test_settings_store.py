from __future__ import annotations

import json
import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from secretforge.core.models import Capitalization, CharacterClasses
from secretforge.core.settings_store import (
    MAX_SETTINGS_FILE_BYTES,
    SETTINGS_ENV_VAR,
    Settings,
    default_settings_path,
    load_settings,
    parse_settings,
    save_settings,
    settings_to_passphrase_options,
    settings_to_password_options,
)
from secretforge.core.validation import normalize_password_options


class SettingsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.path = self.root / "settings.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, payload: object) -> None:
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def test_missing_file_returns_defaults(self) -> None:
        self.assertEqual(load_settings(self.root / "absent.json"), Settings())

    def test_invalid_json_returns_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_settings(self.path), Settings())

    def test_non_object_json_returns_defaults(self) -> None:
        for payload in ([1, 2, 3], "text", 42, None):
            with self.subTest(payload=payload):
                self._write(payload)
                self.assertEqual(load_settings(self.path), Settings())

    def test_oversized_file_returns_defaults(self) -> None:
        self.path.write_text(" " * (MAX_SETTINGS_FILE_BYTES + 1), encoding="utf-8")
        self.assertEqual(load_settings(self.path), Settings())

    def test_out_of_range_integers_are_clamped(self) -> None:
        self._write({"length": 1000, "wordCount": -5})
        loaded = load_settings(self.path)
        self.assertEqual(loaded.length, 128)
        self.assertEqual(loaded.word_count, 3)

    def test_float_numbers_round_like_the_engines(self) -> None:
        self._write({"length": 12.6, "word_count": 6.0})
        loaded = load_settings(self.path)
        self.assertEqual(loaded.length, 13)
        self.assertEqual(loaded.word_count, 6)
        self.assertEqual(loaded.length, normalize_password_options({"length": 12.6}).length)

    def test_half_values_round_away_from_zero(self) -> None:
        loaded = parse_settings({"length": 12.5, "wordCount": 3.5})
        self.assertEqual(loaded.length, 13)
        self.assertEqual(loaded.word_count, 4)

    def test_out_of_range_floats_are_clamped(self) -> None:
        loaded = parse_settings({"length": 500.4, "word_count": 0.2})
        self.assertEqual(loaded.length, 128)
        self.assertEqual(loaded.word_count, 3)

    def test_non_numeric_numbers_fall_back(self) -> None:
        self._write({"length": "12", "word_count": "6"})
        loaded = load_settings(self.path)
        self.assertEqual(loaded.length, 20)
        self.assertEqual(loaded.word_count, 5)

    def test_stringified_booleans_are_rejected(self) -> None:
        self._write(
            {
                "excludeAmbiguous": "false",
                "requireEachClass": "false",
                "include": {"symbols": "true", "lowercase": 0},
                "addDigit": "true",
            }
        )
        loaded = load_settings(self.path)
        self.assertTrue(loaded.exclude_ambiguous)
        self.assertTrue(loaded.require_each_class)
        self.assertEqual(loaded.classes, CharacterClasses())
        self.assertFalse(loaded.add_digits)

    def test_valid_camel_case_values_are_accepted(self) -> None:
        self._write(
            {
                "mode": "passphrase",
                "length": 32,
                "include": {"lowercase": True, "uppercase": False, "digits": True, "symbols": True},
                "excludeAmbiguous": False,
                "requireEachClass": False,
                "wordCount": 7,
                "separator": " ",
                "capitalization": "random",
                "addDigit": True,
                "addSymbol": True,
            }
        )
        loaded = load_settings(self.path)
        self.assertEqual(loaded.mode, "passphrase")
        self.assertEqual(loaded.length, 32)
        self.assertEqual(
            loaded.classes,
            CharacterClasses(lowercase=True, uppercase=False, digits=True, symbols=True),
        )
        self.assertFalse(loaded.exclude_ambiguous)
        self.assertFalse(loaded.require_each_class)
        self.assertEqual(loaded.word_count, 7)
        self.assertEqual(loaded.separator, " ")
        self.assertIs(loaded.capitalization, Capitalization.RANDOM)
        self.assertTrue(loaded.add_digits)
        self.assertTrue(loaded.add_symbol)

    def test_bad_separator_and_capitalization_fall_back(self) -> None:
        loaded = parse_settings({"separator": 123, "capitalization": "uppercase", "mode": "pin"})
        self.assertEqual(loaded.separator, "-")
        self.assertIs(loaded.capitalization, Capitalization.NONE)
        self.assertEqual(loaded.mode, "password")

    def test_long_capitalization_names_load(self) -> None:
        self.assertIs(parse_settings({"capitalization": "capitalizeOneRandom"}).capitalization, Capitalization.RANDOM)

    def test_unhashable_values_do_not_raise(self) -> None:
        loaded = parse_settings({"capitalization": ["first"], "mode": {"x": 1}, "classes": [True]})
        self.assertEqual(loaded, Settings())

    def test_save_load_round_trip(self) -> None:
        settings = Settings(
            mode="passphrase",
            length=40,
            classes=CharacterClasses(symbols=True),
            exclude_ambiguous=False,
            word_count=8,
            separator="",
            capitalization=Capitalization.FIRST,
            add_symbol=True,
        )
        written = save_settings(settings, self.path)
        self.assertEqual(written, self.path)
        self.assertEqual(load_settings(self.path), settings)
        leftovers = [p.name for p in self.root.iterdir() if p.name != "settings.json"]
        self.assertEqual(leftovers, [])

    def test_saved_file_never_contains_generated_values(self) -> None:
        save_settings(Settings(), self.path)
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertNotIn("outputs", data)
        self.assertEqual(data["capitalization"], "none")

    def test_save_creates_missing_parent_directory(self) -> None:
        nested = self.root / "a" / "b" / "settings.json"
        save_settings(Settings(), nested)
        self.assertTrue(nested.is_file())

    @unittest.skipUnless(os.name == "posix", "POSIX permission bits only")
    def test_saved_file_is_owner_only(self) -> None:
        save_settings(Settings(), self.path)
        mode = stat.S_IMODE(self.path.stat().st_mode)
        self.assertEqual(mode, 0o600)

    def test_env_var_overrides_default_path(self) -> None:
        target = self.root / "from-env.json"
        with patch.dict(os.environ, {SETTINGS_ENV_VAR: str(target)}):
            self.assertEqual(default_settings_path(), target)
            save_settings(Settings(length=64))
            self.assertEqual(load_settings().length, 64)
        self.assertTrue(target.is_file())

    def test_default_path_lives_under_home(self) -> None:
        with patch.dict(os.environ, {SETTINGS_ENV_VAR: ""}):
            path = default_settings_path()
        self.assertEqual(path.name, "settings.json")
        self.assertEqual(path.parent.name, ".secretforge")

    def test_settings_convert_to_options(self) -> None:
        settings = Settings(length=16, word_count=4, separator="+", add_digits=True)
        password = settings_to_password_options(settings)
        passphrase = settings_to_passphrase_options(settings)
        self.assertEqual(password.length, 16)
        self.assertEqual(password.classes, settings.classes)
        self.assertEqual(passphrase.word_count, 4)
        self.assertEqual(passphrase.separator, "+")
        self.assertTrue(passphrase.add_digits)


if __name__ == "__main__":
    unittest.main()
