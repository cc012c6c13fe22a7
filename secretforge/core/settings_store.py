"""Persisted generator settings.

Only the configuration is ever written to disk, never a generated value.
Loading is lenient and goes through the same normalizers as the engines:
numbers are rounded and clamped and wrong-typed fields fall back to their
defaults, so a damaged or hand-edited file never fails the load.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from secretforge.core.file_hardening import write_private_text
from secretforge.core.models import (
    DEFAULT_EXCLUDE_AMBIGUOUS,
    DEFAULT_PASSPHRASE_SEPARATOR,
    DEFAULT_PASSPHRASE_WORD_COUNT,
    DEFAULT_PASSWORD_LENGTH,
    DEFAULT_REQUIRE_EACH_CLASS,
    Capitalization,
    CharacterClasses,
    PassphraseOptions,
    PasswordOptions,
)
from secretforge.core.validation import normalize_passphrase_options, normalize_password_options

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "SECRETFORGE_SETTINGS"
MAX_SETTINGS_FILE_BYTES = 64 * 1024
MODE_PASSWORD = "password"
MODE_PASSPHRASE = "passphrase"
MODES = (MODE_PASSWORD, MODE_PASSPHRASE)


@dataclass(frozen=True)
class Settings:
    mode: str = MODE_PASSWORD
    length: int = DEFAULT_PASSWORD_LENGTH
    classes: CharacterClasses = field(default_factory=CharacterClasses)
    exclude_ambiguous: bool = DEFAULT_EXCLUDE_AMBIGUOUS
    require_each_class: bool = DEFAULT_REQUIRE_EACH_CLASS
    word_count: int = DEFAULT_PASSPHRASE_WORD_COUNT
    separator: str = DEFAULT_PASSPHRASE_SEPARATOR
    capitalization: Capitalization = Capitalization.NONE
    add_digits: bool = False
    add_symbol: bool = False


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".secretforge" / "settings.json"


def parse_settings(data: Any) -> Settings:
    """Build settings from decoded JSON, normalizing fields the same way the engines do."""
    if not isinstance(data, Mapping):
        return Settings()

    mode = data.get("mode")
    password = normalize_password_options(data)
    passphrase = normalize_passphrase_options(data)
    return Settings(
        mode=mode if mode in MODES else MODE_PASSWORD,
        length=password.length,
        classes=password.classes,
        exclude_ambiguous=password.exclude_ambiguous,
        require_each_class=password.require_each_class,
        word_count=passphrase.word_count,
        separator=passphrase.separator,
        capitalization=passphrase.capitalization,
        add_digits=passphrase.add_digits,
        add_symbol=passphrase.add_symbol,
    )


def settings_to_dict(settings: Settings) -> dict[str, object]:
    return {
        "mode": settings.mode,
        "length": settings.length,
        "classes": {
            "lowercase": settings.classes.lowercase,
            "uppercase": settings.classes.uppercase,
            "digits": settings.classes.digits,
            "symbols": settings.classes.symbols,
        },
        "exclude_ambiguous": settings.exclude_ambiguous,
        "require_each_class": settings.require_each_class,
        "word_count": settings.word_count,
        "separator": settings.separator,
        "capitalization": settings.capitalization.value,
        "add_digits": settings.add_digits,
        "add_symbol": settings.add_symbol,
    }


def load_settings(path: Optional[Path] = None) -> Settings:
    settings_path = default_settings_path() if path is None else Path(path)
    try:
        if settings_path.stat().st_size > MAX_SETTINGS_FILE_BYTES:
            logger.debug("settings file %s is oversized; using defaults", settings_path)
            return Settings()
        raw = settings_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Settings()
    except (OSError, UnicodeError) as exc:
        logger.debug("unable to read settings file %s: %s", settings_path, exc)
        return Settings()
    try:
        data = json.loads(raw)
    except ValueError:
        logger.debug("settings file %s is not valid JSON; using defaults", settings_path)
        return Settings()
    return parse_settings(data)


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    settings_path = default_settings_path() if path is None else Path(path)
    text = json.dumps(settings_to_dict(settings), indent=2, sort_keys=True) + "\n"
    write_private_text(settings_path, text)
    logger.debug("saved settings to %s", settings_path)
    return settings_path


def settings_to_password_options(settings: Settings) -> PasswordOptions:
    return PasswordOptions(
        length=settings.length,
        classes=settings.classes,
        exclude_ambiguous=settings.exclude_ambiguous,
        require_each_class=settings.require_each_class,
    )


def settings_to_passphrase_options(settings: Settings) -> PassphraseOptions:
    return PassphraseOptions(
        word_count=settings.word_count,
        separator=settings.separator,
        capitalization=settings.capitalization,
        add_digits=settings.add_digits,
        add_symbol=settings.add_symbol,
    )
