"""Validation and normalization of password/passphrase options.

Options arrive either as the frozen dataclasses from :mod:`secretforge.core.models`
or as partial mappings (snake_case keys, with the camelCase spellings used by
stored browser settings accepted as aliases). Each field resolves on its own:
a missing or wrong-typed value falls back to that field's default and never
fails the whole object. ``validate_*`` reports problems without raising and
``normalize_*`` always returns a structurally valid dataclass.
"""
from __future__ import annotations

from dataclasses import fields, is_dataclass
import math
from typing import Any, List, Mapping, Optional, Union

from secretforge.core.models import (
    DEFAULT_EXCLUDE_AMBIGUOUS,
    DEFAULT_PASSPHRASE_SEPARATOR,
    DEFAULT_PASSPHRASE_WORD_COUNT,
    DEFAULT_PASSWORD_LENGTH,
    DEFAULT_REQUIRE_EACH_CLASS,
    PASSPHRASE_WORD_COUNT_MAX,
    PASSPHRASE_WORD_COUNT_MIN,
    PASSWORD_LENGTH_MAX,
    PASSWORD_LENGTH_MIN,
    Capitalization,
    CharacterClasses,
    PassphraseOptions,
    PasswordOptions,
    ValidationResult,
)

OptionsInput = Union[None, Mapping[str, Any], PasswordOptions, PassphraseOptions]

_MISSING = object()

_PASSWORD_KEYS = {
    "length": ("length",),
    "classes": ("classes", "include"),
    "exclude_ambiguous": ("exclude_ambiguous", "excludeAmbiguous"),
    "require_each_class": ("require_each_class", "requireEachClass"),
}
_PASSPHRASE_KEYS = {
    "word_count": ("word_count", "wordCount"),
    "separator": ("separator",),
    "capitalization": ("capitalization",),
    "add_digits": ("add_digits", "addDigits", "addDigit", "appendDigits"),
    "add_symbol": ("add_symbol", "addSymbol", "appendSymbol"),
}
_CLASS_FLAGS = ("lowercase", "uppercase", "digits", "symbols")
# Long mode names used by stored browser settings.
_CAPITALIZATION_ALIASES = {
    "capitalizefirstofeach": Capitalization.FIRST,
    "capitalizeonerandom": Capitalization.RANDOM,
}


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    return None


def _lookup(data: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    for key in aliases:
        if key in data and data[key] is not None:
            return data[key]
    return _MISSING


def _bool_or(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _round_half_away_from_zero(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return int(magnitude) if value >= 0 else -int(magnitude)


def _clamped_int(value: Any, *, default: int, low: int, high: int) -> int:
    if not _is_number(value):
        return default
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        value = _round_half_away_from_zero(value)
    return max(low, min(high, int(value)))


def _resolve_classes(value: Any) -> CharacterClasses:
    if isinstance(value, CharacterClasses):
        return value
    defaults = CharacterClasses()
    data = _as_mapping(value) if value is not _MISSING else {}
    if data is None:
        return defaults
    return CharacterClasses(
        **{flag: _bool_or(data.get(flag), getattr(defaults, flag)) for flag in _CLASS_FLAGS}
    )


def _resolve_capitalization(value: Any) -> Optional[Capitalization]:
    if isinstance(value, Capitalization):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _CAPITALIZATION_ALIASES:
            return _CAPITALIZATION_ALIASES[key]
        try:
            return Capitalization(key)
        except ValueError:
            return None
    return None


# ---------------- Password ----------------

def validate_password_options(options: OptionsInput = None) -> ValidationResult:
    data = _as_mapping(options)
    if data is None:
        return ValidationResult(valid=False, errors=("Options must be a mapping",))

    errors: List[str] = []
    length = _lookup(data, _PASSWORD_KEYS["length"])
    if length is _MISSING:
        length = DEFAULT_PASSWORD_LENGTH
    length_ok = _is_integral(length)
    if not length_ok:
        errors.append("Length must be an integer")
    elif not PASSWORD_LENGTH_MIN <= length <= PASSWORD_LENGTH_MAX:
        errors.append(f"Length must be between {PASSWORD_LENGTH_MIN} and {PASSWORD_LENGTH_MAX}")

    classes = _resolve_classes(_lookup(data, _PASSWORD_KEYS["classes"]))
    enabled = classes.enabled_count()
    if enabled == 0:
        errors.append("At least one character class must be enabled")

    require_each_class = _bool_or(
        _lookup(data, _PASSWORD_KEYS["require_each_class"]), DEFAULT_REQUIRE_EACH_CLASS
    )
    if require_each_class and length_ok and length < enabled:
        errors.append(f"Length must be at least {enabled} when requiring each class")

    return ValidationResult(valid=not errors, errors=tuple(errors))


def normalize_password_options(options: OptionsInput = None) -> PasswordOptions:
    data = _as_mapping(options)
    if data is None:
        data = {}
    return PasswordOptions(
        length=_clamped_int(
            _lookup(data, _PASSWORD_KEYS["length"]),
            default=DEFAULT_PASSWORD_LENGTH,
            low=PASSWORD_LENGTH_MIN,
            high=PASSWORD_LENGTH_MAX,
        ),
        classes=_resolve_classes(_lookup(data, _PASSWORD_KEYS["classes"])),
        exclude_ambiguous=_bool_or(
            _lookup(data, _PASSWORD_KEYS["exclude_ambiguous"]), DEFAULT_EXCLUDE_AMBIGUOUS
        ),
        require_each_class=_bool_or(
            _lookup(data, _PASSWORD_KEYS["require_each_class"]), DEFAULT_REQUIRE_EACH_CLASS
        ),
    )


# ---------------- Passphrase ----------------

def word_count_errors(options: OptionsInput = None) -> List[str]:
    data = _as_mapping(options)
    if data is None:
        return ["Options must be a mapping"]
    word_count = _lookup(data, _PASSPHRASE_KEYS["word_count"])
    if word_count is _MISSING:
        word_count = DEFAULT_PASSPHRASE_WORD_COUNT
    if not _is_integral(word_count):
        return ["Word count must be an integer"]
    if not PASSPHRASE_WORD_COUNT_MIN <= word_count <= PASSPHRASE_WORD_COUNT_MAX:
        return [f"Word count must be between {PASSPHRASE_WORD_COUNT_MIN} and {PASSPHRASE_WORD_COUNT_MAX}"]
    return []


def validate_passphrase_options(options: OptionsInput = None) -> ValidationResult:
    errors = word_count_errors(options)
    data = _as_mapping(options)
    if data is not None:
        separator = _lookup(data, _PASSPHRASE_KEYS["separator"])
        if separator is not _MISSING and not isinstance(separator, str):
            errors.append("Separator must be a string")
        capitalization = _lookup(data, _PASSPHRASE_KEYS["capitalization"])
        if capitalization is not _MISSING and _resolve_capitalization(capitalization) is None:
            allowed = ", ".join(mode.value for mode in Capitalization)
            errors.append(f"Capitalization must be one of: {allowed}")
    return ValidationResult(valid=not errors, errors=tuple(errors))


def normalize_passphrase_options(options: OptionsInput = None) -> PassphraseOptions:
    data = _as_mapping(options)
    if data is None:
        data = {}
    separator = _lookup(data, _PASSPHRASE_KEYS["separator"])
    capitalization = _resolve_capitalization(_lookup(data, _PASSPHRASE_KEYS["capitalization"]))
    return PassphraseOptions(
        word_count=_clamped_int(
            _lookup(data, _PASSPHRASE_KEYS["word_count"]),
            default=DEFAULT_PASSPHRASE_WORD_COUNT,
            low=PASSPHRASE_WORD_COUNT_MIN,
            high=PASSPHRASE_WORD_COUNT_MAX,
        ),
        separator=separator if isinstance(separator, str) else DEFAULT_PASSPHRASE_SEPARATOR,
        capitalization=capitalization or Capitalization.NONE,
        add_digits=_bool_or(_lookup(data, _PASSPHRASE_KEYS["add_digits"]), False),
        add_symbol=_bool_or(_lookup(data, _PASSPHRASE_KEYS["add_symbol"]), False),
    )
