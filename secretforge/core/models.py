from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Tuple


PASSWORD_LENGTH_MIN = 8
PASSWORD_LENGTH_MAX = 128
PASSPHRASE_WORD_COUNT_MIN = 3
PASSPHRASE_WORD_COUNT_MAX = 10

DEFAULT_PASSWORD_LENGTH = 20
DEFAULT_EXCLUDE_AMBIGUOUS = True
DEFAULT_REQUIRE_EACH_CLASS = True
DEFAULT_PASSPHRASE_WORD_COUNT = 5
DEFAULT_PASSPHRASE_SEPARATOR = "-"

MAX_BATCH_COUNT = 512


class Capitalization(str, Enum):
    NONE = "none"
    FIRST = "first"
    RANDOM = "random"


@dataclass(frozen=True)
class CharacterClasses:
    lowercase: bool = True
    uppercase: bool = True
    digits: bool = True
    symbols: bool = False

    def enabled_count(self) -> int:
        return sum(1 for flag in (self.lowercase, self.uppercase, self.digits, self.symbols) if flag)


@dataclass(frozen=True)
class PasswordOptions:
    length: int = DEFAULT_PASSWORD_LENGTH
    classes: CharacterClasses = field(default_factory=CharacterClasses)
    exclude_ambiguous: bool = DEFAULT_EXCLUDE_AMBIGUOUS
    require_each_class: bool = DEFAULT_REQUIRE_EACH_CLASS


@dataclass(frozen=True)
class PassphraseOptions:
    word_count: int = DEFAULT_PASSPHRASE_WORD_COUNT
    separator: str = DEFAULT_PASSPHRASE_SEPARATOR
    capitalization: Capitalization = Capitalization.NONE
    add_digits: bool = False
    add_symbol: bool = False


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PasswordRequest:
    count: int = 1
    options: PasswordOptions = field(default_factory=PasswordOptions)


@dataclass(frozen=True)
class PassphraseRequest:
    count: int = 1
    options: PassphraseOptions = field(default_factory=PassphraseOptions)


@dataclass(frozen=True)
class PasswordResult:
    outputs: Tuple[str, ...]
    estimated_entropy_bits: float = 0.0
    quality: str = ""

    def as_lines(self, show_meta: bool = False) -> Tuple[str, ...]:
        if not show_meta:
            return self.outputs

        bits_value = self.estimated_entropy_bits
        if math.isfinite(bits_value):
            rounded = round(bits_value, 3)
            if rounded.is_integer():
                bits_text = str(int(rounded))
            else:
                bits_text = f"{rounded:.3f}".rstrip("0").rstrip(".")
        else:
            bits_text = "unknown"

        meta = f"[entropy={bits_text} bits"
        if self.quality:
            meta += f" quality={self.quality}"
        meta += "]"
        return tuple(f"{value}\t{meta}" for value in self.outputs)
