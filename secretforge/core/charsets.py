from __future__ import annotations

import string
from typing import FrozenSet, List, Tuple

from secretforge.core.models import CharacterClasses

LOWER = string.ascii_lowercase
UPPER = string.ascii_uppercase
DIGIT = string.digits
# Quotes and backticks are left out so values survive shell and config quoting.
SYMBOL = "!@#$%^&*()-_=+[]{};:,.?"

AMBIGUOUS_CHARS = "Il1O0|"


def enabled_class_sets(classes: CharacterClasses) -> List[str]:
    """Canonical sets of the enabled classes, in lower/upper/digit/symbol order."""
    ordered: Tuple[Tuple[bool, str], ...] = (
        (classes.lowercase, LOWER),
        (classes.uppercase, UPPER),
        (classes.digits, DIGIT),
        (classes.symbols, SYMBOL),
    )
    return [charset for enabled, charset in ordered if enabled]


def ambiguous_filter(classes: CharacterClasses) -> FrozenSet[str]:
    # Only ambiguous characters that an enabled class can actually produce are
    # filtered, so '|' drops out whenever no enabled set contains it.
    reachable = set("".join(enabled_class_sets(classes)))
    return frozenset(ch for ch in AMBIGUOUS_CHARS if ch in reachable)


def _dedupe(chars: str) -> str:
    return "".join(dict.fromkeys(chars))


def build_charset(classes: CharacterClasses, exclude_ambiguous: bool) -> str:
    charset = _dedupe("".join(enabled_class_sets(classes)))
    if exclude_ambiguous:
        blocked = ambiguous_filter(classes)
        charset = "".join(ch for ch in charset if ch not in blocked)
    return charset


def class_charsets(classes: CharacterClasses, exclude_ambiguous: bool) -> List[str]:
    blocked = ambiguous_filter(classes) if exclude_ambiguous else frozenset()
    sets: List[str] = []
    for charset in enabled_class_sets(classes):
        filtered = "".join(ch for ch in _dedupe(charset) if ch not in blocked)
        if filtered:
            sets.append(filtered)
    return sets
