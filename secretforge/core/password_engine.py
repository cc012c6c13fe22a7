from __future__ import annotations

import logging
from typing import List

from secretforge.core.charsets import build_charset, class_charsets
from secretforge.core.error_dialect import NoCharactersAvailableError, NoClassesAvailableError
from secretforge.core.password_entropy import theoretical_bits
from secretforge.core.rng import RandomSource, choose, secure_random_bytes, shuffle
from secretforge.core.validation import OptionsInput, normalize_password_options

logger = logging.getLogger(__name__)


# ---------------- Password mode (unbiased selection) ----------------

def generate_password(options: OptionsInput = None, random: RandomSource = secure_random_bytes) -> str:
    normalized = normalize_password_options(options)
    alphabet = build_charset(normalized.classes, normalized.exclude_ambiguous)
    if not alphabet:
        raise NoCharactersAvailableError("No characters available for password generation")

    chars: List[str] = []
    if normalized.require_each_class:
        per_class = class_charsets(normalized.classes, normalized.exclude_ambiguous)
        if not per_class:
            raise NoClassesAvailableError("No character classes available")
        for charset in per_class:
            chars.append(choose(random, charset))

    remaining = normalized.length - len(chars)
    for _ in range(remaining):
        chars.append(choose(random, alphabet))

    # Required-class picks sit at the front until shuffled.
    shuffle(chars, random)

    logger.debug(
        "generated password: length=%d alphabet_size=%d require_each_class=%s",
        len(chars),
        len(alphabet),
        normalized.require_each_class,
    )
    return "".join(chars)


def estimate_entropy(options: OptionsInput = None) -> float:
    normalized = normalize_password_options(options)
    alphabet = build_charset(normalized.classes, normalized.exclude_ambiguous)
    return theoretical_bits(normalized.length, len(alphabet))
