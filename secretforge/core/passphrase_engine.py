from __future__ import annotations

import logging
import math
from typing import List

from secretforge.core.charsets import DIGIT, SYMBOL
from secretforge.core.error_dialect import InvalidConfigurationError
from secretforge.core.models import Capitalization
from secretforge.core.password_entropy import theoretical_bits
from secretforge.core.rng import RandomSource, choose, choose_many, secure_random_bytes, uniform_random_index
from secretforge.core.validation import OptionsInput, normalize_passphrase_options, word_count_errors
from secretforge.core.wordlist import WORDLIST

logger = logging.getLogger(__name__)

DIGIT_SUFFIX_LENGTH = 2


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def generate_passphrase(options: OptionsInput = None, random: RandomSource = secure_random_bytes) -> str:
    """Build a passphrase from words drawn with replacement from the fixed word list.

    Word count is checked before normalization: unlike password length it is
    never clamped here, an out-of-range value raises InvalidConfigurationError.
    Suffixes are appended after the joined words, digits before the symbol.
    """
    errors = word_count_errors(options)
    if errors:
        raise InvalidConfigurationError(errors)
    normalized = normalize_passphrase_options(options)

    words: List[str] = choose_many(random, WORDLIST, normalized.word_count)
    if normalized.capitalization is Capitalization.FIRST:
        words = [_capitalize(word) for word in words]
    elif normalized.capitalization is Capitalization.RANDOM:
        idx = uniform_random_index(random, len(words))
        words[idx] = _capitalize(words[idx])

    phrase = normalized.separator.join(words)
    if normalized.add_digits:
        phrase += "".join(choose_many(random, DIGIT, DIGIT_SUFFIX_LENGTH))
    if normalized.add_symbol:
        phrase += choose(random, SYMBOL)

    logger.debug(
        "generated passphrase: words=%d capitalization=%s digits=%s symbol=%s",
        normalized.word_count,
        normalized.capitalization.value,
        normalized.add_digits,
        normalized.add_symbol,
    )
    return phrase


def estimate_passphrase_entropy(options: OptionsInput = None) -> float:
    normalized = normalize_passphrase_options(options)
    bits = theoretical_bits(normalized.word_count, len(WORDLIST))
    if normalized.capitalization is Capitalization.RANDOM:
        bits += math.log2(normalized.word_count)
    if normalized.add_digits:
        bits += DIGIT_SUFFIX_LENGTH * math.log2(len(DIGIT))
    if normalized.add_symbol:
        bits += math.log2(len(SYMBOL))
    return bits
