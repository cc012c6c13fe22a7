from __future__ import annotations

import logging

from secretforge.core.error_dialect import make_error
from secretforge.core.models import MAX_BATCH_COUNT, PassphraseRequest, PasswordRequest, PasswordResult
from secretforge.core.passphrase_engine import estimate_passphrase_entropy, generate_passphrase
from secretforge.core.password_engine import estimate_entropy, generate_password
from secretforge.core.password_entropy import quality_from_entropy_bits
from secretforge.core.rng import RandomSource, assert_csprng_ready, secure_random_bytes

logger = logging.getLogger(__name__)


def _validate_count(count: int) -> None:
    if isinstance(count, bool) or not isinstance(count, int):
        raise make_error("invalid_request", "count must be an integer")
    if count <= 0:
        raise make_error("invalid_request", "count must be > 0")
    if count > MAX_BATCH_COUNT:
        raise make_error("invalid_request", f"count must be <= {MAX_BATCH_COUNT}")


def _ensure_source_ready(random: RandomSource) -> None:
    if random is not secure_random_bytes:
        return
    try:
        assert_csprng_ready()
    except OSError as e:
        raise make_error("random_source_failure", str(e)) from e


def generate_passwords(request: PasswordRequest, random: RandomSource = secure_random_bytes) -> PasswordResult:
    _validate_count(request.count)
    _ensure_source_ready(random)

    entropy_bits = estimate_entropy(request.options)
    outputs = []
    for _ in range(request.count):
        try:
            outputs.append(generate_password(request.options, random))
        except OSError as e:
            raise make_error("random_source_failure", str(e)) from e
    logger.debug("password batch: count=%d entropy_bits=%.3f", len(outputs), entropy_bits)
    return PasswordResult(
        outputs=tuple(outputs),
        estimated_entropy_bits=entropy_bits,
        quality=quality_from_entropy_bits(entropy_bits),
    )


def generate_passphrases(request: PassphraseRequest, random: RandomSource = secure_random_bytes) -> PasswordResult:
    _validate_count(request.count)
    _ensure_source_ready(random)

    outputs = []
    for _ in range(request.count):
        try:
            outputs.append(generate_passphrase(request.options, random))
        except OSError as e:
            raise make_error("random_source_failure", str(e)) from e
    # Estimated after generation so an invalid word count surfaces as the engine's error.
    entropy_bits = estimate_passphrase_entropy(request.options)
    logger.debug("passphrase batch: count=%d entropy_bits=%.3f", len(outputs), entropy_bits)
    return PasswordResult(
        outputs=tuple(outputs),
        estimated_entropy_bits=entropy_bits,
        quality=quality_from_entropy_bits(entropy_bits),
    )
