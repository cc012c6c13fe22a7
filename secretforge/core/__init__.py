"""Core generation engines, models, and service APIs for secretforge."""

from __future__ import annotations

__version__ = "0.1.0"


def generate_password(options=None, random=None):
    from secretforge.core.password_engine import generate_password as _generate_password

    if random is None:
        return _generate_password(options)
    return _generate_password(options, random)


def generate_passphrase(options=None, random=None):
    from secretforge.core.passphrase_engine import generate_passphrase as _generate_passphrase

    if random is None:
        return _generate_passphrase(options)
    return _generate_passphrase(options, random)


def estimate_entropy(options=None):
    from secretforge.core.password_engine import estimate_entropy as _estimate_entropy

    return _estimate_entropy(options)


def estimate_passphrase_entropy(options=None):
    from secretforge.core.passphrase_engine import estimate_passphrase_entropy as _estimate

    return _estimate(options)


def normalize_password_options(options=None):
    from secretforge.core.validation import normalize_password_options as _normalize

    return _normalize(options)


def validate_password_options(options=None):
    from secretforge.core.validation import validate_password_options as _validate

    return _validate(options)


def normalize_passphrase_options(options=None):
    from secretforge.core.validation import normalize_passphrase_options as _normalize

    return _normalize(options)


def validate_passphrase_options(options=None):
    from secretforge.core.validation import validate_passphrase_options as _validate

    return _validate(options)


def generate_passwords(request):
    from secretforge.core.password_service import generate_passwords as _generate_passwords

    return _generate_passwords(request)


def generate_passphrases(request):
    from secretforge.core.password_service import generate_passphrases as _generate_passphrases

    return _generate_passphrases(request)


__all__ = [
    "estimate_entropy",
    "estimate_passphrase_entropy",
    "generate_passphrase",
    "generate_passphrases",
    "generate_password",
    "generate_passwords",
    "normalize_passphrase_options",
    "normalize_password_options",
    "validate_passphrase_options",
    "validate_password_options",
]
