from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ErrorDetail:
    code: str
    message: str


class SecretForgeError(ValueError):
    default_code = "invalid_request"

    def __init__(self, message: str, code: str | None = None) -> None:
        normalized = _normalize_code(code if code is not None else self.default_code)
        clean_message = message.strip() or "unspecified error"
        self.code = normalized
        self.message = clean_message
        super().__init__(clean_message)

    def as_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message)


class InvalidArgumentError(SecretForgeError):
    """Programming error: a sampler was asked for an empty range."""

    default_code = "invalid_argument"


class NoCharactersAvailableError(SecretForgeError):
    default_code = "no_characters_available"


class NoClassesAvailableError(SecretForgeError):
    default_code = "no_classes_available"


class InvalidConfigurationError(SecretForgeError):
    default_code = "invalid_configuration"

    def __init__(self, errors: Sequence[str], message: str = "") -> None:
        self.errors = tuple(errors)
        super().__init__(message or "; ".join(self.errors) or "invalid configuration")


class RandomSourceError(SecretForgeError):
    default_code = "random_source_failure"


def _normalize_code(code: str) -> str:
    lowered = code.strip().lower()
    if not lowered:
        return "invalid_request"
    out = []
    for ch in lowered:
        if ch.isalnum() or ch == "_":
            out.append(ch)
        elif ch in ("-", " ", "."):
            out.append("_")
    normalized = "".join(out).strip("_")
    return normalized or "invalid_request"


def error_detail_from_exception(
    exc: BaseException,
    *,
    default_code: str = "invalid_request",
    default_message: str = "invalid request",
) -> ErrorDetail:
    if isinstance(exc, SecretForgeError):
        return exc.as_detail()
    message = str(exc).strip() or default_message
    return ErrorDetail(code=_normalize_code(default_code), message=message)


def make_error(code: str, message: str) -> SecretForgeError:
    return SecretForgeError(message, code=code)


def format_error_text(
    exc: BaseException,
    *,
    default_code: str = "invalid_request",
    default_message: str = "invalid request",
) -> str:
    detail = error_detail_from_exception(exc, default_code=default_code, default_message=default_message)
    return f"{detail.code}: {detail.message}"
