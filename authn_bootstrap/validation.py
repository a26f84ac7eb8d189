"""Validation rules for the authenticator settings.

Every rule runs on every pass, so a single call to ``validate`` reports all
configuration problems at once instead of stopping at the first one.
"""

import logging
import re
from collections.abc import Callable, Mapping
from datetime import timedelta
from enum import Enum

from authn_bootstrap import constants
from authn_bootstrap.errors import (
    CertificateUnavailable,
    InvalidFormat,
    InvalidType,
    MissingRequiredSetting,
    SettingError,
)


logger = logging.getLogger(__name__)

ReadFile = Callable[[str], bytes]

_LOGIN_PATTERN = re.compile(r"host(/[^/]+)*")
_RETRY_COUNT_PATTERN = re.compile(r"[0-9]+")
_DURATION_PART = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class AuthnMode(Enum):
    """Authentication style selected from the authenticator URL."""

    KUBERNETES = "authn-k8s"
    JWT = "authn-jwt"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_url(cls, url: str | None) -> "AuthnMode":
        if url and constants.K8S_AUTHENTICATOR in url:
            return cls.KUBERNETES
        if url and constants.JWT_AUTHENTICATOR in url:
            return cls.JWT
        return cls.UNRECOGNIZED

    @property
    def required_settings(self) -> tuple[str, ...]:
        """Settings that must be non-empty in this mode."""
        return _REQUIRED_SETTINGS[self]


_REQUIRED_SETTINGS = {
    AuthnMode.KUBERNETES: (
        constants.AUTHN_URL,
        constants.ACCOUNT,
        constants.AUTHN_LOGIN,
        constants.POD_NAME,
        constants.POD_NAMESPACE,
    ),
    AuthnMode.JWT: (
        constants.AUTHN_URL,
        constants.ACCOUNT,
        constants.JWT_TOKEN_PATH,
    ),
    # The URL is reported by the mode check itself
    AuthnMode.UNRECOGNIZED: (constants.ACCOUNT,),
}


def parse_duration(value: str) -> timedelta:
    """Parse a duration string such as ``6m0s``, ``1.5h`` or ``300ms``.

    Raises:
        ValueError: If the value is not a valid duration
    """
    text = value
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    seconds = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError as e:
        raise ValueError(f"duration {value!r} is out of range") from e


def is_valid_login(login: str) -> bool:
    return _LOGIN_PATTERN.fullmatch(login) is not None


def is_valid_path(path: str) -> bool:
    """Check that a path has no NUL bytes, empty or relative components."""
    if not path or "\0" in path or "//" in path:
        return False
    parts = path.strip("/").split("/")
    return all(part not in ("", ".", "..") for part in parts)


def check_mode(settings: Mapping[str, str], mode: AuthnMode, _: ReadFile):
    if mode is AuthnMode.UNRECOGNIZED:
        logger.debug(
            "Cannot detect authenticator from %s=%r",
            constants.AUTHN_URL,
            settings.get(constants.AUTHN_URL),
        )
        return [MissingRequiredSetting(constants.AUTHN_URL)]
    return []


def check_required(settings: Mapping[str, str], mode: AuthnMode, _: ReadFile):
    return [
        MissingRequiredSetting(name)
        for name in mode.required_settings
        if not settings.get(name)
    ]


def check_login(settings: Mapping[str, str], mode: AuthnMode, _: ReadFile):
    login = settings.get(constants.AUTHN_LOGIN)
    if login and not is_valid_login(login):
        return [InvalidFormat(constants.AUTHN_LOGIN, login)]
    return []


def check_jwt_token_path(settings: Mapping[str, str], mode: AuthnMode, _: ReadFile):
    path = settings.get(constants.JWT_TOKEN_PATH)
    if path and not is_valid_path(path):
        return [InvalidFormat(constants.JWT_TOKEN_PATH, path)]
    return []


def check_retry_count_limit(
    settings: Mapping[str, str], mode: AuthnMode, _: ReadFile
):
    value = settings.get(constants.CLIENT_CERT_RETRY_COUNT_LIMIT)
    if value and _RETRY_COUNT_PATTERN.fullmatch(value) is None:
        return [InvalidType(constants.CLIENT_CERT_RETRY_COUNT_LIMIT, value)]
    return []


def check_token_timeout(settings: Mapping[str, str], mode: AuthnMode, _: ReadFile):
    value = settings.get(constants.TOKEN_TIMEOUT)
    if value:
        try:
            parse_duration(value)
        except ValueError:
            return [InvalidType(constants.TOKEN_TIMEOUT, value)]
    return []


def check_certificate(
    settings: Mapping[str, str], mode: AuthnMode, read_file: ReadFile
):
    """Check that the CA certificate is set inline or is readable from a file.

    Both causes are reported as a single error, the detail is only logged.
    """
    if settings.get(constants.SSL_CERTIFICATE):
        return []

    cert_file = settings.get(constants.CERT_FILE)
    if not cert_file:
        logger.debug(
            "Neither %s nor %s is set", constants.SSL_CERTIFICATE, constants.CERT_FILE
        )
        return [CertificateUnavailable()]

    try:
        read_file(cert_file)
    except OSError as e:
        logger.debug("Failed to read certificate file '%s': %s", cert_file, e)
        return [CertificateUnavailable()]
    return []


RULES = (
    check_mode,
    check_required,
    check_login,
    check_jwt_token_path,
    check_retry_count_limit,
    check_token_timeout,
    check_certificate,
)


def validate(settings: Mapping[str, str], read_file: ReadFile) -> list[SettingError]:
    """Run every validation rule and collect the errors.

    Args:
        settings: Raw settings to validate
        read_file: Reads a file and returns its content, raising OSError on failure

    Returns:
        list[SettingError]: Errors in rule order, empty when settings are valid
    """
    mode = AuthnMode.from_url(settings.get(constants.AUTHN_URL))
    logger.debug("Validating settings for %s mode", mode.name.lower())

    errors: list[SettingError] = []
    for rule in RULES:
        errors.extend(rule(settings, mode, read_file))
    return errors
