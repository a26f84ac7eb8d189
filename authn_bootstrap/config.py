"""Typed authenticator configuration built from validated settings."""

import logging
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
    model_validator,
)

from authn_bootstrap import constants
from authn_bootstrap.errors import CertificateUnavailableError
from authn_bootstrap.file_handler import read_file as read_file_from_disk
from authn_bootstrap.validation import AuthnMode, ReadFile, parse_duration


logger = logging.getLogger(__name__)

# Fields that must be set on top of url and account, per mode
_MODE_FIELDS = {
    AuthnMode.KUBERNETES: ("username", "pod_name", "pod_namespace"),
    AuthnMode.JWT: ("jwt_token_path",),
}


class Config(BaseModel):
    """Configuration consumed by the authentication flow.

    Settings are immutable per runtime. A Config cannot be created unless the
    fields required by its authentication mode are set.
    """

    model_config = ConfigDict(frozen=True)

    authn_mode: AuthnMode
    url: str = Field(min_length=1)
    account: str = Field(min_length=1)
    username: str | None = None
    pod_name: str | None = None
    pod_namespace: str | None = None
    jwt_token_path: Path | None = None
    container_mode: str = ""
    conjur_version: str = constants.DEFAULT_CONJUR_VERSION
    client_cert_retry_count_limit: NonNegativeInt
    token_timeout: timedelta
    ssl_certificate: bytes = Field(repr=False)
    client_cert_path: Path
    token_file_path: Path

    @field_validator("token_timeout", mode="before")
    @classmethod
    def parse_token_timeout(cls, value):
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @model_validator(mode="after")
    def check_mode_fields(self) -> "Config":
        if self.authn_mode is AuthnMode.UNRECOGNIZED:
            raise ValueError("authentication mode is not recognized")
        missing = [
            name for name in _MODE_FIELDS[self.authn_mode] if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"{', '.join(missing)} must be set in {self.authn_mode.value} mode"
            )
        return self


def resolve_certificate(settings: Mapping[str, str], read_file: ReadFile) -> bytes:
    """Return the inline certificate, or the content of the certificate file.

    Raises:
        CertificateUnavailableError: If the certificate file cannot be read
    """
    ssl_certificate = settings.get(constants.SSL_CERTIFICATE)
    if ssl_certificate:
        return ssl_certificate.encode("utf-8")

    cert_file = settings.get(constants.CERT_FILE, "")
    try:
        return read_file(cert_file)
    except OSError as e:
        logger.error("Failed to read certificate file '%s': %s", cert_file, e)
        raise CertificateUnavailableError(cert_file) from e


def build(
    settings: Mapping[str, str], read_file: ReadFile = read_file_from_disk
) -> Config:
    """Build the configuration from settings that passed validation.

    Args:
        settings: Raw settings with an empty validation error list
        read_file: Reads the certificate file when no inline certificate is set

    Returns:
        Config: The typed configuration

    Raises:
        pydantic.ValidationError: If a required setting is unexpectedly missing
        CertificateUnavailableError: If the certificate file cannot be read
    """

    def optional(name: str) -> str | None:
        return settings.get(name) or None

    return Config(
        authn_mode=AuthnMode.from_url(settings.get(constants.AUTHN_URL)),
        url=settings.get(constants.AUTHN_URL),
        account=settings.get(constants.ACCOUNT),
        username=optional(constants.AUTHN_LOGIN),
        pod_name=optional(constants.POD_NAME),
        pod_namespace=optional(constants.POD_NAMESPACE),
        jwt_token_path=optional(constants.JWT_TOKEN_PATH),
        container_mode=settings.get(constants.CONTAINER_MODE, ""),
        conjur_version=optional(constants.CONJUR_VERSION)
        or constants.DEFAULT_CONJUR_VERSION,
        client_cert_retry_count_limit=optional(constants.CLIENT_CERT_RETRY_COUNT_LIMIT)
        or constants.DEFAULT_CLIENT_CERT_RETRY_COUNT_LIMIT,
        token_timeout=optional(constants.TOKEN_TIMEOUT)
        or constants.DEFAULT_TOKEN_TIMEOUT,
        ssl_certificate=resolve_certificate(settings, read_file),
        client_cert_path=optional(constants.CLIENT_CERT_PATH)
        or constants.DEFAULT_CLIENT_CERT_PATH,
        token_file_path=optional(constants.TOKEN_FILE_PATH)
        or constants.DEFAULT_TOKEN_FILE_PATH,
    )
