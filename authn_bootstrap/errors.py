"""Error types raised or collected while bootstrapping the authenticator.

Configuration problems are collected by the validator as ``SettingError``
values so that every problem can be reported in one run. Readiness problems
are raised as ``ReadinessError`` as soon as they occur.
"""


class SettingError(Exception):
    """Base class for configuration errors.

    Instances compare equal when they are of the same type and carry the same
    parameters, so a list of errors can be checked with ``in``.
    """

    template = "Invalid configuration"

    def __init__(self, *params: str):
        self.params = params
        super().__init__(self.template.format(*params))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.params == other.params

    def __hash__(self) -> int:
        return hash((type(self), self.params))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.params!r}"


class MissingRequiredSetting(SettingError):
    """A setting required by the detected authentication mode is not set."""

    template = "Required setting {0} is not provided"

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


class InvalidFormat(SettingError):
    """A setting is present but its value is structurally wrong."""

    template = "Setting {0} has an invalid format: {1}"

    def __init__(self, name: str, value: str):
        super().__init__(name, value)
        self.name = name
        self.value = value


class InvalidType(SettingError):
    """A setting is present but its value cannot be parsed to its type."""

    template = "Setting {0} has an invalid value type: {1}"

    def __init__(self, name: str, value: str):
        super().__init__(name, value)
        self.name = name
        self.value = value


class CertificateUnavailable(SettingError):
    """Neither an inline nor a file based certificate can be resolved."""

    template = (
        "At least one of CONJUR_SSL_CERTIFICATE and CONJUR_CERT_FILE "
        "must be provided and readable"
    )


class CertificateUnavailableError(CertificateUnavailable):
    """Raised by the config builder when the certificate file cannot be read."""

    template = "Failed to read certificate file {0}"


class ReadinessError(Exception):
    """Base class for errors raised while waiting for the client certificate."""


class FilePermissionError(ReadinessError):
    """Raised when the permissions forbid checking if the file exists."""

    def __init__(self, path: str):
        super().__init__(f"Permission denied when checking that {path} exists")
        self.path = path


class NotRegularFileError(ReadinessError):
    """Raised when the path exists but does not hold a regular file."""

    def __init__(self, path: str):
        super().__init__(f"Path {path} exists but is not a regular file")
        self.path = path


class FileRelocationError(ReadinessError):
    """Raised when the client certificate cannot be moved to its target path."""

    def __init__(self, path: str):
        super().__init__(f"Certificate file {path} not created")
        self.path = path


class RetryExhaustedError(ReadinessError):
    """Raised when the file did not appear within the retry count limit."""

    def __init__(self, retry_count_limit: int, path: str):
        super().__init__(
            f"Certificate file {path} did not appear "
            f"after {retry_count_limit} retries"
        )
        self.retry_count_limit = retry_count_limit
        self.path = path
