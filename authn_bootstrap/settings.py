"""Raw authenticator settings as read from the process environment."""

from collections.abc import Iterator, Mapping
from os import environ
from types import MappingProxyType

from authn_bootstrap.constants import SETTING_NAMES


class AuthnSettings(Mapping[str, str]):
    """Immutable mapping from setting name to its raw string value.

    No parsing and no defaults happen here; a missing key means the setting
    was not provided.
    """

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values = MappingProxyType(dict(values or {}))

    @classmethod
    def from_env(cls, env: Mapping[str, str] = environ) -> "AuthnSettings":
        """Collect the known settings from environment variables."""
        return cls({name: env[name] for name in SETTING_NAMES if name in env})

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AuthnSettings({dict(self._values)!r})"
