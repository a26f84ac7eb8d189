"""File operations for the client certificate.

The Conjur server writes the signed client certificate to a fixed location
out of process. This module polls for it with a bounded backoff and moves it
to the path the authenticator expects.
"""

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path
from stat import S_ISREG

from authn_bootstrap import constants
from authn_bootstrap.errors import (
    FileRelocationError,
    FilePermissionError,
    NotRegularFileError,
    RetryExhaustedError,
)

logger = logging.getLogger(__name__)


def read_file(path: str) -> bytes:
    """Read the whole content of a file.

    Raises:
        OSError: If the file cannot be read
    """
    return Path(path).read_bytes()


class FileUtils:
    """Filesystem operations used while waiting for a file."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def is_regular(self, info: os.stat_result) -> bool:
        return S_ISREG(info.st_mode)

    def rename(self, source: str, target: str) -> None:
        os.rename(source, target)


OS_FILE_UTILS = FileUtils()


class LimitedBackOff:
    """Growing retry intervals, stopping once the retry count limit is passed."""

    def __init__(
        self,
        initial_interval: float,
        retry_count_limit: int,
        max_interval: float = constants.CLIENT_CERT_POLL_MAX_INTERVAL,
    ):
        """
        Args:
            initial_interval: Delay before the first retry, in seconds
            retry_count_limit: Number of retries allowed after the first attempt
            max_interval: Upper bound for a single delay, in seconds
        """
        self.initial_interval = initial_interval
        self.retry_count_limit = retry_count_limit
        self.max_interval = max_interval
        self.retry_count = 0
        self.current_interval = initial_interval

    def next_backoff(self) -> float | None:
        """Return the delay before the next retry, or None when out of retries."""
        self.retry_count += 1
        if self.retry_count > self.retry_count_limit:
            return None
        interval = min(self.current_interval, self.max_interval)
        self.current_interval = min(self.current_interval * 2, self.max_interval)
        return interval


def verify_file_exists(path: str, utilities: FileUtils = OS_FILE_UTILS) -> None:
    """Verify that a regular file exists at the given path.

    Raises:
        FilePermissionError: If permissions forbid checking the path
        NotRegularFileError: If the path exists but is not a regular file
        OSError: If the path cannot be stat'ed, e.g. FileNotFoundError
    """
    try:
        info = utilities.stat(path)
    except PermissionError as e:
        raise FilePermissionError(path) from e
    if not utilities.is_regular(info):
        raise NotRegularFileError(path)


def wait_for_file(
    path: str | Path,
    retry_count_limit: int,
    source_path: str | Path | None = None,
    utilities: FileUtils = OS_FILE_UTILS,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Wait for the client certificate to appear, then move it to `path`.

    The file is checked once, then retried up to `retry_count_limit` times
    with a growing delay between checks.

    Args:
        path: Target path for the certificate
        retry_count_limit: Number of retries after the first check
        source_path: Where the certificate is written, defaults to
            CLIENT_CERT_SOURCE_PATH
        utilities: Filesystem operations
        sleep: Function used to wait between checks

    Raises:
        FilePermissionError: If permissions forbid checking the source path
        RetryExhaustedError: If no regular file appeared in time
        FileRelocationError: If the file cannot be moved to `path`
    """
    if source_path is None:
        source_path = constants.CLIENT_CERT_SOURCE_PATH
    source_path = str(source_path)
    path = str(path)

    backoff = LimitedBackOff(constants.CLIENT_CERT_POLL_INTERVAL, retry_count_limit)
    while True:
        if backoff.retry_count > 0:
            logger.debug(
                "Waiting for file %s to be created (retry %d/%d)",
                source_path,
                backoff.retry_count,
                retry_count_limit,
            )
        try:
            verify_file_exists(source_path, utilities)
            break
        except (OSError, NotRegularFileError) as e:
            interval = backoff.next_backoff()
            if interval is None:
                logger.error("Giving up waiting for %s: %s", source_path, e)
                raise RetryExhaustedError(retry_count_limit, source_path) from e
            sleep(interval)

    logger.debug("Found regular file %s", source_path)
    try:
        utilities.rename(source_path, path)
    except OSError as e:
        logger.error("Failed to move '%s' to '%s': %s", source_path, path, e)
        raise FileRelocationError(path) from e
    logger.info("Client certificate is available at %s", path)
