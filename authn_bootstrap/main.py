#!/usr/bin/env python3
"""Main entrypoint for the Conjur authenticator bootstrap."""

import argparse
import json
import logging
import sys
from typing import cast

from pydantic import ValidationError

from authn_bootstrap import constants
from authn_bootstrap.config import build
from authn_bootstrap.errors import ReadinessError, SettingError
from authn_bootstrap.file_handler import read_file, wait_for_file
from authn_bootstrap.settings import AuthnSettings
from authn_bootstrap.validation import validate


class Args(argparse.Namespace):
    log_level: str
    rich_logs: bool
    print_config_and_exit: bool
    skip_cert_wait: bool


logger = logging.getLogger(__name__)


def parse_args() -> Args:
    """Parse command line arguments.

    The authenticator itself is configured through environment variables only.
    """
    parser = argparse.ArgumentParser(
        description="Conjur authenticator bootstrap",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set the logging level",
    )

    parser.add_argument(
        "--rich-logs",
        action="store_true",
        help="Enable rich colored logging output",
    )

    parser.add_argument(
        "--print-config-and-exit",
        action="store_true",
        help="Print the resolved configuration as JSON and exit without waiting for the client certificate",
    )

    parser.add_argument(
        "--skip-cert-wait",
        action="store_true",
        help="Do not wait for the client certificate to be injected",
    )

    return cast(Args, parser.parse_args())


def configure_logging(log_level: str, use_rich: bool = False) -> None:
    """Configure logging with optional rich formatting.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_rich: Whether to use rich colored logging
    """
    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(message)s",
            datefmt="[%X]",
            handlers=[
                RichHandler(
                    console=Console(stderr=True),
                    show_path=True,
                    show_time=True,
                    show_level=True,
                    markup=False,
                    rich_tracebacks=True,
                )
            ],
        )
    else:
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(asctime)s [%(name)s:%(filename)s:%(lineno)d] %(levelname)s: %(message)s",
        )


def main() -> int:
    """Main function."""
    args = parse_args()

    configure_logging(args.log_level, args.rich_logs)

    logger.info("Starting Conjur authenticator bootstrap")

    try:
        settings = AuthnSettings.from_env()

        errors = validate(settings, read_file)
        if errors:
            for error in errors:
                logger.error("%s", error)
            logger.error("Invalid config, found %d error(s)", len(errors))
            return 1

        config = build(settings, read_file)
        logger.info(
            "Loaded configuration for %s mode (account: %s)",
            config.authn_mode.value,
            config.account,
        )

        if args.print_config_and_exit:
            logger.info("Printing resolved configuration")
            # The CA certificate may be binary (DER)
            config_dict_clean = config.model_dump(
                mode="json", exclude={"ssl_certificate"}
            )
            print(json.dumps(config_dict_clean, indent=2, sort_keys=True))
            return 0

        if args.skip_cert_wait:
            logger.info("Skipping wait for the client certificate")
            return 0

        logger.info("Waiting for the client certificate")
        wait_for_file(
            config.client_cert_path,
            config.client_cert_retry_count_limit,
            source_path=constants.CLIENT_CERT_SOURCE_PATH,
        )

    except ValidationError as e:
        logger.error(
            "Invalid config\n"
            + "\n".join(
                [
                    f"{'.'.join([str(loc) for loc in err['loc']])}: {err['msg']}"
                    for err in e.errors()
                ]
            )
        )
        return 1
    except SettingError as e:
        logger.error("Invalid config: %s", e)
        return 1
    except ReadinessError as e:
        logger.error("Client certificate is not ready: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Bootstrap stopped by user")
        return 0
    except Exception as e:
        logger.error("Error running bootstrap: %s", e, exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
