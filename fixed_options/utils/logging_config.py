"""Logging setup shared by the CLI and the Streamlit explorer."""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
PACKAGE_LOGGER = "fixed_options"


def configure_logging(level: str = "", verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the root logger.

    Priority: verbose > quiet > level argument > LOG_LEVEL env > WARNING.
    The engine logs solver iterations at DEBUG, so the default stays quiet.
    """
    if verbose:
        effective = logging.DEBUG
    elif quiet:
        effective = logging.ERROR
    elif level:
        effective = getattr(logging, level.upper(), logging.WARNING)
    else:
        env_level = os.environ.get("LOG_LEVEL", "WARNING")
        effective = getattr(logging, env_level.upper(), logging.WARNING)

    logging.basicConfig(level=effective, format=LOG_FORMAT, force=True)
    logging.getLogger(PACKAGE_LOGGER).setLevel(effective)
