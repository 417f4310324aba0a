"""
Logging utilities for the command-line uploader.

Diagnostics go through ``logging``; prompts, progress and the spinner write to the
console directly and share the same stream.
"""

import logging
import sys


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging with the project's line format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # googleapiclient logs every discovery/cache lookup at INFO.
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


__all__ = ["configure_logging"]
