"""
Parsing of the timestamps used by the IPMA open-data feeds
"""

import re
import logging
from datetime import datetime
from constants import IPMA_TIME_FORMAT

logger = logging.getLogger(__name__)

# Sentinel returned for anything that does not parse
EPOCH = datetime(1970, 1, 1)

# Searched, not anchored: "2025-03-20T21:46:00Z" parses like "2025-03-20T21:46:00"
IPMA_TIME_PATTERN = re.compile(r"(\d+)-(\d+)-(\d+)T(\d+):(\d+):(\d+)")


def parse_ipma_time(value) -> datetime:
    """
    Parse an IPMA timestamp (YYYY-MM-DDTHH:MM:SS) into a naive datetime.

    Args:
        value: Raw value from the feed

    Returns:
        Parsed datetime, or EPOCH when the value is missing or malformed
    """
    if not isinstance(value, str):
        return EPOCH

    match = IPMA_TIME_PATTERN.search(value)
    if not match:
        logger.debug(f"Unparsable IPMA timestamp: {value!r}")
        return EPOCH

    try:
        return datetime(*(int(part) for part in match.groups()))
    except (ValueError, OverflowError):
        logger.debug(f"Out of range IPMA timestamp: {value!r}")
        return EPOCH


def format_ipma_time(value: datetime) -> str:
    """Format a datetime the way the IPMA feeds do"""
    return value.strftime(IPMA_TIME_FORMAT)
