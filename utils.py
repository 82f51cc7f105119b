"""Utility helpers shared across server modules."""

from collections.abc import Iterable
from datetime import datetime

from config import TIMESTAMP_FORMAT


def format_timestamp(moment: datetime | None = None) -> str:
    """Format a timestamp with its numeric UTC offset, local time when naive."""
    if moment is None or moment.tzinfo is None:
        moment = (moment or datetime.now()).astimezone()
    return moment.strftime(TIMESTAMP_FORMAT)


def indent_lines(lines: Iterable[str], prefix: str = "  ") -> str:
    return "\n".join(f"{prefix}{line}" for line in lines)
