"""Date and time utilities."""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
from typing import TYPE_CHECKING, Any

from dateutil import parser as dateutil_parser

from postlint.utils.exceptions import DateTimeParsingError, InvalidDateTimeInputError

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_datetime_flexible(
    value: datetime | date | str | Any | None,
    *,
    default_timezone: tzinfo = UTC,
    parser_kwargs: Mapping[str, Any] | None = None,
) -> datetime:
    """Parse a front matter timestamp.

    YAML already turns unquoted ISO dates into ``date``/``datetime`` objects, while
    quoted or Jekyll-style values (``2023-05-01 10:00:00 +0900``) arrive as strings.

    Args:
        value: Datetime-like input. ``None`` or blank strings raise.
        default_timezone: Timezone assigned to naive datetimes.
        parser_kwargs: Extra keyword arguments forwarded to ``dateutil.parser``.

    Returns:
        A timezone-aware ``datetime``.

    Raises:
        InvalidDateTimeInputError: if the input is None or an empty string.
        DateTimeParsingError: if parsing fails.

    """
    dt = _to_datetime(value, parser_kwargs=parser_kwargs)
    return normalize_timezone(dt, default_timezone=default_timezone)


def _to_datetime(value: Any, *, parser_kwargs: Mapping[str, Any] | None = None) -> datetime:
    if value is None:
        raise InvalidDateTimeInputError("None", "Input value cannot be None")

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, bool | int | float):
        raise InvalidDateTimeInputError(str(value), "Numbers are not timestamps")

    raw = str(value).strip()
    if not raw:
        raise InvalidDateTimeInputError(str(value), "Input value cannot be an empty or whitespace-only string")

    try:
        return dateutil_parser.parse(raw, **(parser_kwargs or {}))
    except (TypeError, ValueError, OverflowError) as e:
        raise DateTimeParsingError(raw, e) from e


def normalize_timezone(dt: datetime, *, default_timezone: tzinfo = UTC) -> datetime:
    """Make a naive datetime aware; leave aware ones in their own zone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=default_timezone)
    return dt


__all__ = ["normalize_timezone", "parse_datetime_flexible"]
