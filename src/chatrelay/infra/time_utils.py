"""UTC timestamp helpers.

Every timestamp on the wire uses the JavaScript ``toISOString`` shape
(``2024-05-01T12:30:45.123Z``) so browser clients can hand it straight
to ``new Date(...)``.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format *value* as millisecond-precision ISO-8601 with a ``Z`` suffix.

    Naive datetimes are taken to be UTC, which is how BSON dates come
    back from a client created without ``tz_aware``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
