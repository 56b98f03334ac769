from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return current UTC time truncated to milliseconds.

    BSON dates carry millisecond precision, so truncating up front keeps the
    value returned to callers identical to the stored one.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
