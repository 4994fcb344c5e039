from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    Columns are TIMESTAMP WITHOUT TIME ZONE and hold UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a client-supplied datetime to naive UTC for storage.

    Aware values are converted; naive values are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
