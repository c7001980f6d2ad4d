from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC now; columns never get naive datetimes."""
    return datetime.now(timezone.utc)
