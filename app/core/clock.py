from datetime import datetime, timezone


class Clock:
    """Source of "now" for every staleness check.

    Timestamps are naive UTC, matching how the columns are stored.
    """

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


_SYSTEM_CLOCK = SystemClock()


# --- FastAPI dependency ---
def get_clock() -> Clock:
    return _SYSTEM_CLOCK
