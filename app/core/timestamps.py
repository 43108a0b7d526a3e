from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Fixed-width ISO-8601 UTC timestamp; sorts lexicographically in time order."""
    return utc_now().isoformat(timespec="microseconds")


def today_iso() -> str:
    return date.today().isoformat()
