import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.constants import (
    CUSTOM_TIMEFRAME_DAYS,
    PACE_DECIMALS,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SPEED_DECIMALS,
)


def hhmmss_to_seconds(hhmmss: str) -> int:
    """
    Convert 'HH:MM:SS' -> total seconds (int).
    Example: '00:45:32' -> 2732
    """
    parts = hhmmss.split(":")
    if len(parts) != 3:
        raise ValueError("Duration must be in HH:MM:SS format")

    hours, minutes, seconds = map(int, parts)
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def compute_pace(duration_seconds: int, distance_km: float) -> Optional[float]:
    """
    Pace in minutes per kilometer, rounded for display.
    Example: duration=1500 sec, distance=5.0 -> 5.0
    Returns None when either input is not positive.
    """
    if distance_km is None or duration_seconds is None:
        return None
    if distance_km <= 0 or duration_seconds <= 0:
        return None
    return round(duration_seconds / SECONDS_PER_MINUTE / distance_km, PACE_DECIMALS)


def compute_speed(duration_seconds: int, distance_km: float) -> Optional[float]:
    """Speed in km/h, rounded for display. None when either input is not positive."""
    if distance_km is None or duration_seconds is None:
        return None
    if distance_km <= 0 or duration_seconds <= 0:
        return None
    return round(distance_km / (duration_seconds / SECONDS_PER_HOUR), SPEED_DECIMALS)


def format_pace(pace: Optional[float]) -> str:
    """
    Format pace (min/km) as 'M:SS'.
    Example: 5.5 -> '5:30'; None or <= 0 -> 'N/A'
    """
    if pace is None or pace <= 0:
        return "N/A"
    minutes = int(pace)
    seconds = round((pace - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d}"


def to_local_datetime(dt: datetime, tz_name: str | None = None) -> datetime:
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo

        return dt.astimezone(ZoneInfo(tz_name))
    return dt.astimezone()


def to_naive_local(dt: Optional[datetime], tz_name: str | None = None) -> Optional[datetime]:
    """Normalize request timestamps for storage.

    Naive values are taken as already local and returned as-is; aware values
    are converted to the configured timezone and stripped of tzinfo so every
    stored timestamp is comparable with every other.
    """
    if dt is None or dt.tzinfo is None:
        return dt
    return to_local_datetime(dt, tz_name).replace(tzinfo=None)


def add_months(dt: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length.

    Example: 2025-01-31 + 1 month -> 2025-02-28
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def timeframe_end(start: datetime, timeframe: str) -> datetime:
    """Default end of a goal window starting at `start` for a timeframe tag."""
    if timeframe == "Weekly":
        return start + timedelta(weeks=1)
    if timeframe == "Monthly":
        return add_months(start, 1)
    if timeframe == "Yearly":
        return add_months(start, 12)
    return start + timedelta(days=CUSTOM_TIMEFRAME_DAYS)
