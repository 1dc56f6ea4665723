"""
Cron-style schedule matching.

Cron format: minute hour day-of-month month day-of-week (0=Sunday).
Each field supports ``*``, plain numbers, ranges (``1-5``), lists
(``1,3,5``) and steps (``*/15``). Malformed fields never match.
"""

from src.activation.domain.models import ClockReading, Schedule


def _parse_uint(value: str) -> int | None:
    if value.isascii() and value.isdigit():
        return int(value)
    return None


def matches_field(field: str, value: int) -> bool:
    """Check if a single cron field matches a value."""
    if field == "*":
        return True

    if "," in field:
        return any(matches_field(part.strip(), value) for part in field.split(","))

    if "-" in field:
        bounds = field.split("-")
        if len(bounds) != 2:
            return False
        start, end = _parse_uint(bounds[0]), _parse_uint(bounds[1])
        if start is None or end is None:
            return False
        return start <= value <= end

    if field.startswith("*/"):
        step = _parse_uint(field[2:])
        return step is not None and step > 0 and value % step == 0

    number = _parse_uint(field)
    return number is not None and value == number


def should_trigger(schedule: Schedule, now: ClockReading) -> bool:
    """
    Check if a schedule fires at the given instant.

    Must be evaluated at most once per wall-clock minute; the caller is
    responsible for that cadence.
    """
    if not schedule.enabled:
        return False

    parts = schedule.cron_expression.split()
    if len(parts) != 5:
        return False

    values = (now.minute, now.hour, now.day_of_month, now.month, now.weekday)
    return all(matches_field(part, value) for part, value in zip(parts, values))


def triggered_schedules(schedules: list[Schedule], now: ClockReading) -> list[Schedule]:
    """Return the schedules that fire at the given instant, in input order."""
    return [s for s in schedules if should_trigger(s, now)]


def check_schedules(schedules: list[Schedule], now: ClockReading) -> list[str]:
    """
    Check all schedules and return profile IDs that should be activated.

    Duplicates are preserved when several schedules target the same profile.
    """
    return [s.profile_id for s in triggered_schedules(schedules, now)]


def parse_time(time_str: str) -> tuple[int, int] | None:
    """Parse an 'HH:MM' string into (hour, minute)."""
    parts = time_str.split(":")
    if len(parts) != 2:
        return None

    hour, minute = _parse_uint(parts[0]), _parse_uint(parts[1])
    if hour is None or minute is None or hour >= 24 or minute >= 60:
        return None
    return hour, minute


def cron_daily_at(hour: int, minute: int) -> str:
    """Create a cron expression for a specific time every day."""
    return f"{minute} {hour} * * *"


def cron_weekdays_at(hour: int, minute: int, days: str) -> str:
    """
    Create a cron expression for specific weekdays at a time.

    Args:
        hour: Hour of day (0-23)
        minute: Minute of hour (0-59)
        days: Cron day-of-week field, e.g. "1-5" or "0,6" (0=Sunday)
    """
    return f"{minute} {hour} * * {days}"
