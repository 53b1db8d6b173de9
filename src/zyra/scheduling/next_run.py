"""Next-run computation for interval, cron and once schedules.

The cron evaluator is deliberately partial. It accepts any five
space-separated fields but only honors minute and hour as literal
integers; day-of-month, month and day-of-week are accepted and ignored.
When the resulting time is not after ``from_`` it rolls forward exactly
one day. ``"0 9 * * 1"`` therefore fires every day at 09:00, not only on
Mondays. Schedules already stored depend on this behavior, so it must not
be silently widened into a full cron implementation.

    calculate_next_cron_run("0 9 * * *", 10:00 on Jan 1)  ->  09:00 on Jan 2
    calculate_next_cron_run("30 * * * *", 10:10)          ->  10:30 same day
    calculate_next_cron_run("*/5 * * * *", ...)           ->  None (logged)
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo

from zyra.core.errors import ScheduleError
from zyra.core.logging import get_logger
from zyra.core.timestamps import from_iso8601, utc_now

from .models import ScheduleSpec, WorkflowSchedule

logger = get_logger(__name__)

_UNIT_DELTAS = {
    "minutes": lambda value: timedelta(minutes=value),
    "hours": lambda value: timedelta(hours=value),
    "days": lambda value: timedelta(days=value),
}


def _cron_time(cron_expression: str) -> tuple[int | None, int | None]:
    """Split out the (minute, hour) fields; ``None`` stands for ``*``.

    Raises:
        ScheduleError: Not five fields, or minute/hour not plain integers.
    """
    parts = cron_expression.split(" ")
    if len(parts) != 5:
        raise ScheduleError(f"Expected 5 cron fields, got {len(parts)}")

    minute, hour = parts[0], parts[1]
    try:
        return (
            None if minute == "*" else int(minute),
            None if hour == "*" else int(hour),
        )
    except ValueError as e:
        raise ScheduleError(f"Unsupported cron field in {cron_expression!r}", cause=e) from e


def calculate_next_cron_run(cron_expression: str, from_: datetime) -> datetime | None:
    """Compute the next run of a five-field cron expression after ``from_``.

    Hour and minute are applied in ``from_``'s timezone.

    Returns:
        Next run, or ``None`` when the expression does not have exactly five
        fields or its minute/hour fields are not plain integers in range.
    """
    try:
        minute, hour = _cron_time(cron_expression)
        next_run = from_.replace(second=0, microsecond=0)
        if minute is not None:
            next_run = next_run.replace(minute=minute)
        if hour is not None:
            next_run = next_run.replace(hour=hour)
    except (ScheduleError, ValueError) as e:
        logger.warning("cron_parse_failed", cron=cron_expression, error=str(e))
        return None

    if next_run <= from_:
        next_run = next_run + timedelta(days=1)

    return next_run


def calculate_next_run(
    schedule: WorkflowSchedule | ScheduleSpec,
    now: datetime | None = None,
    tz: tzinfo = UTC,
    last_run: str | None = None,
) -> datetime | None:
    """Compute when a schedule should next fire.

    Args:
        schedule: A stored schedule, or a bare spec (then ``last_run`` is used).
        now: Reference time; defaults to the current UTC time.
        tz: Zone in which day arithmetic and cron hour/minute are evaluated,
            and in which a ``once`` value without an offset is read.
        last_run: ISO timestamp of the previous run, for bare specs.

    Returns:
        - interval: ``lastRun`` (or now) plus ``value`` ``unit``
        - once: the target time if still in the future, else ``None``
        - cron: see :func:`calculate_next_cron_run`
        - ``None`` when the sub-spec for the type is missing
    """
    now = now or utc_now()
    if isinstance(schedule, WorkflowSchedule):
        spec = schedule.schedule
        last_run = schedule.last_run
    else:
        spec = schedule

    if spec.type == "interval":
        if spec.interval is None:
            return None
        base = from_iso8601(last_run) or now
        return base.astimezone(tz) + _UNIT_DELTAS[spec.interval.unit](spec.interval.value)

    if spec.type == "once":
        if not spec.once:
            return None
        try:
            target = from_iso8601(spec.once, tz)
        except ValueError as e:
            logger.warning("once_datetime_invalid", once=spec.once, error=str(e))
            return None
        return target if target > now else None

    if spec.type == "cron":
        if not spec.cron:
            return None
        return calculate_next_cron_run(spec.cron, now.astimezone(tz))

    return None
