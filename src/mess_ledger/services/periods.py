"""Resolve report requests into concrete date periods."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from mess_ledger.domain.reports import ReportPeriod
from mess_ledger.services.exceptions import InvalidPeriodError

DECEMBER = 12

Clock = Callable[[], datetime]
DateInput = str | date | datetime | None


def system_clock() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


@dataclass
class PeriodResolver:
    """Turns explicit ranges, calendar months or "this month" into periods.

    Days are interpreted in ``timezone_name``; the clock is injected so the
    current-month default can be pinned in tests.
    """

    timezone_name: str = "UTC"
    clock: Clock = field(default=system_clock)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    def now(self) -> datetime:
        """Return the clock's current time in the report timezone."""
        return self.clock().astimezone(self.tz)

    def resolve(
        self,
        start: DateInput = None,
        end: DateInput = None,
        *,
        month: int | None = None,
        year: int | None = None,
        default_to_current_month: bool = False,
    ) -> ReportPeriod:
        """Return the period for a report request.

        An explicit range always wins and is validated strictly: a bad
        bound raises ``InvalidPeriodError`` instead of falling back.
        """
        if start is not None or end is not None:
            return self.explicit(start, end)
        if default_to_current_month:
            return self.current_month()
        if month is not None and year is not None:
            return self.calendar_month(month, year)
        raise InvalidPeriodError("No report period was requested")

    def explicit(self, start: DateInput, end: DateInput) -> ReportPeriod:
        """Return the inclusive period between two explicit days."""
        if start is None or end is None:
            raise InvalidPeriodError("Both start and end dates are required")
        start_day = _parse_day(start, "start", self.tz)
        end_day = _parse_day(end, "end", self.tz)
        if start_day > end_day:
            raise InvalidPeriodError(
                f"Start date {start_day.isoformat()} is after end date "
                f"{end_day.isoformat()}"
            )
        return ReportPeriod(
            start=self._start_of(start_day), end=self._end_of(end_day)
        )

    def current_month(self) -> ReportPeriod:
        """Return the month-to-date period ending at the end of today."""
        today = self.now().date()
        return ReportPeriod(
            start=self._start_of(today.replace(day=1)), end=self._end_of(today)
        )

    def calendar_month(self, month: int, year: int) -> ReportPeriod:
        """Return the full calendar month."""
        try:
            first = date(year, month, 1)
            if month == DECEMBER:
                next_first = date(year + 1, 1, 1)
            else:
                next_first = date(year, month + 1, 1)
        except (OverflowError, ValueError) as exc:
            raise InvalidPeriodError(f"Invalid month {month}/{year}") from exc
        last = next_first - timedelta(days=1)
        return ReportPeriod(start=self._start_of(first), end=self._end_of(last))

    def is_closed(self, period: ReportPeriod) -> bool:
        """Return True when the period ended before now."""
        return period.end < self.now()

    def _start_of(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz)

    def _end_of(self, day: date) -> datetime:
        return datetime.combine(day, time.max, tzinfo=self.tz)


def _parse_day(value: str | date | datetime, label: str, tz: ZoneInfo) -> date:
    if isinstance(value, datetime):
        return _local_day(value, tz)
    if isinstance(value, date):
        return value
    raw = value.strip()
    if not raw:
        raise InvalidPeriodError(f"Empty {label} date")
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return _local_day(datetime.fromisoformat(raw), tz)
    except ValueError as exc:
        raise InvalidPeriodError(f"Unparseable {label} date: {value!r}") from exc


def _local_day(value: datetime, tz: ZoneInfo) -> date:
    """Calendar day of ``value`` in the report timezone; naive means local."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(tz).date()
