from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class BusinessHours:
    # Monday=0 .. Sunday=6, each a tuple of (open, close) windows
    weekly: tuple[tuple[tuple[time, time], ...], ...]

    @staticmethod
    def uniform(windows: list[tuple[time, time]], closed_weekdays: tuple[int, ...] = ()) -> "BusinessHours":
        ordered = tuple(sorted(windows))
        return BusinessHours(
            weekly=tuple(() if day in closed_weekdays else ordered for day in range(7))
        )

    def windows_for(self, day: date) -> tuple[tuple[time, time], ...]:
        return self.weekly[day.weekday()]

    def contains(self, day: date, start: time, end: time) -> bool:
        return any(open_ <= start and end <= close for open_, close in self.windows_for(day))
