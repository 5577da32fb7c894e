"""
Delivery-day phrases as posted by Posten, e.g. ``i morgen onsdag 29. desember``.

The phrase carries weekday, day of month and month but no year; the year is
taken from the time of the request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

WEEKDAYS = {
    "mandag": 0,
    "tirsdag": 1,
    "onsdag": 2,
    "torsdag": 3,
    "fredag": 4,
    "lørdag": 5,
    "søndag": 6,
}

WEEKDAY_NAMES = {v: k for k, v in WEEKDAYS.items()}

MONTHS = {
    "januar": 1,
    "februar": 2,
    "mars": 3,
    "april": 4,
    "mai": 5,
    "juni": 6,
    "juli": 7,
    "august": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "desember": 12,
}

MONTH_NAMES = {v: k for k, v in MONTHS.items()}

DELIVERY_DAY_RE = re.compile(
    r"^(?:i (?:dag|morgen) )?(?P<dayname>{days}) (?P<day>\d+)\. (?P<month>{months})$".format(
        days="|".join(WEEKDAYS),
        months="|".join(MONTHS),
    )
)


@dataclass(frozen=True)
class DeliveryDay:
    weekday: int
    day: int
    month: int

    def to_date(self, now: datetime | date) -> date:
        year = now.year
        if now.month == 12 and self.month != 12:
            year += 1
        resolved = date(year, self.month, self.day)
        if resolved.weekday() != self.weekday:
            raise ValueError(
                f"Weekday mismatch: {WEEKDAY_NAMES[self.weekday]} {self.day}. "
                f"{MONTH_NAMES[self.month]} resolved to {resolved.isoformat()}"
            )
        return resolved


def parse_delivery_day(text: str) -> DeliveryDay:
    match = DELIVERY_DAY_RE.match(text.strip())
    if not match:
        raise ValueError(f"Unrecognized delivery day: {text!r}")
    return DeliveryDay(
        weekday=WEEKDAYS[match.group("dayname")],
        day=int(match.group("day")),
        month=MONTHS[match.group("month")],
    )


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]
