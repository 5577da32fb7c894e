from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from postgang.common.delivery import parse_delivery_day, weekday_name
from postgang.common.postal_code import PostalCode
from postgang.common.posten import PostenResponse
from postgang.config.schema import IcsConfig
from postgang.ical.components import vcalendar, vevent
from postgang.ical.model import Section

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryCalendar:
    now: datetime
    dates: list[date]
    prodid: str
    hostname: str
    postal_code: PostalCode
    url: str
    calendar_name: str | None = None


def build_calendar(
    now: datetime,
    response: PostenResponse,
    *,
    postal_code: PostalCode,
    hostname: str,
    url: str,
    ics: IcsConfig,
    version: str,
) -> DeliveryCalendar:
    dates = [parse_delivery_day(text).to_date(now) for text in response.next_delivery_days]
    logger.debug("Resolved %d delivery days for %s", len(dates), postal_code)
    template_args = {"postal_code": str(postal_code), "version": version}
    calendar_name = None
    if ics.calendar_name_template:
        calendar_name = ics.calendar_name_template.format(**template_args)
    return DeliveryCalendar(
        now=now,
        dates=dates,
        prodid=ics.prodid_template.format(**template_args),
        hostname=hostname,
        postal_code=postal_code,
        url=url,
        calendar_name=calendar_name,
    )


def summary_for(postal_code: PostalCode, day: date) -> str:
    return f"{postal_code}: Posten kommer {weekday_name(day)} {day.day}."


def to_vevent(day: date, calendar: DeliveryCalendar) -> Section:
    return vevent(
        uid=f"postgang-{day.strftime('%Y%m%d')}@{calendar.hostname}",
        day=day,
        summary=summary_for(calendar.postal_code, day),
        stamp=calendar.now,
        url=calendar.url,
    )


def to_vcalendar(calendar: DeliveryCalendar) -> Section:
    return vcalendar(
        calendar.prodid,
        [to_vevent(day, calendar) for day in calendar.dates],
        calendar_name=calendar.calendar_name,
    )
