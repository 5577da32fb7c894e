from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from postgang.ical.model import Attribute, Field, Section, new_field, new_section


def date_attribute() -> Attribute:
    return Attribute(name="VALUE", value="DATE")


def _format_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def dt_start(value: date) -> Field:
    return new_field("DTSTART", _format_date(value), date_attribute())


def dt_end(value: date) -> Field:
    return new_field("DTEND", _format_date(value), date_attribute())


def dt_stamp(value: datetime) -> Field:
    return new_field("DTSTAMP", value.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ"))


def vevent(uid: str, day: date, summary: str, stamp: datetime, url: str | None = None) -> Section:
    fields = [
        new_field("UID", uid),
        dt_stamp(stamp),
        dt_start(day),
        dt_end(day + timedelta(days=1)),
        new_field("SUMMARY", summary),
    ]
    if url:
        fields.append(new_field("URL", url))
    return new_section("VEVENT", *fields)


def vcalendar(
    prodid: str,
    events: Iterable[Section],
    *,
    calendar_name: str | None = None,
) -> Section:
    header = [
        new_field("VERSION", "2.0"),
        new_field("PRODID", prodid),
        new_field("CALSCALE", "GREGORIAN"),
        new_field("METHOD", "PUBLISH"),
    ]
    if calendar_name:
        header.append(new_field("X-WR-CALNAME", calendar_name))
    return new_section("VCALENDAR", *header, *events)
