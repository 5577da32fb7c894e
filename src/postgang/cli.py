"""
Command line entry point.

    postgang --code 6666 [--output calendar.ics]
    postgang --code 6666 --input response.json --date 2021-12-28

Exit status is 0 only when the whole calendar was written.
"""

from __future__ import annotations

import argparse
import io
import logging
import socket
import sys
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import requests

from postgang.common.build_info import print_version, version
from postgang.common.postal_code import PostalCode, parse_postal_code
from postgang.common.posten import FetchResult, fetch_delivery_days, read_data
from postgang.config.loader import load_config, load_from_env
from postgang.config.schema import PostgangConfig
from postgang.ical.model import Section
from postgang.ical.printer import ContentPrinter, PrintAbortedError, TextSink
from postgang.service.calendar import build_calendar, to_vcalendar

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="postgang", description="Mail delivery days as iCalendar")
    parser.add_argument("--code", help="Postal code, an integer between 1 and 9999")
    parser.add_argument("--input", help="Read response JSON from file ('-' for stdin) instead of fetching")
    parser.add_argument("--date", help="Reference date (YYYY-MM-DD) for --input")
    parser.add_argument("--hostname", help="Host name used in event UIDs")
    parser.add_argument("--output", help="Output file path ('-' for stdout)")
    parser.add_argument("--config", help="Path to config YAML")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def _parse_date(raw: str | None, tz: ZoneInfo) -> datetime:
    if not raw:
        return datetime.now(tz)
    try:
        parsed = datetime.strptime(raw, "%Y-%m-%d").replace(tzinfo=UTC)
    except ValueError as exc:
        raise ValueError(f"Invalid date {raw!r}, expected YYYY-MM-DD") from exc
    return parsed.astimezone(tz)


def _load(args: argparse.Namespace, config: PostgangConfig, postal_code: PostalCode) -> FetchResult:
    if args.input:
        now = _parse_date(args.date, config.zone)
        if args.input == "-":
            return read_data(sys.stdin, now)
        with Path(args.input).open("r", encoding="utf-8") as f:
            return read_data(f, now)
    return fetch_delivery_days(
        postal_code,
        base_url=str(config.source.base_url),
        tz=config.zone,
        timeout=config.source.timeout_seconds,
    )


def _print_calendar(section: Section, sink: TextSink, *, fail_fast: bool) -> None:
    printer = ContentPrinter(sink, raise_on_error=fail_fast).print_section(section)
    if printer.error is not None:
        raise PrintAbortedError(
            f"Output failed after {printer.bytes_written} bytes: {printer.error}"
        ) from printer.error


def write_calendar(section: Section, output: Path | None, *, fail_fast: bool = False) -> None:
    if output is None:
        if isinstance(sys.stdout, io.TextIOWrapper):
            sys.stdout.reconfigure(encoding="utf-8", newline="")
        _print_calendar(section, sys.stdout, fail_fast=fail_fast)
        sys.stdout.flush()
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output.with_suffix(output.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as f:
            _print_calendar(section, f, fail_fast=fail_fast)
        tmp_path.replace(output)
    finally:
        tmp_path.unlink(missing_ok=True)
    logger.info("Calendar written to %s", output)


def run(args: argparse.Namespace) -> None:
    config = load_config(Path(args.config)) if args.config else load_from_env()
    postal_code = parse_postal_code(args.code)
    result = _load(args, config, postal_code)
    if result.response.is_street_address_req:
        raise ValueError(f"Street address is required for postal code {postal_code}")

    hostname = args.hostname or config.ics.hostname or socket.gethostname()
    calendar = build_calendar(
        result.now,
        result.response,
        postal_code=postal_code,
        hostname=hostname,
        url=str(config.source.base_url),
        ics=config.ics,
        version=version(),
    )
    if not calendar.dates:
        raise ValueError(f"No delivery days found, check postal code: {postal_code}")

    output = None if args.output in (None, "", "-") else Path(args.output)
    write_calendar(to_vcalendar(calendar), output, fail_fast=config.output.fail_fast)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(message)s")

    if args.version:
        print_version(sys.stdout)
        return 0
    if not args.code:
        parser.error("--code is required")

    try:
        run(args)
    except (ValueError, OSError, requests.RequestException, PrintAbortedError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
