from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import IO
from zoneinfo import ZoneInfo

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from postgang.common.postal_code import PostalCode

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.posten.no/levering-av-post/"
DATA_PATH = "_/component/main/1/leftRegion/1"


class PostenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    next_delivery_days: list[str] = Field(default_factory=list, alias="nextDeliveryDays")
    is_street_address_req: bool = Field(default=False, alias="isStreetAddressReq")


@dataclass(frozen=True)
class FetchResult:
    response: PostenResponse
    now: datetime


def data_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{DATA_PATH}"


def parse_response(data: str | bytes) -> PostenResponse:
    try:
        return PostenResponse.model_validate_json(data)
    except ValidationError as exc:
        raise ValueError(f"Unable to parse delivery data: {exc}") from exc


def read_data(stream: IO[str] | IO[bytes], now: datetime) -> FetchResult:
    return FetchResult(response=parse_response(stream.read()), now=now)


def _response_time(response: requests.Response, tz: ZoneInfo) -> datetime:
    raw = response.headers.get("Date")
    try:
        if not raw:
            raise ValueError("missing Date header")
        now = parsedate_to_datetime(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Using local clock, bad Date header %r: %s", raw, exc)
        now = datetime.now(UTC)
    return now.astimezone(tz)


def fetch_delivery_days(
    postal_code: PostalCode,
    *,
    base_url: str = DEFAULT_BASE_URL,
    tz: ZoneInfo,
    timeout: int = 30,
) -> FetchResult:
    url = data_url(base_url)
    logger.info("Fetching delivery days for %s", postal_code)
    response = requests.get(
        url,
        params={"postCode": str(postal_code)},
        headers={"x-requested-with": "XMLHttpRequest"},
        timeout=timeout,
    )
    response.raise_for_status()
    return FetchResult(response=parse_response(response.content), now=_response_time(response, tz))
