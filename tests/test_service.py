from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import requests
from flask.testing import FlaskClient

from postgang.common.posten import FetchResult, PostenResponse, parse_response
from postgang.config.schema import IcsConfig, PostgangConfig
from postgang.service import app as app_mod

FIXTURES = Path(__file__).parent / "fixtures"
NOW = datetime(2021, 12, 28, 9, 0, tzinfo=UTC)


@pytest.fixture
def client() -> FlaskClient:
    config = PostgangConfig(ics=IcsConfig(hostname="test"))
    return app_mod.create_app(config).test_client()


def _fake_fetch(response: PostenResponse) -> Any:
    def fetch(postal_code: Any, **kwargs: Any) -> FetchResult:
        return FetchResult(response=response, now=NOW)

    return fetch


def test_healthz(client: FlaskClient) -> None:
    assert client.get("/healthz").get_json() == {"ok": True}


def test_version(client: FlaskClient) -> None:
    assert "version" in client.get("/version").get_json()


def test_calendar_ics(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    response = parse_response((FIXTURES / "posten_response.json").read_bytes())
    monkeypatch.setattr(app_mod, "fetch_delivery_days", _fake_fetch(response))

    resp = client.get("/6666.ics")
    assert resp.status_code == 200
    assert resp.mimetype == "text/calendar"
    text = resp.get_data(as_text=True)
    assert text.startswith("BEGIN:VCALENDAR\r\n")
    assert "UID:postgang-20211228@test\r\n" in text
    assert "DTSTAMP:20211228T090000Z\r\n" in text
    assert text.count("BEGIN:VEVENT") == 4


def test_calendar_ics_invalid_code(client: FlaskClient) -> None:
    resp = client.get("/99999.ics")
    assert resp.status_code == 400
    assert "invalid postal code" in resp.get_json()["error"]


def test_calendar_ics_street_address(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        app_mod, "fetch_delivery_days", _fake_fetch(PostenResponse(is_street_address_req=True))
    )
    assert client.get("/6666.ics").status_code == 422


def test_calendar_ics_no_days(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_mod, "fetch_delivery_days", _fake_fetch(PostenResponse()))
    assert client.get("/6666.ics").status_code == 404


def test_calendar_ics_bad_phrase(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        app_mod,
        "fetch_delivery_days",
        _fake_fetch(PostenResponse(next_delivery_days=["en gang i blant"])),
    )
    assert client.get("/6666.ics").status_code == 502


def test_calendar_ics_upstream_error(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def fetch(postal_code: Any, **kwargs: Any) -> FetchResult:
        raise requests.ConnectionError("down")

    monkeypatch.setattr(app_mod, "fetch_delivery_days", fetch)
    resp = client.get("/6666.ics")
    assert resp.status_code == 502
    assert resp.get_json() == {"error": "Unable to fetch delivery days"}
