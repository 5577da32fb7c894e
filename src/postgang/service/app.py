from __future__ import annotations

import logging
import socket
from typing import Any

import requests
from flask import Flask, jsonify

from postgang.common.build_info import build_stamp, git_commit, version
from postgang.common.postal_code import parse_postal_code
from postgang.common.posten import fetch_delivery_days
from postgang.config.loader import load_from_env
from postgang.config.schema import PostgangConfig
from postgang.ical.printer import dumps
from postgang.service.calendar import build_calendar, to_vcalendar

logger = logging.getLogger(__name__)


def create_app(config: PostgangConfig | None = None) -> Flask:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if config is None:
        config = load_from_env()

    app = Flask(__name__)
    app.config["POSTGANG_CONFIG"] = config

    @app.get("/healthz")
    def healthz() -> Any:
        return jsonify({"ok": True})

    @app.get("/version")
    def version_info() -> Any:
        return jsonify(
            {
                "version": version(),
                "build_stamp": build_stamp(),
                "git_commit": git_commit(),
            }
        )

    @app.get("/<code>.ics")
    def calendar_ics(code: str) -> Any:
        try:
            postal_code = parse_postal_code(code)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        base_url = str(config.source.base_url)
        try:
            result = fetch_delivery_days(
                postal_code,
                base_url=base_url,
                tz=config.zone,
                timeout=config.source.timeout_seconds,
            )
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Fetch failed for %s: %s", postal_code, exc)
            return jsonify({"error": "Unable to fetch delivery days"}), 502

        if result.response.is_street_address_req:
            return jsonify({"error": "Street address is required"}), 422

        try:
            calendar = build_calendar(
                result.now,
                result.response,
                postal_code=postal_code,
                hostname=config.ics.hostname or socket.gethostname(),
                url=base_url,
                ics=config.ics,
                version=version(),
            )
        except ValueError as exc:
            logger.warning("Unexpected delivery data for %s: %s", postal_code, exc)
            return jsonify({"error": "Unexpected delivery data"}), 502

        if not calendar.dates:
            return jsonify({"error": f"No delivery days found for {postal_code}"}), 404

        ics_text = dumps(to_vcalendar(calendar))
        return app.response_class(ics_text, mimetype="text/calendar")

    return app
