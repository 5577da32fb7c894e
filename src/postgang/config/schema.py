from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator

from postgang.common.posten import DEFAULT_BASE_URL


class SourceConfig(BaseModel):
    model_config = ConfigDict(validate_default=True)

    base_url: HttpUrl = DEFAULT_BASE_URL  # type: ignore[assignment]
    timezone: str = "Europe/Oslo"
    timeout_seconds: int = 30

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {v}") from exc
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def _positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return v


class IcsConfig(BaseModel):
    prodid_template: str = "-//postgang//postgang {postal_code}@{version}//EN"
    calendar_name_template: str | None = "Postgang {postal_code}"
    hostname: str | None = None

    @field_validator("prodid_template")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must be non-empty")
        return v

    @field_validator("prodid_template", "calendar_name_template")
    @classmethod
    def _known_placeholders(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            v.format(postal_code="0001", version="0")
        except (KeyError, IndexError, AttributeError, ValueError) as exc:
            raise ValueError(
                f"template {v!r} may only use {{postal_code}} and {{version}}: {exc!r}"
            ) from exc
        return v


class OutputConfig(BaseModel):
    fail_fast: bool = False


class PostgangConfig(BaseModel):
    source: SourceConfig = Field(default_factory=SourceConfig)
    ics: IcsConfig = Field(default_factory=IcsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.source.timezone)


def validate_config(data: dict[str, Any]) -> PostgangConfig:
    try:
        return PostgangConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid postgang config: {exc}") from exc
