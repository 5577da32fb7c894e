from __future__ import annotations

from dataclasses import dataclass

MAX_POSTAL_CODE = 9999


@dataclass(frozen=True)
class PostalCode:
    code: str

    def __str__(self) -> str:
        return self.code


def parse_postal_code(raw: str) -> PostalCode:
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError(f"invalid postal code: {raw!r}")
    value = int(raw)
    if value < 1 or value > MAX_POSTAL_CODE:
        raise ValueError(f"invalid postal code: {value:04d}")
    return PostalCode(f"{value:04d}")
