from __future__ import annotations

import os
import subprocess
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as dist_version
from typing import TextIO


def version() -> str:
    try:
        return dist_version("postgang")
    except PackageNotFoundError:
        return "development"


def build_stamp() -> str:
    return os.getenv("POSTGANG_BUILDSTAMP", "")


def git_commit() -> str | None:
    if env_commit := os.getenv("GIT_COMMIT"):
        return env_commit
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def print_version(stream: TextIO) -> None:
    for key, value in (
        ("Build date", build_stamp()),
        ("Version", version()),
        ("Git commit", git_commit() or ""),
    ):
        stream.write(f"{key:<12}: {value}\n")
