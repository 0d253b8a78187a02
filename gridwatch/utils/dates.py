"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import datetime

import pendulum

from gridwatch.ingest.errors import TimeResolutionError

DEFAULT_TZ = "America/Puerto_Rico"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def resolve_timestamp(value: str, fmt: str, *, tz_name: str | None = None) -> int:
    """Resolve a naive upstream local time to Unix epoch seconds.

    Local times that fall in a DST gap or overlap have no single mapping
    and are rejected instead of guessed.
    """
    try:
        naive = datetime.strptime(value.strip(), fmt)
    except (AttributeError, ValueError) as exc:
        raise TimeResolutionError(f"cannot parse {value!r} with {fmt!r}") from exc
    tz = pendulum.timezone(tz_name or timezone_name())
    earlier = tz.utcoffset(naive.replace(fold=0))
    later = tz.utcoffset(naive.replace(fold=1))
    if later > earlier:
        raise TimeResolutionError(f"{value!r} does not exist in {tz.name}")
    if later < earlier:
        raise TimeResolutionError(f"{value!r} is ambiguous in {tz.name}")
    return pendulum.instance(naive, tz=tz).int_timestamp
