"""Rate-limit information carried in API response headers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "\u00b5s": 1e-6,
    "\u03bcs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h2m3.5s"`` or ``"20ms"``."""
    sign = 1
    rest = text
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")
    total = 0.0
    pos = 0
    while pos < len(rest):
        match = _DURATION_PART.match(rest, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    return timedelta(seconds=sign * total)


def _atoi(text: str) -> int:
    return int(text) if _INTEGER.fullmatch(text) else 0


def _header(headers: Mapping[str, str], name: str) -> str:
    """Return the first value of a header, matched without regard to case."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return ""


class ResetTime(str):
    """A reset delay as sent by the server, for example ``"6m0s"``."""

    def time(self) -> datetime:
        """Return the moment of the reset; an unreadable delay counts as zero."""
        try:
            delay = _parse_duration(str(self))
        except ValueError:
            delay = timedelta(0)
        return datetime.now(timezone.utc) + delay


@dataclass(frozen=True)
class RateLimitHeaders:
    """The ``x-ratelimit-*`` headers of a response."""

    limit_requests: int = 0
    limit_tokens: int = 0
    remaining_requests: int = 0
    remaining_tokens: int = 0
    reset_requests: ResetTime = ResetTime("")
    reset_tokens: ResetTime = ResetTime("")

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitHeaders:
        """Read the limits from response headers; missing or bad numbers become 0."""
        return cls(
            limit_requests=_atoi(_header(headers, "x-ratelimit-limit-requests")),
            limit_tokens=_atoi(_header(headers, "x-ratelimit-limit-tokens")),
            remaining_requests=_atoi(_header(headers, "x-ratelimit-remaining-requests")),
            remaining_tokens=_atoi(_header(headers, "x-ratelimit-remaining-tokens")),
            reset_requests=ResetTime(_header(headers, "x-ratelimit-reset-requests")),
            reset_tokens=ResetTime(_header(headers, "x-ratelimit-reset-tokens")),
        )