"""Query parameters controlling how a single request is answered.

Every parser takes the raw query value (``None`` when the parameter is
absent) and returns a :class:`ParseResult`. Values that cannot be parsed
are replaced by the default and flagged with ``used_default``; nothing is
raised back to the caller.
"""
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, NamedTuple, Optional

from .constant import DEFAULT_STATUS

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_INT_RE = re.compile(r'[+-]?[0-9]+')

# nanoseconds per unit; both the micro sign and the greek mu are accepted
_DURATION_UNITS = {
    'ns': 1,
    'us': 1_000,
    'µs': 1_000,
    'μs': 1_000,
    'ms': 1_000_000,
    's': 1_000_000_000,
    'm': 60_000_000_000,
    'h': 3_600_000_000_000,
}
_DURATION_PART_RE = re.compile(
    r'([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)')


class ParseResult(NamedTuple):
    value: Any
    used_default: bool


def parse_duration(raw: str) -> timedelta:
    """
    Parse a duration such as ``300ms``, ``-1.5h`` or ``2h45m``.

    A duration is an optionally signed sequence of decimal numbers, each
    with an optional fraction and a mandatory unit suffix (``ns``, ``us``,
    ``ms``, ``s``, ``m``, ``h``). The bare string ``0`` is also accepted.
    The total must fit in a signed 64-bit count of nanoseconds (about
    2562047h); sub-microsecond remainders are truncated.
    """
    s = raw
    negative = False
    if s[:1] in ('+', '-'):
        negative = s[0] == '-'
        s = s[1:]
    if s == '0':
        return timedelta(0)
    if not s:
        raise ValueError(f'invalid duration {raw!r}')
    total = 0
    pos = 0
    while pos < len(s):
        m = _DURATION_PART_RE.match(s, pos)
        if m is None:
            raise ValueError(f'invalid duration {raw!r}')
        unit = _DURATION_UNITS[m.group(2)]
        whole, _, frac = m.group(1).partition('.')
        total += int(whole or '0') * unit
        if frac:
            total += int(frac) * unit // 10**len(frac)
        pos = m.end()
    limit = -_INT64_MIN if negative else _INT64_MAX
    if total > limit:
        raise ValueError(f'invalid duration {raw!r}')
    micros = total // 1000
    return timedelta(microseconds=-micros if negative else micros)


def parse_int(raw: str) -> int:
    """Parse a base-10 signed 64-bit integer, with no surrounding space."""
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f'invalid syntax {raw!r}')
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f'value out of range {raw!r}')
    return value


def _parse_or_default(raw: Optional[str], parse, default) -> ParseResult:
    if raw is None:
        return ParseResult(default, True)
    try:
        return ParseResult(parse(raw), False)
    except (ValueError, OverflowError):
        return ParseResult(default, True)


def parse_delay(raw: Optional[str]) -> ParseResult:
    return _parse_or_default(raw, parse_duration, timedelta(0))


def parse_status(raw: Optional[str]) -> ParseResult:
    result = _parse_or_default(raw, parse_int, DEFAULT_STATUS)
    # a status line needs a three digit code
    if not 100 <= result.value <= 999:
        return ParseResult(DEFAULT_STATUS, True)
    return result


def parse_payload(raw: Optional[str]) -> ParseResult:
    return _parse_or_default(raw, parse_int, 0)


@dataclass(frozen=True)
class ResponseParams:
    delay: timedelta = timedelta(0)
    status: int = DEFAULT_STATUS
    payload: int = 0

    @classmethod
    def from_query(cls, args: Mapping[str, str]) -> 'ResponseParams':
        return cls(
            delay=parse_delay(args.get('delay')).value,
            status=parse_status(args.get('status')).value,
            payload=parse_payload(args.get('payload')).value,
        )
