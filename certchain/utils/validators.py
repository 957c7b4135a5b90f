"""Input parsing and validation utilities."""

import ipaddress
import re
from datetime import timedelta
from decimal import Decimal

from certchain.exceptions import InvalidDurationError
from certchain.models.certificate import SANEntry, SANType

# Nanoseconds per duration unit
_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_PATTERN = re.compile(rf"([-+]?)((?:{_COMPONENT})+)", re.ASCII)
_COMPONENT_PATTERN = re.compile(_COMPONENT, re.ASCII)


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string such as "8760h", "1h30m" or "1.5h".

    A duration is an optional sign followed by one or more decimal numbers,
    each with a unit suffix: ns, us (or µs), ms, s, m, h. A bare "0" is also
    accepted. Sub-microsecond parts are truncated.

    Args:
        value: Duration string

    Returns:
        Parsed duration

    Raises:
        InvalidDurationError: If the string is not a valid, non-negative duration

    Example:
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
    """
    if not isinstance(value, str):
        raise InvalidDurationError(f"Invalid duration: {value!r}")

    if value in ("0", "+0", "-0"):
        return timedelta(0)

    match = _DURATION_PATTERN.fullmatch(value)
    if not match:
        raise InvalidDurationError(f"Invalid duration: {value!r}")

    sign, body = match.group(1), match.group(2)
    nanos = Decimal(0)
    for number, unit in _COMPONENT_PATTERN.findall(body):
        nanos += Decimal(number) * _UNIT_NANOS[unit]

    if sign == "-" and nanos != 0:
        raise InvalidDurationError(f"Duration must not be negative: {value!r}")

    try:
        return timedelta(microseconds=int(nanos) // 1_000)
    except OverflowError as e:
        raise InvalidDurationError(f"Duration out of range: {value!r}") from e


def classify_host(token: str) -> SANEntry:
    """
    Classify a host token as an IP address or a DNS name SAN entry.

    A token is an IP entry only if it is a literal IPv4 or IPv6 address.
    Zone-scoped IPv6 literals (fe80::1%eth0) are not addresses a certificate
    can carry and are kept as DNS names.

    Args:
        token: Single host token

    Returns:
        Classified SAN entry
    """
    if "%" not in token:
        try:
            ipaddress.ip_address(token)
            return SANEntry(type=SANType.IP, value=token)
        except ValueError:
            pass
    return SANEntry(type=SANType.DNS, value=token)


def parse_hosts(hosts: str) -> list[SANEntry]:
    """
    Split a comma-separated host list into classified SAN entries.

    Whitespace around tokens is stripped, empty tokens are dropped and
    repeated tokens are kept once. Token order is preserved.

    Args:
        hosts: Comma-separated hostnames and IP literals

    Returns:
        SAN entries in input order
    """
    entries = []
    seen = set()
    for raw in (hosts or "").split(","):
        token = raw.strip()
        if not token or token in seen:
            continue
        seen.add(token)
        entries.append(classify_host(token))
    return entries
