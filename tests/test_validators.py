"""Tests for duration and host parsing."""

from datetime import timedelta

import pytest

from certchain.exceptions import InvalidDurationError
from certchain.models.certificate import SANType
from certchain.utils.validators import classify_host, parse_duration, parse_hosts


@pytest.mark.unit
class TestParseDuration:
    """Test duration string parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("8760h", timedelta(hours=8760)),
            ("1h30m", timedelta(minutes=90)),
            ("1.5h", timedelta(minutes=90)),
            ("90s", timedelta(seconds=90)),
            ("2h45m10s", timedelta(hours=2, minutes=45, seconds=10)),
            ("300ms", timedelta(milliseconds=300)),
            ("1us", timedelta(microseconds=1)),
            ("1µs", timedelta(microseconds=1)),
            ("1500ns", timedelta(microseconds=1)),
            (".5s", timedelta(milliseconds=500)),
            ("+5s", timedelta(seconds=5)),
            ("0", timedelta(0)),
            ("0s", timedelta(0)),
        ],
    )
    def test_valid_durations(self, value, expected):
        """Test parsing valid duration strings."""
        assert parse_duration(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "h", "10", "1d", "1h 30m", "not-a-duration", "8760H", "1..5h", "-", "١h"],
    )
    def test_invalid_durations(self, value):
        """Test that malformed durations are rejected."""
        with pytest.raises(InvalidDurationError, match="Invalid duration"):
            parse_duration(value)

    def test_negative_duration_rejected(self):
        """Test that negative durations are rejected."""
        with pytest.raises(InvalidDurationError, match="negative"):
            parse_duration("-1h")

    def test_non_string_rejected(self):
        """Test that non-string input is rejected."""
        with pytest.raises(InvalidDurationError):
            parse_duration(3600)

    def test_out_of_range_rejected(self):
        """Test that durations beyond timedelta range are rejected."""
        with pytest.raises(InvalidDurationError, match="out of range") as exc_info:
            parse_duration("99999999999999h")

        assert isinstance(exc_info.value.__cause__, OverflowError)

    def test_invalid_duration_is_value_error(self):
        """Test that duration errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_duration("soon")


@pytest.mark.unit
class TestClassifyHost:
    """Test IP versus DNS classification of host tokens."""

    @pytest.mark.parametrize("token", ["10.0.0.1", "127.0.0.1", "::1", "2001:db8::1", "::ffff:192.0.2.1"])
    def test_ip_literals(self, token):
        """Test that IP literals are classified as IP entries."""
        entry = classify_host(token)

        assert entry.type == SANType.IP
        assert entry.value == token

    @pytest.mark.parametrize(
        "token",
        ["example.com", "localhost", "*.example.com", "10.0.0.256", "1.2.3", "010.0.0.1", "fe80::1%eth0", "10.0.0.1a"],
    )
    def test_non_ip_tokens_are_dns(self, token):
        """Test that anything that is not strictly an IP literal is a DNS entry."""
        entry = classify_host(token)

        assert entry.type == SANType.DNS
        assert entry.value == token


@pytest.mark.unit
class TestParseHosts:
    """Test splitting host lists."""

    def test_mixed_hosts(self):
        """Test splitting a mixed list keeps order within each kind."""
        entries = parse_hosts("b.example,10.0.0.2,a.example,10.0.0.1")

        assert [e.value for e in entries if e.type == SANType.DNS] == ["b.example", "a.example"]
        assert [e.value for e in entries if e.type == SANType.IP] == ["10.0.0.2", "10.0.0.1"]

    def test_whitespace_and_empty_tokens(self):
        """Test that whitespace is stripped and empty tokens dropped."""
        entries = parse_hosts(" example.com , ,10.0.0.1,")

        assert [(e.type, e.value) for e in entries] == [
            (SANType.DNS, "example.com"),
            (SANType.IP, "10.0.0.1"),
        ]

    def test_duplicates_kept_once(self):
        """Test that repeated tokens appear only once."""
        entries = parse_hosts("example.com,example.com,10.0.0.1,10.0.0.1")

        assert [e.value for e in entries] == ["example.com", "10.0.0.1"]

    @pytest.mark.parametrize("hosts", ["", ",", None])
    def test_empty_hosts(self, hosts):
        """Test that empty input yields no entries."""
        assert parse_hosts(hosts) == []
