"""Pytest configuration and shared fixtures."""

import itertools
from datetime import datetime, timezone

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from certchain.services.issuer_service import ChainIssuer
from certchain.services.parser_service import CertificateParser


class ScriptedRandomSource:
    """Random source that replays a fixed script of values.

    Integers are returned as big-endian bytes of the requested length,
    bytes are returned unchanged and exceptions are raised.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def token_bytes(self, nbytes):
        self.calls += 1
        value = self.values.pop(0)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, int):
            return value.to_bytes(nbytes, "big")
        return value


@pytest.fixture
def fixed_now():
    """A whole-second UTC timestamp used as notBefore."""
    return datetime(2024, 1, 15, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def rsa_keys():
    """Three RSA keys shared by tests that don't care about fresh key material."""
    return [rsa.generate_private_key(public_exponent=65537, key_size=2048) for _ in range(3)]


@pytest.fixture
def pooled_key_factory(rsa_keys):
    """Key factory handing out the pooled keys in CA, server, client order."""
    keys = itertools.cycle(rsa_keys)
    return lambda key_config: next(keys)


@pytest.fixture
def issuer(fixed_now, pooled_key_factory):
    """Chain issuer with a fixed clock and pooled keys."""
    return ChainIssuer(clock=lambda: fixed_now, key_factory=pooled_key_factory)


@pytest.fixture
def issued_chain(issuer):
    """A chain issued for one IP and one DNS name, valid for a year."""
    return issuer.generate("10.0.0.1,example.com", "8760h")


@pytest.fixture
def parsed_chain(issued_chain):
    """Parsed certificate details keyed by role."""
    return {
        "ca": CertificateParser.parse_certificate_pem(issued_chain.ca_cert),
        "server": CertificateParser.parse_certificate_pem(issued_chain.server_cert),
        "client": CertificateParser.parse_certificate_pem(issued_chain.client_cert),
    }


@pytest.fixture
def scripted_source():
    """Factory for random sources replaying the given values."""
    return ScriptedRandomSource
