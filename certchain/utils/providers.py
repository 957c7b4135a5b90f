"""Clock and randomness providers used by the issuer."""

import secrets
from datetime import datetime, timezone
from typing import Protocol


class RandomSource(Protocol):
    """Source of random bytes for serial numbers."""

    def token_bytes(self, nbytes: int) -> bytes: ...


class SecureRandomSource:
    """Operating system CSPRNG, safe to share between threads."""

    def token_bytes(self, nbytes: int) -> bytes:
        return secrets.token_bytes(nbytes)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
