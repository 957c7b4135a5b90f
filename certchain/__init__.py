"""certchain - self-signed CA, server and client certificates for mutual TLS."""

from certchain.exceptions import (
    CertChainError,
    CertificateSigningError,
    EncodingError,
    InvalidDurationError,
    KeyGenerationError,
    SerialNumberError,
)
from certchain.models.chain import CertificateChain
from certchain.services.issuer_service import ChainIssuer, generate

__version__ = "1.0.0"

__all__ = [
    "CertificateChain",
    "ChainIssuer",
    "generate",
    "CertChainError",
    "InvalidDurationError",
    "KeyGenerationError",
    "SerialNumberError",
    "CertificateSigningError",
    "EncodingError",
]
