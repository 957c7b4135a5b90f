"""Exceptions raised while issuing a certificate chain."""


class CertChainError(Exception):
    """Base class for chain issuance failures."""


class InvalidDurationError(CertChainError, ValueError):
    """Validity string could not be parsed into a duration."""


class KeyGenerationError(CertChainError):
    """Private key generation failed."""


class SerialNumberError(CertChainError):
    """A usable serial number could not be drawn."""


class CertificateSigningError(CertChainError):
    """Building or signing a certificate failed."""


class EncodingError(CertChainError):
    """PEM encoding of a key or certificate failed."""
