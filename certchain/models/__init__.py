"""Data models for certchain."""

from .certificate import (
    CertificateTemplate,
    CertRole,
    ECDSACurve,
    ExtendedKeyUsageType,
    KeyAlgorithm,
    KeyConfig,
    KeyUsageType,
    SANEntry,
    SANType,
    SignedCertificate,
    Subject,
)
from .chain import CertificateChain
from .config import AppConfig, IssuerSettings, LoggingSettings

__all__ = [
    "KeyAlgorithm",
    "ECDSACurve",
    "CertRole",
    "KeyUsageType",
    "ExtendedKeyUsageType",
    "SANType",
    "SANEntry",
    "Subject",
    "KeyConfig",
    "CertificateTemplate",
    "SignedCertificate",
    "CertificateChain",
    "AppConfig",
    "IssuerSettings",
    "LoggingSettings",
]
