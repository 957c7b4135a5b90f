"""Service layer for chain issuance."""

from .issuer_service import ChainIssuer, generate, generate_private_key
from .parser_service import CertificateParser
from .yaml_service import YAMLService

__all__ = [
    "ChainIssuer",
    "generate",
    "generate_private_key",
    "CertificateParser",
    "YAMLService",
]
