"""Certificate data models."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import BaseModel, ConfigDict, Field, model_validator

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]


class KeyAlgorithm(str, Enum):
    """Supported key algorithms."""
    RSA = "RSA"
    ECDSA = "ECDSA"


class ECDSACurve(str, Enum):
    """Supported ECDSA curves."""
    P256 = "P-256"
    P384 = "P-384"
    P521 = "P-521"


class CertRole(str, Enum):
    """Position of a certificate inside the issued chain."""
    CA = "ca"
    SERVER = "server"
    CLIENT = "client"


class KeyUsageType(str, Enum):
    """Key Usage bits, named the way OpenSSL prints them."""

    DIGITAL_SIGNATURE = "digitalSignature"
    NON_REPUDIATION = "nonRepudiation"
    KEY_ENCIPHERMENT = "keyEncipherment"
    DATA_ENCIPHERMENT = "dataEncipherment"
    KEY_AGREEMENT = "keyAgreement"
    KEY_CERT_SIGN = "keyCertSign"
    CRL_SIGN = "cRLSign"


class ExtendedKeyUsageType(str, Enum):
    """Extended Key Usage purposes used by the chain."""

    SERVER_AUTH = "serverAuth"
    CLIENT_AUTH = "clientAuth"


class SANType(str, Enum):
    """Subject Alternative Name entry kinds."""
    IP = "ip"
    DNS = "dns"


class Subject(BaseModel):
    """Certificate subject information."""
    common_name: str = Field(..., min_length=1)
    organization: Optional[str] = None

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "common_name": "Root CA",
                "organization": "certchain"
            }
        }

    def to_x509_name(self) -> x509.Name:
        """Build the X.509 distinguished name (O before CN)."""
        attributes = []
        if self.organization:
            attributes.append(x509.NameAttribute(x509.NameOID.ORGANIZATION_NAME, self.organization))
        attributes.append(x509.NameAttribute(x509.NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attributes)


class KeyConfig(BaseModel):
    """Key configuration."""
    algorithm: KeyAlgorithm = KeyAlgorithm.RSA
    key_size: Optional[int] = Field(2048, ge=2048)  # for RSA
    curve: Optional[ECDSACurve] = None  # for ECDSA

    @model_validator(mode="after")
    def default_curve(self):
        """ECDSA keys fall back to P-256 when no curve is given."""
        if self.algorithm == KeyAlgorithm.ECDSA and self.curve is None:
            self.curve = ECDSACurve.P256
        return self


class SANEntry(BaseModel):
    """One classified host token."""
    type: SANType
    value: str = Field(..., min_length=1)


class CertificateTemplate(BaseModel):
    """Unsigned description of a certificate."""

    role: CertRole
    serial_number: int = Field(..., gt=0)
    subject: Subject
    not_before: datetime
    not_after: datetime
    key_usage: list[KeyUsageType]
    extended_key_usage: list[ExtendedKeyUsageType]
    is_ca: bool = False
    sans: list[SANEntry] = Field(default_factory=list)

    @property
    def ip_addresses(self) -> list[str]:
        return [san.value for san in self.sans if san.type == SANType.IP]

    @property
    def dns_names(self) -> list[str]:
        return [san.value for san in self.sans if san.type == SANType.DNS]


class SignedCertificate(BaseModel):
    """A signed certificate together with the key it certifies."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    template: CertificateTemplate
    private_key: PrivateKey
    certificate: x509.Certificate
