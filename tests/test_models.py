"""Tests for data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from certchain.models.certificate import (
    CertificateTemplate,
    CertRole,
    ECDSACurve,
    KeyAlgorithm,
    KeyConfig,
    KeyUsageType,
    SANEntry,
    SANType,
    Subject,
)
from certchain.models.chain import CertificateChain

CHAIN_FIELDS = {
    "ca_key": "caKey",
    "ca_cert": "caCert",
    "server_key": "serverKey",
    "server_cert": "serverCert",
    "client_key": "clientKey",
    "client_cert": "clientCert",
}


@pytest.mark.unit
class TestCertificateChain:
    """Test the issued chain model."""

    def test_dump_by_alias(self):
        """Test that the bundle dumps under its storage keys."""
        chain = CertificateChain(**{field: field.upper() for field in CHAIN_FIELDS})

        assert chain.model_dump(by_alias=True) == {alias: field.upper() for field, alias in CHAIN_FIELDS.items()}

    def test_load_by_alias(self):
        """Test that a stored bundle loads back."""
        chain = CertificateChain(**{alias: field for field, alias in CHAIN_FIELDS.items()})

        assert chain.server_pair() == ("server_cert", "server_key")
        assert chain.client_pair() == ("client_cert", "client_key")
        assert chain.ca_bundle() == "ca_cert"

    def test_frozen(self, issued_chain):
        """Test that a chain cannot be modified."""
        with pytest.raises(ValidationError):
            issued_chain.ca_key = "other"

    def test_all_fields_required(self):
        """Test that partial chains cannot be built."""
        with pytest.raises(ValidationError):
            CertificateChain(ca_key="k", ca_cert="c")


@pytest.mark.unit
class TestCertificateModels:
    """Test template and key models."""

    def test_subject_name_order(self):
        """Test that the organization precedes the common name."""
        name = Subject(common_name="Root CA", organization="certchain").to_x509_name()

        assert name.rfc4514_string() == "CN=Root CA,O=certchain"

    def test_subject_without_organization(self):
        """Test a subject with only a common name."""
        name = Subject(common_name="Root CA").to_x509_name()

        assert name.rfc4514_string() == "CN=Root CA"

    def test_key_config_defaults(self):
        """Test default key configuration."""
        config = KeyConfig()

        assert config.algorithm == KeyAlgorithm.RSA
        assert config.key_size == 2048

    def test_key_config_rejects_weak_rsa(self):
        """Test that RSA keys below 2048 bits are rejected."""
        with pytest.raises(ValidationError):
            KeyConfig(algorithm="RSA", key_size=1024)

    def test_ecdsa_curve_default(self):
        """Test that ECDSA defaults to P-256."""
        assert KeyConfig(algorithm="ECDSA").curve == ECDSACurve.P256

    def test_template_san_views(self):
        """Test IP and DNS views of the SAN list."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        template = CertificateTemplate(
            role=CertRole.SERVER,
            serial_number=1,
            subject=Subject(common_name="server"),
            not_before=now,
            not_after=now,
            key_usage=[KeyUsageType.DIGITAL_SIGNATURE],
            extended_key_usage=["serverAuth"],
            sans=[
                SANEntry(type=SANType.DNS, value="example.com"),
                SANEntry(type=SANType.IP, value="10.0.0.1"),
            ],
        )

        assert template.ip_addresses == ["10.0.0.1"]
        assert template.dns_names == ["example.com"]

    def test_template_rejects_zero_serial(self):
        """Test that serial numbers must be positive."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with pytest.raises(ValidationError):
            CertificateTemplate(
                role=CertRole.CLIENT,
                serial_number=0,
                subject=Subject(common_name="client"),
                not_before=now,
                not_after=now,
                key_usage=[],
                extended_key_usage=[],
            )
