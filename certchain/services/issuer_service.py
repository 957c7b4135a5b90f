"""Certificate chain issuance service."""

import ipaddress
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from certchain.exceptions import (
    CertChainError,
    CertificateSigningError,
    EncodingError,
    InvalidDurationError,
    KeyGenerationError,
    SerialNumberError,
)
from certchain.models.certificate import (
    CertificateTemplate,
    CertRole,
    ECDSACurve,
    ExtendedKeyUsageType,
    KeyAlgorithm,
    KeyConfig,
    KeyUsageType,
    PrivateKey,
    SANEntry,
    SANType,
    SignedCertificate,
    Subject,
)
from certchain.models.chain import CertificateChain
from certchain.models.config import AppConfig, IssuerSettings
from certchain.utils.providers import RandomSource, SecureRandomSource, utc_now
from certchain.utils.validators import parse_duration, parse_hosts

logger = logging.getLogger("certchain")

SERIAL_NUMBER_BYTES = 16  # 128-bit serials
MAX_SERIAL_ATTEMPTS = 8
RSA_PUBLIC_EXPONENT = 65537

CA_KEY_USAGE = [KeyUsageType.KEY_CERT_SIGN]
SERVER_KEY_USAGE = [KeyUsageType.DIGITAL_SIGNATURE, KeyUsageType.KEY_ENCIPHERMENT]
CLIENT_KEY_USAGE = [KeyUsageType.DIGITAL_SIGNATURE]

CA_EXTENDED_KEY_USAGE = [ExtendedKeyUsageType.SERVER_AUTH, ExtendedKeyUsageType.CLIENT_AUTH]
SERVER_EXTENDED_KEY_USAGE = [ExtendedKeyUsageType.SERVER_AUTH]
CLIENT_EXTENDED_KEY_USAGE = [ExtendedKeyUsageType.CLIENT_AUTH]

_CURVES = {
    ECDSACurve.P256: ec.SECP256R1,
    ECDSACurve.P384: ec.SECP384R1,
    ECDSACurve.P521: ec.SECP521R1,
}

_EKU_OIDS = {
    ExtendedKeyUsageType.SERVER_AUTH: x509.ExtendedKeyUsageOID.SERVER_AUTH,
    ExtendedKeyUsageType.CLIENT_AUTH: x509.ExtendedKeyUsageOID.CLIENT_AUTH,
}


def generate_private_key(key_config: KeyConfig) -> PrivateKey:
    """
    Generate a fresh private key.

    Args:
        key_config: Key algorithm and size/curve

    Returns:
        New private key
    """
    if key_config.algorithm == KeyAlgorithm.ECDSA:
        return ec.generate_private_key(_CURVES[key_config.curve]())
    return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=key_config.key_size or 2048)


class ChainIssuer:
    """Issues a root CA plus a server and a client certificate signed by it."""

    def __init__(
        self,
        settings: Optional[IssuerSettings] = None,
        clock: Callable[[], datetime] = utc_now,
        random_source: Optional[RandomSource] = None,
        key_factory: Optional[Callable[[KeyConfig], PrivateKey]] = None,
    ):
        """
        Initialize chain issuer.

        Args:
            settings: Subject names and key configuration
            clock: Returns the current time, used as notBefore
            random_source: Random bytes for serial numbers
            key_factory: Generates one private key per certificate
        """
        self.settings = settings or IssuerSettings()
        self.clock = clock
        self.random_source = random_source or SecureRandomSource()
        self.key_factory = key_factory or generate_private_key

    def generate(self, hosts: str, validity: str) -> CertificateChain:
        """
        Issue a complete CA, server and client chain.

        Args:
            hosts: Comma-separated hostnames and IPs for the server certificate SANs
            validity: Duration the certificates are valid for, e.g. "8760h"

        Returns:
            Certificate chain with all six PEM blocks

        Raises:
            InvalidDurationError: If validity cannot be parsed
            KeyGenerationError: If a private key cannot be generated
            SerialNumberError: If a serial number cannot be drawn
            CertificateSigningError: If a certificate cannot be signed
            EncodingError: If a key or certificate cannot be PEM encoded
        """
        try:
            not_before, not_after = self._validity_window(validity)
            sans = parse_hosts(hosts)
            logger.info(f"Issuing certificate chain for {len(sans)} host(s), valid until {not_after.isoformat()}")

            serials: set[int] = set()
            ca = self._issue(
                self._template(CertRole.CA, serials, not_before, not_after),
                issuer=None,
            )
            server = self._issue(
                self._template(CertRole.SERVER, serials, not_before, not_after, sans),
                issuer=ca,
            )
            client = self._issue(
                self._template(CertRole.CLIENT, serials, not_before, not_after),
                issuer=ca,
            )

            chain = CertificateChain(
                ca_key=self._encode_key(ca.private_key),
                ca_cert=self._encode_certificate(ca.certificate),
                server_key=self._encode_key(server.private_key),
                server_cert=self._encode_certificate(server.certificate),
                client_key=self._encode_key(client.private_key),
                client_cert=self._encode_certificate(client.certificate),
            )
        except CertChainError as e:
            logger.error(f"Certificate chain issuance failed: {e}")
            raise

        logger.info(
            f"Issued certificate chain (CA serial {ca.template.serial_number:X}, "
            f"server serial {server.template.serial_number:X}, "
            f"client serial {client.template.serial_number:X})"
        )
        return chain

    def _validity_window(self, validity: str) -> tuple[datetime, datetime]:
        """Compute the shared notBefore/notAfter for one chain."""
        duration = parse_duration(validity)
        if duration.microseconds:
            raise InvalidDurationError(f"Validity {validity!r} must be a whole number of seconds")

        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        # X.509 validity carries whole seconds only
        not_before = now.astimezone(timezone.utc).replace(microsecond=0)

        try:
            not_after = not_before + duration
        except OverflowError as e:
            raise InvalidDurationError(f"Validity {validity!r} runs past the representable date range") from e

        return not_before, not_after

    def _template(
        self,
        role: CertRole,
        serials: set[int],
        not_before: datetime,
        not_after: datetime,
        sans: Optional[list[SANEntry]] = None,
    ) -> CertificateTemplate:
        """Build the unsigned template for one role."""
        common_names = {
            CertRole.CA: self.settings.ca_common_name,
            CertRole.SERVER: self.settings.server_common_name,
            CertRole.CLIENT: self.settings.client_common_name,
        }
        usages = {
            CertRole.CA: (CA_KEY_USAGE, CA_EXTENDED_KEY_USAGE),
            CertRole.SERVER: (SERVER_KEY_USAGE, SERVER_EXTENDED_KEY_USAGE),
            CertRole.CLIENT: (CLIENT_KEY_USAGE, CLIENT_EXTENDED_KEY_USAGE),
        }
        key_usage, extended_key_usage = usages[role]

        return CertificateTemplate(
            role=role,
            serial_number=self._next_serial(serials),
            subject=Subject(
                common_name=common_names[role],
                organization=self.settings.organization or None,
            ),
            not_before=not_before,
            not_after=not_after,
            key_usage=list(key_usage),
            extended_key_usage=list(extended_key_usage),
            is_ca=role == CertRole.CA,
            sans=list(sans or []),
        )

    def _next_serial(self, issued: set[int]) -> int:
        """
        Draw a random 128-bit serial number not yet used in this chain.

        Zero and repeated values are redrawn a bounded number of times.
        """
        for _ in range(MAX_SERIAL_ATTEMPTS):
            try:
                raw = self.random_source.token_bytes(SERIAL_NUMBER_BYTES)
            except Exception as e:
                raise SerialNumberError(f"Random source failed: {e}") from e

            if len(raw) != SERIAL_NUMBER_BYTES:
                raise SerialNumberError(f"Random source returned {len(raw)} bytes, expected {SERIAL_NUMBER_BYTES}")

            serial = int.from_bytes(raw, "big")
            if serial != 0 and serial not in issued:
                issued.add(serial)
                return serial
            logger.debug("Discarded unusable serial number, drawing again")

        raise SerialNumberError(f"No unique non-zero serial number after {MAX_SERIAL_ATTEMPTS} attempts")

    def _issue(self, template: CertificateTemplate, issuer: Optional[SignedCertificate]) -> SignedCertificate:
        """
        Generate a key for the template and sign it.

        Args:
            template: Certificate to issue
            issuer: Signing CA, or None to self-sign

        Returns:
            Signed certificate with its private key
        """
        try:
            private_key = self.key_factory(self.settings.key_config)
        except Exception as e:
            raise KeyGenerationError(f"Failed to generate {template.role.value} key: {e}") from e

        signing_key = issuer.private_key if issuer else private_key
        issuer_name = issuer.certificate.subject if issuer else template.subject.to_x509_name()

        try:
            certificate = self._build_certificate(template, private_key, signing_key, issuer_name)
        except Exception as e:
            raise CertificateSigningError(f"Failed to sign {template.role.value} certificate: {e}") from e

        logger.debug(f"Signed {template.role.value} certificate, serial {template.serial_number:X}")
        return SignedCertificate(template=template, private_key=private_key, certificate=certificate)

    @staticmethod
    def _build_certificate(
        template: CertificateTemplate,
        private_key: PrivateKey,
        signing_key: PrivateKey,
        issuer_name: x509.Name,
    ) -> x509.Certificate:
        """Translate a template into a signed X.509 certificate."""
        public_key = private_key.public_key()
        usages = set(template.key_usage)

        builder = (
            x509.CertificateBuilder()
            .subject_name(template.subject.to_x509_name())
            .issuer_name(issuer_name)
            .public_key(public_key)
            .serial_number(template.serial_number)
            .not_valid_before(template.not_before)
            .not_valid_after(template.not_after)
            .add_extension(x509.BasicConstraints(ca=template.is_ca, path_length=None), critical=True)
            .add_extension(
                x509.KeyUsage(
                    digital_signature=KeyUsageType.DIGITAL_SIGNATURE in usages,
                    content_commitment=KeyUsageType.NON_REPUDIATION in usages,
                    key_encipherment=KeyUsageType.KEY_ENCIPHERMENT in usages,
                    data_encipherment=KeyUsageType.DATA_ENCIPHERMENT in usages,
                    key_agreement=KeyUsageType.KEY_AGREEMENT in usages,
                    key_cert_sign=KeyUsageType.KEY_CERT_SIGN in usages,
                    crl_sign=KeyUsageType.CRL_SIGN in usages,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage([_EKU_OIDS[eku] for eku in template.extended_key_usage]),
                critical=False,
            )
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        )

        if not template.is_ca:
            builder = builder.add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(signing_key.public_key()),
                critical=False,
            )

        if template.sans:
            general_names = [
                x509.IPAddress(ipaddress.ip_address(san.value))
                if san.type == SANType.IP
                else x509.DNSName(san.value)
                for san in template.sans
            ]
            builder = builder.add_extension(x509.SubjectAlternativeName(general_names), critical=False)

        return builder.sign(private_key=signing_key, algorithm=hashes.SHA256())

    @staticmethod
    def _encode_key(private_key: PrivateKey) -> str:
        """PEM encode a private key as unencrypted PKCS#8."""
        try:
            return private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode("ascii")
        except Exception as e:
            raise EncodingError(f"Failed to encode private key: {e}") from e

    @staticmethod
    def _encode_certificate(certificate: x509.Certificate) -> str:
        """PEM encode a certificate."""
        try:
            return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")
        except Exception as e:
            raise EncodingError(f"Failed to encode certificate: {e}") from e


def generate(hosts: str, validity: Optional[str] = None, config: Optional[AppConfig] = None) -> CertificateChain:
    """
    Issue a certificate chain with default providers.

    Args:
        hosts: Comma-separated hostnames and IPs for the server certificate
        validity: Duration string; defaults to the configured default validity
        config: Application configuration; defaults are used when omitted

    Returns:
        Issued certificate chain
    """
    config = config or AppConfig()
    issuer = ChainIssuer(config.issuer)
    return issuer.generate(hosts, validity if validity is not None else config.issuer.default_validity)
