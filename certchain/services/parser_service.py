"""Certificate parsing and verification service."""

import logging
from typing import Any, Dict, Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization

from certchain.models.certificate import PrivateKey
from certchain.models.chain import CertificateChain

logger = logging.getLogger("certchain")


class CertificateParser:
    """Service for parsing and checking issued X.509 material."""

    @staticmethod
    def load_certificate_pem(pem_string: str) -> x509.Certificate:
        """
        Load a PEM certificate from a string.

        Args:
            pem_string: The PEM-encoded certificate string.

        Returns:
            A cryptography x509.Certificate object.
        """
        return x509.load_pem_x509_certificate(pem_string.encode("utf-8"))

    @staticmethod
    def load_private_key_pem(pem_string: str) -> PrivateKey:
        """
        Load an unencrypted PEM private key from a string.

        Args:
            pem_string: The PEM-encoded private key string.

        Returns:
            Private key object
        """
        return serialization.load_pem_private_key(pem_string.encode("utf-8"), password=None)

    @staticmethod
    def parse_certificate_pem(cert_pem: str) -> Dict[str, Any]:
        """
        Parse X.509 Certificate from PEM content.

        Args:
            cert_pem: PEM-encoded certificate content

        Returns:
            Dictionary with parsed certificate data

        Raises:
            ValueError: If certificate cannot be parsed
        """
        try:
            cert = CertificateParser.load_certificate_pem(cert_pem)
        except Exception as e:
            logger.error(f"Error parsing certificate: {e}")
            raise ValueError(f"Failed to parse certificate: {e}")

        dns_names, ip_addresses = CertificateParser._extract_sans(cert)
        return {
            "subject": CertificateParser._extract_subject(cert.subject),
            "issuer": CertificateParser._extract_subject(cert.issuer),
            "not_before": cert.not_valid_before_utc,
            "not_after": cert.not_valid_after_utc,
            "serial_number": format(cert.serial_number, "X"),
            "fingerprint_sha256": cert.fingerprint(hashes.SHA256()).hex(":").upper(),
            "dns_names": dns_names,
            "ip_addresses": ip_addresses,
            "is_ca": CertificateParser._is_ca(cert),
            "key_usage": CertificateParser._extract_key_usage(cert),
            "extended_key_usage": CertificateParser._extract_extended_key_usage(cert),
        }

    @staticmethod
    def _extract_subject(name: x509.Name) -> Dict[str, Optional[str]]:
        """
        Extract Subject/Issuer DN.

        Args:
            name: X.509 Name object

        Returns:
            Dictionary with subject fields
        """

        def get_attribute(oid):
            attrs = name.get_attributes_for_oid(oid)
            return attrs[0].value if attrs else None

        return {
            "common_name": get_attribute(x509.NameOID.COMMON_NAME),
            "organization": get_attribute(x509.NameOID.ORGANIZATION_NAME),
        }

    @staticmethod
    def _extract_sans(cert: x509.Certificate) -> tuple[list[str], list[str]]:
        """
        Extract Subject Alternative Names.

        Args:
            cert: Certificate object

        Returns:
            Tuple of (dns_names, ip_addresses)
        """
        try:
            san_ext = cert.extensions.get_extension_for_oid(x509.ExtensionOID.SUBJECT_ALTERNATIVE_NAME)
        except x509.ExtensionNotFound:
            return [], []
        dns_names = san_ext.value.get_values_for_type(x509.DNSName)
        ip_addresses = [str(ip) for ip in san_ext.value.get_values_for_type(x509.IPAddress)]
        return dns_names, ip_addresses

    @staticmethod
    def _is_ca(cert: x509.Certificate) -> bool:
        """
        Check if certificate is a CA.

        Args:
            cert: Certificate object

        Returns:
            True if CA, False otherwise
        """
        try:
            bc = cert.extensions.get_extension_for_oid(x509.ExtensionOID.BASIC_CONSTRAINTS)
            return bc.value.ca
        except x509.ExtensionNotFound:
            return False

    @staticmethod
    def _extract_key_usage(cert: x509.Certificate) -> list[str]:
        """
        Extract Key Usage extension values.

        Args:
            cert: Certificate object

        Returns:
            List of Key Usage strings (e.g., ["digitalSignature", "keyEncipherment"])
        """
        try:
            ku = cert.extensions.get_extension_for_oid(x509.ExtensionOID.KEY_USAGE).value
        except x509.ExtensionNotFound:
            return []

        usage_list = []
        if ku.digital_signature:
            usage_list.append("digitalSignature")
        if ku.content_commitment:  # Also known as nonRepudiation
            usage_list.append("nonRepudiation")
        if ku.key_encipherment:
            usage_list.append("keyEncipherment")
        if ku.data_encipherment:
            usage_list.append("dataEncipherment")
        if ku.key_agreement:
            usage_list.append("keyAgreement")
            # encipher_only and decipher_only are only defined with key_agreement
            if ku.encipher_only:
                usage_list.append("encipherOnly")
            if ku.decipher_only:
                usage_list.append("decipherOnly")
        if ku.key_cert_sign:
            usage_list.append("keyCertSign")
        if ku.crl_sign:
            usage_list.append("cRLSign")
        return usage_list

    @staticmethod
    def _extract_extended_key_usage(cert: x509.Certificate) -> list[str]:
        """
        Extract Extended Key Usage extension values.

        Args:
            cert: Certificate object

        Returns:
            List of Extended Key Usage strings (e.g., ["serverAuth", "clientAuth"])
        """
        eku_oid_map = {
            x509.ExtendedKeyUsageOID.SERVER_AUTH: "serverAuth",
            x509.ExtendedKeyUsageOID.CLIENT_AUTH: "clientAuth",
            x509.ExtendedKeyUsageOID.CODE_SIGNING: "codeSigning",
            x509.ExtendedKeyUsageOID.EMAIL_PROTECTION: "emailProtection",
            x509.ExtendedKeyUsageOID.TIME_STAMPING: "timeStamping",
            x509.ExtendedKeyUsageOID.OCSP_SIGNING: "OCSPSigning",
        }

        try:
            eku_ext = cert.extensions.get_extension_for_oid(x509.ExtensionOID.EXTENDED_KEY_USAGE)
        except x509.ExtensionNotFound:
            return []
        # Unknown OIDs are kept as dotted strings
        return [eku_oid_map.get(oid, oid.dotted_string) for oid in eku_ext.value]

    @staticmethod
    def verify_issued_by(cert: x509.Certificate, issuer: x509.Certificate) -> bool:
        """
        Check that cert names issuer as its issuer and carries a valid signature from it.

        Args:
            cert: Certificate to check
            issuer: Candidate issuing certificate

        Returns:
            True if cert was issued by issuer, False otherwise
        """
        try:
            cert.verify_directly_issued_by(issuer)
        except (ValueError, TypeError, InvalidSignature) as e:
            logger.debug(f"Issuer verification failed: {type(e).__name__} {e}")
            return False
        return True

    @staticmethod
    def verify_key_pair(cert: x509.Certificate, private_key: PrivateKey) -> bool:
        """
        Verify that certificate and private key match.

        Args:
            cert: Certificate object
            private_key: Private key object

        Returns:
            True if key pair matches, False otherwise
        """
        spki = serialization.PublicFormat.SubjectPublicKeyInfo
        pub_from_private_bytes = private_key.public_key().public_bytes(serialization.Encoding.DER, spki)
        pub_from_cert_bytes = cert.public_key().public_bytes(serialization.Encoding.DER, spki)
        return pub_from_private_bytes == pub_from_cert_bytes

    @staticmethod
    def validate_chain(chain: CertificateChain) -> list[str]:
        """
        Validate an issued chain.

        A valid chain has:
        - a self-signed CA certificate with CA:TRUE
        - server and client certificates signed by that CA, with CA:FALSE
        - every private key matching its certificate
        - one shared validity window and three distinct serial numbers

        Args:
            chain: Issued certificate chain

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        pairs = {
            "CA": (chain.ca_cert, chain.ca_key),
            "Server": (chain.server_cert, chain.server_key),
            "Client": (chain.client_cert, chain.client_key),
        }

        certs = {}
        for label, (cert_pem, key_pem) in pairs.items():
            try:
                cert = CertificateParser.load_certificate_pem(cert_pem)
                key = CertificateParser.load_private_key_pem(key_pem)
            except Exception as e:
                errors.append(f"{label}: failed to load certificate or key: {e}")
                continue
            if not CertificateParser.verify_key_pair(cert, key):
                errors.append(f"{label}: private key does not match certificate")
            certs[label] = cert

        if errors:
            return errors

        ca = certs["CA"]
        if not CertificateParser._is_ca(ca):
            errors.append("CA: certificate does not have CA:TRUE in Basic Constraints")
        if not CertificateParser.verify_issued_by(ca, ca):
            errors.append("CA: certificate is not validly self-signed")

        for label in ("Server", "Client"):
            cert = certs[label]
            if CertificateParser._is_ca(cert):
                errors.append(f"{label}: leaf certificate has CA:TRUE")
            if not CertificateParser.verify_issued_by(cert, ca):
                errors.append(f"{label}: certificate is not signed by the CA")

        windows = {(c.not_valid_before_utc, c.not_valid_after_utc) for c in certs.values()}
        if len(windows) != 1:
            errors.append("Certificates do not share one validity window")

        if len({c.serial_number for c in certs.values()}) != len(certs):
            errors.append("Serial numbers are not unique within the chain")

        return errors
