"""Issued certificate chain model."""

from pydantic import BaseModel, ConfigDict, Field


class CertificateChain(BaseModel):
    """
    Root CA, server and client material of one issuance.

    Every field holds a single PEM block. Aliases are the keys the bundle is
    stored under by consumers.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ca_key: str = Field(..., alias="caKey")
    ca_cert: str = Field(..., alias="caCert")
    server_key: str = Field(..., alias="serverKey")
    server_cert: str = Field(..., alias="serverCert")
    client_key: str = Field(..., alias="clientKey")
    client_cert: str = Field(..., alias="clientCert")

    def server_pair(self) -> tuple[str, str]:
        """Return (certificate, key) for the server side."""
        return self.server_cert, self.server_key

    def client_pair(self) -> tuple[str, str]:
        """Return (certificate, key) for the client side."""
        return self.client_cert, self.client_key

    def ca_bundle(self) -> str:
        """CA certificate as a trust bundle for both peers."""
        return self.ca_cert
