"""TLS configuration for the interception listener."""

import ssl

from cryptography import x509

from .config import BootstrapConfig
from .models import LeafCertificate
from .tls_config import CertificateKeyPair, TLSServerConfig, TrustPool

HTTP_1_1 = "http/1.1"


def derive_trust_pool(anchor_cert: x509.Certificate) -> TrustPool:
    """Return a pool holding only this deployment's trust anchor."""
    return TrustPool(certificates=(anchor_cert,))


class ServerConfigAssembler:
    """Packages a leaf certificate into the interception listener's TLS config."""

    def __init__(
        self,
        min_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1,
        alpn_protocols: tuple[str, ...] = (HTTP_1_1,),
        prefer_server_ciphers: bool = True,
    ) -> None:
        """Initialize assembler.

        Args:
            min_version: Lowest protocol version accepted from intercepted clients
            alpn_protocols: Offered application protocols; the interceptor
                handles one request/response stream, so only HTTP/1.1
            prefer_server_ciphers: Use server cipher suite order
        """
        self.min_version = min_version
        self.alpn_protocols = alpn_protocols
        self.prefer_server_ciphers = prefer_server_ciphers

    @classmethod
    def from_config(cls, config: BootstrapConfig) -> "ServerConfigAssembler":
        return cls(
            min_version=config.min_tls_version,
            alpn_protocols=config.alpn_protocols,
            prefer_server_ciphers=config.prefer_server_ciphers,
        )

    def assemble(self, leaf: LeafCertificate) -> TLSServerConfig:
        """Build the interception listener's TLS config.

        Raises:
            InvalidKeyPair: If the leaf key does not match its certificate
        """
        key_pair = CertificateKeyPair.from_objects(leaf.certificate, leaf.private_key)
        return TLSServerConfig(
            key_pair=key_pair,
            min_version=self.min_version,
            alpn_protocols=tuple(self.alpn_protocols),
            prefer_server_ciphers=self.prefer_server_ciphers,
        )

    def trust_pool(self, leaf: LeafCertificate) -> TrustPool:
        """Return the pool of roots that verify leaf."""
        return derive_trust_pool(leaf.issuer)
