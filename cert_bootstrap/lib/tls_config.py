"""Immutable TLS server configuration handed to the listeners."""

import ssl
import tempfile
import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.x509.verification import Store

from .cert_utils import (
    deserialize_certificate_chain,
    deserialize_private_key,
    ensure_key_pair,
    serialize_certificate,
    serialize_private_key,
    write_private_file,
)

LEGACY_CIPHERS = "DEFAULT:@SECLEVEL=0"


@dataclass(frozen=True)
class CertificateKeyPair:
    """Certificate chain (leaf first) with the leaf's private key."""

    chain: tuple[x509.Certificate, ...]
    private_key: CertificateIssuerPrivateKeyTypes

    def __post_init__(self) -> None:
        if not self.chain:
            raise ValueError("certificate chain must not be empty")

    @classmethod
    def from_objects(
        cls,
        certificate: x509.Certificate,
        private_key: CertificateIssuerPrivateKeyTypes,
        intermediates: Sequence[x509.Certificate] = (),
    ) -> "CertificateKeyPair":
        """Pair a parsed certificate with its key.

        Raises:
            InvalidKeyPair: If the key does not match the certificate
        """
        ensure_key_pair(certificate, private_key)
        return cls(chain=(certificate, *intermediates), private_key=private_key)

    @classmethod
    def from_pem(cls, cert_pem: bytes, key_pem: bytes) -> "CertificateKeyPair":
        """Parse a PEM certificate chain and PEM private key.

        Raises:
            CorruptPEM: If either input cannot be parsed
            InvalidKeyPair: If the key does not match the first certificate
        """
        chain = deserialize_certificate_chain(cert_pem)
        private_key = deserialize_private_key(key_pem)
        return cls.from_objects(chain[0], private_key, chain[1:])

    @property
    def certificate(self) -> x509.Certificate:
        return self.chain[0]

    def chain_pem(self) -> bytes:
        return b"".join(serialize_certificate(cert) for cert in self.chain)

    def key_pem(self) -> bytes:
        return serialize_private_key(self.private_key)


@dataclass(frozen=True)
class TLSServerConfig:
    """TLS settings for one listener.

    min_version None and empty alpn_protocols leave the platform defaults in place.
    """

    key_pair: CertificateKeyPair
    min_version: ssl.TLSVersion | None = None
    alpn_protocols: tuple[str, ...] = ()
    prefer_server_ciphers: bool = True

    def to_ssl_context(self) -> ssl.SSLContext:
        """Build a fresh server-side SSLContext from this configuration.

        ssl only loads key material from files, so the pair is written to a
        private temporary directory that is removed before returning.

        A floor below TLS 1.2 also lowers the OpenSSL security level, since
        OpenSSL 3 otherwise offers no cipher usable with TLS 1.0 or 1.1.
        """
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        if self.min_version is not None:
            if self.min_version < ssl.TLSVersion.TLSv1_2:
                with warnings.catch_warnings():
                    warnings.simplefilter("ignore", DeprecationWarning)
                    context.minimum_version = self.min_version
                context.set_ciphers(LEGACY_CIPHERS)
            else:
                context.minimum_version = self.min_version
        if self.alpn_protocols:
            context.set_alpn_protocols(list(self.alpn_protocols))
        if self.prefer_server_ciphers:
            context.options |= ssl.OP_CIPHER_SERVER_PREFERENCE

        with tempfile.TemporaryDirectory(prefix="cert_bootstrap_") as tmp_dir:
            cert_file = Path(tmp_dir) / "chain.pem"
            key_file = Path(tmp_dir) / "key.pem"
            write_private_file(cert_file, self.key_pair.chain_pem())
            write_private_file(key_file, self.key_pair.key_pem())
            context.load_cert_chain(cert_file, key_file)

        return context


@dataclass(frozen=True)
class TrustPool:
    """Certificates a client must trust to accept this deployment's leaves."""

    certificates: tuple[x509.Certificate, ...]

    @property
    def pem(self) -> bytes:
        return b"".join(serialize_certificate(cert) for cert in self.certificates)

    def store(self) -> Store:
        """Return a verification store for cryptography's path validator."""
        return Store(list(self.certificates))
