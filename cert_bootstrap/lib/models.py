"""Result models for certificate bootstrap operations."""

from dataclasses import dataclass, field
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes

from .cert_utils import get_certificate_serial_hex
from .errors import BootstrapError
from .tls_config import TLSServerConfig, TrustPool


@dataclass(frozen=True)
class TrustAnchor:
    """Self-signed root certificate and the key that signs leaves.

    created is True only on the run that generated and persisted the pair.
    """

    certificate: x509.Certificate
    private_key: CertificateIssuerPrivateKeyTypes
    cert_path: Path
    key_path: Path
    created: bool = False

    @property
    def serial(self) -> str:
        return get_certificate_serial_hex(self.certificate)


@dataclass(frozen=True)
class LeafCertificate:
    """In-memory server certificate signed by a trust anchor."""

    certificate: x509.Certificate
    private_key: RSAPrivateKey
    issuer: x509.Certificate
    dns_names: tuple[str, ...]

    @property
    def serial(self) -> str:
        return get_certificate_serial_hex(self.certificate)


@dataclass
class BootstrapResult:
    """Result from a bootstrap run, passed by reference to the listeners.

    A config is None when the step producing it failed; errors holds one
    entry per failed step, in the order they happened.
    """

    trust_anchor: TrustAnchor | None = None
    leaf: LeafCertificate | None = None
    proxy_tls: TLSServerConfig | None = None
    trust_pool: TrustPool | None = None
    dot_tls: TLSServerConfig | None = None
    dot_required: bool = True
    errors: list[BootstrapError] = field(default_factory=list)

    @property
    def proxy_ready(self) -> bool:
        return self.proxy_tls is not None

    @property
    def dot_ready(self) -> bool:
        return self.dot_tls is not None

    @property
    def ready(self) -> bool:
        """True when every required listener has a complete TLS config."""
        if not self.proxy_ready:
            return False
        return self.dot_ready or not self.dot_required

    @property
    def degraded(self) -> bool:
        """True when the proxy can start but the DoT listener cannot."""
        return self.ready and not self.dot_ready

    def raise_for_errors(self) -> None:
        """Re-raise the first recorded error if the result is not ready."""
        if self.ready:
            return
        if self.errors:
            raise self.errors[0]
        raise BootstrapError("bootstrap incomplete")
