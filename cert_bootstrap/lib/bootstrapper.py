"""Startup orchestration of certificate bootstrap."""

from pathlib import Path

from .cert_utils import deserialize_certificate
from .config import BootstrapConfig
from .dot_loader import DoTCertificateLoader
from .errors import BootstrapError, CorruptPEM, MissingCertificateMaterial
from .leaf_issuer import LeafCertificateIssuer
from .logging_config import LOGGER
from .models import BootstrapResult
from .server_config import ServerConfigAssembler, derive_trust_pool
from .trust_anchor_store import TrustAnchorStore


class Bootstrapper:
    """Runs trust anchor, leaf, and listener config setup once at startup."""

    def __init__(self, config: BootstrapConfig) -> None:
        """Initialize bootstrapper with configuration.

        Args:
            config: Paths, subjects, hostnames, and TLS policy
        """
        self.config = config
        self.anchor_store = TrustAnchorStore(
            key_size=config.key_size,
            validity_years=config.validity_years,
        )
        self.leaf_issuer = LeafCertificateIssuer(
            subject_defaults=config.leaf_subject,
            key_size=config.key_size,
            validity_years=config.validity_years,
        )
        self.assembler = ServerConfigAssembler.from_config(config)
        self.dot_loader = DoTCertificateLoader(
            prefer_server_ciphers=config.prefer_server_ciphers
        )

    def run(self) -> BootstrapResult:
        """Build both listener configs, recording failures instead of raising.

        The proxy chain runs strictly in order (anchor, leaf, config); a failed
        step leaves every later field None. DoT loading is independent of it.

        Returns:
            BootstrapResult; check ready before starting any listener
        """
        result = BootstrapResult(dot_required=self.config.require_dot)

        try:
            self._bootstrap_proxy(result)
        except BootstrapError as e:
            LOGGER.error("Proxy TLS bootstrap failed: %s", e)
            result.errors.append(e)
        except ValueError as e:
            error = BootstrapError(f"invalid proxy configuration: {e}")
            error.__cause__ = e
            LOGGER.error("Proxy TLS bootstrap failed: %s", error)
            result.errors.append(error)

        try:
            result.dot_tls = self.dot_loader.load(
                self.config.dot_cert_path, self.config.dot_key_path
            )
        except BootstrapError as e:
            if self.config.require_dot:
                LOGGER.error("DoT TLS bootstrap failed: %s", e)
            else:
                LOGGER.warning("DoT TLS unavailable, continuing without it: %s", e)
            result.errors.append(e)

        if result.ready:
            LOGGER.info(
                "Bootstrap complete (proxy=%s, dot=%s)", result.proxy_ready, result.dot_ready
            )
        return result

    def _bootstrap_proxy(self, result: BootstrapResult) -> None:
        anchor = self.anchor_store.obtain(
            self.config.anchor_cert_path,
            self.config.anchor_key_path,
            self.config.anchor_subject,
        )
        leaf = self.leaf_issuer.issue(anchor, self.config.proxy_hosts)
        proxy_tls = self.assembler.assemble(leaf)

        # Published together so listeners never see a partial chain
        result.trust_anchor = anchor
        result.leaf = leaf
        result.proxy_tls = proxy_tls
        result.trust_pool = self.assembler.trust_pool(leaf)


def export_trust_anchor(cert_path: Path, output_path: Path) -> Path:
    """Write the trust anchor certificate as a PEM bundle for client trust stores.

    Args:
        cert_path: Persisted trust anchor certificate
        output_path: Bundle destination, parent directories are created

    Returns:
        Path to the written bundle

    Raises:
        MissingCertificateMaterial: If the anchor certificate does not exist
        CorruptPEM: If the anchor certificate cannot be parsed
    """
    try:
        if not cert_path.exists():
            raise MissingCertificateMaterial(f"trust anchor certificate not found: {cert_path}")
        anchor_cert = deserialize_certificate(cert_path.read_bytes())
    except OSError as e:
        raise CorruptPEM(f"cannot read trust anchor certificate: {e}") from e

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(derive_trust_pool(anchor_cert).pem)
    return output_path
