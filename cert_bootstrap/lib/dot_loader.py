"""Pre-provisioned certificate material for the DNS-over-TLS listener."""

from pathlib import Path

from .errors import CorruptPEM, MissingCertificateMaterial
from .logging_config import LOGGER
from .tls_config import CertificateKeyPair, TLSServerConfig


class DoTCertificateLoader:
    """Loads the DoT certificate pair.

    DoT clients validate against public roots, so the pair is never generated
    here; it has to be provisioned by an external CA.
    """

    def __init__(self, prefer_server_ciphers: bool = True) -> None:
        self.prefer_server_ciphers = prefer_server_ciphers

    def load(self, cert_path: Path, key_path: Path) -> TLSServerConfig:
        """Load the DoT pair and build its TLS config with platform protocol defaults.

        Raises:
            MissingCertificateMaterial: If either file is absent
            CorruptPEM: If either file cannot be read or parsed
            InvalidKeyPair: If the key does not match the certificate
        """
        try:
            for path in (cert_path, key_path):
                if not path.exists():
                    raise MissingCertificateMaterial(
                        f"DoT certificate material not found: {path}"
                    )
            cert_pem = cert_path.read_bytes()
            key_pem = key_path.read_bytes()
        except OSError as e:
            raise CorruptPEM(f"cannot read DoT certificate material: {e}") from e

        key_pair = CertificateKeyPair.from_pem(cert_pem, key_pem)
        LOGGER.info(
            "Loaded DoT certificate for %s from %s",
            key_pair.certificate.subject.rfc4514_string(),
            cert_path,
        )
        return TLSServerConfig(
            key_pair=key_pair,
            prefer_server_ciphers=self.prefer_server_ciphers,
        )
