"""Persistent trust anchor: load from disk or generate once."""

from pathlib import Path

from .cert_utils import (
    deserialize_certificate,
    deserialize_private_key,
    generate_private_key,
    public_key_matches,
    serialize_certificate,
    serialize_private_key,
    write_private_file,
)
from .certificate_builder import CertificateBuilder
from .config import DistinguishedName
from .errors import CorruptPEM, CorruptTrustAnchor
from .logging_config import LOGGER
from .models import TrustAnchor


class TrustAnchorStore:
    """Loads the trust anchor pair, generating and persisting it on first run."""

    def __init__(self, key_size: int = 4096, validity_years: int = 10) -> None:
        """Initialize store.

        Args:
            key_size: RSA key size for a newly generated anchor
            validity_years: Validity of a newly generated anchor
        """
        self.key_size = key_size
        self.validity_years = validity_years

    def obtain(
        self, cert_path: Path, key_path: Path, subject_defaults: DistinguishedName
    ) -> TrustAnchor:
        """Return the persisted trust anchor, creating it if neither file exists.

        Args:
            cert_path: PEM certificate file
            key_path: PEM private key file
            subject_defaults: Subject used only when a new anchor is generated

        Returns:
            TrustAnchor, with created=True when it was generated by this call

        Raises:
            CorruptTrustAnchor: If only one file exists, or the pair cannot be loaded
            KeyGenerationFailure: If a new key cannot be generated
            CertificateSigningFailure: If a new certificate cannot be signed
        """
        try:
            cert_exists = cert_path.exists()
            key_exists = key_path.exists()
        except OSError as e:
            raise CorruptTrustAnchor(f"cannot access trust anchor files: {e}") from e

        if cert_exists and key_exists:
            return self._load(cert_path, key_path)
        if cert_exists:
            raise CorruptTrustAnchor(
                f"trust anchor certificate {cert_path} has no private key at {key_path}"
            )
        if key_exists:
            raise CorruptTrustAnchor(
                f"trust anchor key {key_path} has no certificate at {cert_path}; "
                "refusing to overwrite it"
            )
        return self._generate(cert_path, key_path, subject_defaults)

    def _load(self, cert_path: Path, key_path: Path) -> TrustAnchor:
        try:
            cert = deserialize_certificate(cert_path.read_bytes())
            key = deserialize_private_key(key_path.read_bytes())
        except (OSError, CorruptPEM) as e:
            raise CorruptTrustAnchor(f"cannot load trust anchor: {e}") from e

        if not public_key_matches(cert, key):
            raise CorruptTrustAnchor(
                f"trust anchor key {key_path} does not match certificate {cert_path}"
            )

        anchor = TrustAnchor(
            certificate=cert,
            private_key=key,
            cert_path=cert_path,
            key_path=key_path,
        )
        LOGGER.info("Loaded trust anchor %s from %s", anchor.serial, cert_path)
        return anchor

    def _generate(
        self, cert_path: Path, key_path: Path, subject_defaults: DistinguishedName
    ) -> TrustAnchor:
        LOGGER.info("No trust anchor at %s, generating RSA-%d root", cert_path, self.key_size)
        key = generate_private_key(self.key_size)
        cert = CertificateBuilder.build_trust_anchor(
            subject_dn=subject_defaults,
            private_key=key,
            validity_years=self.validity_years,
        )

        # Key first: a key without a certificate is reported on the next run
        try:
            write_private_file(key_path, serialize_private_key(key))
            write_private_file(cert_path, serialize_certificate(cert))
        except OSError as e:
            raise CorruptTrustAnchor(f"cannot persist trust anchor: {e}") from e

        anchor = TrustAnchor(
            certificate=cert,
            private_key=key,
            cert_path=cert_path,
            key_path=key_path,
            created=True,
        )
        LOGGER.info("Created trust anchor %s at %s", anchor.serial, cert_path)
        return anchor
