"""Per-process leaf certificate issuance for the interception listener."""

from collections.abc import Iterable

from .cert_utils import generate_private_key
from .certificate_builder import CertificateBuilder
from .config import DistinguishedName
from .logging_config import LOGGER
from .models import LeafCertificate, TrustAnchor


def expand_dns_names(hostnames: Iterable[str]) -> list[str]:
    """Expand each hostname H into H followed by *.H, keeping input order.

    Raises:
        ValueError: If no hostnames are given or one is blank
    """
    dns_names: list[str] = []
    for host in hostnames:
        if not host.strip():
            raise ValueError("hostnames must not be blank")
        dns_names.append(host)
        dns_names.append(f"*.{host}")
    if not dns_names:
        raise ValueError("at least one hostname is required")
    return dns_names


class LeafCertificateIssuer:
    """Issues the in-memory server certificate signed by the trust anchor."""

    def __init__(
        self,
        subject_defaults: DistinguishedName,
        key_size: int = 4096,
        validity_years: int = 10,
    ) -> None:
        self.subject_defaults = subject_defaults
        self.key_size = key_size
        self.validity_years = validity_years

    def issue(self, trust_anchor: TrustAnchor, hostnames: Iterable[str]) -> LeafCertificate:
        """Generate a fresh key and a leaf covering hostnames and their wildcards.

        Args:
            trust_anchor: Anchor whose key signs the leaf
            hostnames: Proxied hostnames, in configuration order

        Returns:
            LeafCertificate held only in memory

        Raises:
            ValueError: If hostnames is empty or holds a blank entry
            KeyGenerationFailure: If the leaf key cannot be generated
            CertificateSigningFailure: If the leaf cannot be signed
        """
        dns_names = expand_dns_names(hostnames)
        leaf_key = generate_private_key(self.key_size)
        cert = CertificateBuilder.build_leaf_certificate(
            subject_dn=self.subject_defaults,
            dns_names=dns_names,
            leaf_key=leaf_key,
            issuer_cert=trust_anchor.certificate,
            issuer_key=trust_anchor.private_key,
            validity_years=self.validity_years,
        )

        leaf = LeafCertificate(
            certificate=cert,
            private_key=leaf_key,
            issuer=trust_anchor.certificate,
            dns_names=tuple(dns_names),
        )
        LOGGER.info("Issued leaf %s for %d DNS names", leaf.serial, len(dns_names))
        LOGGER.debug("Leaf DNS names: %s", ", ".join(dns_names))
        return leaf
