"""Test fixtures for cert_bootstrap tests."""

from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from cert_bootstrap.lib.cert_utils import (
    generate_private_key,
    serialize_certificate,
    serialize_private_key,
)
from cert_bootstrap.lib.certificate_builder import CertificateBuilder
from cert_bootstrap.lib.config import BootstrapConfig, DistinguishedName
from cert_bootstrap.lib.leaf_issuer import LeafCertificateIssuer
from cert_bootstrap.lib.models import LeafCertificate, TrustAnchor


@pytest.fixture
def cert_dir(tmp_path: Path) -> Path:
    """Return empty certificate directory."""
    return tmp_path / "cert"


@pytest.fixture
def bootstrap_config(cert_dir: Path) -> BootstrapConfig:
    """Return test bootstrap configuration with smaller keys."""
    return BootstrapConfig(
        cert_dir=cert_dir,
        key_size=2048,  # Faster for tests
        proxy_hosts=["a.test", "b.test"],
    )


@pytest.fixture
def anchor_dn() -> DistinguishedName:
    """Return test trust anchor distinguished name."""
    return DistinguishedName(
        organization="Test Org",
        locality="San Francisco",
        street_address="Golden Gate Bridge",
        postal_code="94016",
        common_name="Test Root CA",
    )


@pytest.fixture
def leaf_dn() -> DistinguishedName:
    """Return test leaf distinguished name."""
    return DistinguishedName(organization="Test Leaf", locality="San Francisco")


@pytest.fixture
def anchor_key() -> RSAPrivateKey:
    """Generate RSA private key for the trust anchor."""
    return generate_private_key(key_size=2048)


@pytest.fixture
def anchor_cert(anchor_key: RSAPrivateKey, anchor_dn: DistinguishedName) -> x509.Certificate:
    """Generate self-signed trust anchor certificate."""
    return CertificateBuilder.build_trust_anchor(
        subject_dn=anchor_dn,
        private_key=anchor_key,
        validity_years=10,
    )


@pytest.fixture
def trust_anchor(
    anchor_cert: x509.Certificate, anchor_key: RSAPrivateKey, cert_dir: Path
) -> TrustAnchor:
    """Return in-memory trust anchor (not written to disk)."""
    return TrustAnchor(
        certificate=anchor_cert,
        private_key=anchor_key,
        cert_path=cert_dir / "ca.pem",
        key_path=cert_dir / "key.pem",
    )


@pytest.fixture
def leaf_issuer(leaf_dn: DistinguishedName) -> LeafCertificateIssuer:
    """Return leaf issuer with 2048-bit keys."""
    return LeafCertificateIssuer(subject_defaults=leaf_dn, key_size=2048)


@pytest.fixture
def leaf(leaf_issuer: LeafCertificateIssuer, trust_anchor: TrustAnchor) -> LeafCertificate:
    """Issue leaf certificate for a.test and b.test."""
    return leaf_issuer.issue(trust_anchor, ["a.test", "b.test"])


@pytest.fixture
def anchor_files_on_disk(
    cert_dir: Path, anchor_cert: x509.Certificate, anchor_key: RSAPrivateKey
) -> Path:
    """Write trust anchor pair to cert_dir and return the directory.

    Creates:
        {cert_dir}/ca.pem
        {cert_dir}/key.pem
    """
    cert_dir.mkdir(parents=True, exist_ok=True)
    (cert_dir / "ca.pem").write_bytes(serialize_certificate(anchor_cert))
    (cert_dir / "key.pem").write_bytes(serialize_private_key(anchor_key))
    return cert_dir


@pytest.fixture
def dot_key() -> RSAPrivateKey:
    """Generate RSA private key for the DoT certificate."""
    return generate_private_key(key_size=2048)


@pytest.fixture
def dot_cert(dot_key: RSAPrivateKey) -> x509.Certificate:
    """Generate DoT certificate signed by an unrelated CA, as a public CA would."""
    public_ca_key = generate_private_key(key_size=2048)
    public_ca_cert = CertificateBuilder.build_trust_anchor(
        subject_dn=DistinguishedName(organization="Public CA", common_name="Public Root"),
        private_key=public_ca_key,
        validity_years=1,
    )
    return CertificateBuilder.build_leaf_certificate(
        subject_dn=DistinguishedName(organization="DoT", common_name="dns.a.test"),
        dns_names=["dns.a.test"],
        leaf_key=dot_key,
        issuer_cert=public_ca_cert,
        issuer_key=public_ca_key,
        validity_years=1,
    )


@pytest.fixture
def dot_files_on_disk(
    cert_dir: Path, dot_cert: x509.Certificate, dot_key: RSAPrivateKey
) -> Path:
    """Write DoT pair to cert_dir and return the directory.

    Creates:
        {cert_dir}/dot_cert.pem
        {cert_dir}/dot_key.pem
    """
    cert_dir.mkdir(parents=True, exist_ok=True)
    (cert_dir / "dot_cert.pem").write_bytes(serialize_certificate(dot_cert))
    (cert_dir / "dot_key.pem").write_bytes(serialize_private_key(dot_key))
    return cert_dir
