"""Tests for certificate builder module."""

from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import ExtendedKeyUsageOID

from cert_bootstrap.lib.cert_utils import generate_private_key
from cert_bootstrap.lib.certificate_builder import CertificateBuilder
from cert_bootstrap.lib.config import DistinguishedName
from cert_bootstrap.lib.errors import CertificateSigningFailure


class TestBuildTrustAnchor:
    """Tests for CertificateBuilder.build_trust_anchor."""

    def test_anchor_is_self_signed(self, anchor_cert: x509.Certificate) -> None:
        """Anchor issuer must equal subject and verify against itself."""
        assert anchor_cert.issuer == anchor_cert.subject
        anchor_cert.verify_directly_issued_by(anchor_cert)

    def test_anchor_basic_constraints(self, anchor_cert: x509.Certificate) -> None:
        """Anchor must have critical CA=True."""
        bc = anchor_cert.extensions.get_extension_for_class(x509.BasicConstraints)
        assert bc.critical is True
        assert bc.value.ca is True

    def test_anchor_key_usage(self, anchor_cert: x509.Certificate) -> None:
        """Anchor key usage is digital_signature and key_cert_sign only."""
        ku = anchor_cert.extensions.get_extension_for_class(x509.KeyUsage).value
        assert ku.digital_signature is True
        assert ku.key_cert_sign is True
        assert ku.crl_sign is False
        assert ku.key_encipherment is False

    def test_anchor_validity_period(
        self, anchor_key: RSAPrivateKey, anchor_dn: DistinguishedName
    ) -> None:
        """Anchor validity matches requested years."""
        before = datetime.now(UTC)
        cert = CertificateBuilder.build_trust_anchor(
            subject_dn=anchor_dn, private_key=anchor_key, validity_years=10
        )
        expected_not_after = before + timedelta(days=10 * 365)
        # Allow 5-second delta for test execution time
        assert abs((cert.not_valid_after_utc - expected_not_after).total_seconds()) < 5
        assert abs((cert.not_valid_before_utc - before).total_seconds()) < 5

    def test_anchor_subject_matches_dn(
        self, anchor_cert: x509.Certificate, anchor_dn: DistinguishedName
    ) -> None:
        """Anchor subject carries the configured attributes."""
        org = anchor_cert.subject.get_attributes_for_oid(x509.NameOID.ORGANIZATION_NAME)[0].value
        assert org == anchor_dn.organization
        street = anchor_cert.subject.get_attributes_for_oid(x509.NameOID.STREET_ADDRESS)[0].value
        assert street == anchor_dn.street_address

    def test_empty_dn_attributes_are_omitted(self, anchor_cert: x509.Certificate) -> None:
        """Blank province is not encoded."""
        assert anchor_cert.subject.get_attributes_for_oid(x509.NameOID.STATE_OR_PROVINCE_NAME) == []

    def test_anchor_has_subject_key_identifier(self, anchor_cert: x509.Certificate) -> None:
        ski = anchor_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
        expected = x509.SubjectKeyIdentifier.from_public_key(anchor_cert.public_key())  # type: ignore[arg-type]
        assert ski == expected

    def test_signing_failure_is_typed(
        self,
        anchor_key: RSAPrivateKey,
        anchor_dn: DistinguishedName,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Errors raised while signing surface as CertificateSigningFailure."""

        def failing_sign(self, private_key, algorithm, **kwargs):
            raise ValueError("signing backend unavailable")

        monkeypatch.setattr(x509.CertificateBuilder, "sign", failing_sign)

        with pytest.raises(CertificateSigningFailure):
            CertificateBuilder.build_trust_anchor(
                subject_dn=anchor_dn, private_key=anchor_key, validity_years=10
            )


class TestBuildLeafCertificate:
    """Tests for CertificateBuilder.build_leaf_certificate."""

    @pytest.fixture
    def leaf_cert(
        self,
        anchor_cert: x509.Certificate,
        anchor_key: RSAPrivateKey,
        leaf_dn: DistinguishedName,
    ) -> x509.Certificate:
        return CertificateBuilder.build_leaf_certificate(
            subject_dn=leaf_dn,
            dns_names=["example.com", "*.example.com"],
            leaf_key=generate_private_key(key_size=2048),
            issuer_cert=anchor_cert,
            issuer_key=anchor_key,
            validity_years=10,
        )

    def test_leaf_signed_by_anchor(
        self, leaf_cert: x509.Certificate, anchor_cert: x509.Certificate
    ) -> None:
        """Leaf issuer is the anchor subject and its signature verifies."""
        assert leaf_cert.issuer == anchor_cert.subject
        leaf_cert.verify_directly_issued_by(anchor_cert)

    def test_leaf_is_not_ca(self, leaf_cert: x509.Certificate) -> None:
        bc = leaf_cert.extensions.get_extension_for_class(x509.BasicConstraints).value
        assert bc.ca is False

    def test_leaf_key_usage(self, leaf_cert: x509.Certificate) -> None:
        """Leaf key usage is digital_signature only."""
        ku = leaf_cert.extensions.get_extension_for_class(x509.KeyUsage).value
        assert ku.digital_signature is True
        assert ku.key_cert_sign is False
        assert ku.key_encipherment is False

    def test_leaf_extended_key_usage(self, leaf_cert: x509.Certificate) -> None:
        """Leaf allows both server and client authentication."""
        eku = leaf_cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        assert list(eku) == [ExtendedKeyUsageOID.CLIENT_AUTH, ExtendedKeyUsageOID.SERVER_AUTH]

    def test_leaf_san_keeps_order(self, leaf_cert: x509.Certificate) -> None:
        san = leaf_cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
        assert san.get_values_for_type(x509.DNSName) == ["example.com", "*.example.com"]

    def test_leaf_authority_key_identifier_matches_anchor(
        self, leaf_cert: x509.Certificate, anchor_cert: x509.Certificate
    ) -> None:
        aki = leaf_cert.extensions.get_extension_for_class(x509.AuthorityKeyIdentifier).value
        ski = anchor_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
        assert aki.key_identifier == ski.digest

    def test_leaf_serial_differs_from_anchor(
        self, leaf_cert: x509.Certificate, anchor_cert: x509.Certificate
    ) -> None:
        assert leaf_cert.serial_number != anchor_cert.serial_number
