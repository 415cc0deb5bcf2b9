"""Certificate builder for X.509 trust anchor and leaf construction."""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.x509.oid import ExtendedKeyUsageOID

from .cert_utils import generate_serial_number
from .config import DistinguishedName
from .errors import CertificateSigningFailure


def _sign(
    builder: x509.CertificateBuilder, signing_key: CertificateIssuerPrivateKeyTypes
) -> x509.Certificate:
    try:
        return builder.sign(signing_key, hashes.SHA256())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CertificateSigningFailure(f"certificate signing failed: {e}") from e


def _authority_key_identifier(issuer_cert: x509.Certificate) -> x509.AuthorityKeyIdentifier:
    try:
        ski = issuer_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except x509.ExtensionNotFound:
        return x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_cert.public_key())
    return x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ski.value)


class CertificateBuilder:
    """Builds the self-signed trust anchor and the leaves it signs."""

    @staticmethod
    def build_trust_anchor(
        subject_dn: DistinguishedName,
        private_key: RSAPrivateKey,
        validity_years: int,
    ) -> x509.Certificate:
        """Build self-signed trust anchor certificate.

        Args:
            subject_dn: Distinguished name for certificate subject
            private_key: RSA private key for signing
            validity_years: Certificate validity period in years

        Returns:
            Self-signed X.509 certificate with CA extensions

        Raises:
            CertificateSigningFailure: If signing fails
        """
        subject = subject_dn.to_x509_name()
        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(days=validity_years * 365)

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(private_key.public_key())
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=True, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
                critical=False,
            )
        )

        return _sign(builder, private_key)

    @staticmethod
    def build_leaf_certificate(
        subject_dn: DistinguishedName,
        dns_names: Sequence[str],
        leaf_key: RSAPrivateKey,
        issuer_cert: x509.Certificate,
        issuer_key: CertificateIssuerPrivateKeyTypes,
        validity_years: int,
    ) -> x509.Certificate:
        """Build server leaf certificate signed by the trust anchor.

        clientAuth sits next to serverAuth because the proxy presents the same
        certificate when it dials upstream hosts.

        Args:
            subject_dn: Distinguished name for certificate subject
            dns_names: Subject alternative DNS names, in order
            leaf_key: Leaf private key whose public half is certified
            issuer_cert: Trust anchor certificate (issuer)
            issuer_key: Trust anchor private key for signing
            validity_years: Certificate validity period in years

        Returns:
            X.509 end-entity certificate signed by the trust anchor

        Raises:
            CertificateSigningFailure: If signing fails
        """
        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(days=validity_years * 365)
        leaf_public_key = leaf_key.public_key()

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject_dn.to_x509_name())
            .issuer_name(issuer_cert.subject)
            .public_key(leaf_public_key)
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage(
                    [ExtendedKeyUsageOID.CLIENT_AUTH, ExtendedKeyUsageOID.SERVER_AUTH]
                ),
                critical=False,
            )
            .add_extension(
                x509.SubjectAlternativeName([x509.DNSName(name) for name in dns_names]),
                critical=False,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(leaf_public_key),
                critical=False,
            )
            .add_extension(
                _authority_key_identifier(issuer_cert),
                critical=False,
            )
        )

        return _sign(builder, issuer_key)
