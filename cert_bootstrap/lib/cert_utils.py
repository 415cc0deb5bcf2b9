"""Certificate utility functions for key generation, serialization, and PEM file I/O."""

import os
import uuid
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.asymmetric.types import (
    CertificateIssuerPrivateKeyTypes,
    PrivateKeyTypes,
)

from .errors import CorruptPEM, InvalidKeyPair, KeyGenerationFailure

PRIVATE_FILE_MODE = 0o600


def generate_private_key(key_size: int = 4096) -> RSAPrivateKey:
    """Generate RSA private key with specified size.

    Raises:
        KeyGenerationFailure: If the backend rejects the parameters
    """
    try:
        return rsa.generate_private_key(
            public_exponent=65537,
            key_size=key_size,
        )
    except (ValueError, UnsupportedAlgorithm) as e:
        raise KeyGenerationFailure(f"RSA-{key_size} key generation failed: {e}") from e


def serialize_private_key(key: PrivateKeyTypes) -> bytes:
    """Serialize private key to PEM format (PKCS8, no encryption)."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes) -> CertificateIssuerPrivateKeyTypes:
    """Deserialize a signing-capable private key from PEM bytes.

    Accepts both PKCS8 ("PRIVATE KEY") and traditional ("RSA PRIVATE KEY") blocks.

    Raises:
        CorruptPEM: If the data is not a usable PEM private key
    """
    try:
        key = serialization.load_pem_private_key(pem_data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CorruptPEM(f"invalid PEM private key: {e}") from e
    if not isinstance(key, CertificateIssuerPrivateKeyTypes):
        raise CorruptPEM(f"unsupported private key type: {type(key).__name__}")
    return key


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes.

    Raises:
        CorruptPEM: If the data holds no parseable CERTIFICATE block
    """
    try:
        return x509.load_pem_x509_certificate(pem_data)
    except ValueError as e:
        raise CorruptPEM(f"invalid PEM certificate: {e}") from e


def deserialize_certificate_chain(pem_data: bytes) -> list[x509.Certificate]:
    """Deserialize every CERTIFICATE block from PEM bytes, leaf first.

    Raises:
        CorruptPEM: If no certificate can be parsed
    """
    try:
        return x509.load_pem_x509_certificates(pem_data)
    except ValueError as e:
        raise CorruptPEM(f"invalid PEM certificate chain: {e}") from e


def generate_serial_number() -> int:
    """Generate certificate serial number from UUID4.

    Every issued certificate gets a fresh 128-bit value (~122 bits of entropy),
    so anchors and leaves never collide across restarts.
    """
    return uuid.uuid4().int


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def public_key_matches(cert: x509.Certificate, key: PrivateKeyTypes) -> bool:
    """Return True if the certificate carries the public half of key."""
    spki = serialization.PublicFormat.SubjectPublicKeyInfo
    der = serialization.Encoding.DER
    return cert.public_key().public_bytes(der, spki) == key.public_key().public_bytes(der, spki)


def ensure_key_pair(cert: x509.Certificate, key: PrivateKeyTypes) -> None:
    """Raise InvalidKeyPair unless key belongs to cert."""
    if not public_key_matches(cert, key):
        raise InvalidKeyPair(
            f"private key does not match certificate {get_certificate_serial_hex(cert)}"
        )


def write_private_file(path: Path, data: bytes) -> None:
    """Create path with owner-only permissions and write data.

    The file must not already exist, so persisted material is never overwritten.

    Raises:
        FileExistsError: If path already exists
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, PRIVATE_FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    # os.open mode is filtered by umask
    os.chmod(path, PRIVATE_FILE_MODE)
