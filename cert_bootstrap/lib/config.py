"""Bootstrap configuration dataclasses."""

import os
import ssl
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from cryptography import x509
from cryptography.x509 import oid

ENV_PREFIX = "CERT_BOOTSTRAP_"

TLS_VERSIONS = {
    "1.0": ssl.TLSVersion.TLSv1,
    "1.1": ssl.TLSVersion.TLSv1_1,
    "1.2": ssl.TLSVersion.TLSv1_2,
    "1.3": ssl.TLSVersion.TLSv1_3,
}


@dataclass(frozen=True)
class DistinguishedName:
    """X.509 Subject Distinguished Name.

    Empty attributes are left out of the encoded name.
    """

    organization: str
    country: str = "US"
    province: str = ""
    locality: str = ""
    street_address: str = ""
    postal_code: str = ""
    common_name: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name for certificate generation."""
        attributes = [
            (oid.NameOID.COUNTRY_NAME, self.country),
            (oid.NameOID.STATE_OR_PROVINCE_NAME, self.province),
            (oid.NameOID.LOCALITY_NAME, self.locality),
            (oid.NameOID.STREET_ADDRESS, self.street_address),
            (oid.NameOID.POSTAL_CODE, self.postal_code),
            (oid.NameOID.ORGANIZATION_NAME, self.organization),
            (oid.NameOID.COMMON_NAME, self.common_name),
        ]
        return x509.Name(
            [x509.NameAttribute(name_oid, value) for name_oid, value in attributes if value]
        )


def _default_anchor_subject() -> DistinguishedName:
    return DistinguishedName(
        organization="Freenews Org",
        locality="San Francisco",
        street_address="Golden Gate Bridge",
        postal_code="94016",
        common_name="Freenews Root CA",
    )


def _default_leaf_subject() -> DistinguishedName:
    return DistinguishedName(
        organization="Freenews",
        locality="San Francisco",
        street_address="Golden Gate Bridge",
        postal_code="94016",
    )


@dataclass
class BootstrapConfig:
    """Certificate bootstrap configuration with no I/O side effects."""

    cert_dir: Path = Path("cert")
    anchor_cert_name: str = "ca.pem"
    anchor_key_name: str = "key.pem"
    dot_cert_name: str = "dot_cert.pem"
    dot_key_name: str = "dot_key.pem"
    key_size: int = 4096
    validity_years: int = 10
    anchor_subject: DistinguishedName = field(default_factory=_default_anchor_subject)
    leaf_subject: DistinguishedName = field(default_factory=_default_leaf_subject)
    proxy_hosts: list[str] = field(default_factory=list)
    # Oldest widely deployed version; raise it to harden interception
    min_tls_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1
    alpn_protocols: tuple[str, ...] = ("http/1.1",)
    prefer_server_ciphers: bool = True
    require_dot: bool = True

    @property
    def anchor_cert_path(self) -> Path:
        return self.cert_dir / self.anchor_cert_name

    @property
    def anchor_key_path(self) -> Path:
        return self.cert_dir / self.anchor_key_name

    @property
    def dot_cert_path(self) -> Path:
        return self.cert_dir / self.dot_cert_name

    @property
    def dot_key_path(self) -> Path:
        return self.cert_dir / self.dot_key_name

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BootstrapConfig":
        """Build configuration from CERT_BOOTSTRAP_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            BootstrapConfig with defaults for unset variables

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        config = cls()

        cert_dir = env.get(f"{ENV_PREFIX}CERT_DIR")
        if cert_dir:
            config.cert_dir = Path(cert_dir)

        hosts = env.get(f"{ENV_PREFIX}PROXY_HOSTS")
        if hosts:
            config.proxy_hosts = [h.strip() for h in hosts.split(",") if h.strip()]

        min_version = env.get(f"{ENV_PREFIX}MIN_TLS_VERSION")
        if min_version:
            config.min_tls_version = parse_tls_version(min_version)

        key_size = env.get(f"{ENV_PREFIX}KEY_SIZE")
        if key_size:
            config.key_size = int(key_size)

        require_dot = env.get(f"{ENV_PREFIX}REQUIRE_DOT")
        if require_dot:
            config.require_dot = parse_bool(require_dot)

        return config


def parse_tls_version(value: str) -> ssl.TLSVersion:
    """Map a version string such as '1.2' or 'TLSv1.2' to ssl.TLSVersion."""
    normalized = value.strip().lower().removeprefix("tlsv")
    if normalized not in TLS_VERSIONS:
        raise ValueError(f"unsupported TLS version: {value!r}")
    return TLS_VERSIONS[normalized]


def parse_bool(value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"invalid boolean value: {value!r}")
