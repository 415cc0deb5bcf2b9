"""Typed errors raised by certificate bootstrap operations."""


class BootstrapError(Exception):
    """Base class for every certificate bootstrap failure."""


class MissingCertificateMaterial(BootstrapError):
    """A certificate or key file that must be provisioned ahead of time is absent."""


class CorruptPEM(BootstrapError):
    """Persisted certificate material cannot be decoded or parsed."""


class CorruptTrustAnchor(CorruptPEM):
    """Trust anchor files are unreadable, unparseable, or not a matching pair."""


class InvalidKeyPair(BootstrapError):
    """Certificate public key does not correspond to the private key."""


class KeyGenerationFailure(BootstrapError):
    """Private key generation failed."""


class CertificateSigningFailure(BootstrapError):
    """Certificate construction or signing failed."""
