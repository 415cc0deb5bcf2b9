#!/usr/bin/env python3
"""Bootstrap the trust anchor, proxy leaf certificate, and DoT TLS configs."""

import argparse
import sys
from pathlib import Path

from cert_bootstrap.lib.bootstrapper import Bootstrapper
from cert_bootstrap.lib.config import BootstrapConfig, parse_tls_version
from cert_bootstrap.lib.logging_config import LOGGER


def main() -> int:
    """Run certificate bootstrap.

    Returns:
        Exit code (0 when every required TLS config is ready, 1 otherwise)
    """
    parser = argparse.ArgumentParser(
        description="Bootstrap proxy and DoT TLS certificates"
    )
    parser.add_argument(
        "--cert-dir",
        type=Path,
        default=None,
        help="Directory holding ca.pem, key.pem, dot_cert.pem, dot_key.pem (default: cert)",
    )
    parser.add_argument(
        "--host",
        action="append",
        dest="hosts",
        default=None,
        help="Proxied hostname; repeat for several (default: CERT_BOOTSTRAP_PROXY_HOSTS)",
    )
    parser.add_argument(
        "--min-tls-version",
        default=None,
        help="Minimum TLS version for the interception listener, e.g. 1.2 (default: 1.0)",
    )
    parser.add_argument(
        "--no-dot",
        action="store_true",
        help="Continue without DoT certificate material",
    )
    args = parser.parse_args()

    try:
        config = BootstrapConfig.from_env()
        if args.cert_dir is not None:
            config.cert_dir = args.cert_dir
        if args.hosts:
            config.proxy_hosts = args.hosts
        if args.min_tls_version:
            config.min_tls_version = parse_tls_version(args.min_tls_version)
        if args.no_dot:
            config.require_dot = False
    except ValueError as e:
        LOGGER.error("Invalid configuration: %s", e)
        return 1

    LOGGER.info("Bootstrapping certificates in %s...", config.cert_dir)
    result = Bootstrapper(config).run()

    if result.trust_anchor is not None:
        LOGGER.info("Trust anchor:")
        LOGGER.info("  Cert: %s", result.trust_anchor.cert_path)
        LOGGER.info("  Serial: %s", result.trust_anchor.serial)
        LOGGER.info("  Created: %s", result.trust_anchor.created)
    if result.leaf is not None:
        LOGGER.info("Proxy leaf:")
        LOGGER.info("  Serial: %s", result.leaf.serial)
        LOGGER.info("  DNS names: %s", ", ".join(result.leaf.dns_names))

    if not result.ready:
        for error in result.errors:
            LOGGER.error("Bootstrap failed: %s: %s", type(error).__name__, error)
        return 1

    if result.degraded:
        LOGGER.warning("Bootstrap complete without DoT")
    return 0


if __name__ == "__main__":
    sys.exit(main())
