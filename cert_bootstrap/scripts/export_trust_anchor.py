#!/usr/bin/env python3
"""Export the trust anchor certificate for installation in client trust stores."""

import argparse
import sys
from pathlib import Path

from cert_bootstrap.lib.bootstrapper import export_trust_anchor
from cert_bootstrap.lib.errors import BootstrapError, MissingCertificateMaterial
from cert_bootstrap.lib.logging_config import LOGGER


def main() -> int:
    """Export trust anchor bundle.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(
        description="Export trust anchor PEM bundle for clients"
    )
    parser.add_argument(
        "--cert",
        type=Path,
        default=Path("cert/ca.pem"),
        help="Trust anchor certificate (default: cert/ca.pem)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Bundle output path (e.g., dist/proxy-ca.pem)",
    )
    args = parser.parse_args()

    try:
        LOGGER.info("Exporting trust anchor...")
        bundle_path = export_trust_anchor(args.cert, args.output)

        LOGGER.info("Trust anchor bundle written: %s", bundle_path)
        return 0

    except MissingCertificateMaterial as e:
        LOGGER.error("Trust anchor not found: %s", e)
        return 1
    except (BootstrapError, OSError) as e:
        LOGGER.error("Trust anchor export failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
