"""Console entry point for the MKS patch upgrader CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List

from clients import MKS_ENDPOINTS, MKSRestClient
from config import UpgraderConfig
from log_utils import setup_logging
from upgrader import ClusterUpgrader

logger = logging.getLogger(__name__)

FAILED_STATUSES = {"failed", "rejected"}


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Upgrade a Selectel Managed Kubernetes cluster to the latest patch "
            "version of its current minor version."
        ),
        epilog=(
            "Examples:\n"
            "  # Check whether the upgrade would be accepted\n"
            "  mks-patch-upgrade --cluster <id> --region ru-1 --kube-version 1.27.6 --dry-run\n\n"
            "  # Upgrade and wait up to 30 minutes for ACTIVE\n"
            "  mks-patch-upgrade --cluster <id> --region ru-1 --kube-version 1.27.6 --timeout 1800"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--cluster", required=True, help="MKS cluster ID")
    parser.add_argument(
        "--region",
        required=True,
        choices=sorted(MKS_ENDPOINTS),
        help="MKS region of the cluster",
    )
    parser.add_argument(
        "--kube-version",
        required=True,
        help="Desired Kubernetes version (latest patch of the current minor)",
    )
    parser.add_argument(
        "--token", help="API token (defaults to the SEL_TOKEN environment variable)"
    )
    parser.add_argument("--dry-run", action="store_true", help="Only plan the upgrade")
    parser.add_argument(
        "--timeout",
        type=int,
        default=3600,
        help="Maximum time to wait for the cluster to become ACTIVE (seconds)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write logs to this file (default: stdout only)",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    try:
        setup_logging(verbose=args.verbose, log_file=args.log_file)
    except OSError as e:
        parser.error(f"cannot open log file {args.log_file}: {e}")

    try:
        config = UpgraderConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    client = MKSRestClient(token=config.token, region=config.region)
    runner = ClusterUpgrader(client)
    result = runner.run(
        config.cluster_id,
        config.kube_version,
        timeout=config.timeout,
        dry_run=config.dry_run,
    )
    return 1 if result.status in FAILED_STATUSES else 0
