"""
Configuration management for the MKS patch upgrader.
"""

import os
from dataclasses import dataclass

TOKEN_ENV_VAR = "SEL_TOKEN"


@dataclass
class UpgraderConfig:
    """Configuration for a cluster patch upgrade."""

    cluster_id: str
    region: str
    kube_version: str
    token: str
    dry_run: bool = False
    timeout: int = 3600
    verbose: bool = False

    @classmethod
    def from_args(cls, args) -> "UpgraderConfig":
        """
        Create configuration from command-line arguments.

        The token falls back to the SEL_TOKEN environment variable.

        Args:
            args: Parsed argparse arguments

        Returns:
            UpgraderConfig instance

        Raises:
            ValueError: If no token is available
        """
        token = args.token or os.environ.get(TOKEN_ENV_VAR, "")
        if not token:
            raise ValueError(
                f"An API token is required: pass --token or set {TOKEN_ENV_VAR}"
            )
        return cls(
            cluster_id=args.cluster,
            region=args.region,
            kube_version=args.kube_version,
            token=token,
            dry_run=args.dry_run,
            timeout=args.timeout,
            verbose=args.verbose,
        )
