"""
Patch upgrade planning for MKS clusters.

The MKS "upgrade patch version" action always moves a cluster to the newest
patch of its current minor version. A requested version is only accepted if
it matches exactly what that action will produce.
"""

import logging
from typing import Iterable, Optional

from errors import (
    MinorVersionMismatchError,
    NoMatchingMinorError,
    NotLatestPatchError,
    PatchDowngradeError,
)
from models import UpgradeDecision
from versions import kube_version_to_minor, kube_version_to_patch, latest_by_patch

logger = logging.getLogger(__name__)


def find_latest_patch(minor: str, available_versions: Iterable[str]) -> Optional[str]:
    """Return the newest version in the catalog sharing the given minor, if any."""
    latest: Optional[str] = None
    for version in available_versions:
        if kube_version_to_minor(version) != minor:
            continue
        latest = version if latest is None else latest_by_patch(latest, version)
    return latest


def plan_patch_upgrade(
    current: str, desired: str, available_versions: Iterable[str]
) -> UpgradeDecision:
    """
    Decide whether a cluster on ``current`` may be upgraded to ``desired``.

    Args:
        current: Current Kubernetes version of the cluster
        desired: Requested Kubernetes version
        available_versions: All versions currently supported by the platform

    Returns:
        UpgradeDecision, allowed only when ``desired`` is the latest patch
        of the current minor version

    Raises:
        InvalidVersionFormatError: If any version cannot be parsed
    """
    logger.debug(f"current kube version: {current}")
    logger.debug(f"desired kube version: {desired}")

    current_minor = kube_version_to_minor(current)
    desired_minor = kube_version_to_minor(desired)
    if current_minor != desired_minor:
        return UpgradeDecision.reject(MinorVersionMismatchError(current, desired))

    if kube_version_to_patch(desired) < kube_version_to_patch(current):
        return UpgradeDecision.reject(PatchDowngradeError(current, desired))

    latest = find_latest_patch(current_minor, available_versions)
    logger.debug(f"latest kube version: {latest}")
    if latest is None:
        return UpgradeDecision.reject(NoMatchingMinorError(current))

    if desired != latest:
        return UpgradeDecision.reject(NotLatestPatchError(current, desired, latest))

    return UpgradeDecision.allow(desired)
