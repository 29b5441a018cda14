"""
Error taxonomy for the MKS patch upgrader.
"""

from typing import Optional


class MKSUpgradeError(Exception):
    """Base class for all upgrader errors."""


class InvalidVersionFormatError(MKSUpgradeError, ValueError):
    """A Kubernetes version string could not be parsed."""

    def __init__(self, version: str, reason: str):
        self.version = version
        self.reason = reason
        super().__init__(f"Kubernetes version {version} has invalid format: {reason}")


class UpgradeRejectedError(MKSUpgradeError):
    """The requested upgrade is not allowed. Raised before any remote mutation."""


class MinorVersionMismatchError(UpgradeRejectedError):
    def __init__(self, current: str, desired: str):
        self.current = current
        self.desired = desired
        super().__init__(
            f"current minor version of {current} can't be upgraded to {desired}"
        )


class PatchDowngradeError(UpgradeRejectedError):
    def __init__(self, current: str, desired: str):
        self.current = current
        self.desired = desired
        super().__init__(
            f"current patch version {current} can't be downgraded to {desired}"
        )


class NoMatchingMinorError(UpgradeRejectedError):
    def __init__(self, current: str):
        self.current = current
        super().__init__(
            f"no supported Kubernetes version shares the minor version of {current}"
        )


class NotLatestPatchError(UpgradeRejectedError):
    def __init__(self, current: str, desired: str, latest: str):
        self.current = current
        self.desired = desired
        self.latest = latest
        super().__init__(
            f"current version {current} can't be upgraded to version {desired}, "
            f"the latest available patch version is: {latest}"
        )


class RemoteError(MKSUpgradeError):
    """A call to the MKS API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UpgradeFailedError(MKSUpgradeError):
    """
    The upgrade was triggered but the cluster did not return to ACTIVE.

    The remote upgrade is not rolled back: the cluster may still be pending
    or in an error state and should be re-read by the caller.
    """

    def __init__(self, cluster_id: str, reason: str, state: Optional[str] = None):
        self.cluster_id = cluster_id
        self.reason = reason
        self.state = state
        super().__init__(
            f"error updating cluster {cluster_id}: {reason} "
            "(the remote upgrade was not rolled back)"
        )
