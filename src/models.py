"""
Data models for the MKS patch upgrader.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Version:
    """Parsed Kubernetes version."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class ClusterStatus(str, Enum):
    """Cluster statuses reported by the MKS API."""

    ACTIVE = "ACTIVE"
    PENDING_CREATE = "PENDING_CREATE"
    PENDING_UPDATE = "PENDING_UPDATE"
    PENDING_UPGRADE = "PENDING_UPGRADE"
    PENDING_UPGRADE_PATCH_VERSION = "PENDING_UPGRADE_PATCH_VERSION"
    PENDING_UPGRADE_MINOR_VERSION = "PENDING_UPGRADE_MINOR_VERSION"
    PENDING_RESIZE = "PENDING_RESIZE"
    PENDING_ROTATE_CERTS = "PENDING_ROTATE_CERTS"
    PENDING_DELETE = "PENDING_DELETE"
    PENDING_NODE_REINSTALL = "PENDING_NODE_REINSTALL"
    MAINTENANCE = "MAINTENANCE"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"


class StateClass(Enum):
    """Classification of an observed resource state during a watch."""

    PENDING = "pending"
    TARGET = "target"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class WatchConfig:
    """Timing parameters of a state watch, in seconds."""

    delay: float
    min_interval: float
    timeout: float

    def __post_init__(self):
        if self.min_interval <= 0:
            raise ValueError(
                f"min_interval must be positive, got {self.min_interval}"
            )
        if self.delay < 0 or self.timeout < 0:
            raise ValueError("delay and timeout must not be negative")


@dataclass
class KubeVersion:
    """Kubernetes version supported by the MKS platform."""

    version: str
    is_default: bool = False


@dataclass
class ClusterView:
    """Subset of an MKS cluster as returned by the API."""

    id: str
    name: str
    status: str
    kube_version: str
    region: str = ""


@dataclass
class UpgradeDecision:
    """Result of planning a patch upgrade."""

    target_version: Optional[str] = None
    rejection: Optional[Exception] = None

    @property
    def allowed(self) -> bool:
        return self.rejection is None

    @classmethod
    def allow(cls, target_version: str) -> "UpgradeDecision":
        return cls(target_version=target_version)

    @classmethod
    def reject(cls, rejection: Exception) -> "UpgradeDecision":
        return cls(rejection=rejection)


@dataclass
class UpgradeResult:
    """Result of an upgrade run."""

    cluster_id: str
    status: str  # "success", "failed", "rejected", "up_to_date", "dry_run"
    current_version: Optional[str] = None
    target_version: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    error_message: Optional[str] = None
