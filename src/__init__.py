"""
Selectel Managed Kubernetes patch version upgrader.
"""

from clients import MKSRestClient
from config import UpgraderConfig
from log_utils import setup_logging
from models import ClusterView, KubeVersion, UpgradeDecision, UpgradeResult, Version
from planner import plan_patch_upgrade
from upgrader import ClusterUpgrader
from watcher import StateClassifier, StateWatcher, WatchOutcome, WatchResult

__all__ = [
    "MKSRestClient",
    "UpgraderConfig",
    "setup_logging",
    "ClusterView",
    "KubeVersion",
    "UpgradeDecision",
    "UpgradeResult",
    "Version",
    "plan_patch_upgrade",
    "ClusterUpgrader",
    "StateClassifier",
    "StateWatcher",
    "WatchOutcome",
    "WatchResult",
]
