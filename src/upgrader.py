"""
Patch version upgrader for MKS clusters.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from clients import MKSRestClient
from errors import (
    InvalidVersionFormatError,
    RemoteError,
    UpgradeFailedError,
    UpgradeRejectedError,
)
from models import ClusterStatus, UpgradeResult, WatchConfig
from planner import plan_patch_upgrade
from watcher import StateClassifier, StateWatcher, WatchOutcome, WatchResult

logger = logging.getLogger(__name__)

CLUSTER_ACTIVE_CLASSIFIER = StateClassifier(
    pending=[
        ClusterStatus.PENDING_CREATE,
        ClusterStatus.PENDING_UPDATE,
        ClusterStatus.PENDING_UPGRADE_PATCH_VERSION,
        ClusterStatus.PENDING_RESIZE,
    ],
    target=[ClusterStatus.ACTIVE],
)


class ClusterUpgrader:
    """
    Upgrades MKS clusters to the latest patch of their minor version.

    Concurrent upgrades of the same cluster are not serialized; callers
    must not run two upgrades of one cluster at the same time.
    """

    WATCH_DELAY = 10
    WATCH_MIN_INTERVAL = 3

    def __init__(
        self,
        client: MKSRestClient,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize the upgrader.

        Args:
            client: MKS API client
            clock: Clock used by the state watcher
            sleep: Sleep function used by the state watcher
        """
        self.client = client
        self.clock = clock
        self.sleep = sleep

    def wait_for_active(
        self,
        cluster_id: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> WatchResult:
        """Block until the cluster is ACTIVE again, or raise UpgradeFailedError."""
        logger.info(f"Waiting for cluster {cluster_id} to become ACTIVE (max {timeout}s)...")
        watcher = StateWatcher(
            refresh=lambda: self.client.refresh_cluster_status(cluster_id),
            classifier=CLUSTER_ACTIVE_CLASSIFIER,
            config=WatchConfig(
                delay=self.WATCH_DELAY,
                min_interval=self.WATCH_MIN_INTERVAL,
                timeout=timeout,
            ),
            clock=self.clock,
            sleep=self.sleep,
            cancel_event=cancel_event,
            name=f"cluster {cluster_id}",
        )

        try:
            result = watcher.wait()
        except RemoteError as e:
            raise UpgradeFailedError(
                cluster_id, f"error waiting for the cluster to become 'ACTIVE': {e}"
            ) from e

        if result.outcome is WatchOutcome.CONVERGED:
            return result
        if result.outcome is WatchOutcome.TIMED_OUT:
            raise UpgradeFailedError(
                cluster_id,
                f"timeout after {result.elapsed:.0f}s waiting for 'ACTIVE' "
                f"(last state={result.state})",
                state=result.state,
            )
        if result.outcome is WatchOutcome.CANCELLED:
            raise UpgradeFailedError(
                cluster_id, "wait for 'ACTIVE' was cancelled", state=result.state
            )
        raise UpgradeFailedError(
            cluster_id, f"unexpected state {result.state}", state=result.state
        )

    def upgrade_patch_version(
        self,
        cluster_id: str,
        current: str,
        desired: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> WatchResult:
        """
        Upgrade a cluster from ``current`` to the patch version ``desired``.

        Args:
            cluster_id: MKS cluster ID
            current: Current Kubernetes version of the cluster
            desired: Requested Kubernetes version
            timeout: Maximum time to wait for the cluster to become ACTIVE
            cancel_event: Optional event aborting the wait

        Returns:
            WatchResult of the convergence wait

        Raises:
            InvalidVersionFormatError: If a version cannot be parsed
            UpgradeRejectedError: If the upgrade is not allowed
            RemoteError: If fetching versions or starting the upgrade fails
            UpgradeFailedError: If the cluster does not become ACTIVE
        """
        kube_versions = self.client.list_kube_versions()
        decision = plan_patch_upgrade(
            current, desired, [v.version for v in kube_versions]
        )
        if not decision.allowed:
            raise decision.rejection

        self.client.upgrade_patch_version(cluster_id)
        logger.info(f"Started patch upgrade: {cluster_id} ({current} -> {desired})")

        return self.wait_for_active(cluster_id, timeout, cancel_event=cancel_event)

    def run(
        self, cluster_id: str, desired: str, timeout: float, dry_run: bool = False
    ) -> UpgradeResult:
        """
        Execute the patch upgrade of a single cluster and report the outcome.

        Args:
            cluster_id: MKS cluster ID
            desired: Requested Kubernetes version
            timeout: Maximum time to wait for the cluster to become ACTIVE
            dry_run: If True, only plan the upgrade

        Returns:
            UpgradeResult
        """
        logger.info("=" * 70)
        logger.info("MKS Cluster Patch Version Upgrade")
        logger.info("=" * 70)
        logger.info(f"Cluster: {cluster_id}")
        logger.info(f"Region: {self.client.region}")
        logger.info(f"Desired version: {desired}")
        logger.info(f"Dry run: {dry_run}")
        logger.info(f"Timeout: {timeout}s")
        logger.info(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info("=" * 70)

        result = UpgradeResult(cluster_id=cluster_id, status="failed", target_version=desired)
        try:
            cluster = self.client.get_cluster(cluster_id)
            result.current_version = cluster.kube_version

            if cluster.kube_version == desired:
                logger.info(f"[-] {cluster_id} is up to date ({desired})")
                result.status = "up_to_date"
            elif dry_run:
                decision = plan_patch_upgrade(
                    cluster.kube_version,
                    desired,
                    [v.version for v in self.client.list_kube_versions()],
                )
                if not decision.allowed:
                    raise decision.rejection
                logger.info(
                    f"DRY RUN: Would upgrade {cluster_id} {cluster.kube_version} -> {desired}"
                )
                result.status = "dry_run"
            else:
                result.start_time = time.time()
                self.upgrade_patch_version(
                    cluster_id, cluster.kube_version, desired, timeout
                )
                result.status = "success"
        except (UpgradeRejectedError, InvalidVersionFormatError) as e:
            logger.error(f"Upgrade rejected for {cluster_id}: {e}")
            result.status = "rejected"
            result.error_message = str(e)
        except (RemoteError, UpgradeFailedError) as e:
            logger.error(f"Upgrade FAILED for {cluster_id}: {e}")
            result.error_message = str(e)

        if result.start_time is not None:
            result.end_time = time.time()
            result.duration_seconds = result.end_time - result.start_time

        self._print_report(result)
        return result

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            mins = int(seconds // 60)
            secs = seconds % 60
            return f"{mins}m {secs:.0f}s"
        else:
            hours = int(seconds // 3600)
            mins = int((seconds % 3600) // 60)
            secs = seconds % 60
            return f"{hours}h {mins}m {secs:.0f}s"

    def _print_report(self, result: UpgradeResult) -> None:
        logger.info("")
        logger.info("=" * 70)
        logger.info("UPGRADE REPORT")
        logger.info("-" * 40)
        logger.info(f"{'Cluster':<16}: {result.cluster_id}")
        logger.info(f"{'Status':<16}: {result.status}")
        logger.info(f"{'Current version':<16}: {result.current_version or 'N/A'}")
        logger.info(f"{'Target version':<16}: {result.target_version or 'N/A'}")
        if result.duration_seconds is not None:
            logger.info(
                f"{'Duration':<16}: {self._format_duration(result.duration_seconds)}"
            )
        if result.error_message:
            logger.info(f"{'Error':<16}: {result.error_message}")
        logger.info("=" * 70)
