"""
REST API client for Selectel Managed Kubernetes (MKS v1 API).
"""

import logging
import random
import time
from typing import List, Optional, Tuple

import requests

from errors import RemoteError
from models import ClusterView, KubeVersion

logger = logging.getLogger(__name__)

MKS_ENDPOINTS = {
    "ru-1": "https://ru-1.mks.selcloud.ru/v1",
    "ru-2": "https://ru-2.mks.selcloud.ru/v1",
    "ru-3": "https://ru-3.mks.selcloud.ru/v1",
    "ru-7": "https://ru-7.mks.selcloud.ru/v1",
    "ru-8": "https://ru-8.mks.selcloud.ru/v1",
}


def get_mks_endpoint(region: str) -> str:
    """Return the MKS API endpoint for a region."""
    try:
        return MKS_ENDPOINTS[region]
    except KeyError:
        raise ValueError(
            f"Unsupported MKS region {region!r}, expected one of: "
            f"{', '.join(sorted(MKS_ENDPOINTS))}"
        ) from None


class MKSRestClient:
    """REST client for the MKS v1 API."""

    RETRYABLE_STATUS_CODES = {409, 429, 500, 502, 503, 504}

    def __init__(
        self,
        token: str,
        region: str,
        endpoint: Optional[str] = None,
        timeout_s: int = 60,
        max_retries: int = 5,
        base_delay: float = 2.0,
    ):
        """
        Initialize the MKS REST client.

        Args:
            token: Keystone token sent as X-Auth-Token
            region: MKS region (e.g. 'ru-1')
            endpoint: Override of the regional API endpoint
            timeout_s: Request timeout in seconds
            max_retries: Maximum number of retries for transient errors
            base_delay: Base delay for exponential backoff
        """
        self.region = region
        self.endpoint = (endpoint or get_mks_endpoint(region)).rstrip("/")
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.base_delay = base_delay

        self.session = requests.Session()
        self.session.headers.update(
            {
                "X-Auth-Token": token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _url(self, path: str) -> str:
        """Construct full API URL from path."""
        return f"{self.endpoint}/{path.lstrip('/')}"

    def _request_with_retry(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Execute HTTP request with exponential backoff retry for transient errors.

        Args:
            method: HTTP method (GET, POST)
            url: Request URL
            **kwargs: Additional request parameters

        Returns:
            Successful response

        Raises:
            RemoteError: On a non-retryable error or when max retries exceeded
        """
        last_error = None
        last_status: Optional[int] = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.request(
                    method.upper(), url, timeout=self.timeout_s, **kwargs
                )
            except requests.RequestException as e:
                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Request error: {e}, attempt {attempt + 1}/{self.max_retries + 1}, waiting {delay:.1f}s..."
                )
                last_error = str(e)
                if attempt < self.max_retries:
                    time.sleep(delay)
                continue

            if resp.status_code in self.RETRYABLE_STATUS_CODES:
                delay = self._calculate_delay(attempt, resp)
                error_info = self._error_message(resp)
                logger.warning(
                    f"Retryable error {resp.status_code} ({error_info}), attempt {attempt + 1}/{self.max_retries + 1}, waiting {delay:.1f}s..."
                )
                last_error = f"HTTP {resp.status_code}: {error_info}"
                last_status = resp.status_code
                if attempt < self.max_retries:
                    time.sleep(delay)
                continue

            if not resp.ok:
                raise RemoteError(
                    f"{method.upper()} {url} failed ({resp.status_code}): "
                    f"{self._error_message(resp)}",
                    status_code=resp.status_code,
                )

            return resp

        raise RemoteError(
            f"Max retries exceeded. Last error: {last_error}", status_code=last_status
        )

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("message", "") or resp.text[:200]
        return resp.text[:200]

    def _calculate_delay(self, attempt: int, resp=None) -> float:
        """
        Calculate delay with exponential backoff and jitter.

        Args:
            attempt: Current attempt number
            resp: Optional response object (to check Retry-After header)

        Returns:
            Delay in seconds
        """
        if resp is not None and "Retry-After" in resp.headers:
            try:
                return float(resp.headers["Retry-After"])
            except ValueError:
                pass

        delay = self.base_delay * (2**attempt)
        jitter = delay * 0.2 * (random.random() - 0.5)
        return min(delay + jitter, 60.0)

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON in response ({resp.status_code}): {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e
        if not isinstance(data, dict):
            raise RemoteError(
                f"Unexpected response body: {data!r}", status_code=resp.status_code
            )
        return data

    def _cluster_from_response(self, resp: requests.Response) -> ClusterView:
        data = self._json(resp)
        try:
            c = data["cluster"]
            return ClusterView(
                id=c["id"],
                name=c.get("name", ""),
                status=c.get("status", ""),
                kube_version=c.get("kube_version", ""),
                region=c.get("region", self.region),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise RemoteError(
                f"Unexpected cluster response: {data}", status_code=resp.status_code
            ) from e

    def list_kube_versions(self) -> List[KubeVersion]:
        """
        List all Kubernetes versions supported by MKS.

        Returns:
            List of KubeVersion objects in API order

        Raises:
            RemoteError: If API call fails
        """
        resp = self._request_with_retry("GET", self._url("kubeversions"))
        data = self._json(resp)
        try:
            return [
                KubeVersion(
                    version=item["version"], is_default=bool(item.get("is_default"))
                )
                for item in data["kube_versions"]
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise RemoteError(
                f"Unexpected kube versions response: {data}",
                status_code=resp.status_code,
            ) from e

    def get_cluster(self, cluster_id: str) -> ClusterView:
        """
        Get a cluster by ID.

        Raises:
            RemoteError: If API call fails
        """
        resp = self._request_with_retry("GET", self._url(f"clusters/{cluster_id}"))
        return self._cluster_from_response(resp)

    def refresh_cluster_status(self, cluster_id: str) -> Tuple[ClusterView, str]:
        """Read a cluster and return it with its current status."""
        cluster = self.get_cluster(cluster_id)
        return cluster, cluster.status

    def upgrade_patch_version(self, cluster_id: str) -> ClusterView:
        """
        Start upgrading a cluster to the latest patch of its minor version.

        The upgrade runs asynchronously; the returned cluster is usually
        in PENDING_UPGRADE_PATCH_VERSION.

        Raises:
            RemoteError: If API call fails
        """
        resp = self._request_with_retry(
            "POST", self._url(f"clusters/{cluster_id}/upgrade-patch-version")
        )
        return self._cluster_from_response(resp)
