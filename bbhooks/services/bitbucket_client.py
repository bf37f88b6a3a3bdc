"""
Bitbucket Server REST API client.

This module lists the open outgoing pull requests of a ref, which is all the
hook processing needs from the server. Transient failures are retried with
exponential backoff; a missing repository or ref surfaces as NotFoundError.
"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from bbhooks.config import settings
from bbhooks.models.pull_request import PullRequest
from bbhooks.services.payload_parser import parse_pull_request
from bbhooks.utils.logging import get_logger, log_api_call
from bbhooks.utils.resilience import retry_with_backoff


logger = get_logger(__name__)

PAGE_LIMIT = 100


class BitbucketApiError(Exception):
    """Base exception for Bitbucket Server API errors."""
    pass


class NotFoundError(BitbucketApiError):
    """The repository or ref no longer exists on the server."""
    pass


class TransientApiError(BitbucketApiError):
    """Error that may succeed on retry (5xx, rate limiting, network)."""
    pass


class BitbucketServerClient:
    """
    Client for one repository on one Bitbucket Server instance.

    Args:
        server_url: Base URL of the Bitbucket Server instance
        owner: Project key of the repository
        repository: Repository slug
        token: Optional bearer token (HTTP access token)
        timeout: Request timeout in seconds
        max_retries: Maximum attempts for transient failures
        base_delay: Base delay in seconds for exponential backoff
        http_client: Optional preconfigured httpx.Client
    """

    def __init__(
        self,
        server_url: str,
        owner: str,
        repository: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.owner = owner
        self.repository = repository
        self.max_retries = max_retries
        self.base_delay = base_delay

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = http_client or httpx.Client(timeout=timeout, headers=headers)

        self._get_page = retry_with_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            exceptions=(TransientApiError,),
        )(self._request_page)

    @classmethod
    def for_repository(cls, server_url: str, owner: str, repository: str) -> "BitbucketServerClient":
        """Build a client configured from application settings."""
        return cls(
            server_url,
            owner,
            repository,
            token=settings.bitbucket_token,
            timeout=settings.api_timeout_seconds,
            max_retries=settings.api_max_retries,
            base_delay=settings.api_base_delay,
        )

    @property
    def pull_requests_url(self) -> str:
        return (
            f"{self.server_url}/rest/api/1.0/projects/{quote(self.owner, safe='')}"
            f"/repos/{quote(self.repository, safe='')}/pull-requests"
        )

    def get_outgoing_open_pull_requests(self, ref_id: str) -> List[PullRequest]:
        """
        List open pull requests whose source is the given ref.

        Args:
            ref_id: Fully qualified ref (e.g. refs/heads/feature/x)

        Returns:
            Every open outgoing pull request, across all pages

        Raises:
            NotFoundError: If the repository or ref does not exist
            TransientApiError: If the server keeps failing after retries
            BitbucketApiError: For any other unexpected response
        """
        pull_requests: List[PullRequest] = []
        start = 0
        while True:
            page = self._get_page(ref_id, start)
            pull_requests.extend(parse_pull_request(value) for value in page.get("values", []))
            if page.get("isLastPage", True) or page.get("nextPageStart") is None:
                break
            start = page["nextPageStart"]
        return pull_requests

    def _request_page(self, ref_id: str, start: int) -> Dict[str, Any]:
        params = {
            "direction": "OUTGOING",
            "at": ref_id,
            "state": "OPEN",
            "start": start,
            "limit": PAGE_LIMIT,
        }
        url = self.pull_requests_url
        start_time = time.time()

        try:
            response = self._http.get(url, params=params)
        except httpx.TransportError as e:
            log_api_call(logger, "bitbucket_server", url, "GET", error=str(e))
            raise TransientApiError(f"Request to {url} failed: {e}") from e

        duration_ms = (time.time() - start_time) * 1000
        status = response.status_code

        if status == 404:
            log_api_call(logger, "bitbucket_server", url, "GET", status, duration_ms, error="not found")
            raise NotFoundError(f"{self.owner}/{self.repository} or {ref_id} not found")
        if status == 429 or status >= 500:
            log_api_call(logger, "bitbucket_server", url, "GET", status, duration_ms, error=response.text)
            raise TransientApiError(f"Bitbucket Server answered {status} for {url}")
        if status >= 400:
            log_api_call(logger, "bitbucket_server", url, "GET", status, duration_ms, error=response.text)
            raise BitbucketApiError(f"Bitbucket Server answered {status} for {url}")

        log_api_call(logger, "bitbucket_server", url, "GET", status, duration_ms)
        try:
            return response.json()
        except ValueError as e:
            raise BitbucketApiError(f"Invalid JSON from {url}: {e}") from e

    def close(self) -> None:
        self._http.close()
