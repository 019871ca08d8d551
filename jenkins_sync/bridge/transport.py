"""Transport bridge — the HTTP boundary between jenkins-sync and Jenkins.

``JenkinsClient`` wraps an ``httpx.Client`` authenticated with HTTP Basic
credentials and exposes the handful of Jenkins REST calls the rest of the
package depends on.  Every ``httpx`` failure (connection errors, timeouts,
non-2xx responses) is re-raised as ``TransportError`` so callers never
import httpx directly.

Nothing here retries: a failed request aborts the current operation.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from jenkins_sync.models.job import JobSnapshot

logger = logging.getLogger(__name__)

_QUEUE_ITEM_RE = re.compile(r"/queue/item/(\d+)/?$")


class TransportError(RuntimeError):
    """Raised when a request to the Jenkins server fails.

    Attributes
    ----------
    status_code:
        HTTP status of the failed response, or ``None`` when no response
        was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JenkinsClient:
    """Minimal Jenkins REST client.

    Parameters
    ----------
    host:
        Base URL of the Jenkins server, e.g. ``https://ci.example.com``.
    username, password:
        Credentials for HTTP Basic auth.  An API token works as password.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional ``httpx`` transport; tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._host = host.rstrip("/")
        self._client = httpx.Client(
            base_url=self._host,
            auth=httpx.BasicAuth(username, password),
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    def __enter__(self) -> JenkinsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Jobs and builds
    # ------------------------------------------------------------------

    def get_job(self, name: str) -> JobSnapshot:
        """Fetch the current metadata for job *name*."""
        response = self._request("GET", f"{_job_path(name)}/api/json")
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Job {name!r} did not return JSON") from exc
        return JobSnapshot.model_validate(payload)

    def get_build_log(self, name: str, number: int) -> str:
        """Fetch the full console text of build *number* of job *name*."""
        response = self._request("GET", f"{_job_path(name)}/{number}/consoleText")
        return response.text

    def trigger_build(self, name: str) -> int | None:
        """Queue a new build of job *name*.

        Returns the queue item id parsed from the ``Location`` header, or
        ``None`` if Jenkins did not send one.
        """
        response = self._request("POST", f"{_job_path(name)}/build")
        match = _QUEUE_ITEM_RE.search(response.headers.get("location", ""))
        return int(match.group(1)) if match else None

    # ------------------------------------------------------------------
    # Job configuration documents
    # ------------------------------------------------------------------

    def get_job_config(self, name: str) -> str:
        """Fetch the ``config.xml`` document of job *name*."""
        return self._request("GET", f"{_job_path(name)}/config.xml").text

    def update_job_config(self, name: str, config_xml: str | bytes) -> None:
        """Replace the ``config.xml`` document of job *name*."""
        self._request(
            "POST",
            f"{_job_path(name)}/config.xml",
            content=config_xml,
            headers={"Content-Type": "application/xml"},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s%s", method, self._host, path)
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"{method} {path} failed with HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        return response


def _job_path(name: str) -> str:
    return f"/job/{quote(name, safe='')}"
