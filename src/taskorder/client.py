# client.py
from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any, Optional
from urllib.parse import urlencode, urljoin

PROCESS_PATH = "/api/jobs/process"


class APIError(Exception):
    """Raised when the service cannot be reached or answers with an error."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.error_type = error_type


class APIClient:
    """HTTP client for a running taskorder service."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str, **query: str) -> str:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        if query:
            url += "?" + urlencode(query)
        return url

    def process_job(self, job_data: Any, fmt: str = "json") -> str:
        """
        Submit a job document and return the raw response body.

        Args:
            job_data: decoded job document ({"tasks": [...]})
            fmt: "json" or "bash"

        Raises:
            APIError: on network failures and on 4xx/5xx answers. For job
                validation failures the service's tag and message are kept.
        """
        req = urllib.request.Request(
            self._url(PROCESS_PATH, format=fmt),
            data=json.dumps(job_data).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8") if e.fp else ""
            raise _error_from_response(e.code, e.reason, error_body) from e
        except urllib.error.URLError as e:
            raise APIError(f"Network error: {e.reason}") from e


def _error_from_response(status: int, reason: str, body: str) -> APIError:
    try:
        payload = json.loads(body) if body else {}
    except json.JSONDecodeError:
        payload = {}

    if isinstance(payload, dict) and "error" in payload and "message" in payload:
        return APIError(str(payload["message"]), status=status, error_type=str(payload["error"]))
    return APIError(f"API request failed: {status} {reason}. {body}".strip(), status=status)
