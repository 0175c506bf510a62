"""HTTP client for a running short-link service."""

from typing import Any, Dict, Optional

import requests


class ShortLinksError(Exception):
    """Raised when the service answers with an error status."""

    def __init__(self, status_code: int, error: str, detail: Optional[str] = None):
        super().__init__(f"{status_code} {error}" + (f": {detail}" if detail else ""))
        self.status_code = status_code
        self.error = error
        self.detail = detail


class ShortLinksClient:
    """Thin wrapper over the service's JSON endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def shorten(
        self,
        url: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a short link. Returns {shortlink, shortcode, expiry}."""
        body: Dict[str, Any] = {"url": url}
        if validity is not None:
            body["validity"] = validity
        if shortcode:
            body["shortcode"] = shortcode
        return self._request("POST", "/shorten", json=body)

    def stats(self, shortcode: str) -> Dict[str, Any]:
        return self._request("GET", f"/shorturls/{shortcode}")

    def list_stats(self) -> list:
        return self._request("GET", "/api/stats")

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health")

    def resolve(self, shortcode: str) -> str:
        """Follow one redirect hop and return its Location (records a click)."""
        response = self.session.get(
            f"{self.base_url}/{shortcode}",
            allow_redirects=False,
            timeout=self.timeout,
        )
        if not response.is_redirect:
            self._raise_for_error(response)
        return response.headers["Location"]

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, path: str, **kwargs):
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            timeout=self.timeout,
            **kwargs,
        )
        if response.status_code >= 400:
            self._raise_for_error(response)
        return response.json()

    @staticmethod
    def _raise_for_error(response: requests.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        raise ShortLinksError(
            response.status_code,
            body.get("error", "http_error"),
            body.get("detail") or response.reason,
        )
