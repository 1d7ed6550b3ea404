"""Thin HTTP client for the timeclock JSON API."""

from __future__ import annotations

from typing import Any, Optional

import requests


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class ApiClient:
    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.token: Optional[str] = None
        self._session = session or requests.Session()
        self._timeout = timeout

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> requests.Response:
        response = self._session.request(
            method,
            f"{self.base_url}{path}",
            params={k: v for k, v in (params or {}).items() if v is not None},
            json=json,
            headers=self._headers(),
            timeout=self._timeout,
        )
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, _error_message(response))
        return response

    def get(self, path: str, **params) -> Any:
        return self.request("GET", path, params=params).json()

    def post(self, path: str, payload: Any = None) -> Any:
        return self.request("POST", path, json=payload).json()

    def put(self, path: str, payload: Any = None) -> Any:
        return self.request("PUT", path, json=payload).json()

    def patch(self, path: str, payload: Any = None) -> Any:
        return self.request("PATCH", path, json=payload).json()

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path).json()

    def download(self, path: str, **params) -> tuple[bytes, Optional[str]]:
        """Binary export and the filename from Content-Disposition."""
        response = self.request("GET", path, params=params)
        return response.content, _attachment_filename(response.headers.get("Content-Disposition", ""))


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Request failed"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or "Request failed"


def _attachment_filename(header: str) -> Optional[str]:
    for part in header.split(";"):
        key, _, value = part.strip().partition("=")
        if key.lower() == "filename":
            return value.strip('"')
    return None
