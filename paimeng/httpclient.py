"""A small HTTP client with retries, default headers and cookies."""

from __future__ import annotations

import json
from typing import Any

import requests

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/74.0.3729.131 Safari/537.36"
)

_CHUNK = 64 * 1024


def parse_json(data: Any) -> Any:
    """Parse JSON from bytes, text or a readable object; None if it is not JSON."""
    if hasattr(data, "read"):
        data = data.read()
    try:
        return json.loads(data)
    except (TypeError, ValueError):
        return None


class HttpClient:
    """Sends requests with shared headers and cookies, retrying on failure."""

    def __init__(self, try_time: int = 0, timeout: float = 0.0) -> None:
        self.try_time = try_time or 1
        self.timeout = timeout or 10.0
        self.headers: dict[str, str] = {}
        self.cookies: dict[str, str] = {}

    def set_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def set_user_agent(self) -> None:
        self.set_header("User-Agent", USER_AGENT)

    def add_cookie(self, name: str, value: str) -> None:
        self.cookies[name] = value

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request, trying up to ``try_time`` times on connection errors."""
        if self.try_time <= 0:
            raise ValueError("try_time is not positive, no request sent")
        headers = {**self.headers, **(kwargs.pop("headers", None) or {})}
        cookies = {**self.cookies, **(kwargs.pop("cookies", None) or {})}
        kwargs.setdefault("timeout", self.timeout)
        last_error: requests.RequestException | None = None
        for _ in range(self.try_time):
            try:
                return requests.request(method, url, headers=headers, cookies=cookies, **kwargs)
            except requests.RequestException as exc:
                last_error = exc
        assert last_error is not None
        raise last_error

    def get(self, url: str) -> requests.Response:
        return self.request("GET", url)

    def get_json(self, url: str) -> Any:
        """GET a URL and parse its body as JSON (None if it is not JSON)."""
        return parse_json(self.get(url).content)

    def post_form(self, url: str, data: dict[str, str]) -> requests.Response:
        return self.request(
            "POST",
            url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    def post_json(self, url: str, data: Any) -> Any:
        """POST data as JSON and parse the response body as JSON."""
        body = json.dumps(data).encode("utf-8")
        response = self.request(
            "POST", url, data=body, headers={"Content-Type": "application/json"}
        )
        return parse_json(response.content)

    def download_to_file(self, filename: str, url: str) -> None:
        """Download ``url`` into ``filename``, replacing its contents."""
        with open(filename, "wb") as fh:
            response = self.request("GET", url, stream=True)
            with response:
                for chunk in response.iter_content(_CHUNK):
                    fh.write(chunk)


def download_to_file(filename: str, url: str, try_time: int = 0) -> None:
    """Download ``url`` into ``filename`` with a fresh client."""
    HttpClient(try_time=try_time).download_to_file(filename, url)