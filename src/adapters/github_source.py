"""GitHub contents API adapter.

Implements the core ContentSourcePort by reading a single file through
GET /repos/{owner}/{repo}/contents/{path}.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from core.errors import RetrievalError

DEFAULT_API_ROOT = "https://api.github.com"


class GitHubContentSource:
    """Content source adapter backed by the GitHub REST API."""

    def __init__(
        self,
        headers: dict[str, str],
        api_root: str = DEFAULT_API_ROOT,
        timeout: float = 10.0,
    ) -> None:
        self._headers = dict(headers)
        self._api_root = api_root.rstrip("/")
        self._timeout = timeout

    def _endpoint(self, owner: str, repo: str, path: str) -> str:
        quoted = urllib.parse.quote(path.lstrip("/"))
        return f"{self._api_root}/repos/{owner}/{repo}/contents/{quoted}"

    def _get_json(self, url: str, label: str) -> object:
        request = urllib.request.Request(url, method="GET")
        for key, value in self._headers.items():
            request.add_header(key, value)

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise RetrievalError(f"{label} was not found (HTTP 404)") from e
            detail = e.read().decode("utf-8", errors="replace")
            raise RetrievalError(f"GitHub API error {e.code} for {label}: {detail}") from e
        except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
            # URLError covers DNS/connection failures; socket timeouts are OSError;
            # a body cut short mid-read is an http.client.IncompleteRead.
            raise RetrievalError(f"Cannot reach GitHub for {label}: {e}") from e

        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as e:
            raise RetrievalError(f"GitHub returned a non-JSON body for {label}") from e

    def get_file_content(self, owner: str, repo: str, path: str) -> str:
        """Return the file's base64 content as served by GitHub."""

        label = f"{owner}/{repo}/{path}"
        payload = self._get_json(self._endpoint(owner, repo, path), label)

        # Directories come back as lists; symlinks and submodules carry another type.
        if not isinstance(payload, dict) or payload.get("type") != "file":
            raise RetrievalError(f"{label} is not a regular file")

        content: Optional[str] = payload.get("content")
        if payload.get("encoding") != "base64" or not isinstance(content, str):
            # Files over 1 MB are served without inline content.
            raise RetrievalError(f"{label} has no inline base64 content")
        return content
