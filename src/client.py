"""GitHub API client factory for pattern-mirror.

The target repository is public, so a token is optional. When GITHUB_TOKEN
is set (directly or via a .env file) it raises the API rate limit.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from adapters.github_source import GitHubContentSource

USER_AGENT = "pattern-mirror"


def build_headers() -> dict[str, str]:
    """Build request headers for the GitHub REST API.

    We read GITHUB_TOKEN via python-dotenv to keep secrets out of the repo.
    """

    load_dotenv()

    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
        "X-GitHub-Api-Version": "2022-11-28",
    }
    token = os.getenv("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    else:
        logging.getLogger(__name__).info("GITHUB_TOKEN not set, using unauthenticated GitHub access")
    return headers


def build_source(api_root: str, timeout: float) -> GitHubContentSource:
    """Create the GitHub content source used by the fetcher."""

    logging.getLogger(__name__).info("Initializing GitHub client")
    return GitHubContentSource(build_headers(), api_root=api_root, timeout=timeout)
