"""Fetch directory listings, raw files, metadata and commits from the GitHub API."""

import asyncio
import logging
import os

import httpx

from detective.analysis.models import CommitRecord, RemoteFile

logger = logging.getLogger(__name__)

GITHUB_API = os.environ.get("GITHUB_API_URL", "https://api.github.com")
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN", "")

_MAX_RETRIES = 3
_RETRY_BACKOFF = 1.0  # seconds, doubled each retry


class RemoteError(Exception):
    """A remote fetch failed after retries."""


class RemoteListError(RemoteError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Could not list '{path or '/'}': {detail}")
        self.path = path


class RemoteFetchError(RemoteError):
    def __init__(self, url: str, detail: str):
        super().__init__(f"Could not fetch {url}: {detail}")
        self.url = url


def _headers(token: str, accept: str = "application/vnd.github+json") -> dict:
    headers = {
        "Accept": accept,
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GitHubContents:
    """
    Read-only view of one repository through the REST contents API.

    Pass *client* to reuse an ``httpx.AsyncClient`` (tests hand in one
    backed by ``httpx.MockTransport``); otherwise a short-lived client is
    opened per request.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self._token = GITHUB_TOKEN if token is None else token
        self._client = client

    @property
    def _base(self) -> str:
        return f"{GITHUB_API}/repos/{self.owner}/{self.repo}"

    async def _send(self, url: str, headers: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=headers)
        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await client.get(url, headers=headers)

    async def _get(self, url: str, headers: dict) -> httpx.Response:
        """GET with retry on transient 5xx and transport errors."""
        last_exc = None
        for attempt in range(_MAX_RETRIES):
            try:
                response = await self._send(url, headers)
                if response.status_code < 500:
                    response.raise_for_status()
                    return response
                logger.warning(
                    "GitHub API %s (attempt %d/%d): %s",
                    response.status_code, attempt + 1, _MAX_RETRIES, url,
                )
                last_exc = httpx.HTTPStatusError(
                    f"{response.status_code}", request=response.request, response=response,
                )
            except httpx.TransportError as exc:
                logger.warning("Transport error (attempt %d/%d): %s", attempt + 1, _MAX_RETRIES, exc)
                last_exc = exc

            if attempt < _MAX_RETRIES - 1:
                await asyncio.sleep(_RETRY_BACKOFF * (2 ** attempt))

        raise last_exc

    async def list_directory(self, path: str = "") -> list[RemoteFile]:
        url = f"{self._base}/contents/{path}"
        try:
            response = await self._get(url, _headers(self._token))
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RemoteListError(path, str(exc)) from exc

        items = data if isinstance(data, list) else [data]
        logger.debug("Listed %d entries under '%s'", len(items), path or "/")
        return [RemoteFile.from_api(item) for item in items]

    async def fetch_raw(self, url: str) -> str:
        try:
            response = await self._get(url, _headers(self._token, accept="application/vnd.github.raw+json"))
        except httpx.HTTPError as exc:
            raise RemoteFetchError(url, str(exc)) from exc
        return response.text

    async def fetch_metadata(self) -> dict | None:
        """Return the repository object, or None if it cannot be fetched."""
        try:
            response = await self._get(self._base, _headers(self._token))
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not fetch metadata for %s/%s: %s", self.owner, self.repo, exc)
            return None

    async def fetch_commits(self, limit: int = 30) -> list[CommitRecord]:
        """Return up to *limit* recent commits, or [] if they cannot be fetched."""
        url = f"{self._base}/commits?per_page={limit}"
        try:
            response = await self._get(url, _headers(self._token))
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not fetch commits for %s/%s: %s", self.owner, self.repo, exc)
            return []
        if not isinstance(data, list):
            return []
        return [CommitRecord.from_api(item) for item in data[:limit]]
