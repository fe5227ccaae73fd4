"""GitHub REST client for the doc sources."""
import base64
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from .config import ImporterConfig
from .errors import RemoteFetchFailed
from .models import DirectoryEntry, FileRecord

logger = logging.getLogger(__name__)


class GitHubClient:
    """Read-only access to the repository tree holding the docs."""

    def __init__(
        self,
        config: Optional[ImporterConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            config: Importer configuration
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.config = config or ImporterConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def connect(self):
        """Initialize HTTP client."""
        if self._client is None:
            headers = {
                "User-Agent": self.config.user_agent,
                "Accept": "application/vnd.github+json",
            }
            if self.config.github_token:
                headers["Authorization"] = f"Bearer {self.config.github_token}"
            self._client = httpx.AsyncClient(
                base_url=self.config.github_api_url,
                timeout=self.config.request_timeout,
                follow_redirects=True,
                headers=headers,
                transport=self._transport,
            )

    async def close(self):
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.config.github_owner}/{self.config.github_repo}"

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        if self._client is None:
            await self.connect()

        try:
            response = await self._client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            # 404 is an expected answer for path probes
            logger.log(
                logging.DEBUG if status == 404 else logging.WARNING,
                f"HTTP error fetching {url}: {status}",
            )
            raise RemoteFetchFailed(url, e.response.status_code, e.response.text) from e
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching {url}: {e}")
            raise RemoteFetchFailed(url) from e
        return response

    def _contents_url(self, path: str) -> str:
        return f"{self._repo_path}/contents/{quote(path.strip('/'))}"

    async def get_directory(self, ref: str, path: str) -> List[DirectoryEntry]:
        """
        List a directory at a ref.

        Args:
            ref: Branch, tag or commit
            path: Directory path in the repository

        Returns:
            Entries with their names and shas
        """
        response = await self._get(self._contents_url(path), params={"ref": ref})
        data = response.json()
        if not isinstance(data, list):
            raise RemoteFetchFailed(f"{path}@{ref} (not a directory)")
        return [DirectoryEntry.model_validate(item) for item in data]

    async def get_all_files(self, sha: str) -> List[FileRecord]:
        """
        Recursively list every file under a tree sha.

        Args:
            sha: Tree sha

        Returns:
            FileRecords with paths relative to the tree
        """
        response = await self._get(
            f"{self._repo_path}/git/trees/{sha}",
            params={"recursive": "1"},
        )
        data = response.json()
        if data.get("truncated"):
            logger.warning(f"Tree {sha} listing was truncated by the API")

        return [
            FileRecord(path=item["path"], sha=item["sha"])
            for item in data.get("tree", [])
            if item.get("type") == "blob"
        ]

    async def get_file(
        self,
        sha: Optional[str] = None,
        ref: Optional[str] = None,
        path: Optional[str] = None,
    ) -> bytes:
        """
        Fetch raw file bytes, either by blob sha or by ref + path.

        Args:
            sha: Blob sha
            ref: Branch, tag or commit (with path)
            path: File path in the repository (with ref)

        Returns:
            File content
        """
        if sha:
            response = await self._get(f"{self._repo_path}/git/blobs/{sha}")
            data = response.json()
            if data.get("encoding") == "base64":
                return base64.b64decode(data["content"])
            return data.get("content", "").encode("utf-8")

        if not (ref and path):
            raise ValueError("get_file needs either sha or both ref and path")

        response = await self._get(
            self._contents_url(path),
            params={"ref": ref},
            headers={"Accept": "application/vnd.github.raw"},
        )
        return response.content

    async def get_latest_sha(self, branch: str) -> str:
        """Resolve the head commit sha of a branch."""
        response = await self._get(f"{self._repo_path}/commits/{quote(branch, safe='')}")
        return response.json()["sha"]

    async def path_exists(self, ref: str, path: str) -> Optional[str]:
        """
        Check whether a path exists at a ref.

        Returns:
            The path itself when it exists, None on 404
        """
        try:
            await self._get(self._contents_url(path), params={"ref": ref})
        except RemoteFetchFailed as e:
            if e.status == 404:
                return None
            raise
        return path
