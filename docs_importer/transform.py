"""Per-file content transform.

Every file written into the content tree passes through a transform that
rewrites its frontmatter for the site. The pipeline only relies on the
``ContentTransform`` contract; ``Transform`` is the default implementation.
"""
import posixpath
import re
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple, Union

import yaml

from .models import Release

Content = Union[str, bytes]

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\n(.*?)\n?---[ \t]*(?:\n|\Z)", re.DOTALL)


class ContentTransform(Protocol):
    """Rewrites one file's content for the target site."""

    def sync(
        self,
        content: Content,
        *,
        release: Release,
        path: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        ...

    def stream(
        self,
        chunks: Iterable[bytes],
        *,
        release: Release,
        path: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        ...


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into its frontmatter mapping and body.

    Args:
        text: Document text

    Returns:
        (frontmatter dict, body) - the dict is empty when there is none
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end():]


class Transform:
    """Default transform: merge release metadata into YAML frontmatter."""

    def __init__(self, github_repository: str = "npm/cli"):
        self.github_repository = github_repository

    def sync(
        self,
        content: Content,
        *,
        release: Release,
        path: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Transform a whole buffer.

        Args:
            content: File content (bytes are decoded as UTF-8)
            release: Release the file belongs to
            path: Output path relative to the release root
            frontmatter: Extra frontmatter that wins over existing keys

        Returns:
            Transformed document text
        """
        if isinstance(content, bytes):
            content = content.decode("utf-8")

        existing, body = split_frontmatter(content)
        data = {
            **existing,
            **self._release_frontmatter(release, path),
            **{k: v for k, v in (frontmatter or {}).items() if v is not None},
        }
        header = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        body = body.lstrip("\n")
        return f"---\n{header}---\n\n{body}"

    def stream(
        self,
        chunks: Iterable[bytes],
        *,
        release: Release,
        path: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Transform content delivered as a sequence of chunks."""
        return self.sync(
            b"".join(chunks),
            release=release,
            path=path,
            frontmatter=frontmatter,
        )

    def _release_frontmatter(self, release: Release, path: str) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "github_repo": self.github_repository,
            "github_branch": release.branch,
        }
        if release.src:
            data["github_path"] = posixpath.join(release.src, path)
        return data
