"""Directory index pages.

The imported docs contain content pages and a nav but no index pages. An
index page is synthesized for every output directory; its body is an MDX
component that renders the nav for that directory.
"""
import asyncio
import logging
import posixpath
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional

from .errors import NavigationMatchNotFound
from .models import FileRecord, NavNode, NavTree, Release
from .tasks import gather_or_cancel
from .transform import ContentTransform

logger = logging.getLogger(__name__)

INDEX_FILE = "index.mdx"
INDEX_BODY = '<Index depth="1" />\n'


def _segment(url: str) -> str:
    return posixpath.basename(url.rstrip("/"))


def index_dirs(files: Iterable[FileRecord]) -> List[str]:
    """Root plus every distinct directory holding a file, first-seen order."""
    dirs = [""]
    for f in files:
        d = posixpath.dirname(f.path)
        if d not in dirs:
            dirs.append(d)
    return dirs


def directory_map(nodes: Optional[List[NavNode]], prefix: str = "") -> Dict[str, NavNode]:
    """
    Map output directories to nav nodes.

    Top-level sections are keyed by the last segment of their url; nested
    sections by ``parent/segment``.
    """
    mapping: Dict[str, NavNode] = {}
    for node in nodes or []:
        key = posixpath.join(prefix, _segment(node.url)) if prefix else _segment(node.url)
        mapping.setdefault(key, node)
        for child_key, child in directory_map(node.children, key).items():
            mapping.setdefault(child_key, child)
    return mapping


class IndexGenerator:
    """Writes one index page per output directory."""

    def __init__(self, transform: ContentTransform, log: Optional[logging.Logger] = None):
        self.transform = transform
        self.log = log or logger

    def match(
        self,
        directory: str,
        release: Release,
        sections: Dict[str, NavNode],
        base_nav: List[NavNode],
    ) -> NavNode:
        """
        Find the nav node describing a directory.

        The root directory matches the base nav entry for the release
        (by ``url_prefix``); any other directory matches the release's
        own nav.

        Raises:
            NavigationMatchNotFound: when no node matches
        """
        if directory:
            node = sections.get(directory)
        else:
            node = next(
                (n for n in base_nav if _segment(n.url) == release.url_prefix),
                None,
            )
        if node is None:
            raise NavigationMatchNotFound(release.id, directory)
        return node

    async def generate(
        self,
        *,
        release: Release,
        nav: NavTree,
        base_nav: List[NavNode],
        dirs: List[str],
        cwd: Path,
    ) -> List[str]:
        """
        Write index pages for every directory.

        Args:
            release: Release being imported
            nav: Rewritten release navigation
            base_nav: Site-level navigation (for the root index)
            dirs: Directories relative to ``cwd`` ("" is the root)
            cwd: Release output directory

        Returns:
            Paths of the written index pages
        """
        sections = directory_map(nav.children)
        # Resolve every match first so a missing section fails before any write
        matches = [(d, self.match(d, release, sections, base_nav)) for d in dirs]

        async def write(directory: str, node: NavNode) -> str:
            path = posixpath.join(directory, INDEX_FILE)
            content = self.transform.sync(
                INDEX_BODY,
                release=release,
                path=path,
                frontmatter={
                    "github_path": nav.path,
                    "title": node.title,
                    "shortName": node.short_name,
                },
            )
            target = cwd.joinpath(*PurePosixPath(path).parts)
            await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_text, content, encoding="utf-8")
            self.log.debug(f"{release.id} {path}")
            return path

        return await gather_or_cancel(write(d, n) for d, n in matches)
