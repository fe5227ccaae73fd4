"""Changelog page and nav entry."""
import asyncio
import logging
import posixpath
import re
from pathlib import Path, PurePosixPath
from typing import Optional

from .errors import NavigationParseError
from .github import GitHubClient
from .models import NavNode, NavTree, Release
from .transform import ContentTransform

logger = logging.getLogger(__name__)

CHANGELOG_SRC = "CHANGELOG.md"
CHANGELOG_CONTENT_PATH = posixpath.join("using-npm", "changelog")
CHANGELOG_TITLE = "Changelog"
CHANGELOG_DESCRIPTION = "Changelog notes for each version"

_UNESCAPED_GT = re.compile(r"([^\\])>")


def escape_mdx(text: str) -> str:
    """Escape ``>`` not already preceded by a backslash (MDX reads it as JSX)."""
    return _UNESCAPED_GT.sub(r"\1\\>", text)


def append_changelog(nav: NavTree, node: NavNode) -> NavTree:
    """Return a copy of ``nav`` with ``node`` appended to its last section."""
    if not nav.children:
        raise NavigationParseError(nav.path, "no sections to attach the changelog to")

    *head, last = nav.children
    section = last.model_copy(update={"children": [*(last.children or []), node]})
    return nav.model_copy(update={"children": [*head, section]})


class ChangelogMerger:
    """Imports the changelog and links it from the nav."""

    def __init__(
        self,
        github: GitHubClient,
        transform: ContentTransform,
        src_path: str = CHANGELOG_SRC,
        content_path: str = CHANGELOG_CONTENT_PATH,
        log: Optional[logging.Logger] = None,
    ):
        self.github = github
        self.transform = transform
        self.src_path = src_path
        self.content_path = content_path
        self.log = log or logger

    async def merge(self, *, release: Release, nav: NavTree, cwd: Path) -> NavTree:
        """
        Write the changelog page and add it to the nav.

        Args:
            release: Release being imported
            nav: Navigation to extend (not modified)
            cwd: Release output directory

        Returns:
            New NavTree whose last section ends with the changelog entry
        """
        changelog = await self.github.get_file(ref=release.branch, path=self.src_path)
        content = self.transform.sync(
            escape_mdx(changelog.decode("utf-8")),
            release=release,
            path=self.content_path,
            frontmatter={
                "github_path": self.src_path,
                "title": CHANGELOG_TITLE,
            },
        )

        target = cwd.joinpath(*PurePosixPath(self.content_path + ".md").parts)
        await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(target.write_text, content, encoding="utf-8")
        self.log.debug(f"{release.id} {self.content_path}.md")

        return append_changelog(nav, NavNode(
            title=CHANGELOG_TITLE,
            url=f"{release.url}/{self.content_path}",
            description=CHANGELOG_DESCRIPTION,
        ))
