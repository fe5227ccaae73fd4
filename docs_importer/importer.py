"""Release import orchestration."""
import logging
import posixpath
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .changelog import ChangelogMerger
from .config import ImporterConfig
from .errors import ReleaseSkipped, SourceDirectoryNotFound
from .extract import strategy_for
from .github import GitHubClient
from .indexes import IndexGenerator, index_dirs
from .models import ImportResult, NavNode, Release
from .navigation import build_nav
from .registry import RegistryClient
from .resolver import ReleaseResolver
from .transform import ContentTransform, Transform

logger = logging.getLogger(__name__)

# Built docs inside the published tarball
BUILT_PATH = posixpath.join("docs", "content")
# Doc sources on the branch (newer layouts first)
SRC_PATHS = (posixpath.join("docs", "lib", "content"), BUILT_PATH)
NAV_PATHS = (posixpath.join("docs", "lib", "content", "nav.yml"), posixpath.join("docs", "nav.yml"))


class ReleaseImporter:
    """Imports the documentation of one release at a time."""

    def __init__(
        self,
        config: Optional[ImporterConfig] = None,
        github: Optional[GitHubClient] = None,
        registry: Optional[RegistryClient] = None,
        transform: Optional[ContentTransform] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize release importer.

        Args:
            config: Importer configuration
            github: GitHub client (created from config if omitted)
            registry: Registry client (created from config if omitted)
            transform: Content transform (defaults to Transform)
            log: Logger passed down to every stage
        """
        self.config = config or ImporterConfig()
        self.github = github or GitHubClient(self.config)
        self.registry = registry or RegistryClient(self.config)
        self.transform = transform or Transform(self.config.github_repository)
        self.log = log or logger

        self.resolver = ReleaseResolver(self.github, log=self.log)
        self.indexes = IndexGenerator(self.transform, log=self.log)
        self.changelog = ChangelogMerger(self.github, self.transform, log=self.log)

    async def __aenter__(self):
        """Async context manager entry."""
        await self.github.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.github.close()

    async def _probe(self, release: Release, candidates: Sequence[str]) -> str:
        for candidate in candidates:
            found = await self.github.path_exists(release.branch, candidate)
            if found:
                return found
        raise SourceDirectoryNotFound(release.id, candidates)

    async def unpack_release(
        self,
        release: Release,
        *,
        base_nav: List[NavNode],
        content_path: Optional[str] = None,
        force: bool = False,
        prerelease: bool = False,
    ) -> Optional[ImportResult]:
        """
        Import one release into ``<content_path>/<release.id>``.

        Args:
            release: Release to import (with the last recorded ``resolved``)
            base_nav: Site navigation, used for the release's root index
            content_path: Content root (defaults to config.content_path)
            force: Re-import even if the resolved value is unchanged
            prerelease: Allow prerelease imports

        Returns:
            The updated release with its nav, or None when skipped

        Raises:
            ReleaseImportError: any fatal failure; the release is not imported
        """
        try:
            release = await self.resolver.resolve(release, force=force, prerelease=prerelease)
        except ReleaseSkipped as e:
            self.log.info(e.message)
            return None

        self.log.debug(f"Importing {release!r}")

        cwd = Path(content_path or self.config.content_path) / release.id
        if cwd.exists():
            shutil.rmtree(cwd)
        cwd.mkdir(parents=True)

        # Source dir of the docs, used for edit links
        release = release.model_copy(update={"src": await self._probe(release, SRC_PATHS)})

        nav_path = await self._probe(release, NAV_PATHS)
        nav_text = await self.github.get_file(ref=release.branch, path=nav_path)
        nav = build_nav(nav_text.decode("utf-8"), release, nav_path)

        # Branch trees hold the docs as built in source (true for v6, not v9+)
        strategy = strategy_for(
            release,
            github=self.github,
            registry=self.registry,
            transform=self.transform,
            max_concurrency=self.config.max_concurrency,
            log=self.log,
        )
        files = await strategy.extract(
            release,
            cwd,
            release.src if release.use_branch else BUILT_PATH,
        )

        indexes = await self.indexes.generate(
            release=release,
            nav=nav,
            base_nav=base_nav,
            dirs=index_dirs(files),
            cwd=cwd,
        )

        nav = await self.changelog.merge(release=release, nav=nav, cwd=cwd)

        self.log.info(f"{release.id} {len(files) + len(indexes)} files")

        return ImportResult.model_validate({**dict(release), "nav": nav.children or []})
