"""Decide whether a release needs to be (re)imported."""
import logging
from typing import Optional

from .errors import ReleaseImportError, SkippedNoChange, SkippedPrerelease
from .github import GitHubClient
from .models import Release

logger = logging.getLogger(__name__)


class ReleaseResolver:
    """Resolves a release's content address and gates unchanged releases."""

    def __init__(self, github: GitHubClient, log: Optional[logging.Logger] = None):
        self.github = github
        self.log = log or logger

    async def resolve(
        self,
        release: Release,
        force: bool = False,
        prerelease: bool = False,
    ) -> Release:
        """
        Resolve a release for import.

        Branch-based releases resolve to the head commit of their branch
        (their docs were updated on GitHub but never published). Others take
        the tarball URL and specifier from their manifest.

        Args:
            release: Release with the previously recorded ``resolved``
            force: Import even when nothing changed
            prerelease: Allow prerelease imports

        Returns:
            Copy of the release with ``resolved`` (and ``spec``) populated

        Raises:
            SkippedPrerelease: prerelease and not opted in
            SkippedNoChange: resolved value unchanged and not forced
        """
        if release.prerelease and not prerelease:
            raise SkippedPrerelease(release.id, release.version)

        current = release.resolved
        if release.use_branch:
            resolved = release.model_copy(update={
                "resolved": await self.github.get_latest_sha(release.branch),
            })
        else:
            if release.manifest is None:
                raise ReleaseImportError(
                    code="MANIFEST_MISSING",
                    message=f"Release {release.id} is not branch-based and has no manifest",
                    suggestion="Set useBranch or provide the registry manifest.",
                )
            resolved = release.model_copy(update={
                "resolved": release.manifest.resolved,
                "spec": release.manifest.from_,
            })

        self.log.info(f"{resolved.id} {resolved.version} {resolved.resolved}")

        if resolved.resolved == current and not force:
            raise SkippedNoChange(resolved.id, current)

        return resolved
