"""Extraction strategies: release tarball or branch tree."""
import asyncio
import logging
import tarfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, List, Optional, Protocol

from .errors import RemoteFetchFailed, SourceDirectoryNotFound, StreamExtractionFailed
from .github import GitHubClient
from .models import FileRecord, Release
from .registry import RegistryClient
from .tasks import gather_or_cancel
from .transform import ContentTransform

logger = logging.getLogger(__name__)

# Tarballs wrap everything in one top-level directory (package/, pkg-1.0.0/)
STRIP = 1
CHUNK_SIZE = 64 * 1024


class ExtractionStrategy(Protocol):
    """Writes a release's docs under ``cwd`` and reports what was written."""

    async def extract(self, release: Release, cwd: Path, dir: str) -> List[FileRecord]:
        ...


def _split(path: str) -> List[str]:
    return [p for p in path.split("/") if p not in ("", ".")]


def unpack_tarball(
    fileobj: BinaryIO,
    *,
    release: Release,
    cwd: Path,
    dir: str,
    transform: ContentTransform,
    log: Optional[logging.Logger] = None,
) -> List[FileRecord]:
    """
    Extract the ``dir`` subtree of a tarball stream into ``cwd``.

    Entries are read in stream order. Only entries whose path (after the
    wrapper directory) starts with ``dir`` are kept, and that prefix is
    stripped, so ``<wrapper>/<dir>/a/b.md`` lands at ``cwd/a/b.md``.

    Args:
        fileobj: Readable tarball stream (gzip or plain)
        release: Release being imported
        cwd: Output directory
        dir: Archive directory holding the docs, e.g. docs/content
        transform: Content transform applied to every file
        log: Logger (defaults to the module logger)

    Returns:
        FileRecords for every written file
    """
    log = log or logger
    dir_parts = _split(dir)
    depth = STRIP + len(dir_parts)
    result: List[FileRecord] = []

    log.debug(f"tarball {release.resolved} cwd={cwd} dir={dir}")

    try:
        with tarfile.open(fileobj=fileobj, mode="r|*") as archive:
            for member in archive:
                parts = _split(member.name)
                if parts[STRIP:depth] != dir_parts:
                    continue

                rel_parts = parts[depth:]
                if not rel_parts:
                    continue
                if ".." in rel_parts:
                    log.warning(f"Skipping {member.name}: escapes the output directory")
                    continue

                target = cwd.joinpath(*rel_parts)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if not member.isfile():
                    log.debug(f"Skipping non-regular entry {member.name}")
                    continue

                path = "/".join(rel_parts)
                source = archive.extractfile(member)
                chunks = iter(lambda: source.read(CHUNK_SIZE), b"")
                content = transform.stream(chunks, release=release, path=path)

                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                result.append(FileRecord(path=path))
                log.debug(f"{release.id} {path}")
    except (tarfile.TarError, OSError, UnicodeDecodeError) as e:
        raise StreamExtractionFailed(release.id, str(e)) from e

    return result


class ArchiveStrategy:
    """Extracts built docs from the published tarball."""

    def __init__(
        self,
        registry: RegistryClient,
        transform: ContentTransform,
        log: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.transform = transform
        self.log = log or logger

    async def extract(self, release: Release, cwd: Path, dir: str) -> List[FileRecord]:
        def run() -> List[FileRecord]:
            with self.registry.open_tarball(release.spec, release.resolved) as stream:
                return unpack_tarball(
                    stream,
                    release=release,
                    cwd=cwd,
                    dir=dir,
                    transform=self.transform,
                    log=self.log,
                )

        return await asyncio.to_thread(run)


class TreeStrategy:
    """Fetches source docs file by file from the release branch."""

    def __init__(
        self,
        github: GitHubClient,
        transform: ContentTransform,
        max_concurrency: int = 8,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize tree strategy.

        Args:
            github: GitHub client
            transform: Content transform applied to every file
            max_concurrency: Maximum simultaneous blob fetches
            log: Logger (defaults to the module logger)
        """
        self.github = github
        self.transform = transform
        self.max_concurrency = max_concurrency
        self.log = log or logger

    async def _dir_sha(self, release: Release, dir: str) -> str:
        # The sha of a directory is only listed in its parent
        *parent_parts, child = _split(dir)
        entries = await self.github.get_directory(release.branch, "/".join(parent_parts))
        for entry in entries:
            if entry.name == child:
                return entry.sha
        raise SourceDirectoryNotFound(release.id, [dir])

    async def extract(self, release: Release, cwd: Path, dir: str) -> List[FileRecord]:
        sha = await self._dir_sha(release, dir)
        files = await self.github.get_all_files(sha)
        self.log.debug(f"tree {sha} for {release.id}: {len(files)} files")

        # Unlike tar extraction, nothing creates the directories for us
        dirs = {cwd.joinpath(*PurePosixPath(f.path).parent.parts) for f in files}
        for d in sorted(dirs):
            d.mkdir(parents=True, exist_ok=True)

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(file: FileRecord) -> None:
            async with semaphore:
                buffer = await self.github.get_file(sha=file.sha)
            try:
                content = self.transform.sync(buffer, release=release, path=file.path)
            except UnicodeDecodeError as e:
                raise RemoteFetchFailed(file.path, body=f"not UTF-8 text: {e}") from e
            target = cwd.joinpath(*PurePosixPath(file.path).parts)
            await asyncio.to_thread(target.write_text, content, encoding="utf-8")
            self.log.debug(f"{release.id} {file.path}")

        await gather_or_cancel(fetch(f) for f in files)
        return files


def strategy_for(
    release: Release,
    *,
    github: GitHubClient,
    registry: RegistryClient,
    transform: ContentTransform,
    max_concurrency: int = 8,
    log: Optional[logging.Logger] = None,
) -> ExtractionStrategy:
    """Select the extraction strategy for a release."""
    if release.use_branch:
        return TreeStrategy(github, transform, max_concurrency=max_concurrency, log=log)
    return ArchiveStrategy(registry, transform, log=log)
