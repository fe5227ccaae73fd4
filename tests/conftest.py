"""Shared test configuration and fixtures for the docs importer test suite."""
import io
import sys
import tarfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Make the package importable without installing it
project_dir = str(Path(__file__).parent.parent)
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

from docs_importer.errors import RemoteFetchFailed
from docs_importer.models import DirectoryEntry, FileRecord, NavNode, Release


class RecordingTransform:
    """Deterministic transform that records every call."""

    def __init__(self):
        self.calls: List[dict] = []

    def sync(self, content, *, release, path, frontmatter=None):
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        self.calls.append({
            "release": release.id,
            "path": path,
            "frontmatter": frontmatter,
            "content": content,
        })
        return f"<!-- {release.id}:{path} -->\n{content}"

    def stream(self, chunks, *, release, path, frontmatter=None):
        return self.sync(b"".join(chunks), release=release, path=path, frontmatter=frontmatter)

    def paths(self) -> List[str]:
        return [c["path"] for c in self.calls]


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self):
        self.directories: Dict[Tuple[str, str], List[DirectoryEntry]] = {}
        self.trees: Dict[str, List[FileRecord]] = {}
        self.blobs: Dict[str, bytes] = {}
        self.files: Dict[Tuple[str, str], bytes] = {}
        self.existing: set = set()
        self.latest: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.on_blob = None

    async def connect(self):
        pass

    async def close(self):
        pass

    async def get_directory(self, ref, path):
        self.calls.append(("get_directory", ref, path))
        return self.directories[(ref, path)]

    async def get_all_files(self, sha):
        self.calls.append(("get_all_files", sha))
        return self.trees[sha]

    async def get_file(self, sha=None, ref=None, path=None):
        self.calls.append(("get_file", sha, ref, path))
        if sha:
            if self.on_blob:
                await self.on_blob(sha)
            return self.blobs[sha]
        if (ref, path) not in self.files:
            raise RemoteFetchFailed(f"{path}@{ref}", 404)
        return self.files[(ref, path)]

    async def get_latest_sha(self, branch):
        self.calls.append(("get_latest_sha", branch))
        return self.latest[branch]

    async def path_exists(self, ref, path):
        self.calls.append(("path_exists", ref, path))
        if (ref, path) in self.existing or (ref, path) in self.files:
            return path
        return None


class FakeRegistry:
    """Serves one in-memory tarball."""

    def __init__(self, data: bytes = b""):
        self.data = data
        self.opened: List[tuple] = []

    @contextmanager
    def open_tarball(self, spec, resolved=None):
        self.opened.append((spec, resolved))
        yield io.BytesIO(self.data)


def build_tarball(entries: Dict[str, Optional[bytes]], gzip: bool = True) -> bytes:
    """Build a tarball; a None value makes a directory entry."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz" if gzip else "w") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def make_release():
    def _make(**overrides) -> Release:
        data = {
            "id": "v6",
            "version": "6.14.18",
            "branch": "release/v6",
            "url": "/cli/v6",
            "urlPrefix": "v6",
            "useBranch": True,
        }
        data.update(overrides)
        return Release.model_validate(data)
    return _make


@pytest.fixture
def transform():
    return RecordingTransform()


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def base_nav():
    return [
        NavNode(title="npm CLI v6", url="/cli/v6", shortName="v6"),
        NavNode(title="npm CLI v8", url="/cli/v8", shortName="v8"),
    ]


NAV_YAML = """\
- title: CLI Commands
  shortName: Commands
  url: /commands
  description: Inside the command line
  children:
    - title: npm access
      url: /commands/npm-access
- title: Configuring npm
  shortName: Configuring
  url: /configuring-npm
  children:
    - title: folders
      url: /configuring-npm/folders
- title: Using npm
  shortName: Using
  url: /using-npm
  children: []
"""


@pytest.fixture
def nav_yaml():
    return NAV_YAML
