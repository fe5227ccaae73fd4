"""Docs Importer Package."""

__version__ = "1.0.0"
__author__ = "artqcid"

from .config import ImporterConfig
from .errors import (
    ReleaseImportError,
    ReleaseSkipped,
    SkippedPrerelease,
    SkippedNoChange,
    SourceDirectoryNotFound,
    NavigationMatchNotFound,
    NavigationParseError,
    StreamExtractionFailed,
    RemoteFetchFailed,
)
from .importer import ReleaseImporter
from .models import (
    Release,
    PackageManifest,
    NavNode,
    NavTree,
    FileRecord,
    ImportResult,
)

__all__ = [
    "ImporterConfig",
    "ReleaseImporter",
    "Release",
    "PackageManifest",
    "NavNode",
    "NavTree",
    "FileRecord",
    "ImportResult",
    "ReleaseImportError",
    "ReleaseSkipped",
    "SkippedPrerelease",
    "SkippedNoChange",
    "SourceDirectoryNotFound",
    "NavigationMatchNotFound",
    "NavigationParseError",
    "StreamExtractionFailed",
    "RemoteFetchFailed",
]
