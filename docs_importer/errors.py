"""
Structured error catalog for release imports.

Every error carries a code, a human message and an optional suggestion.
Skips are modelled as errors too so the resolver can name why it stopped,
but they are never reported as failures.
"""
from typing import Any, Dict, Optional, Sequence


class ReleaseImportError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ReleaseSkipped(ReleaseImportError):
    """Nothing to do for this release."""


class SkippedPrerelease(ReleaseSkipped):
    def __init__(self, release_id: str, version: str):
        super().__init__(
            code="SKIPPED_PRERELEASE",
            message=f"Skipping {release_id} due to prerelease {version}",
            suggestion="Pass --prerelease to import prerelease documentation.",
        )


class SkippedNoChange(ReleaseSkipped):
    def __init__(self, release_id: str, resolved: Optional[str]):
        super().__init__(
            code="SKIPPED_NO_CHANGE",
            message=f"Skipping {release_id} due to resolved fields matching",
            suggestion="Pass --force to re-import unchanged releases.",
            detail=resolved,
        )


class SourceDirectoryNotFound(ReleaseImportError):
    def __init__(self, release_id: str, candidates: Sequence[str]):
        super().__init__(
            code="SOURCE_DIRECTORY_NOT_FOUND",
            message=f"Could not find source dir for {release_id}: tried {', '.join(candidates)}",
            suggestion="Check that the release branch contains the documentation sources.",
            detail=list(candidates),
        )


class NavigationMatchNotFound(ReleaseImportError):
    def __init__(self, release_id: str, directory: str):
        self.directory = directory
        where = directory or "<root>"
        super().__init__(
            code="NAVIGATION_MATCH_NOT_FOUND",
            message=f"No navigation entry for directory {where!r} in {release_id}",
            suggestion="Add a nav.yml section (or base nav entry) whose url ends with the directory name.",
            detail=directory,
        )


class NavigationParseError(ReleaseImportError):
    def __init__(self, path: str, message: str):
        super().__init__(
            code="NAVIGATION_PARSE_FAILED",
            message=f"Invalid navigation description {path}: {message}",
            suggestion="nav.yml must be a YAML sequence of {url, title, children?} mappings.",
        )


class StreamExtractionFailed(ReleaseImportError):
    def __init__(self, target: str, message: str):
        super().__init__(
            code="STREAM_EXTRACTION_FAILED",
            message=f"Archive extraction failed for {target}: {message}",
            suggestion="Re-run the import; the output directory is rebuilt from scratch.",
        )


class RemoteFetchFailed(ReleaseImportError):
    def __init__(self, target: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        reason = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(
            code="REMOTE_FETCH_FAILED",
            message=f"Fetching {target} failed ({reason})",
            suggestion="Check the GitHub token and rate limits, then re-run the import.",
            detail=body[:500] if body else None,
        )
