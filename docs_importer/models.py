"""Pydantic models for the release import pipeline."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class PackageManifest(BaseModel):
    """Registry metadata for a published release (the fields we read)."""

    name: str = Field(
        ...,
        description="Package name"
    )
    version: Optional[str] = Field(
        default=None,
        description="Package version"
    )
    resolved: Optional[str] = Field(
        default=None,
        alias="_resolved",
        description="Tarball URL the manifest was resolved to"
    )
    from_: Optional[str] = Field(
        default=None,
        alias="_from",
        description="Fetch specifier, e.g. npm@6.14.18"
    )
    integrity: Optional[str] = Field(
        default=None,
        alias="_integrity",
        description="Subresource integrity of the tarball"
    )

    class Config:
        populate_by_name = True


class NavNode(BaseModel):
    """A node in the navigation tree."""

    title: str
    url: str
    short_name: Optional[str] = Field(default=None, alias="shortName")
    description: Optional[str] = None
    children: Optional[List["NavNode"]] = None

    class Config:
        populate_by_name = True


NavNode.model_rebuild()


class NavTree(BaseModel):
    """Rewritten navigation for one release."""

    path: str = Field(
        ...,
        description="Source-control path of the nav description (used as github_path)"
    )
    children: Optional[List[NavNode]] = None


class Release(BaseModel):
    """One versioned release whose documentation is imported."""

    id: str = Field(
        ...,
        description="Stable identifier, also the output subdirectory name"
    )
    version: str
    branch: str = Field(
        ...,
        description="Source-control ref the docs live on"
    )
    manifest: Optional[PackageManifest] = Field(
        default=None,
        description="Registry manifest, used when the release is not branch-based"
    )
    resolved: Optional[str] = Field(
        default=None,
        description="Content address recorded by the last import"
    )
    spec: Optional[str] = Field(
        default=None,
        description="Archive fetch specifier (from the manifest)"
    )
    use_branch: bool = Field(
        default=False,
        alias="useBranch",
        description="Fetch docs from the branch tree instead of the tarball"
    )
    prerelease: bool = False
    url: str = Field(
        ...,
        description="Site-relative base path, e.g. /cli/v6"
    )
    url_prefix: Optional[str] = Field(
        default=None,
        alias="urlPrefix",
        description="Final segment of this release's entry in the base nav"
    )
    src: Optional[str] = Field(
        default=None,
        description="Source-control path containing the doc sources"
    )
    nav: Optional[List[NavNode]] = None

    class Config:
        populate_by_name = True

    def to_record(self) -> Dict[str, Any]:
        """Serialize using the camelCase input names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ImportResult(Release):
    """A freshly imported release together with its navigation."""

    nav: List[NavNode] = Field(default_factory=list)


class FileRecord(BaseModel):
    """A file written during one extraction run."""

    path: str = Field(
        ...,
        description="Path relative to the release content root"
    )
    sha: Optional[str] = Field(
        default=None,
        description="Blob sha (tree fetches only)"
    )


class DirectoryEntry(BaseModel):
    """An entry of a remote directory listing."""

    name: str
    path: str
    sha: str
    type: str = "file"
