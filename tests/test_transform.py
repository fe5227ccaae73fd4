"""Unit tests for the default content transform."""
import yaml

from docs_importer.transform import Transform, split_frontmatter


def _parse(doc):
    data, body = split_frontmatter(doc)
    return data, body


def test_adds_release_frontmatter(make_release):
    out = Transform("npm/cli").sync(b"# Hello\n", release=make_release(), path="commands/npm.md")

    data, body = _parse(out)
    assert data == {"github_repo": "npm/cli", "github_branch": "release/v6"}
    assert body == "\n# Hello\n"


def test_github_path_from_src(make_release):
    release = make_release(src="docs/content")
    out = Transform().sync("x", release=release, path="commands/npm.md")
    data, _ = _parse(out)
    assert data["github_path"] == "docs/content/commands/npm.md"


def test_merges_existing_and_explicit_frontmatter(make_release):
    doc = "---\ntitle: npm-access\nsection: 1\n---\n\nBody\n"
    out = Transform().sync(
        doc,
        release=make_release(src="docs/content"),
        path="using-npm/changelog",
        frontmatter={"github_path": "CHANGELOG.md", "title": "Changelog", "shortName": None},
    )

    data, body = _parse(out)
    assert data["title"] == "Changelog"
    assert data["section"] == 1
    assert data["github_path"] == "CHANGELOG.md"
    assert "shortName" not in data
    assert body.strip() == "Body"


def test_stream_matches_sync(make_release):
    release = make_release()
    t = Transform()
    chunks = [b"---\ntitle: a\n", b"---\n", b"text"]
    assert t.stream(iter(chunks), release=release, path="a.md") == t.sync(
        b"".join(chunks), release=release, path="a.md",
    )


def test_non_mapping_frontmatter_left_as_body():
    data, body = split_frontmatter("---\n- a\n- b\n---\nrest")
    assert data == {}
    assert body.startswith("---")


def test_output_is_valid_yaml(make_release):
    out = Transform().sync('title with "quotes": yes', release=make_release(), path="a.md")
    header = out.split("---\n")[1]
    assert yaml.safe_load(header)["github_branch"] == "release/v6"
