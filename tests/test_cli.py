"""CLI tests using click's CliRunner."""
import json

from click.testing import CliRunner

from docs_importer import cli as cli_module
from docs_importer.errors import SourceDirectoryNotFound
from docs_importer.models import ImportResult

RELEASES = [
    {
        "id": "v6",
        "version": "6.14.18",
        "branch": "release/v6",
        "url": "/cli/v6",
        "urlPrefix": "v6",
        "useBranch": True,
        "resolved": "abc",
    },
    {
        "id": "v10",
        "version": "10.0.0-pre.0",
        "branch": "latest",
        "url": "/cli/v10",
        "urlPrefix": "v10",
        "prerelease": True,
        "manifest": {"name": "npm", "_resolved": "https://r/npm.tgz", "_from": "npm@10.0.0-pre.0"},
    },
]

BASE_NAV = "- title: npm CLI v6\n  url: /cli/v6\n"


def _write_inputs(tmp_path):
    releases = tmp_path / "releases.json"
    releases.write_text(json.dumps(RELEASES))
    nav = tmp_path / "nav.yml"
    nav.write_text(BASE_NAV)
    return releases, nav


def test_show(tmp_path):
    releases, _ = _write_inputs(tmp_path)
    result = CliRunner().invoke(cli_module.cli, ["show", str(releases)])

    assert result.exit_code == 0
    assert "v6 6.14.18" in result.output
    assert "branch release/v6" in result.output
    assert "v10 10.0.0-pre.0 (prerelease)" in result.output
    assert "tarball" in result.output


class _SkippingImporter:
    def __init__(self, config):
        self.config = config

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def unpack_release(self, release, **kwargs):
        return None


class _FailingImporter(_SkippingImporter):
    async def unpack_release(self, release, **kwargs):
        raise SourceDirectoryNotFound(release.id, ["docs/lib/content", "docs/content"])


def test_import_keeps_skipped_records(tmp_path, monkeypatch):
    releases, nav = _write_inputs(tmp_path)
    output = tmp_path / "out.json"
    monkeypatch.setattr(cli_module, "ReleaseImporter", _SkippingImporter)

    result = CliRunner().invoke(
        cli_module.cli,
        ["import", str(releases), "--base-nav", str(nav), "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert "Imported 0/2 releases" in result.output
    records = json.loads(output.read_text())
    assert [r["id"] for r in records] == ["v6", "v10"]
    assert records[0]["resolved"] == "abc"
    assert records[1]["manifest"]["_from"] == "npm@10.0.0-pre.0"


def test_import_error_exits_nonzero(tmp_path, monkeypatch):
    releases, nav = _write_inputs(tmp_path)
    monkeypatch.setattr(cli_module, "ReleaseImporter", _FailingImporter)

    result = CliRunner().invoke(cli_module.cli, ["import", str(releases), "--base-nav", str(nav)])

    assert result.exit_code == 1
    assert "SOURCE_DIRECTORY_NOT_FOUND" in result.output


class _FailingAfterFirstImporter(_SkippingImporter):
    async def unpack_release(self, release, **kwargs):
        if release.id != "v6":
            raise SourceDirectoryNotFound(release.id, ["docs/lib/content", "docs/content"])
        return ImportResult.model_validate({**dict(release), "resolved": "def456", "nav": []})


def test_import_error_keeps_finished_records(tmp_path, monkeypatch):
    releases, nav = _write_inputs(tmp_path)
    output = tmp_path / "out.json"
    monkeypatch.setattr(cli_module, "ReleaseImporter", _FailingAfterFirstImporter)

    result = CliRunner().invoke(
        cli_module.cli,
        ["import", str(releases), "--base-nav", str(nav), "--output", str(output)],
    )

    assert result.exit_code == 1
    records = json.loads(output.read_text())
    assert [r["id"] for r in records] == ["v6", "v10"]
    assert records[0]["resolved"] == "def456"
    assert records[0]["nav"] == []
    assert records[1]["manifest"]["_from"] == "npm@10.0.0-pre.0"
