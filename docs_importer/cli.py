"""CLI interface for importing release docs."""
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List

import click

from .config import ImporterConfig
from .errors import ReleaseImportError
from .importer import ReleaseImporter
from .models import Release
from .navigation import parse_nav

logger = logging.getLogger(__name__)


def load_releases(path: Path) -> List[Release]:
    """Load a JSON list of release records."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [Release.model_validate(item) for item in data]


def write_records(path: Path, records: List[dict]):
    """Write release records as JSON."""
    path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
    click.echo(f"Wrote {path}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Docs importer - pull release documentation into the site content tree."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command("import")
@click.argument("releases_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-nav", required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Site navigation YAML (holds one entry per release)")
@click.option("--content-path", help="Content root (default: DOCS_IMPORT_CONTENT_PATH)")
@click.option("--force", is_flag=True, help="Re-import releases whose resolved value is unchanged")
@click.option("--prerelease", is_flag=True, help="Also import prereleases")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the updated release records as JSON")
def import_releases(
    releases_file: Path,
    base_nav: Path,
    content_path: str,
    force: bool,
    prerelease: bool,
    output: Path,
):
    """Import the docs of every release listed in RELEASES_FILE."""
    config = ImporterConfig.from_env()
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    releases = load_releases(releases_file)
    nav = parse_nav(base_nav.read_text(encoding="utf-8"), str(base_nav)) or []

    records = []

    async def run():
        imported = 0
        async with ReleaseImporter(config) as importer:
            for release in releases:
                result = await importer.unpack_release(
                    release,
                    base_nav=nav,
                    content_path=content_path,
                    force=force,
                    prerelease=prerelease,
                )
                if result is None:
                    records.append(release.to_record())
                else:
                    imported += 1
                    records.append(result.to_record())
        return imported

    try:
        imported = asyncio.run(run())
    except ReleaseImportError as e:
        click.secho(f"Error [{e.code}]: {e.message}", fg="red", err=True)
        if e.suggestion:
            click.echo(f"  {e.suggestion}", err=True)
        if output:
            # Releases not reached keep their previous record
            write_records(output, records + [r.to_record() for r in releases[len(records):]])
        sys.exit(1)

    click.echo(f"Imported {imported}/{len(releases)} releases")

    if output:
        write_records(output, records)


@cli.command("show")
@click.argument("releases_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(releases_file: Path):
    """Show releases with their extraction strategy and last resolved value."""
    releases = load_releases(releases_file)
    if not releases:
        click.echo("No releases found.")
        return

    for release in releases:
        strategy = f"branch {release.branch}" if release.use_branch else "tarball"
        flags = " (prerelease)" if release.prerelease else ""
        click.echo(f"{release.id} {release.version}{flags}")
        click.echo(f"  Source: {strategy}")
        click.echo(f"  URL: {release.url}")
        click.echo(f"  Resolved: {release.resolved or '-'}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
