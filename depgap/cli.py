"""CLI entry point: depgap.

Subcommands:
    depgap locate src/index.ts             # nearest package.json
    depgap check src/index.ts left-pad     # declared? exit 0 / 1
    depgap missing src/index.ts [--json]   # undeclared external imports
    depgap suggest src/index.ts 3 24       # install hint at line 3, column 24
    depgap install src/index.ts left-pad   # install one or more modules
    depgap install-all src/index.ts        # install everything missing
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from depgap.core.config import Settings
from depgap.core.logging import setup_logging
from depgap.engines.gap_detector import is_installed, offset_of
from depgap.engines.installer import InstallFlow, InstallOutcome
from depgap.exceptions import DepGapError, InstallProcessError
from depgap.services import PackageService


def _read_document(file_path: str) -> str:
    return Path(file_path).read_text(encoding="utf-8", errors="replace")


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--tool", default=None, help="Package manager executable (default: npm)")
@click.option("--manifest-name", default=None, help="Manifest file name (default: package.json)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, tool: str | None, manifest_name: str | None) -> None:
    """depgap: find imports missing from package.json and install them."""
    setup_logging("DEBUG" if verbose else None)
    try:
        settings = Settings.from_env().override(install_tool=tool, manifest_name=manifest_name)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    ctx.obj = PackageService(settings)


@main.command("locate")
@click.argument("path", type=click.Path())
@click.pass_obj
def locate_cmd(service: PackageService, path: str) -> None:
    """Print the manifest nearest to PATH."""
    try:
        click.echo(str(service.locate(path)))
    except DepGapError as exc:
        _fail(exc)


@main.command("check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("module")
@click.pass_obj
def check_cmd(service: PackageService, file: str, module: str) -> None:
    """Exit 0 if MODULE is declared in FILE's manifest, 1 otherwise."""
    try:
        manifest = service.locate(file)
        installed = is_installed(manifest, module)
    except DepGapError as exc:
        _fail(exc)
        return
    if installed:
        click.echo(f"{module} is declared in {manifest}")
        return
    click.echo(f"Package {module} is not installed.")
    sys.exit(1)


@main.command("missing")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def missing_cmd(service: PackageService, file: str, as_json: bool) -> None:
    """List external imports of FILE that its manifest does not declare."""
    try:
        report = service.missing(file, _read_document(file))
    except DepGapError as exc:
        _fail(exc)
        return

    if as_json:
        click.echo(json.dumps({"manifest": str(report.manifest_path), "missing": report.names}, indent=2))
        return
    if not report.names:
        click.echo("All imported modules are already installed.")
        return
    click.echo(f"{len(report.names)} missing from {report.manifest_path}:")
    for name in report.names:
        click.echo(f"  {name}")


@main.command("suggest")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("line", type=int)
@click.argument("column", type=int)
@click.pass_obj
def suggest_cmd(service: PackageService, file: str, line: int, column: int) -> None:
    """Show the install hint for the import string at LINE:COLUMN (1-based)."""
    text = _read_document(file)
    try:
        offset = offset_of(text, line, column)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    try:
        suggestion = service.suggest(file, text, offset)
    except DepGapError as exc:
        _fail(exc)
        return
    if suggestion is None:
        click.echo("Nothing to install here.")
        return
    click.echo(suggestion.message)
    click.echo(f"  -> {suggestion.title} (depgap install {file} {suggestion.module_name})")


def _install_with_retry(flow: InstallFlow, retry: bool) -> InstallOutcome | None:
    """Run *flow*, one event loop per attempt; the retry prompt runs between loops."""
    while True:
        try:
            return asyncio.run(flow.run())
        except InstallProcessError as exc:
            click.echo(f"Failed to install {', '.join(flow.names)}: {exc.message}", err=True)
            if not (retry and flow.can_retry and click.confirm("Retry?", default=False)):
                return None


@main.command("install")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("modules", nargs=-1, required=True)
@click.option("--retry/--no-retry", default=True, help="Offer a retry after a failed install")
@click.pass_obj
def install_cmd(service: PackageService, file: str, modules: tuple[str, ...], retry: bool) -> None:
    """Install MODULES into the project that contains FILE."""
    try:
        manifest = service.locate(file)
    except DepGapError as exc:
        _fail(exc)
        return

    flow = InstallFlow(service.installer, list(modules), manifest.parent)
    outcome = _install_with_retry(flow, retry)
    if outcome is None:
        sys.exit(1)
    click.echo(f"Successfully installed {', '.join(outcome.names)}!")


@main.command("install-all")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def install_all_cmd(service: PackageService, file: str, yes: bool, as_json: bool) -> None:
    """Install every undeclared external import of FILE."""
    try:
        report = service.missing(file, _read_document(file))
    except DepGapError as exc:
        _fail(exc)
        return

    installed: list[str] = []
    if report.names:
        if not yes and not click.confirm(f"Install {', '.join(report.names)}?", default=True):
            click.echo("Nothing installed.")
            return
        try:
            outcome = asyncio.run(service.installer.install(report.names, report.manifest_path.parent))
        except InstallProcessError as exc:
            click.echo(f"Failed to install dependencies: {exc.message}", err=True)
            sys.exit(1)
        installed = outcome.names

    if as_json:
        click.echo(json.dumps({"manifest": str(report.manifest_path), "installed": installed}, indent=2))
    elif not installed:
        click.echo("All imported modules are already installed.")
    else:
        click.echo(f"Successfully installed {', '.join(installed)}")


if __name__ == "__main__":
    main()
