"""CLI entry point: depaudit.

    depaudit analyze [PROJECT_PATH]          # human-readable report
    depaudit analyze . --dev --json          # include devDependencies, JSON output
    depaudit analyze . --exclude vendor      # skip extra directories

Results are advisory; nothing is uninstalled.
"""

from __future__ import annotations

import json
import sys

import click

from depaudit.analyzer import analyze
from depaudit.config import AnalyzerConfig
from depaudit.core.logging import setup_logging
from depaudit.exceptions import ManifestError
from depaudit.models import AnalysisResult
from depaudit.sizes import format_size


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """depaudit: find declared dependencies that source code never imports."""
    setup_logging("DEBUG" if verbose else None)


@main.command("analyze")
@click.argument("project_path", default=".", type=click.Path(file_okay=False))
@click.option("-d", "--dev", is_flag=True, help="Include devDependencies")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--exclude", multiple=True, help="Extra directory name to skip (repeatable)")
def analyze_cmd(
    project_path: str,
    dev: bool,
    as_json: bool,
    exclude: tuple[str, ...],
) -> None:
    """Report used and unused dependencies of PROJECT_PATH."""
    config = AnalyzerConfig.from_env(extra_excludes=list(exclude))
    try:
        result = analyze(project_path, include_dev=dev or None, config=config)
    except ManifestError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    _print_report(result)


def _print_report(result: AnalysisResult) -> None:
    scope = "dependencies + devDependencies" if result.includes_dev_dependencies else "dependencies"
    click.echo(f"Dependency analysis ({scope})\n")

    click.echo(f"Used ({len(result.used)}):")
    for name in result.used:
        click.echo(f"  + {_describe(result, name)}")

    click.echo(f"\nUnused ({len(result.unused)}):")
    for name in result.unused:
        click.echo(f"  - {_describe(result, name)}")
    if result.unused:
        total = sum(result.package_details[n].size_bytes for n in result.unused)
        click.echo(f"\n  {format_size(total)} in unused packages (verify before removing)")

    if result.errors:
        click.echo(f"\nWarnings ({len(result.errors)}):")
        for err in result.errors:
            click.echo(f"  ! {err}")


def _describe(result: AnalysisResult, name: str) -> str:
    detail = result.package_details[name]
    version = detail.version if detail.version_source == "installed" else f"{detail.version} (declared)"
    return f"{name} {version} [{format_size(detail.size_bytes)}]"
