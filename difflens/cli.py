import asyncio
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from difflens.config import DiffLensConfig, load_config
from difflens.diff.parse import diff_stat, parse_unified_diff
from difflens.errors import DiffLensError, InvalidConfigError
from difflens.filters.extensions import parse_extension_filter
from difflens.generation.orchestrator import DiffOrchestrator
from difflens.logging import get_logger, setup_logging
from difflens.repo.git import GitRepository, git_content_provider
from difflens.reporting.render import (
    format_diff_as_markdown,
    render_exclusion_report,
    render_preview,
    render_stat,
)

logger = get_logger(__name__)

app = typer.Typer(no_args_is_help=True)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _with_overrides(config: DiffLensConfig, **overrides) -> DiffLensConfig:
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    try:
        return DiffLensConfig.model_validate(config.model_dump() | updates)
    except ValidationError as e:
        raise InvalidConfigError("command line", e) from e


@app.command("diff")
def diff_cmd(
    from_revision: str = typer.Argument("HEAD", help="Revision to compare from"),
    to_revision: str | None = typer.Option(
        None, "--to", help="Revision to compare to (default: working tree)"
    ),
    context_lines: int | None = typer.Option(
        None, "-U", "--unified", help="Context lines around each change (0-100)"
    ),
    exclude_deletes: bool | None = typer.Option(
        None,
        "--exclude-deletes/--include-deletes",
        help="Drop deleted files from the output",
    ),
    extensions: str | None = typer.Option(
        None, "--ext", help="Extension filter, e.g. 'py,ts' or '**/*.spec.ts'"
    ),
    markdown: bool = typer.Option(False, "--markdown", help="Group files into markdown blocks"),
    preview: bool = typer.Option(False, "--preview", help="Wrap the diff in a preview document"),
    stat: bool = typer.Option(False, "--stat", help="Print a diffstat instead of the diff"),
    report: bool = typer.Option(
        False, "--report", help="Print the excluded files report to stderr"
    ),
    out: Path | None = typer.Option(None, "--out", help="Write output to a file"),
    config_path: Path | None = typer.Option(None, "--config", help="YAML config file"),
    repo: Path = typer.Option(Path("."), "--repo", help="Git work tree"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Generate a unified diff for the changes in a git work tree."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = _with_overrides(
            load_config(config_path),
            context_lines=context_lines,
            exclude_deletes=exclude_deletes,
            file_extensions=extensions,
        )
        rule = config.to_exclusion_rule()

        repository = GitRepository(repo)
        base = repository.resolve_revision(from_revision)
        target = repository.resolve_revision(to_revision) if to_revision else None
        logger.debug("Comparing %s against %s", base, target or "working tree")
        files = repository.list_changes(base, target)

        orchestrator = DiffOrchestrator(
            git_content_provider(repository),
            max_edit_distance=config.max_edit_distance,
        )
        result = asyncio.run(
            orchestrator.generate(
                files,
                rule,
                config.context_lines,
                from_revision=base,
                to_revision=target,
            )
        )
    except DiffLensError as exc:
        raise _fail(str(exc))

    if stat:
        output = render_stat(diff_stat(parse_unified_diff(result.diff)))
    elif markdown:
        output = format_diff_as_markdown(result.diff)
    elif preview:
        output = render_preview(
            result.diff,
            from_revision=base,
            to_revision=target,
            context_lines=config.context_lines,
            exclude_deletes=config.exclude_deletes,
            extension_filter=config.file_extensions,
        )
    else:
        output = result.diff

    if report:
        typer.echo(
            render_exclusion_report(result.exclusions, limit=config.excluded_file_limit),
            err=True,
        )

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(output + "\n", encoding="utf-8")
        typer.echo(f"Diff written to {out} ({len(result.files)} files)")
    else:
        typer.echo(output)


@app.command("patterns")
def patterns_cmd(text: str = typer.Argument(..., help="Extension filter text")):
    """Show the glob patterns an extension filter expands to."""
    try:
        patterns = parse_extension_filter(text)
    except DiffLensError as exc:
        raise _fail(str(exc))
    if not patterns:
        typer.echo("(no filter: all files match)")
    for pattern in patterns:
        typer.echo(pattern)


@app.command("commits")
def commits_cmd(
    count: int = typer.Option(20, "-n", "--max-count", help="Number of commits"),
    repo: Path = typer.Option(Path("."), "--repo", help="Git work tree"),
):
    """List recent commits to pick a comparison base from."""
    try:
        commits = GitRepository(repo).log(max_count=count)
    except DiffLensError as exc:
        raise _fail(str(exc))
    for commit in commits:
        typer.echo(f"{commit.sha[:8]}  {commit.date[:10]}  {commit.author}  {commit.subject}")


@app.callback()
def main():
    """
    DiffLens CLI
    """
    pass
