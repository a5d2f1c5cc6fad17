"""prtag CLI: all commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from prtag.branches import classify, rc_identifier
from prtag.errors import ConfigError
from prtag.events import load_event
from prtag.models import Tag
from prtag.providers.base import ReleaseProvider
from prtag.providers.github import GitHubProvider
from prtag.resolver import resolve_next_version
from prtag.runner import run
from prtag.settings import CONFIG_PATH, PrtagSettings, get_settings

app = typer.Typer(help="prtag: release and release-candidate tags from pull request branches", no_args_is_help=True)


def get_provider(settings: PrtagSettings) -> ReleaseProvider:
    return GitHubProvider(settings)


def _fail(message: str) -> typer.Exit:
    rprint(f"[red]{escape(message)}[/red]")
    return typer.Exit(1)


@app.command("run")
def run_cmd(
    event_name: Annotated[
        str | None,
        typer.Option("--event-name", help="Webhook event name (default: $GITHUB_EVENT_NAME)"),
    ] = None,
    event_path: Annotated[
        Path | None,
        typer.Option("--event-path", help="Webhook payload JSON file (default: $GITHUB_EVENT_PATH)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Resolve the tag without creating releases, labels or comments"),
    ] = False,
) -> None:
    """Handle the current pull request event (GitHub Actions entry point)."""
    try:
        settings = get_settings(event_name=event_name, event_path=event_path)
        if not settings.event_name or not settings.event_path:
            raise ConfigError(
                "No event to handle. Set GITHUB_EVENT_NAME and GITHUB_EVENT_PATH or pass --event-name/--event-path."
            )
        event = load_event(settings.event_name, settings.event_path)
        outcome = run(event, get_provider(settings), settings, dry_run=dry_run)
    except Exception as exc:
        raise _fail(str(exc) or exc.__class__.__name__) from exc

    match outcome.status:
        case "released":
            kind = "Pre-release" if outcome.resolved.is_prerelease else "Release"  # type: ignore[union-attr]
            rprint(f"[green]✓[/green] {kind} [bold]{outcome.resolved.tag_name}[/bold] created")  # type: ignore[union-attr]
        case "dry-run":
            rprint(f"[dim](dry run)[/dim] next tag: [bold]{outcome.resolved.tag_name}[/bold]")  # type: ignore[union-attr]
        case "labeled":
            rprint(f"[green]✓[/green] PR #{outcome.pr_number} labeled {outcome.reason or '(no label)'}")
        case _:
            rprint(f"[dim]Nothing to do: {outcome.reason}[/dim]")


@app.command("next-tag")
def next_tag(
    branch: Annotated[str, typer.Argument(help="Head branch, e.g. feature/login")],
    pre_release: Annotated[
        bool,
        typer.Option("--pre-release", "-p", help="Resolve a release candidate instead of a release"),
    ] = False,
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Existing tag, newest first (repeatable). Default: the repository's tags"),
    ] = None,
) -> None:
    """Print the tag a PR from BRANCH would get."""
    rule = classify(branch)
    if rule is None:
        rprint(f"[yellow]Branch '{branch}' does not match a release pattern, no tag.[/yellow]")
        return
    if rule.bump == "chore":
        rprint(f"[dim]Chore branch '{branch}', no tag.[/dim]")
        return

    try:
        if tags:
            existing = [Tag(name=name) for name in tags]
        else:
            settings = get_settings()
            existing = get_provider(settings).list_tags(settings.tags_per_page)
        resolved = resolve_next_version(existing, rule, branch, pre_release)
    except Exception as exc:
        raise _fail(str(exc)) from exc

    typer.echo(resolved.tag_name)


@app.command("classify")
def classify_cmd(
    branch: Annotated[str, typer.Argument(help="Head branch, e.g. fix/null-check")],
) -> None:
    """Show how a branch name is classified."""
    rule = classify(branch)
    if rule is None:
        rprint(f"[yellow]Branch '{branch}' does not match a release pattern.[/yellow]")
        raise typer.Exit(1)

    table = Table(title=branch)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Pattern", rule.pattern.pattern)
    table.add_row("Bump", rule.bump)
    table.add_row("Label", rule.label)
    table.add_row("RC identifier", rc_identifier(branch) if rule.bump != "chore" else "[dim](no release)[/dim]")
    rprint(table)


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration (masks credentials)."""
    try:
        settings = get_settings(require_credentials=False)
    except Exception as exc:
        raise _fail(str(exc)) from exc

    def mask(val: str | None, prefix: str = "") -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"{prefix}...{val[-5:]}"

    def show(val: object) -> str:
        return "[dim](not set)[/dim]" if val is None else str(val)

    table = Table(title="prtag Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("config_file", str(CONFIG_PATH) if CONFIG_PATH.exists() else "[dim](none)[/dim]")
    table.add_row(
        "github_token",
        mask(settings.github_token.get_secret_value() if settings.github_token else None, prefix="ghp_"),
    )
    table.add_row("github_repository", show(settings.github_repository))
    table.add_row("github_api_url", settings.github_api_url)
    table.add_row("event_name", show(settings.event_name))
    table.add_row("event_path", show(settings.event_path))
    table.add_row("output_path", show(settings.output_path))
    table.add_row("base_branches", ", ".join(settings.base_branches))
    table.add_row("trigger_phrase", settings.trigger_phrase)
    table.add_row("tags_per_page", str(settings.tags_per_page))

    rprint(table)
