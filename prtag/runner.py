"""One run per webhook event: gate the pull request, resolve the tag, create the release."""

from collections.abc import Sequence
from pathlib import Path

from rich import print as rprint

from prtag.branches import BRANCH_RULES, classify
from prtag.errors import PrtagError, ReleaseCreationError
from prtag.models import BranchRule, CommentEvent, PullRequest, PullRequestEvent, RunOutcome
from prtag.providers.base import ReleaseProvider
from prtag.release import build_intent, build_release_request, opened_hint, release_comment
from prtag.resolver import resolve_next_version
from prtag.settings import PrtagSettings

RELEASE_CREATED = 201


def _info(message: str) -> None:
    rprint(f"[dim]{message}[/dim]")


def _warning(message: str) -> None:
    rprint(f"[yellow]Warning:[/yellow] {message}")


def _skip(reason: str, pr_number: int | None = None, warn: bool = False) -> RunOutcome:
    (_warning if warn else _info)(f"{reason}, skipping")
    return RunOutcome(status="skipped", reason=reason, pr_number=pr_number)


def write_outputs(path: Path, outputs: dict[str, str]) -> None:
    """Append step outputs in the GITHUB_OUTPUT name=value format."""
    with path.open("a", encoding="utf-8") as fh:
        for name, value in outputs.items():
            fh.write(f"{name}={value}\n")


def label_opened_pr(
    provider: ReleaseProvider,
    pr: PullRequest,
    settings: PrtagSettings,
    rules: Sequence[BranchRule] = BRANCH_RULES,
    dry_run: bool = False,
) -> RunOutcome:
    """Label a newly opened PR by branch kind and explain how to request an RC."""
    rule = classify(pr.head_ref, rules)
    if rule is None:
        _warning("branch pattern not expected, skipping label")
    elif not dry_run:
        provider.add_labels(pr.number, [rule.label])
    if not dry_run:
        provider.create_comment(pr.number, opened_hint(settings.trigger_phrase))
    return RunOutcome(status="labeled", reason=rule.label if rule else None, pr_number=pr.number)


def _pull_request_for(
    event: CommentEvent | PullRequestEvent, provider: ReleaseProvider, settings: PrtagSettings
) -> PullRequest | None:
    match event:
        case CommentEvent(action="created", comment_body=body) if settings.trigger_phrase in body:
            return provider.get_pull_request(event.issue_number)
        case PullRequestEvent(action="closed", pull_request=pr) if pr.merged:
            return pr
    return None


def run(
    event: CommentEvent | PullRequestEvent | None,
    provider: ReleaseProvider,
    settings: PrtagSettings,
    rules: Sequence[BranchRule] = BRANCH_RULES,
    dry_run: bool = False,
) -> RunOutcome:
    """Handle one event. Skips return an outcome; failures raise PrtagError."""
    if isinstance(event, PullRequestEvent) and event.action == "opened":
        return label_opened_pr(provider, event.pull_request, settings, rules, dry_run)

    pr = _pull_request_for(event, provider, settings) if event is not None else None
    if pr is None:
        if isinstance(event, PullRequestEvent):
            # Lifecycle events other than a merge are expected noise.
            return RunOutcome(status="skipped", reason=f"pull request {event.action}", pr_number=event.number)
        return _skip("PR not found", warn=True)
    if pr.base_ref not in settings.base_branches:
        return _skip(f"PR not to {' or '.join(settings.base_branches)}", pr.number)
    if pr.draft:
        return _skip("PR is a draft", pr.number)

    rule = classify(pr.head_ref, rules)
    if rule is None:
        return _skip("branch pattern not expected", pr.number, warn=True)
    if rule.bump == "chore":
        return _skip("chore branch", pr.number)

    intent = build_intent(pr, rule)
    tags = provider.list_tags(settings.tags_per_page)
    _info(f"tags: {', '.join(tag.name for tag in tags) or '(none)'}")
    resolved = resolve_next_version(tags, rule, intent.branch, intent.is_prerelease)
    _info(f"baseline: {resolved.baseline}, existing RC: {resolved.existing_rc or '(none)'}")
    _info(f"newTag: {resolved.tag_name}")

    if dry_run:
        return RunOutcome(status="dry-run", resolved=resolved, pr_number=pr.number)

    request = build_release_request(intent, resolved.tag_name)
    status = provider.create_release(request)
    if status != RELEASE_CREATED and pr.number > 0:
        raise ReleaseCreationError(resolved.tag_name, status)

    if settings.output_path:
        write_outputs(
            settings.output_path,
            {"new_tag": resolved.tag_name, "pre_release": str(resolved.is_prerelease).lower()},
        )

    try:
        provider.create_comment(pr.number, release_comment(resolved.tag_name, resolved.is_prerelease))
    except PrtagError as exc:
        _warning(f"release created but comment failed: {exc}")

    return RunOutcome(status="released", resolved=resolved, pr_number=pr.number)
