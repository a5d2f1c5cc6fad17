"""Shape resolver output into what the release, label and comment sinks receive."""

from prtag.models import BranchRule, PullRequest, ReleaseIntent, ReleaseRequest

DEFAULT_TRIGGER_PHRASE = "#tag"


def build_intent(pr: PullRequest, rule: BranchRule) -> ReleaseIntent:
    # Open PRs (comment-triggered) get release candidates, merged PRs get releases.
    return ReleaseIntent(
        branch=pr.head_ref,
        is_prerelease=not pr.merged,
        pr_number=pr.number,
        bump=rule.bump,
        title=pr.title,
        body=pr.body,
        base_ref=pr.base_ref,
        head_ref=pr.head_ref,
    )


def build_release_request(intent: ReleaseIntent, tag_name: str) -> ReleaseRequest:
    return ReleaseRequest(
        tag_name=tag_name,
        name=intent.title,
        body=intent.body,
        draft=False,
        prerelease=intent.is_prerelease,
        target_commitish=intent.head_ref if intent.is_prerelease else intent.base_ref,
    )


def release_comment(tag_name: str, is_prerelease: bool) -> str:
    kind = "Pre-release" if is_prerelease else "Release"
    return f":label: {kind} `{tag_name}` created."


def opened_hint(trigger_phrase: str = DEFAULT_TRIGGER_PHRASE) -> str:
    return f"Add a comment including `{trigger_phrase}` to create a release candidate tag."
