"""Shared pydantic models: the contract between providers, the resolver and main.py."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

BumpKind = Literal["patch", "minor", "major", "chore"]


class BranchRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: re.Pattern[str]
    bump: BumpKind
    label: str  # applied to the PR when it is opened


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str | None = None
    draft: bool = False
    merged: bool = False
    head_ref: str  # source branch
    base_ref: str  # branch merged into


class ReleaseIntent(BaseModel):
    """Everything the resolver and the release builder need from one PR."""

    model_config = ConfigDict(frozen=True)

    branch: str
    is_prerelease: bool
    pr_number: int
    bump: BumpKind
    title: str
    body: str | None
    base_ref: str
    head_ref: str


class ResolvedVersion(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag_name: str
    is_prerelease: bool
    baseline: str  # last full release, or 0.0.0
    existing_rc: str | None = None  # RC tag that was bumped, if any


class ReleaseRequest(BaseModel):
    """Payload for the release sink, field names follow the GitHub API."""

    model_config = ConfigDict(frozen=True)

    tag_name: str
    name: str
    body: str | None
    draft: bool = False
    prerelease: bool
    target_commitish: str


class CommentEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["comment"] = "comment"
    action: str
    issue_number: int
    comment_body: str


class PullRequestEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pull_request"] = "pull_request"
    action: str
    number: int
    pull_request: PullRequest


Event = Annotated[CommentEvent | PullRequestEvent, Field(discriminator="kind")]


class RunOutcome(BaseModel):
    """Returned by run, what happened for one triggering event."""

    model_config = ConfigDict(frozen=True)

    status: Literal["released", "labeled", "skipped", "dry-run"]
    reason: str | None = None
    resolved: ResolvedVersion | None = None
    pr_number: int | None = None
