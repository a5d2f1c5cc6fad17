"""Branch name classification into bump kinds."""

import re
from collections.abc import Sequence

from prtag.models import BranchRule

# Order matters: the first matching rule wins.
BRANCH_RULES: tuple[BranchRule, ...] = (
    BranchRule(pattern=re.compile(r"^fix/.*"), bump="patch", label="fix"),
    BranchRule(pattern=re.compile(r"^feature/.*"), bump="minor", label="feature"),
    BranchRule(pattern=re.compile(r"^release/.*"), bump="major", label="release"),
    BranchRule(pattern=re.compile(r"^chore/.*"), bump="chore", label="chore"),
)


def classify(branch: str, rules: Sequence[BranchRule] = BRANCH_RULES) -> BranchRule | None:
    """Return the first rule matching branch, or None when the branch is not a release branch."""
    for rule in rules:
        if rule.pattern.match(branch):
            return rule
    return None


def rc_identifier(branch: str) -> str:
    """Pre-release identifier for a branch.

    feature/login → rc-feature-login. Only the first "/" is replaced.
    """
    return "rc-" + branch.replace("/", "-", 1)
