"""Next tag computation.

Final releases bump the baseline. Pre-releases either start a new RC line off the
baseline (1.2.3 + minor on feature/x → 1.3.0-rc-feature-x.0) or, when the branch
already has an RC tag, bump only that tag's counter (→ 1.3.0-rc-feature-x.1).
"""

from collections.abc import Iterable

import semver

from prtag.branches import rc_identifier
from prtag.errors import VersionResolutionError
from prtag.models import BranchRule, BumpKind, ResolvedVersion, Tag
from prtag.tags import canonical, find_existing_rc, find_last_full_release, parse_version


def _parse(name: str, what: str) -> semver.Version:
    version = parse_version(name.strip().removeprefix("v"))
    if version is None:
        raise VersionResolutionError(f"Cannot increment {what} '{name}': not a semantic version")
    return version


def _bump(version: semver.Version, bump: BumpKind) -> semver.Version:
    match bump:
        case "major":
            return version.bump_major()
        case "minor":
            return version.bump_minor()
        case "patch":
            return version.bump_patch()
        case _:
            raise VersionResolutionError(f"Bump kind '{bump}' does not produce a version")


def _bump_prerelease(version: semver.Version) -> semver.Version:
    """Increment the last numeric pre-release identifier, appending .0 if there is none."""
    if not version.prerelease:
        return version.bump_patch().replace(prerelease="0")
    parts = version.prerelease.split(".")
    for i in range(len(parts) - 1, -1, -1):
        if parts[i].isdigit():
            parts[i] = str(int(parts[i]) + 1)
            break
    else:
        parts.append("0")
    return version.replace(prerelease=".".join(parts), build=None)


def _checked(version: semver.Version) -> str:
    rendered = canonical(version)
    if parse_version(rendered) is None:
        raise VersionResolutionError(f"'{rendered}' is not a valid semantic version")
    return rendered


def resolve(
    baseline: str,
    bump: BumpKind,
    is_prerelease: bool,
    branch: str,
    existing_rc: Tag | None = None,
) -> str:
    """Return the next tag name.

    Raises VersionResolutionError for a malformed baseline or RC tag, for a
    branch whose RC identifier is not a legal pre-release identifier, and for
    the chore bump kind.
    """
    if is_prerelease:
        if existing_rc is not None:
            return _checked(_bump_prerelease(_parse(existing_rc.name, "RC tag")))
        bumped = _bump(_parse(baseline, "baseline"), bump)
        return _checked(bumped.replace(prerelease=f"{rc_identifier(branch)}.0"))
    return _checked(_bump(_parse(baseline, "baseline"), bump))


def resolve_next_version(
    tags: Iterable[Tag],
    rule: BranchRule,
    branch: str,
    is_prerelease: bool,
) -> ResolvedVersion:
    """Scan tags and resolve the next version for branch."""
    tags = list(tags)
    baseline = find_last_full_release(tags)
    existing_rc = find_existing_rc(tags, branch) if is_prerelease else None
    tag_name = resolve(baseline, rule.bump, is_prerelease, branch, existing_rc)
    return ResolvedVersion(
        tag_name=tag_name,
        is_prerelease=is_prerelease,
        baseline=baseline,
        existing_rc=existing_rc.name if existing_rc else None,
    )
