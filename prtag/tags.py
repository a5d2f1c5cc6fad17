"""Scan existing tag history for the release baseline and branch RC tags.

Tag order is significant. The GitHub tags endpoint lists the newest tags first,
so the last full release is the FIRST full-release tag in the given order, not
the highest semantic version. Reordering the same tags can change the baseline.
"""

from collections.abc import Iterable

import semver

from prtag.branches import rc_identifier
from prtag.models import Tag

DEFAULT_BASELINE = "0.0.0"


def parse_version(name: str) -> semver.Version | None:
    try:
        return semver.Version.parse(name)
    except (ValueError, TypeError):
        return None


def canonical(version: semver.Version) -> str:
    """Serialize without build metadata, the way the version compares."""
    return str(version.replace(build=None))


def is_full_release(name: str) -> bool:
    """True for canonical, non-pre-release versions (1.2.3 but not v1.2.3, 1.2.3-rc.1 or 1.2.3+b1)."""
    version = parse_version(name)
    if version is None or version.prerelease:
        return False
    return canonical(version) == name


def find_last_full_release(tags: Iterable[Tag]) -> str:
    for tag in tags:
        if is_full_release(tag.name):
            return tag.name
    return DEFAULT_BASELINE


def find_existing_rc(tags: Iterable[Tag], branch: str) -> Tag | None:
    """Return the first tag whose name contains the branch's RC identifier."""
    identifier = rc_identifier(branch)
    for tag in tags:
        if identifier in tag.name:
            return tag
    return None
