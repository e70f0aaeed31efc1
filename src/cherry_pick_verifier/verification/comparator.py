"""
Patch Comparator

Decides whether the upstream changes to a file were applied in the
cherry-pick PR by comparing added and removed lines of both patches.
Lines are compared by content with surrounding whitespace stripped,
not by position, since cherry-picks shift line numbers and context.
"""

import logging
from typing import List

from ..github.parser import extract_changes
from ..models.comparison import PatchComparison


logger = logging.getLogger(__name__)


def _unmatched(expected: List[str], actual: List[str]) -> List[str]:
    """Lines of ``expected`` that have no stripped equal in ``actual``."""
    available = {line.strip() for line in actual}
    return [line for line in expected if line.strip() not in available]


def compare_patches(upstream_patch: str, pr_patch: str, additions: int, deletions: int) -> PatchComparison:
    """
    Compare an upstream patch with the PR patch for the same file.

    Args:
        upstream_patch: Patch of the file in the upstream version range
        pr_patch: Patch of the file between the PR base and head
        additions: Upstream addition count, used in the summary
        deletions: Upstream deletion count, used in the summary

    Returns:
        PatchComparison; ``applied`` is True iff every upstream addition and
        deletion appears in the PR patch. Extra PR additions never affect it.
    """
    if not pr_patch:
        return PatchComparison(
            applied=False,
            summary=f"❌ No changes found in PR (0/{additions} additions, 0/{deletions} deletions applied)",
        )

    upstream = extract_changes(upstream_patch)
    pr = extract_changes(pr_patch)

    missing_additions = _unmatched(upstream.additions, pr.additions)
    missing_deletions = _unmatched(upstream.deletions, pr.deletions)
    extra_additions = _unmatched(pr.additions, upstream.additions)

    if not missing_additions and not missing_deletions:
        summary = f"✅ All changes applied correctly (+{additions} -{deletions})"
        if extra_additions:
            summary += f" | {len(extra_additions)} extra additions in PR"
        return PatchComparison(
            applied=True,
            summary=summary,
            extra_additions=extra_additions,
        )

    logger.debug(
        f"Patch mismatch: {len(missing_additions)} missing additions, "
        f"{len(missing_deletions)} missing deletions"
    )

    summary = f"❌ Cherry-pick incomplete (+{additions} -{deletions})"
    if missing_additions:
        summary += f" | Missing {len(missing_additions)} additions"
    if missing_deletions:
        summary += f" | Missing {len(missing_deletions)} deletions"

    return PatchComparison(
        applied=False,
        summary=summary,
        missing_additions=missing_additions,
        missing_deletions=missing_deletions,
        extra_additions=extra_additions,
    )
