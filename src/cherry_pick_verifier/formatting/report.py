"""
Verification Report Formatter

Renders per-file comparison results as a markdown PR comment.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from ..models.comparison import ComparisonStatus, FileComparison


logger = logging.getLogger(__name__)

PERFECT = "PERFECT"
PARTIAL = "PARTIAL"
INCOMPLETE = "INCOMPLETE"


@dataclass
class ReportSummary:
    """Aggregate counts for a report."""
    total_files: int
    files_in_pr: int
    files_matched: int


def summarize(comparisons: Sequence[FileComparison]) -> ReportSummary:
    """Count total, present-in-PR and matched files."""
    return ReportSummary(
        total_files=len(comparisons),
        files_in_pr=sum(1 for c in comparisons if c.exists_in_pr),
        files_matched=sum(1 for c in comparisons if c.is_matched),
    )


def overall_status(comparisons: Sequence[FileComparison]) -> str:
    """
    Overall verdict for a set of comparisons.
    
    PERFECT when every file matched, PARTIAL when every file is present
    but some changes are missing, INCOMPLETE otherwise.
    """
    summary = summarize(comparisons)
    if summary.files_matched == summary.total_files:
        return PERFECT
    if summary.files_in_pr == summary.total_files:
        return PARTIAL
    return INCOMPLETE


def _render_file(comparison: FileComparison) -> List[str]:
    lines = [
        f"#### `{comparison.path}`",
        "- **Upstream has changes:** ✅ Yes",
    ]
    
    if comparison.status == ComparisonStatus.MISSING:
        lines.append("- **File exists in PR:** ❌ No")
        lines.append(f"- **Status:** 🔴 Missing - {comparison.diff_summary}")
    elif comparison.status == ComparisonStatus.MATCHED:
        lines.append("- **File exists in PR:** ✅ Yes")
        lines.append("- **Changes match:** ✅ Yes")
        lines.append(f"- **Status:** 🟢 Perfect - {comparison.diff_summary}")
    else:
        lines.append("- **File exists in PR:** ✅ Yes")
        lines.append("- **Changes match:** ❌ No")
        lines.append(f"- **Status:** 🟡 Partial - {comparison.diff_summary}")
    
    lines.append("")
    return lines


def render_report(target_version: str, previous_version: str, comparisons: Sequence[FileComparison]) -> str:
    """
    Render the cherry-pick verification report.
    
    Args:
        target_version: Upstream tag the PR should be ported up to
        previous_version: Upstream tag the range starts from
        comparisons: Per-file results in upstream diff order
        
    Returns:
        Markdown comment body
    """
    logger.info(f"Rendering report for {len(comparisons)} files")
    
    body_parts = [
        "## 🔍 Cherry-Pick Verification Report",
        f"📦 **Upstream Changes:** `{previous_version}...{target_version}`",
        "",
        "### 📋 **File-by-File Analysis:**",
        "",
    ]
    
    for comparison in comparisons:
        body_parts.extend(_render_file(comparison))
    
    summary = summarize(comparisons)
    body_parts.extend([
        "---",
        "### 📊 **Summary:**",
        f"- **Total files changed upstream:** {summary.total_files}",
        f"- **Files present in PR:** {summary.files_in_pr}/{summary.total_files}",
        f"- **Files with matching changes:** {summary.files_matched}/{summary.files_in_pr}",
        "",
    ])
    
    status = overall_status(comparisons)
    if status == PERFECT:
        body_parts.append("🎉 **Overall Status:** ✅ **PERFECT** - All upstream changes successfully applied!")
    elif status == PARTIAL:
        body_parts.append("⚠️ **Overall Status:** 🟡 **PARTIAL** - All files present but some changes missing")
    else:
        body_parts.append("❌ **Overall Status:** 🔴 **INCOMPLETE** - Missing files or changes")
    
    return '\n'.join(body_parts)
