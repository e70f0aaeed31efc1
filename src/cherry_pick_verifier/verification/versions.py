"""
Release Version Extraction

Finds the labelled release versions that the cherry-pick automation
writes into PR comments, e.g.::

    📦 Target Release Version: `v1.4.0`
"""

import logging
from typing import Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)

TARGET_VERSION_LABEL = "📦 Target Release Version:"
PREVIOUS_VERSION_LABEL = "📦 Previous Release Version:"


def extract_version(text: str, label: str) -> Optional[str]:
    """
    Extract the version following ``label`` from free text.
    
    The first line starting with ``label`` wins. A backtick-quoted token
    on that line is returned as-is; otherwise the line's last
    whitespace-separated field is returned.
    
    Args:
        text: Comment body or other free text
        label: Exact line prefix, e.g. ``📦 Target Release Version:``
        
    Returns:
        Version string, or None if no line carries the label
    """
    if not text:
        return None
    
    for line in text.split('\n'):
        if not line.startswith(label):
            continue
        
        parts = line.split('`')
        if len(parts) >= 3:
            return parts[1]
        
        fields = line.split()
        if fields:
            return fields[-1]
    
    return None


def find_version_in_comments(comments: Iterable[Dict], label: str) -> Optional[str]:
    """
    Scan PR comments in order and return the first non-empty version.
    
    Args:
        comments: Comment data from the GitHub API (``body`` key)
        label: Version label to look for
        
    Returns:
        Version string, or None if no comment carries the label
    """
    for comment in comments:
        version = extract_version(comment.get('body') or '', label)
        if version:
            logger.debug(f"Found '{label}' {version} in comment {comment.get('id')}")
            return version
    
    return None


def previous_release_tag(tags: List[str], current_tag: str) -> Optional[str]:
    """
    Return the tag sorted immediately before ``current_tag``.
    
    Tags are ordered lexicographically, so this only works for
    consistently formatted tag names.
    """
    ordered = sorted(tags)
    for i, tag in enumerate(ordered):
        if tag == current_tag and i > 0:
            return ordered[i - 1]
    return None
