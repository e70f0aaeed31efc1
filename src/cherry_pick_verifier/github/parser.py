"""
Patch Parser

Parses GitHub unified diff patches into the added and removed
line bodies used for cherry-pick verification.
"""

import logging
from typing import Dict, List

from ..models.comparison import PatchChanges
from ..models.github import CompareFile


logger = logging.getLogger(__name__)


def extract_changes(patch: str) -> PatchChanges:
    """
    Extract added and removed lines from a unified diff patch.
    
    File header markers (``+++``/``---``), hunk headers and context lines
    are ignored. Order and duplicates are preserved.
    
    Args:
        patch: Raw diff patch string
        
    Returns:
        PatchChanges with the leading ``+``/``-`` stripped from each line
    """
    added_lines = []
    removed_lines = []
    
    if not patch:
        return PatchChanges(additions=added_lines, deletions=removed_lines)
    
    for line in patch.split('\n'):
        if line.startswith('+') and not line.startswith('+++'):
            added_lines.append(line[1:])
        elif line.startswith('-') and not line.startswith('---'):
            removed_lines.append(line[1:])
    
    return PatchChanges(additions=added_lines, deletions=removed_lines)


def index_patches(files: List[CompareFile]) -> Dict[str, str]:
    """Map each compared file path to its patch text."""
    patches = {}
    for compare_file in files:
        patches[compare_file.filename] = compare_file.patch
    logger.debug(f"Indexed {len(patches)} patches")
    return patches
