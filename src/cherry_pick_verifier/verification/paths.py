"""
Ignored Path Filtering
"""

from typing import List, Optional, Sequence


def is_ignored(path: str, ignored_paths: Sequence[str]) -> bool:
    """
    Check whether a changed file should be left out of verification.
    
    Entries ending with ``/`` match every path below that directory;
    other entries must equal the path exactly.
    """
    for ignored in ignored_paths:
        if ignored.endswith('/'):
            if path.startswith(ignored):
                return True
        elif path == ignored:
            return True
    return False


def parse_ignored_paths(raw: Optional[str]) -> List[str]:
    """Split a comma-separated ignore option, dropping blank entries."""
    if not raw:
        return []
    return [entry.strip() for entry in raw.split(',') if entry.strip()]
