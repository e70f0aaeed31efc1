"""
Verification Layer

버전 추출, 경로 필터링, patch 비교 로직
"""

from .comparator import compare_patches
from .paths import is_ignored, parse_ignored_paths
from .versions import extract_version, find_version_in_comments, previous_release_tag

__all__ = [
    'compare_patches',
    'is_ignored',
    'parse_ignored_paths',
    'extract_version',
    'find_version_in_comments',
    'previous_release_tag',
]
