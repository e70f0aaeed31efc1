"""
Data Models

Cherry-pick 검증에 사용하는 핵심 데이터 모델들
"""

from .comparison import ComparisonStatus, FileComparison, PatchChanges, PatchComparison
from .github import CompareFile, PullRequestInfo
from .result import FileComparisonRecord, VerificationResult

__all__ = [
    "ComparisonStatus",
    "FileComparison",
    "PatchChanges",
    "PatchComparison",
    "CompareFile",
    "PullRequestInfo",
    "FileComparisonRecord",
    "VerificationResult",
]
