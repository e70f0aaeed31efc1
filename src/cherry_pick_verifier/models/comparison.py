"""
Comparison Data Models

파일 단위 비교 결과 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ComparisonStatus(str, Enum):
    """파일별 검증 상태"""
    MATCHED = "matched"
    PARTIAL = "partial"  # 파일은 있으나 일부 변경사항 누락
    MISSING = "missing"  # PR 브랜치에 파일 없음


@dataclass(frozen=True)
class FileComparison:
    """upstream 변경 파일 하나에 대한 검증 결과"""
    path: str
    status: ComparisonStatus
    diff_summary: str
    additions: int = 0
    deletions: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("Path cannot be empty")
        if not isinstance(self.status, ComparisonStatus):
            # frozen dataclass라 object.__setattr__ 사용
            object.__setattr__(self, "status", ComparisonStatus(self.status))
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @property
    def exists_in_pr(self) -> bool:
        """PR 브랜치에 파일이 존재하는지 여부"""
        return self.status != ComparisonStatus.MISSING

    @property
    def is_matched(self) -> bool:
        return self.status == ComparisonStatus.MATCHED


@dataclass(frozen=True)
class PatchChanges:
    """patch 텍스트에서 추출한 추가/삭제 라인"""
    additions: List[str] = field(default_factory=list)
    deletions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PatchComparison:
    """upstream patch와 PR patch 비교 결과"""
    applied: bool
    summary: str
    missing_additions: List[str] = field(default_factory=list)
    missing_deletions: List[str] = field(default_factory=list)
    extra_additions: List[str] = field(default_factory=list)
