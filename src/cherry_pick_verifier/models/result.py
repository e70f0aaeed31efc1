"""
Verification Result Models

JSON 출력용 pydantic 모델들
"""

from typing import List

from pydantic import BaseModel, field_validator

from .comparison import FileComparison


class FileComparisonRecord(BaseModel):
    """JSON 출력용 FileComparison 모델"""
    path: str
    status: str
    diff_summary: str
    additions: int = 0
    deletions: int = 0

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in {'matched', 'partial', 'missing'}:
            raise ValueError('Invalid status')
        return v

    @field_validator('additions', 'deletions')
    @classmethod
    def validate_counts(cls, v):
        if v < 0:
            raise ValueError('Counts must be non-negative')
        return v

    @classmethod
    def from_comparison(cls, comparison: FileComparison) -> "FileComparisonRecord":
        return cls(
            path=comparison.path,
            status=comparison.status.value,
            diff_summary=comparison.diff_summary,
            additions=comparison.additions,
            deletions=comparison.deletions,
        )


class VerificationResult(BaseModel):
    """검증 실행 전체 결과"""
    repository: str
    pr_number: int
    target_version: str
    previous_version: str
    comparisons: List[FileComparisonRecord]
    total_files: int
    files_in_pr: int
    files_matched: int
    overall_status: str
    report: str
    comment_posted: bool = False

    @field_validator('repository')
    @classmethod
    def validate_repository(cls, v):
        if '/' not in v:
            raise ValueError('Repository must be in format "owner/repo"')
        return v

    @field_validator('overall_status')
    @classmethod
    def validate_overall_status(cls, v):
        if v not in {'PERFECT', 'PARTIAL', 'INCOMPLETE'}:
            raise ValueError('Invalid overall status')
        return v
