"""
GitHub Data Models

GitHub API 응답에서 필요한 필드만 추린 데이터 모델들
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class CompareFile:
    """compare API 응답의 파일 항목"""
    filename: str
    status: str
    additions: int
    deletions: int
    patch: str

    def __post_init__(self):
        """데이터 검증"""
        if not self.filename:
            raise ValueError("Filename cannot be empty")
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CompareFile":
        # 바이너리 파일이나 대용량 diff는 patch 필드가 없음
        return cls(
            filename=data["filename"],
            status=data.get("status", "modified"),
            additions=data.get("additions", 0),
            deletions=data.get("deletions", 0),
            patch=data.get("patch") or "",
        )


@dataclass
class PullRequestInfo:
    """검증 대상 Pull Request"""
    number: int
    head_ref: str
    head_sha: str
    base_ref: str
    html_url: str = ""

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequestInfo":
        return cls(
            number=data["number"],
            head_ref=data["head"]["ref"],
            head_sha=data["head"]["sha"],
            base_ref=data.get("base", {}).get("ref", ""),
            html_url=data.get("html_url", ""),
        )
