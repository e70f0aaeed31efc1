"""
Cherry-Pick Verifier

Upstream 릴리스 구간의 변경사항이 cherry-pick PR에 반영되었는지 검증하는 도구
"""

__version__ = "1.0.0"

from .verifier import CherryPickVerifier

__all__ = ["CherryPickVerifier"]
