"""
GitHub Integration Layer

This module provides GitHub API access for pull request lookup,
commit range comparison and unified diff patch parsing.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import extract_changes

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'extract_changes']
