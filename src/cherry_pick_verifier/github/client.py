"""
GitHub API Client

Handles GitHub API authentication, rate limit tracking, and communication.
Provides methods for pull request lookup, issue comments, commit range
comparison and file content retrieval.
"""

import base64
import time
import logging
from typing import Dict, List, Optional
from datetime import datetime
from urllib.parse import quote
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.github import CompareFile, PullRequestInfo


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication and error handling.

    Provides methods for:
    - Pull request lookup by head branch
    - Listing and creating PR (issue) comments
    - Comparing two refs and reading file contents
    - Listing releases
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: int = 30,
        max_retries: int = 0,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
            max_retries: Retries for transient failures (default: none)
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            # hand exhausted-retry responses back to _make_request
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'Cherry-Pick-Verifier/1.0'
        })

        return session

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429:
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _get_paginated(self, endpoint: str, params: Optional[Dict] = None, per_page: int = 100) -> List[Dict]:
        """Collect every page of a list endpoint."""
        items = []
        page = 1

        while True:
            page_params = dict(params or {})
            page_params.update({'page': page, 'per_page': per_page})
            response = self._make_request('GET', endpoint, params=page_params)

            page_items = response.json()
            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < per_page:
                break

            page += 1

        return items

    def find_pull_requests(self, owner: str, repo: str, branch: str, state: str = "open") -> List[PullRequestInfo]:
        """
        List pull requests whose head is the given branch.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Head branch name (without owner prefix)
            state: Pull request state filter

        Returns:
            Matching pull requests in API order
        """
        logger.info(f"Looking up {state} PRs for {owner}/{repo} with head {owner}:{branch}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/pulls',
            params={'head': f'{owner}:{branch}', 'state': state, 'per_page': 10}
        )
        return [PullRequestInfo.from_api(item) for item in response.json()]

    def list_issue_comments(self, owner: str, repo: str, number: int) -> List[Dict]:
        """
        Get all comments on an issue or pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Issue or pull request number

        Returns:
            Comment data in chronological order
        """
        logger.info(f"Fetching comments for {owner}/{repo}#{number}")

        comments = self._get_paginated(f'/repos/{owner}/{repo}/issues/{number}/comments')
        logger.info(f"Found {len(comments)} comments")
        return comments

    def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> Dict:
        """
        Post a new comment on an issue or pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Issue or pull request number
            body: Markdown comment body

        Returns:
            Created comment data
        """
        logger.info(f"Posting comment to {owner}/{repo}#{number} ({len(body)} chars)")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{number}/comments',
            json={'body': body}
        )
        return response.json()

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> List[CompareFile]:
        """
        Get the files changed between two refs.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Base ref (tag, branch or SHA)
            head: Head ref (tag, branch or SHA)

        Returns:
            Changed files in API order
        """
        logger.info(f"Comparing {owner}/{repo} {base}...{head}")

        # only commits are paginated; files (up to 300) come with the first page
        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/compare/{quote(base, safe="")}...{quote(head, safe="")}'
        )
        files = response.json().get('files') or []

        logger.info(f"Found {len(files)} changed files")
        return [CompareFile.from_api(item) for item in files]

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """
        Read a file's content at a given ref.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository
            ref: Tag, branch or SHA

        Returns:
            Decoded file content

        Raises:
            GitHubAPIError: If the path does not exist or is not a file
        """
        logger.debug(f"Reading {owner}/{repo}/{path}@{ref}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/contents/{quote(path)}',
            params={'ref': ref}
        )
        data = response.json()

        if not isinstance(data, dict) or data.get('type') != 'file':
            raise GitHubAPIError(f"Not a file: {path}", status_code=response.status_code)

        content = data.get('content') or ''
        if data.get('encoding') == 'base64':
            return base64.b64decode(content).decode('utf-8', errors='replace')
        return content

    def list_release_tags(self, owner: str, repo: str) -> List[str]:
        """
        Get tag names of the repository's releases.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            Release tag names in API order
        """
        logger.info(f"Fetching releases for {owner}/{repo}")

        releases = self._get_paginated(f'/repos/{owner}/{repo}/releases')
        return [release['tag_name'] for release in releases if release.get('tag_name')]
