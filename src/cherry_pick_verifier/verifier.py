"""
Cherry-Pick Verifier

Main interface that orchestrates a verification run, from locating the
cherry-pick PR to posting the markdown report as a PR comment.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import click

from .config import AppConfig, parse_repository
from .errors import (
    LookupNotFoundError,
    ReportDeliveryError,
    UpstreamCompareError,
)
from .formatting.report import overall_status, render_report, summarize
from .github.client import GitHubAPIError, GitHubClient
from .github.parser import index_patches
from .models.comparison import ComparisonStatus, FileComparison
from .models.github import CompareFile, PullRequestInfo
from .models.result import FileComparisonRecord, VerificationResult
from .verification.comparator import compare_patches
from .verification.paths import is_ignored
from .verification.versions import find_version_in_comments, previous_release_tag


logger = logging.getLogger(__name__)


class CherryPickVerifier:
    """
    Cherry-pick PR verification workflow.

    Runs strictly in sequence:
    1. Locate the open PR for the configured cherry-pick branch
    2. Read target and previous release versions from its comments
    3. Compare the upstream version range
    4. Check every changed file against the PR branch
    5. Render the report and post it as a PR comment
    """

    def __init__(
        self,
        config: AppConfig,
        client: Optional[GitHubClient] = None,
        echo: Callable[[str], None] = click.echo,
    ):
        """
        Initialize verifier.

        Args:
            config: Application configuration
            client: Optional GitHub client (created from config when omitted)
            echo: Console output function
        """
        self.config = config
        self._client = client
        self.echo = echo
        self._pr_patches: Optional[Dict[str, str]] = None

    @property
    def client(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient(
                self.config.github.token,
                base_url=self.config.github.api_base_url,
                timeout=self.config.github.timeout_seconds,
                max_retries=self.config.github.max_retries,
            )
        return self._client

    def run(self, dry_run: bool = False) -> VerificationResult:
        """
        Execute a full verification run.

        Args:
            dry_run: Render and print the report without posting it

        Returns:
            VerificationResult for the run

        Raises:
            VerificationError: On any fatal condition
        """
        self.config.validate()
        owner, repo = parse_repository(self.config.github.repository)
        self._pr_patches = None

        branch = self.config.verification.pr_branch
        self.echo(f"🔍 Looking for PR with branch: {branch} in {owner}/{repo}")
        pr = self.find_pull_request(owner, repo)
        self.echo(f"🔍 Using PR head SHA: {pr.head_sha}")

        target_version, previous_version = self.resolve_versions(owner, repo, pr)
        self.echo(f"🔍 Comparing {previous_version}...{target_version} from upstream")

        upstream_files = self.fetch_upstream_files(previous_version, target_version)
        comparisons = self.verify_files(owner, repo, pr, upstream_files, target_version)

        report = render_report(target_version, previous_version, comparisons)
        self.echo(report)

        comment_posted = False
        if dry_run:
            self.echo("⚠️ Dry run: verification comment not posted")
        else:
            self.post_report(owner, repo, pr, report)
            comment_posted = True
            self.echo("✅ Verification comment posted to PR successfully")

        summary = summarize(comparisons)
        return VerificationResult(
            repository=f"{owner}/{repo}",
            pr_number=pr.number,
            target_version=target_version,
            previous_version=previous_version,
            comparisons=[FileComparisonRecord.from_comparison(c) for c in comparisons],
            total_files=summary.total_files,
            files_in_pr=summary.files_in_pr,
            files_matched=summary.files_matched,
            overall_status=overall_status(comparisons),
            report=report,
            comment_posted=comment_posted,
        )

    def find_pull_request(self, owner: str, repo: str) -> PullRequestInfo:
        """Return the first open PR whose head is the cherry-pick branch."""
        branch = self.config.verification.pr_branch
        try:
            pull_requests = self.client.find_pull_requests(owner, repo, branch, state="open")
        except GitHubAPIError as e:
            raise LookupNotFoundError(f"Unable to locate cherry-pick PR: {e}") from e

        if not pull_requests:
            raise LookupNotFoundError(f"Unable to locate cherry-pick PR: no open PR found for branch {branch}")

        if len(pull_requests) > 1:
            logger.warning(f"{len(pull_requests)} open PRs for {branch}, using #{pull_requests[0].number}")

        return pull_requests[0]

    def resolve_versions(self, owner: str, repo: str, pr: PullRequestInfo) -> Tuple[str, str]:
        """
        Read (target, previous) release versions from the PR comments.

        Raises:
            LookupNotFoundError: If either version cannot be determined
        """
        settings = self.config.verification
        try:
            comments = self.client.list_issue_comments(owner, repo, pr.number)
        except GitHubAPIError as e:
            raise LookupNotFoundError(f"Failed to get PR comments: {e}") from e

        target_version = find_version_in_comments(comments, settings.target_version_label)
        if not target_version:
            raise LookupNotFoundError(
                f"Failed to extract target release version: '{settings.target_version_label}' not found in PR comments"
            )

        previous_version = find_version_in_comments(comments, settings.previous_version_label)
        if not previous_version and settings.previous_from_releases:
            previous_version = self._previous_version_from_releases(target_version)

        if not previous_version:
            raise LookupNotFoundError(
                f"Failed to extract previous release version: '{settings.previous_version_label}' not found in PR comments"
            )

        return target_version, previous_version

    def _previous_version_from_releases(self, target_version: str) -> Optional[str]:
        upstream = self.config.upstream
        logger.info(f"Resolving previous release of {target_version} from {upstream.owner}/{upstream.repo} releases")
        try:
            tags = self.client.list_release_tags(upstream.owner, upstream.repo)
        except GitHubAPIError as e:
            raise LookupNotFoundError(f"Failed to find previous tag: {e}") from e
        return previous_release_tag(tags, target_version)

    def fetch_upstream_files(self, previous_version: str, target_version: str) -> List[CompareFile]:
        """Files changed upstream between the two release versions."""
        upstream = self.config.upstream
        try:
            return self.client.compare_commits(upstream.owner, upstream.repo, previous_version, target_version)
        except GitHubAPIError as e:
            raise UpstreamCompareError(f"Failed to get compare: {e}") from e

    def verify_files(
        self,
        owner: str,
        repo: str,
        pr: PullRequestInfo,
        upstream_files: List[CompareFile],
        target_version: str,
    ) -> List[FileComparison]:
        """
        Compare every non-ignored upstream file with the PR branch.

        Ignored files never enter the result. Files missing on both sides
        are skipped.
        """
        ignored_paths = self.config.verification.ignored_paths
        comparisons = []

        for upstream_file in upstream_files:
            if is_ignored(upstream_file.filename, ignored_paths):
                logger.debug(f"Ignoring {upstream_file.filename}")
                continue

            comparison = self._verify_file(owner, repo, pr, upstream_file, target_version)
            if comparison is not None:
                comparisons.append(comparison)

        logger.info(f"Verified {len(comparisons)} of {len(upstream_files)} upstream files")
        return comparisons

    def _verify_file(
        self,
        owner: str,
        repo: str,
        pr: PullRequestInfo,
        upstream_file: CompareFile,
        target_version: str,
    ) -> Optional[FileComparison]:
        path = upstream_file.filename
        self.echo(f"🔍 Analyzing changes for file: {path}")

        if not upstream_file.patch:
            self.echo(f"⚠️  No patch data for file: {path}")
            return None

        try:
            self.client.get_file_content(owner, repo, path, pr.head_sha)
        except GitHubAPIError as e:
            logger.info(f"{path} not readable at {pr.head_sha}: {e}")
            if not self._exists_upstream(path, target_version):
                self.echo(f"⚠️ File doesn't exist in upstream either, skipping: {path}")
                return None

            return FileComparison(
                path=path,
                status=ComparisonStatus.MISSING,
                diff_summary=(
                    f"File missing in PR (upstream has {upstream_file.additions} additions, "
                    f"{upstream_file.deletions} deletions)"
                ),
                additions=upstream_file.additions,
                deletions=upstream_file.deletions,
            )

        pr_patch = self._pr_patch_for(owner, repo, pr, path)
        result = compare_patches(upstream_file.patch, pr_patch, upstream_file.additions, upstream_file.deletions)

        return FileComparison(
            path=path,
            status=ComparisonStatus.MATCHED if result.applied else ComparisonStatus.PARTIAL,
            diff_summary=result.summary,
            additions=upstream_file.additions,
            deletions=upstream_file.deletions,
        )

    def _exists_upstream(self, path: str, target_version: str) -> bool:
        upstream = self.config.upstream
        try:
            self.client.get_file_content(upstream.owner, upstream.repo, path, target_version)
        except GitHubAPIError:
            return False
        return True

    def _pr_patch_for(self, owner: str, repo: str, pr: PullRequestInfo, path: str) -> str:
        """PR-side patch for ``path``; the base...head compare runs once per run."""
        if self._pr_patches is None:
            base_branch = self.config.verification.base_branch
            try:
                files = self.client.compare_commits(owner, repo, base_branch, pr.head_sha)
                self._pr_patches = index_patches(files)
            except GitHubAPIError as e:
                logger.error(f"Failed to compare {base_branch}...{pr.head_sha}: {e}")
                self._pr_patches = {}

        return self._pr_patches.get(path, "")

    def post_report(self, owner: str, repo: str, pr: PullRequestInfo, report: str) -> None:
        """Post the rendered report as a new PR comment."""
        try:
            self.client.create_issue_comment(owner, repo, pr.number, report)
        except GitHubAPIError as e:
            raise ReportDeliveryError(f"Failed to post comment to PR: {e}") from e
