"""
Cherry-Pick Verifier CLI
"""

import sys
from pathlib import Path

import click

from . import __version__
from .config import AppConfig, setup_logging
from .errors import VerificationError
from .verification.paths import parse_ignored_paths
from .verifier import CherryPickVerifier


@click.command()
@click.version_option(__version__, message="verify-cherry-pick v%(version)s")
@click.option("--upstream-owner", help="Upstream GitHub owner")
@click.option("--upstream-repo", help="Upstream GitHub repo name")
@click.option("--base-branch", help="Base branch name [default: main]")
@click.option("--pr-branch", help="PR branch to verify [default: auto-cherry-pick]")
@click.option("--ignored-paths", help="Comma-separated list of ignored paths")
@click.option("--token", help="GitHub token [default: $GITHUB_TOKEN]")
@click.option("--repository", help="Target repository as owner/name [default: $GITHUB_REPOSITORY]")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
@click.option("--previous-from-releases", is_flag=True,
              help="Resolve the previous version from upstream releases when no comment carries it")
@click.option("--dry-run", is_flag=True, help="Print the report without posting it")
@click.option("--output-json", type=click.Path(dir_okay=False, writable=True),
              help="Write the verification result as JSON")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging level")
def main(upstream_owner, upstream_repo, base_branch, pr_branch, ignored_paths, token, repository,
         config_path, previous_from_releases, dry_run, output_json, log_level):
    """🔍 Verify that a cherry-pick PR carries every upstream change."""
    try:
        config = AppConfig.from_yaml(config_path) if config_path else AppConfig.from_env()
        config = config.with_overrides(**{
            "github.token": token,
            "github.repository": repository,
            "upstream.owner": upstream_owner,
            "upstream.repo": upstream_repo,
            "verification.base_branch": base_branch,
            "verification.pr_branch": pr_branch,
            "verification.ignored_paths": parse_ignored_paths(ignored_paths) if ignored_paths is not None else None,
            "verification.previous_from_releases": previous_from_releases or None,
            "logging.level": log_level.upper() if log_level else None,
        })
        config.validate()
        setup_logging(config.logging)

        result = CherryPickVerifier(config).run(dry_run=dry_run)
    except VerificationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if output_json:
        Path(output_json).write_text(result.model_dump_json(indent=2), encoding="utf-8")
        click.echo(f"📝 Result written to {output_json}")


if __name__ == "__main__":
    main()
