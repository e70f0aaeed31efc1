"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Dict, Any, List, Tuple
from pathlib import Path
import logging

from .errors import ConfigurationError
from .verification.paths import parse_ignored_paths
from .verification.versions import TARGET_VERSION_LABEL, PREVIOUS_VERSION_LABEL


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    max_retries: int = 0
    repository: Optional[str] = None  # 'owner/name' (GITHUB_REPOSITORY)


@dataclass
class UpstreamConfig:
    """Upstream 저장소 설정"""
    owner: str = ""
    repo: str = ""


@dataclass
class VerificationConfig:
    """검증 동작 설정"""
    base_branch: str = "main"
    pr_branch: str = "auto-cherry-pick"
    ignored_paths: List[str] = field(default_factory=list)
    target_version_label: str = TARGET_VERSION_LABEL
    previous_version_label: str = PREVIOUS_VERSION_LABEL
    previous_from_releases: bool = False


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    verification: VerificationConfig = field(default_factory=VerificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        try:
            timeout_seconds = int(os.getenv("GITHUB_TIMEOUT", "30"))
            max_retries = int(os.getenv("GITHUB_MAX_RETRIES", "0"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting in environment: {e}") from e

        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=timeout_seconds,
                max_retries=max_retries,
                repository=os.getenv("GITHUB_REPOSITORY"),
            ),
            upstream=UpstreamConfig(
                owner=os.getenv("UPSTREAM_OWNER", ""),
                repo=os.getenv("UPSTREAM_REPO", ""),
            ),
            verification=VerificationConfig(
                base_branch=os.getenv("BASE_BRANCH", "main"),
                pr_branch=os.getenv("PR_BRANCH", "auto-cherry-pick"),
                ignored_paths=parse_ignored_paths(os.getenv("IGNORED_PATHS")),
                target_version_label=os.getenv("TARGET_VERSION_LABEL", TARGET_VERSION_LABEL),
                previous_version_label=os.getenv("PREVIOUS_VERSION_LABEL", PREVIOUS_VERSION_LABEL),
                previous_from_releases=os.getenv("PREVIOUS_FROM_RELEASES", "false").lower() == "true",
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
            ),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드 (지정하지 않은 값은 환경 변수 기준)"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        base = cls.from_env()
        try:
            verification_data = dict(config_data.get('verification') or {})
            # 쉼표로 구분된 문자열도 허용
            if isinstance(verification_data.get('ignored_paths'), str):
                verification_data['ignored_paths'] = parse_ignored_paths(verification_data['ignored_paths'])

            return cls(
                github=replace(base.github, **(config_data.get('github') or {})),
                upstream=replace(base.upstream, **(config_data.get('upstream') or {})),
                verification=replace(base.verification, **verification_data),
                logging=replace(base.logging, **(config_data.get('logging') or {})),
            )
        except (TypeError, ValueError) as e:
            # 알 수 없는 키 또는 매핑이 아닌 섹션
            raise ConfigurationError(f"Invalid config in {config_path}: {e}") from e

    def with_overrides(self, **kwargs) -> "AppConfig":
        """'section.field' 키로 일부 값을 덮어쓴 새 설정 반환 (None 값은 무시)"""
        sections = {f.name: getattr(self, f.name) for f in fields(self)}

        for key, value in kwargs.items():
            if value is None:
                continue
            section, field_name = key.split('.', 1)
            if section not in sections:
                raise KeyError(f"Unknown config section: {section}")
            sections[section] = replace(sections[section], **{field_name: value})

        return AppConfig(**sections)

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 토큰 필수 확인
        if not self.github.token:
            errors.append("GITHUB_TOKEN not provided")

        if not self.upstream.owner or not self.upstream.repo:
            errors.append("Upstream owner and repo are required")

        if not self.verification.pr_branch:
            errors.append("PR branch is required")

        if not isinstance(self.github.timeout_seconds, int) or self.github.timeout_seconds <= 0:
            errors.append("Timeout must be a positive integer")

        if not isinstance(self.github.max_retries, int) or self.github.max_retries < 0:
            errors.append("Max retries must be a non-negative integer")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                'max_retries': self.github.max_retries,
                'repository': self.github.repository,
                # 보안상 토큰은 제외
            },
            'upstream': {
                'owner': self.upstream.owner,
                'repo': self.upstream.repo,
            },
            'verification': {
                'base_branch': self.verification.base_branch,
                'pr_branch': self.verification.pr_branch,
                'ignored_paths': list(self.verification.ignored_paths),
                'target_version_label': self.verification.target_version_label,
                'previous_version_label': self.verification.previous_version_label,
                'previous_from_releases': self.verification.previous_from_releases,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
        }


def parse_repository(full_name: Optional[str]) -> Tuple[str, str]:
    """'owner/name' 형식의 저장소 식별자를 분리"""
    parts = (full_name or "").split('/')
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(f"Invalid GITHUB_REPOSITORY format: {full_name}")
    return parts[0], parts[1]


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))

        # 루트 로거에 핸들러 추가
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
