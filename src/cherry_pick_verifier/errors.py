"""
Error Taxonomy

검증 실행을 중단시키는 치명적 오류들
"""


class VerificationError(Exception):
    """Base class for errors that abort a verification run."""


class ConfigurationError(VerificationError):
    """Missing token, malformed repository identity or upstream settings."""


class LookupNotFoundError(VerificationError):
    """A required pull request, version or release could not be found."""


class UpstreamCompareError(VerificationError):
    """The upstream version range could not be compared."""


class ReportDeliveryError(VerificationError):
    """The rendered report could not be posted to the pull request."""
