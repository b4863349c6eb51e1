from typing import List, Optional, Sequence, Tuple

Issue = Tuple[str, str]


class ShortestError(Exception):
    """Base error for shortest"""
    pass


class ConfigValidationError(ShortestError, ValueError):
    """Configuration failed validation.

    Carries every violated constraint as (field path, message) pairs so
    they can all be reported at once.
    """

    def __init__(self, issues: Sequence[Issue]):
        self.issues: List[Issue] = list(issues)

        lines = ["Invalid shortest configuration:"]
        for path, message in self.issues:
            lines.append(f"  - {path}: {message}")

        super().__init__("\n".join(lines))

    @property
    def paths(self) -> List[str]:
        return [path for path, _ in self.issues]


class UnsupportedProviderError(ShortestError):
    """AI provider is unknown or missing required configuration"""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)
