"""Error types for the Freedcamp MCP server."""


class FreedcampMCPError(Exception):
    """Base exception for Freedcamp MCP errors."""

    pass


# Configuration errors
class ConfigurationError(FreedcampMCPError):
    """Raised when configuration is missing or invalid."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when required settings are not present in the environment."""

    def __init__(self, names: list[str]):
        super().__init__(f"Missing required environment variables: {', '.join(names)}")
        self.names = names


# Upstream errors
class UpstreamError(FreedcampMCPError):
    """Raised when the Freedcamp API cannot be talked to."""

    pass


class UpstreamResponseError(UpstreamError):
    """Raised when a successful Freedcamp reply cannot be parsed."""

    def __init__(self, status_code: int, body: str):
        preview = body[:200]
        super().__init__(f"Malformed response from Freedcamp (HTTP {status_code}): {preview!r}")
        self.status_code = status_code
        self.body = body
