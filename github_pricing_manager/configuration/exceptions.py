"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class PricingConfigurationError(Exception):
    """Raised when the pricing configuration file cannot be loaded or validated."""

    def __init__(self, path: str, reason: str) -> None:
        """Initializes the exception with the offending path and the reason."""
        super().__init__(f"Invalid pricing configuration in {path}: {reason}")
        self.path = path
        self.reason = reason


class PushEventPayloadError(Exception):
    """Raised when the push event payload cannot be read or validated."""

    pass
