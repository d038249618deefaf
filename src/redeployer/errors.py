"""Domain errors for Redeployer."""


class RedeployerError(RuntimeError):
    """Base class for every failure raised by the run."""


class ConfigurationError(RedeployerError):
    """Required settings are missing or invalid; raised before any automation."""


class DiscoveryError(RedeployerError):
    """The console does not contain what was requested. Never retried."""


class EnvironmentNotFoundError(DiscoveryError):
    def __init__(self, environment: str) -> None:
        self.environment = environment
        super().__init__(f"Environment {environment} not found")


class StacksNotFoundError(DiscoveryError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Stacks not found: {', '.join(self.missing)}")


class UIError(RedeployerError):
    """Transient UI failure; the enclosing retry unit may try again."""


class ElementNotFoundError(UIError):
    """A selector did not show up within its timeout."""

    def __init__(self, selector: str, timeout_ms: int | None = None) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        suffix = f" within {timeout_ms}ms" if timeout_ms is not None else ""
        super().__init__(f"Element not found: {selector}{suffix}")


class NavigationError(UIError):
    """Page navigation failed or timed out."""


class RemoteReportedError(UIError):
    """The console surfaced an error notification."""
