"""Application configuration loaded from environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from redeployer.errors import ConfigurationError
from redeployer.models import RunConfig

# Field name -> environment variable, in the order they are reported when missing
REQUIRED_FIELDS = {
    "portainer_username": "PORTAINER_USERNAME",
    "portainer_password": "PORTAINER_PASSWORD",
    "portainer_stacks": "PORTAINER_STACKS",
    "portainer_environment": "PORTAINER_ENVIRONMENT",
}


class Settings(BaseSettings):
    """Redeployer settings from env vars."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Portainer console
    portainer_url: str = "http://localhost:9000"
    portainer_username: str = ""
    portainer_password: str = ""
    # Comma-separated stack names, processed in this order
    portainer_stacks: str = ""
    portainer_environment: str = ""

    # "prod" runs the browser headless
    app_env: str = "dev"

    # Milliseconds
    operation_timeout: int = 30000
    retry_attempts: int = 3
    retry_delay: int = 5000

    # Directory for error.log / combined.log
    log_dir: str = "."

    @property
    def is_prod(self) -> bool:
        return self.app_env.strip().lower() == "prod"


def get_settings() -> Settings:
    """Return loaded settings from environment (and .env if present)."""
    return Settings()


def parse_stack_names(raw: str) -> tuple[str, ...]:
    """Split PORTAINER_STACKS; keeps order and duplicates, drops blanks."""
    return tuple(name.strip() for name in (raw or "").split(",") if name.strip())


def build_run_config(
    settings: Settings,
    stacks: str | None = None,
    environment: str | None = None,
    headless: bool | None = None,
) -> RunConfig:
    """
    Validate settings (with optional CLI overrides) into an immutable RunConfig.

    Raises ConfigurationError listing every missing variable at once.
    """
    values = {
        "portainer_username": settings.portainer_username,
        "portainer_password": settings.portainer_password,
        "portainer_stacks": stacks if stacks is not None else settings.portainer_stacks,
        "portainer_environment": (
            environment if environment is not None else settings.portainer_environment
        ),
    }
    missing = [env for field, env in REQUIRED_FIELDS.items() if not (values[field] or "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    stack_names = parse_stack_names(values["portainer_stacks"])
    if not stack_names:
        raise ConfigurationError("At least one stack name must be provided in PORTAINER_STACKS")
    if settings.retry_attempts < 1:
        raise ConfigurationError("RETRY_ATTEMPTS must be at least 1")
    if settings.operation_timeout <= 0:
        raise ConfigurationError("OPERATION_TIMEOUT must be a positive number of milliseconds")
    if settings.retry_delay < 0:
        raise ConfigurationError("RETRY_DELAY must not be negative")

    return RunConfig(
        base_url=settings.portainer_url,
        username=values["portainer_username"],
        password=values["portainer_password"],
        environment=values["portainer_environment"],
        stack_names=stack_names,
        headless=settings.is_prod if headless is None else headless,
        timeout_ms=settings.operation_timeout,
        retry_attempts=settings.retry_attempts,
        retry_delay_ms=settings.retry_delay,
    )
