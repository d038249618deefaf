"""Shared data models for the redeploy run."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RunConfig(BaseModel):
    """Validated, immutable configuration for one run."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    username: str
    password: str = Field(repr=False)
    environment: str
    stack_names: tuple[str, ...]
    headless: bool = False
    timeout_ms: int = 30000
    retry_attempts: int = 3
    retry_delay_ms: int = 5000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    @property
    def navigation_timeout_ms(self) -> int:
        """Stack pages load slower than the rest of the console."""
        return self.timeout_ms * 2


class Environment(BaseModel):
    """Portainer environment (endpoint) as listed on the home view."""

    name: str
    dashboard_url: str = ""
    stacks_url: str = ""


class Stack(BaseModel):
    """Stack row from an environment's stacks table."""

    name: str
    url: str


class UpdateOutcome(str, Enum):
    """What the console looked like after confirming an update."""

    SUCCESS = "success"
    IN_PROGRESS = "in-progress"
    UNKNOWN = "unknown"


class UpdateState(str, Enum):
    """Steps of the per-stack update workflow, in order."""

    NAVIGATE = "navigate"
    OPEN_EDITOR = "open_editor"
    TRIGGER_UPDATE = "trigger_update"
    WAIT_FOR_MODAL = "wait_for_modal"
    ENABLE_REPULL = "enable_repull"
    CONFIRM = "confirm"
    OBSERVE = "observe"


class StackUpdateResult(BaseModel):
    """Result of one stack's update workflow."""

    stack_name: str
    outcome: UpdateOutcome
    attempts: int = Field(ge=1)
    duration_seconds: float = 0.0


class RunSummary(BaseModel):
    """Everything a successful run touched."""

    environment: str
    results: list[StackUpdateResult] = Field(default_factory=list)

    @property
    def stack_names(self) -> list[str]:
        return [r.stack_name for r in self.results]

    @property
    def ambiguous(self) -> list[StackUpdateResult]:
        """Results that completed without a confirmed success signal."""
        return [r for r in self.results if r.outcome != UpdateOutcome.SUCCESS]
