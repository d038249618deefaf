"""Login and environment resolution against the Portainer console."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from redeployer.errors import EnvironmentNotFoundError
from redeployer.models import Environment, RunConfig
from redeployer.retry import with_retry
from redeployer.ui_automation import scripts
from redeployer.ui_automation.surface import AutomationPage

logger = logging.getLogger(__name__)


def stacks_url_for(dashboard_url: str) -> str:
    """
    Derive an environment's stacks view from its dashboard link.

    Portainer routes .../<id>/docker/dashboard and .../<id>/docker/stacks side by
    side; only the first "dashboard" segment is swapped.
    """
    return dashboard_url.replace("dashboard", "stacks", 1)


class SessionBootstrapper:
    """Authenticates the shared page and finds the configured environment."""

    def __init__(
        self,
        page: AutomationPage,
        config: RunConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._page = page
        self._config = config
        self._sleep = sleep

    async def _retry(self, operation, label: str):
        return await with_retry(
            operation,
            label,
            self._config.retry_attempts,
            self._config.retry_delay_seconds,
            sleep=self._sleep,
        )

    async def open_console(self) -> None:
        async def _open() -> None:
            await self._page.goto(
                self._config.base_url, timeout_ms=self._config.timeout_ms, wait_until="load"
            )

        await self._retry(_open, "open console")

    async def login(self) -> None:
        """Submit credentials and wait for the home view; retried as a whole."""

        async def _login() -> None:
            await self._page.type_text(scripts.USERNAME_INPUT, self._config.username)
            await self._page.type_text(scripts.PASSWORD_INPUT, self._config.password)
            await self._page.click(scripts.LOGIN_SUBMIT)
            await self._page.wait_for_selector(
                scripts.HOME_LANDMARK, visible=True, timeout_ms=self._config.timeout_ms
            )

        await self._retry(_login, "login")
        logger.info("Logged in", extra={"username": self._config.username})

    async def list_environments(self) -> list[Environment]:
        async def _fetch() -> list[dict]:
            return await self._page.extract_all(
                scripts.ENVIRONMENT_ITEMS, scripts.EXTRACT_ENVIRONMENTS
            )

        rows = await self._retry(_fetch, "fetch environments")
        environments = []
        for row in rows or []:
            dashboard = row.get("dashboard") or ""
            environments.append(
                Environment(
                    name=(row.get("name") or "").strip(),
                    dashboard_url=dashboard,
                    stacks_url=stacks_url_for(dashboard),
                )
            )
        logger.info("Found %s environments", len(environments))
        return environments

    def resolve_environment(self, environments: list[Environment]) -> Environment:
        """Exact name match; the list is complete, so a miss is final."""
        for environment in environments:
            if environment.name == self._config.environment:
                return environment
        raise EnvironmentNotFoundError(self._config.environment)

    async def bootstrap(self) -> Environment:
        await self.open_console()
        await self.login()
        environment = self.resolve_environment(await self.list_environments())
        logger.info(
            "Using environment %s",
            environment.name,
            extra={"stacks_url": environment.stacks_url},
        )
        return environment
