"""Discovers stacks in an environment and resolves requested names."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from redeployer.errors import StacksNotFoundError
from redeployer.models import Environment, RunConfig, Stack
from redeployer.retry import with_retry
from redeployer.ui_automation import scripts
from redeployer.ui_automation.surface import AutomationPage

logger = logging.getLogger(__name__)


class TargetResolver:
    """
    Maps requested stack names to discovered Stack entries.

    Fails fast with every missing name at once, so a bad name late in the list
    never leaves earlier stacks redeployed.
    """

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

    async def list_stacks(self, environment: Environment) -> list[Stack]:
        async def _open() -> None:
            await self._page.goto(
                environment.stacks_url, timeout_ms=self._config.timeout_ms, wait_until="load"
            )
            await self._page.wait_for_selector(
                scripts.STACKS_TABLE, visible=True, timeout_ms=self._config.timeout_ms
            )

        async def _fetch() -> list[dict]:
            return await self._page.extract_all(scripts.STACK_LINKS, scripts.EXTRACT_STACKS)

        await self._retry(_open, "open stacks list")
        rows = await self._retry(_fetch, "fetch stacks")
        stacks = [
            Stack(name=(row.get("name") or "").strip(), url=row.get("link") or "")
            for row in rows or []
        ]
        logger.info(
            "Found %s stacks in %s",
            len(stacks),
            environment.name,
            extra={"stacks": [s.name for s in stacks]},
        )
        return stacks

    @staticmethod
    def resolve(requested: Sequence[str], discovered: Sequence[Stack]) -> list[Stack]:
        """Requested order and duplicates are kept; first discovered match wins."""
        by_name: dict[str, Stack] = {}
        for stack in discovered:
            by_name.setdefault(stack.name, stack)

        missing: list[str] = []
        for name in requested:
            if name not in by_name and name not in missing:
                missing.append(name)
        if missing:
            raise StacksNotFoundError(missing)
        return [by_name[name] for name in requested]

    async def discover(self, environment: Environment, requested: Sequence[str]) -> list[Stack]:
        return self.resolve(requested, await self.list_stacks(environment))
