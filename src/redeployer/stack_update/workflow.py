"""
Update one stack through the Portainer editor with a forced image re-pull.

States run strictly in order (see UpdateState). The whole sequence is one
retry unit: a failure anywhere restarts from navigation. The console exposes
no readiness signal for the editor tab or the modal form, so fixed settle
delays stand in for one.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from redeployer.errors import ElementNotFoundError, RemoteReportedError, UIError
from redeployer.models import RunConfig, Stack, StackUpdateResult, UpdateOutcome, UpdateState
from redeployer.retry import with_retry
from redeployer.ui_automation import scripts
from redeployer.ui_automation.surface import AutomationPage

logger = logging.getLogger(__name__)

EDITOR_TAB_SETTLE_SECONDS = 2.0
MODAL_SETTLE_SECONDS = 1.0
REPULL_SETTLE_SECONDS = 1.0
STACK_COOLDOWN_SECONDS = 3.0
ERROR_PROBE_TIMEOUT_MS = 3000


class StackUpdateWorkflow:
    """
    Drives the update dialog for a single stack.

    The page is shared with the rest of the run; this class only borrows it.
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
        self.state: UpdateState | None = None
        self.attempts = 0

    def _enter(self, state: UpdateState, stack: Stack) -> None:
        self.state = state
        logger.info(
            "Stack %s: %s",
            stack.name,
            state.value,
            extra={"stack": stack.name, "state": state.value, "attempt": self.attempts},
        )

    async def run(self, stack: Stack) -> StackUpdateResult:
        """Update the stack (retrying the whole sequence), then cool down."""
        logger.info("Starting update for stack: %s", stack.name)
        self.attempts = 0
        started = time.monotonic()

        outcome = await with_retry(
            lambda: self._attempt(stack),
            f"update stack {stack.name}",
            self._config.retry_attempts,
            self._config.retry_delay_seconds,
            sleep=self._sleep,
        )

        if outcome == UpdateOutcome.SUCCESS:
            logger.info("Stack update confirmed successfully: %s", stack.name)
        elif outcome == UpdateOutcome.IN_PROGRESS:
            logger.info("Stack update still in progress, but no errors detected: %s", stack.name)
        else:
            logger.warning("Stack update status unknown, but no errors detected: %s", stack.name)

        result = StackUpdateResult(
            stack_name=stack.name,
            outcome=outcome,
            attempts=self.attempts,
            duration_seconds=time.monotonic() - started,
        )
        # Let the console settle before the next stack navigates away
        await self._sleep(STACK_COOLDOWN_SECONDS)
        return result

    async def _attempt(self, stack: Stack) -> UpdateOutcome:
        self.attempts += 1
        await self._navigate(stack)
        await self._open_editor(stack)
        await self._trigger_update(stack)
        await self._wait_for_modal(stack)
        await self._enable_repull(stack)
        await self._confirm(stack)
        return await self._observe(stack)

    async def _navigate(self, stack: Stack) -> None:
        self._enter(UpdateState.NAVIGATE, stack)
        await self._page.goto(
            stack.url,
            timeout_ms=self._config.navigation_timeout_ms,
            wait_until="domcontentloaded",
        )
        await self._page.wait_for_selector(
            scripts.STACK_TABS, visible=True, timeout_ms=self._config.timeout_ms
        )

    async def _open_editor(self, stack: Stack) -> None:
        self._enter(UpdateState.OPEN_EDITOR, stack)
        clicked = await self._page.evaluate(scripts.CLICK_EDITOR_TAB, scripts.EDITOR_TAB_LABEL)
        if not clicked:
            raise UIError("Editor tab not found")
        await self._sleep(EDITOR_TAB_SETTLE_SECONDS)

    async def _trigger_update(self, stack: Stack) -> None:
        self._enter(UpdateState.TRIGGER_UPDATE, stack)
        await self._page.wait_for_selector(
            scripts.UPDATE_BUTTON, visible=True, timeout_ms=self._config.timeout_ms
        )
        await self._page.click(scripts.UPDATE_BUTTON)

    async def _wait_for_modal(self, stack: Stack) -> None:
        self._enter(UpdateState.WAIT_FOR_MODAL, stack)
        await self._page.wait_for_selector(
            scripts.MODAL_CONTENT, visible=True, timeout_ms=self._config.timeout_ms
        )
        await self._sleep(MODAL_SETTLE_SECONDS)

    async def _enable_repull(self, stack: Stack) -> None:
        # No fallback: redeploying without the re-pull defeats the run
        self._enter(UpdateState.ENABLE_REPULL, stack)
        result = await self._page.evaluate(scripts.ACTIVATE_REPULL, scripts.REPULL_LABEL_TEXT)
        if not isinstance(result, dict) or not result.get("activated"):
            reason = result.get("reason") if isinstance(result, dict) else None
            raise UIError(f"Failed to activate repull option: {reason or 'no result'}")
        logger.info("Repull option activated successfully")
        await self._sleep(REPULL_SETTLE_SECONDS)

    async def _confirm(self, stack: Stack) -> None:
        self._enter(UpdateState.CONFIRM, stack)
        status = await self._page.evaluate(
            scripts.CONFIRM_UPDATE, [scripts.MODAL_CONTENT, scripts.CONFIRM_BUTTON_TEXT]
        )
        if status != scripts.CONFIRM_CLICKED:
            raise UIError(f"Failed to click update button in modal ({status})")
        logger.info("Update button clicked successfully")

    async def _observe(self, stack: Stack) -> UpdateOutcome:
        self._enter(UpdateState.OBSERVE, stack)
        error_text = await self._probe_error()
        if error_text is not None:
            raise RemoteReportedError(f"Update failed - Error: {error_text}")

        status = await self._page.evaluate(
            scripts.OBSERVE_STATUS,
            [scripts.UPDATE_REGION, scripts.SUCCESS_TOAST, scripts.MODAL_CONTENT],
        )
        try:
            return UpdateOutcome(status)
        except ValueError:
            return UpdateOutcome.UNKNOWN

    async def _probe_error(self) -> str | None:
        """Error toast text if one shows up within the probe window."""
        try:
            await self._page.wait_for_selector(
                scripts.ERROR_TOAST, visible=False, timeout_ms=ERROR_PROBE_TIMEOUT_MS
            )
        except ElementNotFoundError:
            return None
        return (await self._page.text_content(scripts.ERROR_TOAST)).strip()
