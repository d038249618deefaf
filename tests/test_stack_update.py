"""Tests for the per-stack update state machine."""

import pytest

from conftest import make_config, stack_url
from redeployer.errors import RemoteReportedError, UIError
from redeployer.models import Stack, UpdateOutcome, UpdateState
from redeployer.stack_update import (
    EDITOR_TAB_SETTLE_SECONDS,
    ERROR_PROBE_TIMEOUT_MS,
    MODAL_SETTLE_SECONDS,
    REPULL_SETTLE_SECONDS,
    STACK_COOLDOWN_SECONDS,
    StackUpdateWorkflow,
)
from redeployer.ui_automation import scripts

WEB = Stack(name="web", url=stack_url("web"))


def _single_attempt_config():
    return make_config(retry_attempts=1)


@pytest.mark.asyncio
async def test_happy_path_walks_every_state_in_order(page, config, sleeper):
    workflow = StackUpdateWorkflow(page, config, sleep=sleeper)

    result = await workflow.run(WEB)

    assert result.stack_name == "web"
    assert result.outcome == UpdateOutcome.SUCCESS
    assert result.attempts == 1
    assert workflow.state == UpdateState.OBSERVE
    assert page.navigated == [WEB.url]
    interaction = [c for c in page.calls if c[0] in ("wait", "click", "evaluate")]
    assert interaction == [
        ("wait", scripts.STACK_TABS),
        ("evaluate", scripts.CLICK_EDITOR_TAB),
        ("wait", scripts.UPDATE_BUTTON),
        ("click", scripts.UPDATE_BUTTON),
        ("wait", scripts.MODAL_CONTENT),
        ("evaluate", scripts.ACTIVATE_REPULL),
        ("evaluate", scripts.CONFIRM_UPDATE),
        ("wait", scripts.ERROR_TOAST),
        ("evaluate", scripts.OBSERVE_STATUS),
    ]
    assert page.confirm_clicks == 1
    assert sleeper.calls == [
        EDITOR_TAB_SETTLE_SECONDS,
        MODAL_SETTLE_SECONDS,
        REPULL_SETTLE_SECONDS,
        STACK_COOLDOWN_SECONDS,
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, expected",
    [
        ("success", UpdateOutcome.SUCCESS),
        ("in-progress", UpdateOutcome.IN_PROGRESS),
        ("unknown", UpdateOutcome.UNKNOWN),
        ("something-else", UpdateOutcome.UNKNOWN),
    ],
)
async def test_ambiguous_outcomes_are_completions(page, config, sleeper, status, expected):
    page.status = status
    result = await StackUpdateWorkflow(page, config, sleep=sleeper).run(WEB)
    assert result.outcome == expected
    assert result.attempts == 1
    assert sleeper.calls[-1] == STACK_COOLDOWN_SECONDS


@pytest.mark.asyncio
async def test_missing_repull_toggle_never_reaches_confirm(page, sleeper):
    page.repull_result = {"activated": False, "reason": "switch label not found"}
    workflow = StackUpdateWorkflow(page, _single_attempt_config(), sleep=sleeper)

    with pytest.raises(UIError, match="^Failed to activate repull option"):
        await workflow.run(WEB)

    assert workflow.state == UpdateState.ENABLE_REPULL
    assert page.evaluated(scripts.CONFIRM_UPDATE) == 0
    assert page.confirm_clicks == 0


@pytest.mark.asyncio
async def test_repull_script_without_result_is_a_failure(page, sleeper):
    page.repull_result = None
    with pytest.raises(UIError, match="Failed to activate repull option: no result"):
        await StackUpdateWorkflow(page, _single_attempt_config(), sleep=sleeper).run(WEB)


@pytest.mark.asyncio
async def test_disabled_confirm_button_is_not_activated(page, sleeper):
    page.confirm_status = "disabled"
    workflow = StackUpdateWorkflow(page, _single_attempt_config(), sleep=sleeper)

    with pytest.raises(UIError, match=r"Failed to click update button in modal \(disabled\)"):
        await workflow.run(WEB)

    assert workflow.state == UpdateState.CONFIRM
    assert page.confirm_clicks == 0
    assert page.evaluated(scripts.OBSERVE_STATUS) == 0


@pytest.mark.asyncio
async def test_missing_editor_tab_fails_attempt(page, sleeper):
    page.editor_found = False
    workflow = StackUpdateWorkflow(page, _single_attempt_config(), sleep=sleeper)

    with pytest.raises(UIError, match="Editor tab not found"):
        await workflow.run(WEB)
    assert workflow.state == UpdateState.OPEN_EDITOR
    # No cooldown after a failed stack
    assert STACK_COOLDOWN_SECONDS not in sleeper.calls


@pytest.mark.asyncio
async def test_error_toast_fails_with_remote_message(page, sleeper):
    page.error_toast = "  Failed to pull images for web  "
    workflow = StackUpdateWorkflow(page, _single_attempt_config(), sleep=sleeper)

    with pytest.raises(RemoteReportedError) as exc_info:
        await workflow.run(WEB)

    assert str(exc_info.value) == "Update failed - Error: Failed to pull images for web"
    assert page.evaluated(scripts.OBSERVE_STATUS) == 0


@pytest.mark.asyncio
async def test_failure_restarts_from_navigation(page, config, sleeper):
    page.fail_wait(scripts.UPDATE_BUTTON, times=2, url=WEB.url)
    workflow = StackUpdateWorkflow(page, config, sleep=sleeper)

    result = await workflow.run(WEB)

    assert result.outcome == UpdateOutcome.SUCCESS
    assert result.attempts == 3
    assert page.navigated == [WEB.url] * 3
    assert page.confirm_clicks == 1
    assert sleeper.calls.count(config.retry_delay_seconds) == 2


@pytest.mark.asyncio
async def test_remote_error_is_retried_then_exhausts(page, config, sleeper):
    page.error_toast = "Unable to update stack"
    workflow = StackUpdateWorkflow(page, config, sleep=sleeper)

    with pytest.raises(RemoteReportedError):
        await workflow.run(WEB)

    assert workflow.attempts == config.retry_attempts
    assert page.navigated == [WEB.url] * config.retry_attempts
    assert sleeper.calls.count(config.retry_delay_seconds) == config.retry_attempts - 1


@pytest.mark.asyncio
async def test_error_toast_wait_uses_short_timeout(page, config, sleeper):
    seen = {}
    original = page.wait_for_selector

    async def spy(selector, *, visible=True, timeout_ms=None):
        seen[selector] = timeout_ms
        await original(selector, visible=visible, timeout_ms=timeout_ms)

    page.wait_for_selector = spy
    await StackUpdateWorkflow(page, config, sleep=sleeper).run(WEB)

    assert seen[scripts.ERROR_TOAST] == ERROR_PROBE_TIMEOUT_MS
    assert seen[scripts.STACK_TABS] == config.timeout_ms
