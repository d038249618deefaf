"""Shared fakes: a scriptable console page, a recording sleep and a surface."""

import pytest

from redeployer.errors import ElementNotFoundError, NavigationError
from redeployer.models import RunConfig
from redeployer.ui_automation import scripts

CONSOLE_URL = "http://console.local:9000"


def stack_url(name: str) -> str:
    return f"{CONSOLE_URL}/#!/1/docker/stacks/{name}?type=2"


class FakePage:
    """
    In-memory stand-in for AutomationPage.

    Every call is appended to .calls as (method, detail). Failures can be
    queued per selector (optionally only while a given URL is open).
    """

    def __init__(self, environments=None, stacks=None) -> None:
        self.environments = (
            environments
            if environments is not None
            else [
                {"name": "local", "dashboard": f"{CONSOLE_URL}/#!/1/docker/dashboard"},
                {"name": "staging", "dashboard": f"{CONSOLE_URL}/#!/2/docker/dashboard"},
            ]
        )
        self.stacks = (
            stacks
            if stacks is not None
            else [{"name": n, "link": stack_url(n)} for n in ("web", "worker", "proxy")]
        )
        self.calls: list[tuple[str, object]] = []
        self.current_url: str | None = None
        self.editor_found = True
        self.repull_result: object = {"activated": True, "reason": ""}
        self.confirm_status = "clicked"
        self.error_toast: str | None = None
        self.status = "success"
        self._wait_failures: dict[tuple[str | None, str], int] = {}
        self._goto_failures: dict[str, int] = {}
        self.typed: dict[str, str] = {}

    # Failure injection

    def fail_wait(self, selector: str, times: int, url: str | None = None) -> None:
        self._wait_failures[(url, selector)] = times

    def fail_goto(self, url: str, times: int) -> None:
        self._goto_failures[url] = times

    # Inspection

    @property
    def navigated(self) -> list[str]:
        return [detail for method, detail in self.calls if method == "goto"]

    @property
    def confirm_clicks(self) -> int:
        return sum(1 for method, detail in self.calls if method == "confirm_clicked")

    def evaluated(self, script: str) -> int:
        return sum(1 for method, detail in self.calls if method == "evaluate" and detail is script)

    # AutomationPage

    async def goto(self, url, *, timeout_ms, wait_until="load"):
        self.calls.append(("goto", url))
        remaining = self._goto_failures.get(url, 0)
        if remaining:
            self._goto_failures[url] = remaining - 1
            raise NavigationError(f"Timed out after {timeout_ms}ms loading {url}")
        self.current_url = url

    async def wait_for_selector(self, selector, *, visible=True, timeout_ms=None):
        self.calls.append(("wait", selector))
        for key in ((self.current_url, selector), (None, selector)):
            remaining = self._wait_failures.get(key, 0)
            if remaining:
                self._wait_failures[key] = remaining - 1
                raise ElementNotFoundError(selector, timeout_ms)
        if selector == scripts.ERROR_TOAST and self.error_toast is None:
            raise ElementNotFoundError(selector, timeout_ms)

    async def click(self, selector):
        self.calls.append(("click", selector))

    async def type_text(self, selector, text):
        self.calls.append(("type", selector))
        self.typed[selector] = text

    async def evaluate(self, script, arg=None):
        self.calls.append(("evaluate", script))
        if script is scripts.CLICK_EDITOR_TAB:
            return self.editor_found
        if script is scripts.ACTIVATE_REPULL:
            return self.repull_result
        if script is scripts.CONFIRM_UPDATE:
            if self.confirm_status == "clicked":
                self.calls.append(("confirm_clicked", self.current_url))
            return self.confirm_status
        if script is scripts.OBSERVE_STATUS:
            return self.status
        raise AssertionError("unexpected script")

    async def extract_all(self, selector, script):
        self.calls.append(("extract", selector))
        if selector == scripts.ENVIRONMENT_ITEMS:
            return list(self.environments)
        if selector == scripts.STACK_LINKS:
            return list(self.stacks)
        return []

    async def text_content(self, selector):
        self.calls.append(("text", selector))
        return self.error_toast or ""


class SleepRecorder:
    """Async sleep replacement that only records durations."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeSurface:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self.page

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True


def make_config(**overrides) -> RunConfig:
    values = {
        "base_url": CONSOLE_URL,
        "username": "admin",
        "password": "s3cret",
        "environment": "local",
        "stack_names": ("web", "worker"),
        "headless": True,
        "timeout_ms": 30000,
        "retry_attempts": 3,
        "retry_delay_ms": 5000,
    }
    values.update(overrides)
    return RunConfig(**values)


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def config():
    return make_config()
