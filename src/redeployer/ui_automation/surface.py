"""Capability interface the orchestration core drives."""

from typing import Any, Protocol


class AutomationPage(Protocol):
    """
    One live page of the console.

    Implementations translate their own timeouts into ElementNotFoundError
    (waits) or NavigationError (goto), and script failures into UIError.
    """

    async def goto(self, url: str, *, timeout_ms: int, wait_until: str = "load") -> None: ...

    async def wait_for_selector(
        self, selector: str, *, visible: bool = True, timeout_ms: int | None = None
    ) -> None: ...

    async def click(self, selector: str) -> None: ...

    async def type_text(self, selector: str, text: str) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def extract_all(self, selector: str, script: str) -> list[dict[str, Any]]: ...

    async def text_content(self, selector: str) -> str: ...


class AutomationSurface(Protocol):
    """Async context manager that owns the browser and yields its single page."""

    async def __aenter__(self) -> AutomationPage: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
