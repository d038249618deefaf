"""
Run coordinator.

  Acquire browser → Login → Resolve environment → Resolve stacks
    → Update each stack (sequential, requested order) → Release browser
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from redeployer.config import Settings, build_run_config, get_settings
from redeployer.discovery import TargetResolver
from redeployer.errors import ConfigurationError
from redeployer.models import RunConfig, RunSummary
from redeployer.session import SessionBootstrapper
from redeployer.stack_update import StackUpdateWorkflow
from redeployer.ui_automation import PlaywrightSurface
from redeployer.ui_automation.surface import AutomationSurface

logger = logging.getLogger(__name__)

# Bundled mock console (dashboard/app.py) used by --demo
DEMO_CONSOLE_URL = "http://localhost:9000"
DEMO_USERNAME = "admin"
DEMO_PASSWORD = "demo-password"
DEMO_ENVIRONMENT = "local"
DEMO_STACKS = "web,worker"


async def run(
    config: RunConfig,
    surface_factory: Callable[[RunConfig], AutomationSurface] = PlaywrightSurface,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RunSummary:
    """
    Redeploy every requested stack, one at a time.

    The first unrecovered failure stops the run and propagates; no stack after
    it is attempted. The automation surface is released on every path.
    """
    logger.info(
        "Starting Portainer stack update process",
        extra={"environment": config.environment, "stacks": list(config.stack_names)},
    )
    async with surface_factory(config) as page:
        environment = await SessionBootstrapper(page, config, sleep=sleep).bootstrap()
        stacks = await TargetResolver(page, config, sleep=sleep).discover(
            environment, config.stack_names
        )

        summary = RunSummary(environment=environment.name)
        for stack in stacks:
            workflow = StackUpdateWorkflow(page, config, sleep=sleep)
            summary.results.append(await workflow.run(stack))
    return summary


def run_once(
    settings: Settings | None = None,
    stacks: str | None = None,
    environment: str | None = None,
    headless: bool | None = None,
    surface_factory: Callable[[RunConfig], AutomationSurface] = PlaywrightSurface,
) -> bool:
    """
    Validate configuration and run the whole redeploy.

    Returns True only if every requested stack completed. Configuration errors
    are reported before any browser is launched.
    """
    settings = settings or get_settings()
    try:
        config = build_run_config(
            settings, stacks=stacks, environment=environment, headless=headless
        )
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return False

    try:
        summary = asyncio.run(run(config, surface_factory=surface_factory))
    except Exception as e:
        logger.error("Fatal error: %s", e, exc_info=True)
        return False

    for result in summary.ambiguous:
        logger.warning(
            "Stack %s finished without a confirmed success (%s)",
            result.stack_name,
            result.outcome.value,
        )
    logger.info(
        "All stacks updated successfully",
        extra={"environment": summary.environment, "stacks": summary.stack_names},
    )
    return True


def run_demo(
    stacks: str | None = None,
    environment: str | None = None,
    headless: bool | None = None,
) -> bool:
    """
    Redeploy the demo stacks on the bundled mock console.

    Start it first with `python -m dashboard.app`. Overrides work as in
    run_once, e.g. environment="staging" with stacks="broken".
    """
    import httpx

    try:
        httpx.get(DEMO_CONSOLE_URL.rstrip("/") + "/api/status", timeout=2.0).raise_for_status()
    except httpx.HTTPError:
        print(f"Mock console not reachable at {DEMO_CONSOLE_URL}.")
        print("Start it with: python -m dashboard.app")
        print()

    settings = Settings(
        portainer_url=DEMO_CONSOLE_URL,
        portainer_username=DEMO_USERNAME,
        portainer_password=DEMO_PASSWORD,
        portainer_environment=DEMO_ENVIRONMENT,
        portainer_stacks=DEMO_STACKS,
    )
    return run_once(
        settings=settings, stacks=stacks, environment=environment, headless=headless
    )
