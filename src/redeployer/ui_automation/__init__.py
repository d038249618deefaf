"""
UI automation surface.

Capability interface used by the orchestration core, its Playwright
implementation, and the console's selectors and page scripts.
"""

from redeployer.ui_automation.playwright_surface import PlaywrightPage, PlaywrightSurface
from redeployer.ui_automation.surface import AutomationPage, AutomationSurface

__all__ = ["AutomationPage", "AutomationSurface", "PlaywrightPage", "PlaywrightSurface"]
