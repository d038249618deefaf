"""
Stack update workflow.

Per-stack state machine: open the stack, open its editor, trigger the update
dialog, force the image re-pull, confirm, and observe the outcome.
"""

from redeployer.stack_update.workflow import (
    EDITOR_TAB_SETTLE_SECONDS,
    ERROR_PROBE_TIMEOUT_MS,
    MODAL_SETTLE_SECONDS,
    REPULL_SETTLE_SECONDS,
    STACK_COOLDOWN_SECONDS,
    StackUpdateWorkflow,
)

__all__ = [
    "EDITOR_TAB_SETTLE_SECONDS",
    "ERROR_PROBE_TIMEOUT_MS",
    "MODAL_SETTLE_SECONDS",
    "REPULL_SETTLE_SECONDS",
    "STACK_COOLDOWN_SECONDS",
    "StackUpdateWorkflow",
]
