"""
Retry executor.

Runs a fallible async step up to N times with a fixed delay between attempts.
"""

from redeployer.retry.executor import with_retry

__all__ = ["with_retry"]
