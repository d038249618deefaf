"""
Session bootstrap.

Logs into the console and resolves the target environment by name.
"""

from redeployer.session.bootstrap import SessionBootstrapper, stacks_url_for

__all__ = ["SessionBootstrapper", "stacks_url_for"]
