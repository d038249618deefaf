"""
Target resolution.

Lists the stacks of the resolved environment and checks every requested name
exists before anything is changed.
"""

from redeployer.discovery.resolver import TargetResolver

__all__ = ["TargetResolver"]
