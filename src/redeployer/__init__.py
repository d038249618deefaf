"""
Redeployer: force-repull redeploys for Portainer stacks.

Drives the Portainer web console like an operator would: log in, pick the
environment, open each stack's editor and run "Update the stack" with
"Re-pull image and redeploy" enabled.
"""

__version__ = "0.1.0"
