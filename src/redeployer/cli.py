"""CLI entry point for Redeployer."""

import argparse
import sys

from pydantic import ValidationError

from redeployer import __version__
from redeployer.config import get_settings
from redeployer.logging_config import setup_logging
from redeployer.workflow import run_demo, run_once


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Redeploy Portainer stacks with a forced image re-pull"
    )
    parser.add_argument(
        "--stacks", help="Comma-separated stack names (overrides PORTAINER_STACKS)"
    )
    parser.add_argument(
        "--environment", help="Environment name (overrides PORTAINER_ENVIRONMENT)"
    )
    parser.add_argument(
        "--headed", action="store_true", help="Show the browser even when APP_ENV=prod"
    )
    parser.add_argument("--log-dir", help="Directory for error.log and combined.log")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--demo", action="store_true", help="Run against the bundled mock console"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        logger = setup_logging(args.log_dir or ".", verbose=args.verbose)
        logger.error("Invalid configuration: %s", e)
        return 1
    logger = setup_logging(args.log_dir or settings.log_dir, verbose=args.verbose)

    overrides = {
        "stacks": args.stacks,
        "environment": args.environment,
        "headless": False if args.headed else None,
    }
    if args.demo:
        ok = run_demo(**overrides)
    else:
        ok = run_once(settings=settings, **overrides)

    if ok:
        logger.info("Process completed successfully")
        return 0
    logger.error("Process failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
