"""Command-line entry point for the SupportBot web UI."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from supportbot.config import config
from supportbot.dispatcher import ProviderSettings, ResponseDispatcher

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger

PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_APP = PROJECT_ROOT / "app.py"
DEFAULT_PORT = 8501


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Read launcher options from the command line."""  # noqa: DOC201
    parser = argparse.ArgumentParser(
        description="Run the SupportBot customer support assistant.",
    )
    parser.add_argument(
        "--app", type=Path, default=DEFAULT_APP, help="Streamlit script to run."
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--address", default="localhost")
    parser.add_argument(
        "--db-path",
        type=Path,
        help="SQLite database holding the knowledge base and chat sessions.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for simulated token counts when answering without a provider.",
    )
    parser.add_argument(
        "--no-fallback-delay",
        action="store_true",
        help="Skip the simulated latency of the local fallback responder.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Report provider status and exit without starting the UI.",
    )
    parser.add_argument(
        "--show",
        dest="headless",
        action="store_false",
        help="Open a browser window instead of running headless.",
    )
    return parser.parse_args(argv)


def resolve_script(app: Path) -> Path:
    """Absolute path of the Streamlit script, relative paths from the project root."""  # noqa: DOC201
    return (app if app.is_absolute() else PROJECT_ROOT / app).resolve()


def streamlit_command(args: argparse.Namespace, script_path: Path) -> list[str]:
    """Arguments for ``python -m streamlit run``."""  # noqa: DOC201
    server_options = {
        "port": str(args.port),
        "address": args.address,
        "headless": str(args.headless).lower(),
    }
    command = [sys.executable, "-m", "streamlit", "run", str(script_path)]
    for option, value in server_options.items():
        command += [f"--server.{option}", value]
    return command


def launch_environment(args: argparse.Namespace) -> dict[str, str]:
    """Current environment with launcher overrides for the UI process."""  # noqa: DOC201
    overrides = {
        "DATABASE_PATH": str(args.db_path) if args.db_path else None,
        "FALLBACK_SEED": str(args.seed) if args.seed is not None else None,
        "FALLBACK_DELAY_ENABLED": "false" if args.no_fallback_delay else None,
    }
    env = dict(os.environ)
    env.update({key: value for key, value in overrides.items() if value is not None})
    return env


def report_provider_status(logger: Logger) -> bool:
    """Log whether chat turns go to the provider or the local fallback.

    Returns:
        bool: True if a provider credential is configured.
    """
    health = ResponseDispatcher(ProviderSettings.from_config()).check_health()
    if health["status"]:
        logger.info("%s ready (model %s)", health["provider"], health["model"])
    else:
        logger.info(
            "%s: %s, answering from the local knowledge base",
            health["provider"],
            health["message"],
        )
    return health["status"]


def run_streamlit(command: Sequence[str], env: dict[str, str], logger: Logger) -> int:
    """Run Streamlit until it exits and return its status."""  # noqa: DOC201
    try:
        completed = subprocess.run(command, check=False, cwd=PROJECT_ROOT, env=env)
    except KeyboardInterrupt:
        logger.info("SupportBot stopped by user")
        return 0
    except OSError:
        logger.exception("Unable to launch Streamlit")
        return 1
    if completed.returncode != 0:
        logger.error("Streamlit exited with status %s", completed.returncode)
    return completed.returncode


def main(argv: Sequence[str] | None = None) -> int:
    """Validate configuration, then check the provider or launch the UI."""  # noqa: DOC201
    args = parse_args(argv)

    config.setup_logging()
    logger = config.get_logger(__name__)

    try:
        config.validate()
    except ValueError:
        logger.exception("Configuration invalid")
        return 1

    report_provider_status(logger)
    if args.check:
        return 0

    script_path = resolve_script(args.app)
    if not script_path.exists():
        logger.error("Streamlit script not found: %s", script_path)
        return 1

    logger.info("Serving SupportBot on http://%s:%s", args.address, args.port)
    return run_streamlit(
        streamlit_command(args, script_path), launch_environment(args), logger
    )


if __name__ == "__main__":
    sys.exit(main())
