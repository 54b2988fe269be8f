"""CLI entrypoint for Goal Tracker"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

from app_logging import reset_logging, setup_logging

from .app import create_app_session
from .auth import AuthError
from .config import Config

logger = logging.getLogger(__name__)


def render_goals(goals) -> str:
    lines = [f"Goals to complete: {len(goals)}"]
    for goal in goals:
        mark = "x" if goal.completed else " "
        lines.append(f"  [{mark}] {goal.name}")
    return "\n".join(lines)


def main(argv=None) -> int:
    """Main CLI entrypoint"""
    parser = argparse.ArgumentParser(
        description="Goal Tracker - sign in and show your goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sign in and list the starter goals
  goal-tracker --email me@example.com

  # Use a custom starter list
  goal-tracker --email me@example.com --seed-file goals.yaml

Environment Variables:
  SUPABASE_URL           Supabase project URL (required)
  SUPABASE_ANON_KEY      Supabase anon key (required)
  AUTH_TIMEOUT           Auth request timeout seconds (default: 10)
  GOALS_SEED_FILE        YAML file with starter goals (optional)
  ENABLE_MULTI_CAMERA    Try front+back capture first (default: true)
  LOG_LEVEL              Logging level (default: INFO)
        """,
    )
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument("--seed-file", default=None, help="YAML file with starter goals")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.from_env(Path(args.env_file).expanduser() if args.env_file else None)
        config.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("\nPlease check your environment variables.", file=sys.stderr)
        return 1

    if args.seed_file:
        config.goals_seed_file = Path(args.seed_file).expanduser()

    log_file = setup_logging(
        "DEBUG" if args.verbose else config.log_level,
        log_dir=config.state_dir / "logs",
        console_output=args.verbose,
    )
    logger.debug(f"Writing logs to {log_file}")

    try:
        password = getpass.getpass("Password: ")

        with create_app_session(config) as session:
            try:
                session.auth_client.sign_in(args.email, password)
            except AuthError as e:
                logger.warning(f"Sign-in failed for {args.email}: {e}")
                print(f"Sign-in failed: {e}", file=sys.stderr)
                return 1

            store = session.open_goals_screen()
            print(render_goals(store.goals))
            session.auth_client.sign_out()
    finally:
        reset_logging()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
