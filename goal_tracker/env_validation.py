"""Environment validation helpers for Goal Tracker bootstrap."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional


REQUIRED_ENV_KEYS = ("SUPABASE_URL", "SUPABASE_ANON_KEY")
PLACEHOLDER_VALUES = {
    "your_supabase_anon_key_here",
    "https://your-project.supabase.co",
    "YOUR_KEY_HERE",
}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class EnvValidationResult:
    """Structured result for environment validation."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def load_env_file(path: Path) -> dict[str, str]:
    """Load a .env file into a dict without mutating os.environ."""
    env: dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue
        env[key] = _strip_quotes(value.strip())
    return env


def validate_env_values(env: Mapping[str, str]) -> EnvValidationResult:
    """Validate required env vars and basic URL/path constraints."""
    result = EnvValidationResult()

    for key in REQUIRED_ENV_KEYS:
        value = env.get(key, "").strip()
        if not value or value in PLACEHOLDER_VALUES:
            result.errors.append(
                f"{key} is required. Set it in .env (see .env.example)."
            )

    supabase_url = env.get("SUPABASE_URL", "").strip()
    if supabase_url and supabase_url not in PLACEHOLDER_VALUES:
        if not supabase_url.startswith("http"):
            result.errors.append("SUPABASE_URL must start with http or https.")
        elif supabase_url.startswith("http://") and "localhost" not in supabase_url:
            result.warnings.append(
                "SUPABASE_URL uses plain http; credentials will be sent unencrypted."
            )

    timeout = env.get("AUTH_TIMEOUT", "").strip()
    if timeout:
        if not timeout.isdigit() or int(timeout) <= 0:
            result.errors.append("AUTH_TIMEOUT must be a positive integer (seconds).")

    log_level = env.get("LOG_LEVEL", "").strip()
    if log_level and log_level.upper() not in LOG_LEVELS:
        result.errors.append(f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}.")

    seed_file = env.get("GOALS_SEED_FILE", "").strip()
    if seed_file:
        seed_path = Path(seed_file).expanduser()
        if not seed_path.exists():
            result.warnings.append(
                f"GOALS_SEED_FILE not found at {seed_path}; default goals will be used."
            )
    return result


def validate_env_file(path: Path) -> EnvValidationResult:
    """Load and validate a .env file."""
    env = load_env_file(path)
    return validate_env_values(env)


def _print_messages(result: EnvValidationResult) -> None:
    for error in result.errors:
        print(f"ERROR: {error}", file=sys.stderr)
    for warning in result.warnings:
        print(f"WARN: {warning}", file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Goal Tracker .env configuration.")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)",
    )
    args = parser.parse_args(argv)

    env_path = Path(args.env_file).expanduser()
    if not env_path.exists():
        print(
            f"ERROR: .env file not found at {env_path}. "
            "Run: cp .env.example .env",
            file=sys.stderr,
        )
        return 1

    result = validate_env_file(env_path)
    _print_messages(result)

    if result.errors:
        return 1

    print("Environment validation OK.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
