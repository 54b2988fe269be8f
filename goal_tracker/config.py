"""Configuration management for Goal Tracker"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .state_paths import resolve_state_dir


def parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass
class Config:
    """Configuration for a Goal Tracker app session"""

    # Supabase settings
    supabase_url: str
    supabase_anon_key: str
    auth_timeout: int

    # Goals screen
    goals_seed_file: Optional[Path]

    # Capture
    enable_multi_camera: bool

    # Logging and state
    log_level: str
    state_dir: Path

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """Load configuration from environment variables (and .env if present)"""
        load_dotenv(env_file)

        supabase_url = os.getenv("SUPABASE_URL", "").strip().rstrip("/")
        if not supabase_url:
            raise ValueError("SUPABASE_URL environment variable is required")

        supabase_anon_key = os.getenv("SUPABASE_ANON_KEY", "").strip()
        if not supabase_anon_key:
            raise ValueError("SUPABASE_ANON_KEY environment variable is required")

        auth_timeout = int(os.getenv("AUTH_TIMEOUT", "10"))

        seed_file = os.getenv("GOALS_SEED_FILE", "").strip()
        goals_seed_file = Path(seed_file).expanduser() if seed_file else None

        enable_multi_camera = parse_bool(os.getenv("ENABLE_MULTI_CAMERA"), True)

        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        state_dir = resolve_state_dir()

        return cls(
            supabase_url=supabase_url,
            supabase_anon_key=supabase_anon_key,
            auth_timeout=auth_timeout,
            goals_seed_file=goals_seed_file,
            enable_multi_camera=enable_multi_camera,
            log_level=log_level,
            state_dir=state_dir,
        )

    def validate(self) -> None:
        """Validate configuration"""
        if not self.supabase_url.startswith("http"):
            raise ValueError(f"Invalid SUPABASE_URL: {self.supabase_url}")

        if self.auth_timeout <= 0:
            raise ValueError(f"AUTH_TIMEOUT must be positive, got {self.auth_timeout}")

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {self.log_level}")
