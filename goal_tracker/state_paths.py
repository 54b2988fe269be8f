"""Shared helpers for resolving Goal Tracker state paths."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

DEFAULT_STATE_DIR = Path.home() / ".local" / "state" / "goal_tracker"


def resolve_state_dir(base_dir: Optional[Path] = None) -> Path:
    """Resolve the Goal Tracker base state directory.

    Handles both ~ and $HOME/$VAR expansion for compatibility with
    systemd EnvironmentFile and shell scripts.
    """
    if base_dir is not None:
        return Path(os.path.expandvars(str(base_dir))).expanduser()
    env_dir = os.getenv("STATE_DIR") or os.getenv("GOAL_TRACKER_STATE_DIR")
    if env_dir:
        return Path(os.path.expandvars(env_dir)).expanduser()
    return DEFAULT_STATE_DIR

