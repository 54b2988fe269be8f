"""Starter goals for a fresh goals screen, optionally read from YAML."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from goals.models import Goal

logger = logging.getLogger(__name__)

DEFAULT_GOALS: tuple[tuple[str, bool], ...] = (
    ("Work out", False),
    ("Errands", True),
)


def default_goals() -> list[Goal]:
    return [Goal.create(name, completed) for name, completed in DEFAULT_GOALS]


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        return {}
    return data


def _goal_from_entry(entry: Any) -> Optional[Goal]:
    if isinstance(entry, str):
        entry = {"name": entry}
    if not isinstance(entry, dict):
        return None
    try:
        return Goal.create(str(entry.get("name", "")), bool(entry.get("completed", False)))
    except ValueError:
        return None


def load_seed_goals(path: Optional[Path] = None) -> list[Goal]:
    """
    Load the initial goal list for a goals screen.

    The file looks like::

        goals:
          - name: Work out
            completed: false
          - Errands

    Args:
        path: YAML file to read; None, a missing file or malformed YAML
            yields DEFAULT_GOALS

    Returns:
        Freshly identified goals in file order
    """
    if path is None:
        return default_goals()

    seed_path = Path(path).expanduser()
    if not seed_path.exists():
        logger.info(f"Seed file {seed_path} not found, using default goals")
        return default_goals()

    try:
        data = _load_yaml(seed_path)
    except yaml.YAMLError as e:
        logger.warning(f"Malformed seed file {seed_path}, using default goals: {e}")
        return default_goals()

    entries = data.get("goals") if isinstance(data.get("goals"), list) else []

    goals: list[Goal] = []
    for entry in entries:
        goal = _goal_from_entry(entry)
        if goal is None:
            logger.warning(f"Skipping invalid seed goal entry in {seed_path}: {entry!r}")
            continue
        goals.append(goal)

    logger.debug(f"Loaded {len(goals)} seed goals from {seed_path}")
    return goals
