"""Goal list state for Goal Tracker."""

from .models import Goal, new_goal_id, normalize_goal_name
from .seed import DEFAULT_GOALS, default_goals, load_seed_goals
from .store import GoalStore

__all__ = [
    "Goal",
    "GoalStore",
    "new_goal_id",
    "normalize_goal_name",
    "DEFAULT_GOALS",
    "default_goals",
    "load_seed_goals",
]
