"""Goal value type shared by the store and its callers."""
from __future__ import annotations

import uuid
from dataclasses import dataclass


def new_goal_id() -> str:
    return str(uuid.uuid4())


def normalize_goal_name(text: str) -> str:
    """Trim leading/trailing whitespace from a goal name."""
    if not text:
        return ""
    return str(text).strip()


@dataclass(frozen=True)
class Goal:
    """A named goal with a stable identifier and a completion flag."""

    id: str
    name: str
    completed: bool = False

    @classmethod
    def create(cls, name: str, completed: bool = False) -> "Goal":
        """Build a goal with a fresh id, rejecting empty names."""
        cleaned = normalize_goal_name(name)
        if not cleaned:
            raise ValueError("Goal name is required")
        return cls(id=new_goal_id(), name=cleaned, completed=bool(completed))
