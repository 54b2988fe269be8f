"""In-memory goal list with change notifications.

GoalStore is the only mutator of its collection. Callers read snapshots
(tuples of frozen Goal values) and change state through the operations below;
every call that changes state notifies subscribers exactly once, after the
change is fully applied. Invalid names and unknown ids are ignored silently.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Iterator, Optional

from goals.models import Goal, new_goal_id, normalize_goal_name

logger = logging.getLogger(__name__)

GoalsObserver = Callable[[tuple[Goal, ...]], None]


class GoalStore:
    """Ordered, observable collection of goals for one screen session."""

    def __init__(self, goals: Iterable[Goal] = ()) -> None:
        # Preconstructed goals are taken as-is.
        self._goals: list[Goal] = list(goals)
        self._observers: list[GoalsObserver] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def goals(self) -> tuple[Goal, ...]:
        return tuple(self._goals)

    def __len__(self) -> int:
        return len(self._goals)

    def __iter__(self) -> Iterator[Goal]:
        return iter(self.goals)

    def __contains__(self, goal_id: object) -> bool:
        return self.index_of(goal_id) is not None

    def index_of(self, goal_id: object) -> Optional[int]:
        for idx, goal in enumerate(self._goals):
            if goal.id == goal_id:
                return idx
        return None

    def get(self, goal_id: str) -> Optional[Goal]:
        idx = self.index_of(goal_id)
        return self._goals[idx] if idx is not None else None

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, callback: GoalsObserver) -> Callable[[], None]:
        """
        Register a callback for change notifications.

        Args:
            callback: Called with the post-change snapshot after each mutation

        Returns:
            A function that removes the callback; calling it twice is harmless
        """
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.goals
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as exc:
                logger.error(f"Goal observer {observer!r} failed: {exc}", exc_info=True)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: str, completed: bool = False) -> None:
        trimmed = normalize_goal_name(name)
        if not trimmed:
            logger.debug("Ignoring goal with empty name")
            return

        goal_id = new_goal_id()
        existing = {goal.id for goal in self._goals}
        while goal_id in existing:
            goal_id = new_goal_id()

        self._goals.append(Goal(id=goal_id, name=trimmed, completed=bool(completed)))
        logger.debug(f"Added goal {goal_id}: {trimmed!r}")
        self._notify()

    def delete_at(self, offsets: Iterable[int]) -> None:
        """
        Remove the goals at the given positions in a single mutation.

        Positions refer to the order before the call. Any position outside
        the current list raises IndexError and nothing is removed.
        """
        positions = set(offsets)
        if not positions:
            return

        size = len(self._goals)
        invalid = sorted(pos for pos in positions if pos < 0 or pos >= size)
        if invalid:
            raise IndexError(f"Goal offsets out of range for {size} goals: {invalid}")

        self._goals = [goal for idx, goal in enumerate(self._goals) if idx not in positions]
        logger.debug(f"Deleted goals at offsets {sorted(positions)}")
        self._notify()

    def delete(self, goal_id: str) -> None:
        idx = self.index_of(goal_id)
        if idx is None:
            return
        del self._goals[idx]
        logger.debug(f"Deleted goal {goal_id}")
        self._notify()

    def rename(self, goal_id: str, name: str) -> None:
        trimmed = normalize_goal_name(name)
        if not trimmed:
            return
        idx = self.index_of(goal_id)
        if idx is None or self._goals[idx].name == trimmed:
            return
        self._goals[idx] = replace(self._goals[idx], name=trimmed)
        logger.debug(f"Renamed goal {goal_id} to {trimmed!r}")
        self._notify()

    def set_completed(self, goal_id: str, completed: bool = True) -> None:
        idx = self.index_of(goal_id)
        if idx is None or self._goals[idx].completed == bool(completed):
            return
        self._goals[idx] = replace(self._goals[idx], completed=bool(completed))
        logger.debug(f"Marked goal {goal_id} completed={bool(completed)}")
        self._notify()
