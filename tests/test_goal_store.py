"""Tests for the in-memory goal store."""

from dataclasses import FrozenInstanceError

import pytest

from goals.models import Goal
from goals.store import GoalStore


@pytest.fixture
def store():
    return GoalStore(
        [
            Goal(id="g-work", name="Work out", completed=False),
            Goal(id="g-errands", name="Errands", completed=True),
        ]
    )


@pytest.fixture
def notifications(store):
    received = []
    store.subscribe(received.append)
    return received


def names(store):
    return [goal.name for goal in store.goals]


def test_initial_goals_are_taken_verbatim():
    goals = [Goal(id="a", name="  padded  ", completed=True)]
    store = GoalStore(goals)
    assert store.goals == (Goal(id="a", name="  padded  ", completed=True),)


def test_empty_store_by_default():
    assert len(GoalStore()) == 0
    assert GoalStore().goals == ()


@pytest.mark.parametrize("name", ["", " ", "   ", "\t", "\n", " \t\n "])
def test_add_ignores_blank_names(store, notifications, name):
    before = store.goals
    store.add(name, False)
    assert store.goals == before
    assert notifications == []


def test_add_appends_trimmed_goal_with_fresh_id(store, notifications):
    existing_ids = {goal.id for goal in store.goals}

    store.add("  Read  ", False)

    assert len(store) == 3
    added = store.goals[-1]
    assert added.name == "Read"
    assert added.completed is False
    assert added.id not in existing_ids
    assert len(notifications) == 1


def test_add_keeps_completed_flag(store):
    store.add("Meditate", True)
    assert store.goals[-1].completed is True


def test_add_generates_distinct_ids():
    store = GoalStore()
    for _ in range(50):
        store.add("Same name", False)
    assert len({goal.id for goal in store.goals}) == 50


def test_delete_by_id_removes_only_that_goal(store, notifications):
    store.add("Read", False)
    store.delete("g-errands")

    assert names(store) == ["Work out", "Read"]
    assert len(notifications) == 2


def test_delete_by_id_is_idempotent(store, notifications):
    store.delete("g-errands")
    after_first = store.goals

    store.delete("g-errands")

    assert store.goals == after_first
    assert len(notifications) == 1


def test_delete_missing_id_is_noop(store, notifications):
    before = store.goals
    store.delete("does-not-exist")
    assert store.goals == before
    assert notifications == []


def test_delete_at_removes_positions_in_one_mutation(store, notifications):
    store.add("Read", False)
    store.add("Cook", False)
    notifications.clear()

    store.delete_at({0, 2})

    assert names(store) == ["Errands", "Cook"]
    assert len(notifications) == 1
    assert [goal.name for goal in notifications[0]] == ["Errands", "Cook"]


def test_delete_at_empty_offsets_is_noop(store, notifications):
    store.delete_at(set())
    assert len(store) == 2
    assert notifications == []


@pytest.mark.parametrize("offsets", [{2}, {0, 5}, {-1}])
def test_delete_at_out_of_range_raises_without_mutation(store, notifications, offsets):
    before = store.goals
    with pytest.raises(IndexError):
        store.delete_at(offsets)
    assert store.goals == before
    assert notifications == []


def test_rename_trims_and_keeps_identity(store, notifications):
    store.rename("g-work", " New Name ")

    goal = store.get("g-work")
    assert goal.name == "New Name"
    assert goal.id == "g-work"
    assert goal.completed is False
    assert store.index_of("g-work") == 0
    assert len(notifications) == 1


@pytest.mark.parametrize("name", ["", "   "])
def test_rename_to_blank_leaves_name(store, notifications, name):
    store.rename("g-work", name)
    assert store.get("g-work").name == "Work out"
    assert notifications == []


def test_rename_missing_goal_is_noop(store, notifications):
    store.rename("missing", "Anything")
    assert names(store) == ["Work out", "Errands"]
    assert notifications == []


def test_rename_to_same_name_does_not_notify(store, notifications):
    store.rename("g-work", "  Work out ")
    assert notifications == []


def test_set_completed(store, notifications):
    store.set_completed("g-work")
    assert store.get("g-work").completed is True
    assert len(notifications) == 1

    store.set_completed("g-work", True)
    assert len(notifications) == 1

    store.set_completed("g-work", False)
    assert store.get("g-work").completed is False
    assert len(notifications) == 2


def test_set_completed_missing_goal_is_noop(store, notifications):
    store.set_completed("missing")
    assert notifications == []


def test_snapshots_cannot_mutate_store(store):
    snapshot = store.goals
    assert isinstance(snapshot, tuple)
    with pytest.raises(FrozenInstanceError):
        snapshot[0].name = "Hacked"
    assert store.get("g-work").name == "Work out"


def test_observer_sees_fully_applied_state(store):
    seen = []
    store.subscribe(lambda goals: seen.append((len(store), [g.name for g in goals])))

    store.delete_at({0, 1})

    assert seen == [(0, [])]


def test_unsubscribe_stops_notifications(store):
    received = []
    unsubscribe = store.subscribe(received.append)
    unsubscribe()
    unsubscribe()

    store.add("Read", False)

    assert received == []


def test_failing_observer_does_not_block_others(store):
    received = []

    def broken(goals):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(received.append)

    store.add("Read", False)

    assert len(received) == 1
    assert len(store) == 3


def test_contains_checks_ids(store):
    assert "g-work" in store
    assert "Work out" not in store


def test_end_to_end_add_then_delete():
    store = GoalStore(
        [
            Goal.create("Work out", False),
            Goal.create("Errands", True),
        ]
    )

    store.add("  Read  ", False)
    assert len(store) == 3
    third = store.goals[2]
    assert (third.name, third.completed) == ("Read", False)

    errands_id = next(goal.id for goal in store if goal.name == "Errands")
    store.delete(errands_id)

    assert names(store) == ["Work out", "Read"]
