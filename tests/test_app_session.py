"""Tests for app session wiring: auth gating and the complete-goal flow."""

from pathlib import Path

import pytest

from capture import (
    CameraPosition,
    CapturePermissionError,
    CaptureSession,
    PermissionStatus,
    SimulatedCameraBackend,
)
from goal_tracker.app import AppSession, create_app_session
from goal_tracker.auth import AuthEvent, AuthSession, AuthStateChange, SupabaseAuthClient
from goal_tracker.config import Config

SESSION = AuthSession(access_token="a", refresh_token="r", user_id="user-1", email="me@example.com")


class FakeAuthClient:
    def __init__(self, session=None):
        self.current_session = session
        self.listeners = []
        self.closed = False

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        callback(AuthStateChange(AuthEvent.INITIAL_SESSION, self.current_session))
        return lambda: self.listeners.remove(callback)

    def emit(self, event, session):
        self.current_session = session
        for listener in list(self.listeners):
            listener(AuthStateChange(event, session))

    def close(self):
        self.closed = True


def make_config(tmp_path, seed_file=None):
    return Config(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="anon-key",
        auth_timeout=10,
        goals_seed_file=seed_file,
        enable_multi_camera=True,
        log_level="INFO",
        state_dir=Path(tmp_path),
    )


def test_initial_session_sets_authentication(tmp_path):
    with AppSession(make_config(tmp_path), FakeAuthClient(SESSION)) as app:
        assert app.is_authenticated


def test_auth_events_toggle_authentication(tmp_path):
    auth = FakeAuthClient()
    app = AppSession(make_config(tmp_path), auth)
    app.open()
    assert not app.is_authenticated

    auth.emit(AuthEvent.SIGNED_IN, SESSION)
    assert app.is_authenticated

    auth.emit(AuthEvent.SIGNED_OUT, None)
    assert not app.is_authenticated
    app.close()


def test_close_unsubscribes_and_closes_client(tmp_path):
    auth = FakeAuthClient(SESSION)
    app = AppSession(make_config(tmp_path), auth)
    app.open()
    app.close()

    assert auth.listeners == []
    assert auth.closed
    assert not app.is_authenticated


def test_goals_screen_requires_sign_in(tmp_path):
    with AppSession(make_config(tmp_path), FakeAuthClient()) as app:
        with pytest.raises(PermissionError):
            app.open_goals_screen()


def test_goals_screen_gets_fresh_seeded_store(tmp_path):
    with AppSession(make_config(tmp_path), FakeAuthClient(SESSION)) as app:
        first = app.open_goals_screen()
        second = app.open_goals_screen()

    assert [g.name for g in first] == ["Work out", "Errands"]
    first.add("Read", False)
    assert len(second) == 2


def test_goals_screen_uses_seed_file(tmp_path):
    seed = tmp_path / "goals.yaml"
    seed.write_text("goals:\n  - name: Stretch\n")
    with AppSession(make_config(tmp_path, seed), FakeAuthClient(SESSION)) as app:
        store = app.open_goals_screen()
    assert [g.name for g in store] == ["Stretch"]


@pytest.mark.asyncio
async def test_complete_goal_captures_and_marks_completed(tmp_path):
    backend = SimulatedCameraBackend()
    app = AppSession(make_config(tmp_path), FakeAuthClient(SESSION), CaptureSession(backend))
    app.open()
    store = app.open_goals_screen()
    goal_id = store.goals[0].id
    notifications = []
    store.subscribe(notifications.append)

    image = await app.complete_goal(store, goal_id)

    assert image.position == CameraPosition.BACK
    assert store.get(goal_id).completed is True
    assert len(notifications) == 1
    assert backend.start_calls == 1
    assert not backend.is_running
    await app.aclose()


@pytest.mark.asyncio
async def test_complete_goal_denied_permission(tmp_path):
    backend = SimulatedCameraBackend(permission=PermissionStatus.DENIED)
    app = AppSession(make_config(tmp_path), FakeAuthClient(SESSION), CaptureSession(backend))
    app.open()
    store = app.open_goals_screen()
    goal_id = store.goals[0].id

    with pytest.raises(CapturePermissionError):
        await app.complete_goal(store, goal_id)

    assert store.get(goal_id).completed is False
    assert backend.photos_taken == 0
    app.close()


@pytest.mark.asyncio
async def test_complete_missing_goal_skips_capture(tmp_path):
    backend = SimulatedCameraBackend()
    app = AppSession(make_config(tmp_path), FakeAuthClient(SESSION), CaptureSession(backend))
    app.open()
    store = app.open_goals_screen()

    assert await app.complete_goal(store, "missing") is None
    assert backend.photos_taken == 0
    app.close()


@pytest.mark.asyncio
async def test_aclose_stops_running_capture(tmp_path):
    backend = SimulatedCameraBackend()
    camera = CaptureSession(backend)
    auth = FakeAuthClient(SESSION)
    app = AppSession(make_config(tmp_path), auth, camera)
    app.open()
    await camera.configure()
    await camera.start()

    await app.aclose()

    assert not backend.is_running
    assert auth.closed


def test_create_app_session_builds_collaborators(tmp_path):
    config = make_config(tmp_path)
    config.enable_multi_camera = False
    backend = SimulatedCameraBackend()

    app = create_app_session(config, backend)

    assert isinstance(app.auth_client, SupabaseAuthClient)
    assert app.auth_client.url == "https://demo.supabase.co"
    assert app.capture_session.backend is backend
    assert app.capture_session.allow_multi_camera is False
    app.close()


def test_create_app_session_without_camera(tmp_path):
    app = create_app_session(make_config(tmp_path))
    assert app.capture_session is None
    app.close()
