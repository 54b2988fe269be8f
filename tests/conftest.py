from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path_factory, monkeypatch):
    """Keep log and state files out of the real home directory."""
    state_dir = tmp_path_factory.mktemp("state")
    monkeypatch.setenv("STATE_DIR", str(state_dir))
    return state_dir
