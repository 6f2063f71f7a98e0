"""Shared test fixtures for healthnote."""

import os
import tempfile
from datetime import date

import pytest

from healthnote.core.exceptions import RemoteRejectedError, RemoteUnreachableError
from healthnote.core.storage import MemoryStorage
from healthnote.journal import JournalStore, ThemeOption, UserProfile


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "store_dir": os.path.join(tmp_dir, "data", "store"),
        },
        "sync": {"timeout": 2.5},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def store():
    return JournalStore(MemoryStorage())


@pytest.fixture
def profile():
    return UserProfile(
        name="Aiko",
        birth_date=date(1990, 4, 12),
        theme=ThemeOption.DARK,
        is_child_mode=False,
        height=160.0,
        weight=52.0,
    )


class FakeSession:
    """SessionProvider whose signed-in user can be flipped by the test."""

    def __init__(self, user_id=None):
        self.user_id = user_id
        self.signed_out = False

    def current_user_id(self):
        return self.user_id

    def sign_out(self):
        self.signed_out = True
        self.user_id = None


class FakeBackend:
    """In-memory RemoteBackend. Set ``fail`` to "unreachable" or "rejected" to break it."""

    def __init__(self):
        self.profiles: dict[str, dict] = {}
        self.logs: list[dict] = []
        self.calls: list[str] = []
        self.fail: str | None = None

    def _check(self, op):
        self.calls.append(op)
        if self.fail == "unreachable":
            raise RemoteUnreachableError("offline")
        if self.fail == "rejected":
            raise RemoteRejectedError("denied")

    def select_profile(self, user_id):
        self._check("select_profile")
        return self.profiles.get(user_id)

    def select_logs(self, user_id):
        self._check("select_logs")
        return [row for row in self.logs if row["user_id"] == user_id]

    def upsert_profile(self, row):
        self._check("upsert_profile")
        self.profiles[row["user_id"]] = dict(row)

    def insert_log(self, row):
        self._check("insert_log")
        self.logs.append(dict(row))

    def delete_profiles(self, user_id):
        self._check("delete_profiles")
        self.profiles.pop(user_id, None)

    def delete_logs(self, user_id):
        self._check("delete_logs")
        self.logs = [row for row in self.logs if row["user_id"] != user_id]


@pytest.fixture
def session():
    return FakeSession("user-123")


@pytest.fixture
def backend():
    return FakeBackend()
