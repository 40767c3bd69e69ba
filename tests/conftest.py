"""Shared fixtures."""

import pytest

from labtrack.agent.models import ActingUser
from labtrack.store import JsonFileStore
from labtrack.tools import ToolContext, build_registry
from tests.fakes import scripted_openai


@pytest.fixture
def user():
    return ActingUser(uid="u1", display_name="Dr. Who", email="who@lab.example")


@pytest.fixture
def other_user():
    return ActingUser(uid="u2", display_name="Dr. Watson", email="watson@lab.example")


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def make_registry(store):
    """Build a registry for a user, optionally with a scripted OpenAI client."""

    def _make(acting_user, openai=None, timeout=5.0):
        context = ToolContext(
            user=acting_user,
            store=store,
            openai=openai or scripted_openai(),
            model="test-idea-model",
            request_timeout=timeout,
        )
        return build_registry(context)

    return _make
