"""Shared fixtures for the user directory tests."""

import json
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from user_directory.config import Settings
from user_directory.store import UserStore


SEED_USER = {
    "id": 1,
    "name": "John Doe",
    "email": "john.doe@example.com",
    "address": "1234 Elm Street, Springfield, USA",
    "phone": "555-123-4567",
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def users_file(tmp_path):
    """A users file holding a single user with ID 1."""
    path = tmp_path / "users.json"
    path.write_text(json.dumps([SEED_USER], indent=2), encoding="utf-8")
    return str(path)


@pytest.fixture
def store(users_file):
    return UserStore(users_file)


@pytest.fixture
def settings(users_file):
    """Settings with a dummy key so agents never read the real environment."""
    return Settings(
        openai_api_key="test-key",
        openai_model="test-model",
        temperature=0.0,
        users_file=users_file,
        server_command=["python", "-m", "user_directory.mcp.mcp_server"],
        confirm_sampling=True,
        max_tool_steps=5,
        log_level="INFO",
    )
