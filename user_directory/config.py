"""
Runtime configuration read from environment variables (and ``.env``).
"""

import json
import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Users file relative to project root
DEFAULT_USERS_FILE = os.path.join(PROJECT_ROOT, "data", "users.json")


def _env_bool(key: str, default: bool = True) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_server_command() -> List[str]:
    """
    Parse MCP_SERVER_COMMAND as a JSON argv list.

    Falls back to running the bundled server module with the current
    interpreter when unset.
    """
    raw = os.getenv("MCP_SERVER_COMMAND", "").strip()
    if raw:
        argv = json.loads(raw)
        if not isinstance(argv, list) or not argv:
            raise ValueError(f"MCP_SERVER_COMMAND must be a non-empty JSON list, got {raw!r}")
        return [str(x) for x in argv]
    return [sys.executable, "-m", "user_directory.mcp.mcp_server"]


@dataclass
class Settings:
    # Provider
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
    temperature: float = field(default_factory=lambda: float(os.getenv("OPENAI_TEMPERATURE", "0.7")))

    # Store
    users_file: str = field(default_factory=lambda: os.getenv("MCP_USERS_FILE", DEFAULT_USERS_FILE))

    # Client
    server_command: List[str] = field(default_factory=_parse_server_command)
    confirm_sampling: bool = field(default_factory=lambda: _env_bool("CONFIRM_SAMPLING", True))
    max_tool_steps: int = field(default_factory=lambda: int(os.getenv("MAX_TOOL_STEPS", "5")))

    log_level: str = field(default_factory=lambda: os.getenv("USER_DIRECTORY_LOG_LEVEL", "INFO").upper())


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
