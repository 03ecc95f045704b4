# Configuration paths and canonical list persistence for mcpswitch
import json
import os
from pathlib import Path

from mcpswitch.files import ConfigFiles
from mcpswitch.models import CanonicalServer

# ABOUTME: Environment variable overriding the config directory
HOME_ENV_VAR = "MCPSWITCH_HOME"

# ABOUTME: Default config directory in user's home
CONFIG_DIR = Path.home() / ".mcpswitch"

# ABOUTME: Canonical server list (JSON format)
CONFIG_FILE_NAME = "servers.json"

CONFIG_VERSION = "1.0"


def get_config_dir() -> Path:
    """Return the mcpswitch config directory, honouring MCPSWITCH_HOME."""
    override = os.environ.get(HOME_ENV_VAR)
    return Path(override).expanduser() if override else CONFIG_DIR


def get_config_path() -> Path:
    """Return the path to the canonical server list.

    ABOUTME: Returns ~/.mcpswitch/servers.json by default
    ABOUTME: File may not exist yet - use ensure_config_dir() first
    """
    return get_config_dir() / CONFIG_FILE_NAME


def get_backup_dir() -> Path:
    """Directory for target file backups (~/.mcpswitch/backups)."""
    return get_config_dir() / "backups"


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist.

    Returns:
        Path to config directory (guaranteed to exist)
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_servers(path: Path) -> list[CanonicalServer]:
    """Load the canonical server list.

    ABOUTME: A missing file is an empty list (first run)
    ABOUTME: Fail-fast on parse errors with clear error messages

    Args:
        path: Path to servers.json

    Returns:
        Servers in stored order

    Raises:
        ValueError: If the JSON is invalid or an entry has no command/url
    """
    if not path.exists():
        return []

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict) or "servers" not in data:
        raise ValueError(f"Missing required 'servers' section in {path}")

    entries = data["servers"]
    if not isinstance(entries, list):
        raise ValueError(f"'servers' must be a list in {path}")

    servers: list[CanonicalServer] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Server #{index} in {path} is not an object")
        servers.append(CanonicalServer.from_dict(entry))
    return servers


def save_servers(path: Path, servers: list[CanonicalServer], files: ConfigFiles | None = None) -> None:
    """Save the canonical server list atomically.

    Raises:
        OSError: If file cannot be written
    """
    data = {
        "mcpswitch": {"version": CONFIG_VERSION},
        "servers": [server.to_dict() for server in servers],
    }
    (files or ConfigFiles()).write_document(path, data)
