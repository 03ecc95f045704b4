# Tests for configuration paths and canonical list persistence
import json

import pytest

from mcpswitch.config import (
    CONFIG_DIR,
    HOME_ENV_VAR,
    ensure_config_dir,
    get_backup_dir,
    get_config_path,
    load_servers,
    save_servers,
)
from mcpswitch.models import CanonicalServer, NetworkKind, Target


def test_get_config_path_default(monkeypatch):
    """Test default config file location."""
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)

    path = get_config_path()

    assert path == CONFIG_DIR / "servers.json"
    assert ".mcpswitch" in str(path)


def test_config_dir_override(tmp_path, monkeypatch):
    """Test MCPSWITCH_HOME moves config and backups."""
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "home"))

    assert get_config_path() == tmp_path / "home" / "servers.json"
    assert get_backup_dir() == tmp_path / "home" / "backups"


def test_ensure_config_dir(tmp_path, monkeypatch):
    """Test creating config directory."""
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "new"))

    result = ensure_config_dir()

    assert result == tmp_path / "new"
    assert result.is_dir()


def test_load_missing_file_is_empty(tmp_path):
    assert load_servers(tmp_path / "servers.json") == []


def test_load_valid_file(tmp_path):
    """Test loading a valid servers file."""
    config_file = tmp_path / "servers.json"
    config_file.write_text(json.dumps({
        "mcpswitch": {"version": "1.0"},
        "servers": [
            {
                "id": "abc",
                "name": "filesystem",
                "transport": "stdio",
                "command": "npx",
                "args": ["-y", "@modelcontextprotocol/server-filesystem"],
                "enabled": True,
                "syncTargets": {"claude": True, "codex": False},
            },
            {
                "id": "def",
                "name": "remote",
                "transport": "sse",
                "url": "https://example.com/mcp",
                "env": {"TOKEN": "t"},
                "enabled": False,
            },
        ],
    }))

    servers = load_servers(config_file)

    assert [s.name for s in servers] == ["filesystem", "remote"]
    fs, remote = servers
    assert fs.id == "abc"
    assert fs.args == ("-y", "@modelcontextprotocol/server-filesystem")
    assert fs.is_synced_to(Target.CLAUDE)
    assert not fs.is_synced_to(Target.GEMINI)
    assert remote.transport.kind is NetworkKind.SSE
    assert remote.env == {"TOKEN": "t"}
    assert not remote.enabled


@pytest.mark.parametrize(
    "content, message",
    [
        ("{ invalid json }", "Invalid JSON"),
        ('{"mcpswitch": {}}', "Missing required 'servers'"),
        ('{"servers": {}}', "must be a list"),
        ('{"servers": ["x"]}', "not an object"),
        ('{"servers": [{"name": "x", "transport": "stdio"}]}', "missing command or url"),
    ],
)
def test_load_invalid_file(tmp_path, content, message):
    config_file = tmp_path / "servers.json"
    config_file.write_text(content)

    with pytest.raises(ValueError, match=message):
        load_servers(config_file)


def test_save_and_load(tmp_path):
    """Test that saved servers load back unchanged and in order."""
    path = tmp_path / "nested" / "servers.json"
    servers = [
        CanonicalServer.stdio("b", "echo", ["1"], env={"K": "v"}),
        CanonicalServer.network("a", "https://x.dev/sse", sync_targets={Target.CODEX: True}),
    ]

    save_servers(path, servers)

    data = json.loads(path.read_text())
    assert data["mcpswitch"] == {"version": "1.0"}
    assert [entry["name"] for entry in data["servers"]] == ["b", "a"]
    assert load_servers(path) == servers
