# OpenCode platform adapter
from typing import Any

from mcpswitch.models import (
    CanonicalServer,
    NetworkTransport,
    StdioTransport,
    Target,
    Transport,
    classify_url,
)
from mcpswitch.platforms.base import JsonPlatformAdapter, dict_to_transport, read_env

# ABOUTME: Older OpenCode configs used the Claude-style key
LEGACY_SERVERS_KEY = "mcpServers"


class OpenCodeAdapter(JsonPlatformAdapter):
    """Adapter for OpenCode (~/.config/opencode/opencode.json).

    ABOUTME: Servers live under `mcp`; stdio entries are {type: local, command: [cmd, *args]}
    ABOUTME: network entries are {type: remote, url}; env is called `environment`
    """

    target = Target.OPENCODE
    servers_key = "mcp"

    def render_entry(self, server: CanonicalServer) -> dict[str, Any]:
        entry: dict[str, Any]
        if isinstance(server.transport, StdioTransport):
            entry = {
                "type": "local",
                "command": [server.transport.command, *server.transport.args],
            }
        else:
            entry = {"type": "remote", "url": server.transport.url}

        if server.env:
            entry["environment"] = dict(server.env)
        return entry

    def parse_entry(self, name: str, data: dict[str, Any]) -> tuple[Transport, dict[str, str]] | None:
        """Parse local/remote entries, falling back to the generic schema.

        ABOUTME: A local entry with an empty command array is rejected
        """
        entry_type = data.get("type")
        command = data.get("command")
        url = data.get("url")

        transport: Transport | None
        if entry_type == "local" and isinstance(command, list):
            parts = [str(part) for part in command if part is not None]
            if not parts or not parts[0].strip():
                return None
            transport = StdioTransport(parts[0], tuple(parts[1:]))
        elif entry_type == "remote" and isinstance(url, str) and url.strip():
            transport = NetworkTransport(url, classify_url(url))
        else:
            transport = dict_to_transport(data)
            if transport is None:
                return None
            return transport, read_env(data.get("env"))

        env_data = data.get("environment")
        if not isinstance(env_data, dict):
            env_data = data.get("env")
        return transport, read_env(env_data)

    def read_servers(self, document: dict[str, Any]) -> Any:
        servers = document.get(self.servers_key)
        if isinstance(servers, dict):
            return servers
        legacy = document.get(LEGACY_SERVERS_KEY)
        if isinstance(legacy, dict):
            return legacy
        return servers
