# Platform adapter base utilities
import logging
from pathlib import Path
from typing import Any

from mcpswitch.files import ConfigFiles
from mcpswitch.models import (
    CandidateServer,
    CanonicalServer,
    ImportOptions,
    ImportSource,
    NetworkTransport,
    ParseResult,
    ParseWarning,
    StdioTransport,
    Target,
    Transport,
    classify_url,
)

logger = logging.getLogger(__name__)


def server_to_dict(server: CanonicalServer) -> dict[str, Any]:
    """Convert CanonicalServer to the common `mcpServers` entry format.

    ABOUTME: stdio -> {command, args}, network -> {url}
    ABOUTME: Omits empty env dict for cleaner output
    """
    result: dict[str, Any] = {}

    if isinstance(server.transport, StdioTransport):
        result["command"] = server.transport.command
        result["args"] = list(server.transport.args)
    else:
        result["url"] = server.transport.url

    if server.env:
        result["env"] = dict(server.env)

    return result


def read_env(data: Any) -> dict[str, str]:
    """Read an env mapping, dropping nulls and stringifying scalar values."""
    if not isinstance(data, dict):
        return {}
    return {
        str(key): value if isinstance(value, str) else str(value)
        for key, value in data.items()
        if value is not None
    }


def read_args(data: Any) -> tuple[str, ...]:
    if not isinstance(data, list):
        return ()
    return tuple(str(arg) for arg in data if arg is not None)


def dict_to_transport(data: dict[str, Any]) -> Transport | None:
    """Build a transport from a `{command, args}` or `{url}` entry.

    ABOUTME: `command` wins over `url` when both are present
    ABOUTME: Returns None when neither yields a usable value
    """
    command = data.get("command")
    if isinstance(command, str) and command.strip():
        return StdioTransport(command, read_args(data.get("args")))

    url = data.get("url")
    if isinstance(url, str) and url.strip():
        return NetworkTransport(url, classify_url(url))

    return None


def looks_like_server_map(data: dict[str, Any]) -> bool:
    """True if any top-level value is an object with `command` or `url`."""
    return any(
        isinstance(item, dict) and ("command" in item or "url" in item)
        for item in data.values()
    )


class JsonPlatformAdapter:
    """Shared behaviour for targets that keep servers in a JSON object.

    ABOUTME: Subclasses set target/servers_key and may override render_entry
    ABOUTME: and parse_entry for their own entry schema
    """

    target: Target = Target.CLAUDE
    servers_key: str = "mcpServers"

    @property
    def name(self) -> str:
        """Human-readable platform name."""
        return self.target.display_name

    def config_path(self, files: ConfigFiles) -> Path:
        return files.mcp_path(self.target)

    def render_entry(self, server: CanonicalServer) -> dict[str, Any]:
        return server_to_dict(server)

    def render(self, servers: list[CanonicalServer]) -> dict[str, Any]:
        """Render servers as a name-keyed mapping (pure, no I/O)."""
        return {server.name: self.render_entry(server) for server in servers}

    def parse_entry(self, name: str, data: dict[str, Any]) -> tuple[Transport, dict[str, str]] | None:
        transport = dict_to_transport(data)
        if transport is None:
            return None
        return transport, read_env(data.get("env"))

    def parse(self, raw: Any, source_label: str) -> ParseResult:
        """Parse a name-keyed server mapping.

        ABOUTME: Never raises for bad entries; each rejected entry yields
        ABOUTME: exactly one ParseWarning
        """
        result = ParseResult()
        if raw is None:
            return result
        if not isinstance(raw, dict):
            result.warnings.append(
                ParseWarning(source_label, f"expected an object of servers, got {type(raw).__name__}")
            )
            return result

        for name, data in raw.items():
            if not isinstance(name, str) or not name.strip():
                result.warnings.append(ParseWarning(source_label, "server with empty name"))
                continue
            if not isinstance(data, dict):
                result.warnings.append(
                    ParseWarning(source_label, "entry is not an object", name=name)
                )
                continue

            try:
                parsed = self.parse_entry(name, data)
            except (TypeError, ValueError) as e:
                result.warnings.append(ParseWarning(source_label, f"invalid entry: {e}", name=name))
                continue

            if parsed is None:
                result.warnings.append(
                    ParseWarning(source_label, "entry has neither command nor url", name=name)
                )
                continue

            transport, env = parsed
            result.candidates.append(
                CandidateServer(
                    name=name,
                    transport=transport,
                    source=self.target,
                    source_label=source_label,
                    env=env,
                )
            )
            logger.debug(f"{source_label}: parsed server '{name}'")

        return result

    def save(self, files: ConfigFiles, servers: list[CanonicalServer]) -> Path:
        """Replace the servers key of the target document.

        ABOUTME: Creates file if missing, preserves every other key
        ABOUTME: Removes the key entirely when there is nothing to export
        """
        path = self.config_path(files)
        document = files.read_document(path)

        if servers:
            document[self.servers_key] = self.render(servers)
        else:
            document.pop(self.servers_key, None)

        files.write_document(path, document)
        return path

    def read_servers(self, document: dict[str, Any]) -> Any:
        return document.get(self.servers_key)

    def collect(
        self,
        files: ConfigFiles,
        project_root: Path | None = None,
        options: ImportOptions | None = None,
    ) -> list[ImportSource]:
        """Single source: the servers key of the target document."""
        document = files.read_document(self.config_path(files))
        servers = self.read_servers(document)
        if servers is None:
            return []
        return [ImportSource(label=self.name, fragment=servers)]
