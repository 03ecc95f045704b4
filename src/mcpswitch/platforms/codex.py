# Codex CLI platform adapter
import logging
from pathlib import Path
from typing import Any

from mcpswitch.files import ConfigFiles
from mcpswitch.models import (
    CandidateServer,
    CanonicalServer,
    ImportOptions,
    ImportSource,
    NetworkKind,
    NetworkTransport,
    ParseResult,
    ParseWarning,
    StdioTransport,
    Target,
    Transport,
)
from mcpswitch.utils.managed_block import ManagedBlock
from mcpswitch.utils.toml_sections import SectionParser, TomlSection, remove_sections
from mcpswitch.utils.toml_writer import render_tables

logger = logging.getLogger(__name__)

# ABOUTME: Codex uses snake_case mcp_servers tables (not mcpServers)
SERVERS_PREFIX = "mcp_servers"

MCP_BLOCK = ManagedBlock(
    start_marker="# >>> mcpswitch:mcp:start",
    end_marker="# <<< mcpswitch:mcp:end",
)

BLOCK_TITLE = "# MCP Servers (managed by mcpswitch)"


class CodexAdapter:
    """Adapter for Codex CLI (~/.codex/config.toml).

    ABOUTME: config.toml also holds model/provider settings we must not touch,
    ABOUTME: so servers are written inside a managed block and the rest of
    ABOUTME: the file is patched as text, never re-serialized
    """

    target = Target.CODEX

    @property
    def name(self) -> str:
        """Human-readable platform name."""
        return self.target.display_name

    def config_path(self, files: ConfigFiles) -> Path:
        return files.mcp_path(self.target)

    def render(self, servers: list[CanonicalServer]) -> str:
        """Render the managed block holding one table per server."""
        tables: dict[str, dict[str, Any]] = {}
        for server in servers:
            values: dict[str, Any] = {}
            if isinstance(server.transport, StdioTransport):
                values["type"] = "stdio"
                values["command"] = server.transport.command
                if server.transport.args:
                    values["args"] = list(server.transport.args)
            else:
                values["type"] = server.transport.kind.value
                values["url"] = server.transport.url
            if server.env:
                values["env"] = dict(server.env)
            tables[server.name] = values

        body = f"{BLOCK_TITLE}\n\n" + render_tables(SERVERS_PREFIX, tables)
        return MCP_BLOCK.wrap(body)

    def parse(self, raw: Any, source_label: str) -> ParseResult:
        """Parse config.toml text with the line-oriented section reader.

        ABOUTME: Both managed and hand-written tables are read
        """
        result = ParseResult()
        if not isinstance(raw, str) or not raw.strip():
            return result

        for section in SectionParser(SERVERS_PREFIX).parse(raw):
            transport = section_to_transport(section)
            if transport is None:
                result.warnings.append(
                    ParseWarning(
                        source_label,
                        f"type '{section.type}' without a matching command/url",
                        name=section.name,
                    )
                )
                continue
            result.candidates.append(
                CandidateServer(
                    name=section.name,
                    transport=transport,
                    source=self.target,
                    source_label=source_label,
                    env=dict(section.env),
                )
            )
        return result

    def save(self, files: ConfigFiles, servers: list[CanonicalServer]) -> Path:
        """Rewrite the managed block in config.toml.

        ABOUTME: Drops unmanaged tables that define one of the servers being
        ABOUTME: written, then replaces the previous block in place (or
        ABOUTME: appends one), so repeated saves give byte-identical files
        """
        path = self.config_path(files)
        existing = files.read_text(path)
        block = self.render(servers)
        names = [server.name for server in servers if server.name.strip()]

        parts = MCP_BLOCK.split(existing)
        if parts is not None:
            before, _, after = parts
            content = (
                remove_sections(before, SERVERS_PREFIX, names)
                + block
                + remove_sections(after, SERVERS_PREFIX, names)
            )
        else:
            stripped = remove_sections(existing, SERVERS_PREFIX, names)
            if stripped != existing:
                logger.info(f"Removed unmanaged [{SERVERS_PREFIX}] tables now managed in {path}")
            content = MCP_BLOCK.upsert(stripped, block)

        files.write_text(path, content)
        return path

    def collect(
        self,
        files: ConfigFiles,
        project_root: Path | None = None,
        options: ImportOptions | None = None,
    ) -> list[ImportSource]:
        content = files.read_text(self.config_path(files))
        if not content.strip():
            return []
        return [ImportSource(label=self.name, fragment=content)]


def section_to_transport(section: TomlSection) -> Transport | None:
    """Infer the transport from `type` and its companion field."""
    if section.type == "stdio" and section.command:
        return StdioTransport(section.command, tuple(section.args))
    if section.type in (NetworkKind.SSE.value, NetworkKind.HTTP.value) and section.url:
        return NetworkTransport(section.url, NetworkKind(section.type))
    return None
