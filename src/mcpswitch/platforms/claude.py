# Claude Code platform adapter
import logging
import os
from pathlib import Path
from typing import Any

from mcpswitch.files import ConfigFiles
from mcpswitch.models import ImportOptions, ImportSource, Target
from mcpswitch.platforms.base import JsonPlatformAdapter, looks_like_server_map

logger = logging.getLogger(__name__)

# ABOUTME: Project-local server file checked into a repository
LOCAL_CONFIG_NAME = ".mcp.json"


def normalize_path(path: Path | str) -> str:
    """Absolute, normalized path string used for project key matching."""
    try:
        return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))
    except (TypeError, ValueError):
        return str(path)


def find_matching_project_key(projects: dict[str, Any], project_root: Path) -> str | None:
    """Find the `projects` key that refers to project_root.

    ABOUTME: Compares normalized absolute paths case-insensitively on every
    ABOUTME: platform, so /Work/App and /work/app match even on Linux
    """
    wanted = normalize_path(project_root).casefold()
    for raw_key in projects:
        if not isinstance(raw_key, str) or not raw_key.strip():
            continue
        if normalize_path(raw_key).casefold() == wanted:
            return raw_key
    return None


class ClaudeAdapter(JsonPlatformAdapter):
    """Adapter for Claude Code (~/.claude.json).

    ABOUTME: Writes user-scope servers under `mcpServers`
    ABOUTME: Reads three scopes on import: user, project (projects map), local (.mcp.json)
    """

    target = Target.CLAUDE
    servers_key = "mcpServers"

    def collect(
        self,
        files: ConfigFiles,
        project_root: Path | None = None,
        options: ImportOptions | None = None,
    ) -> list[ImportSource]:
        """Collect user, project and local scope server maps, in that order."""
        opts = options or ImportOptions()
        sources: list[ImportSource] = []
        document = files.read_document(self.config_path(files))

        if opts.include_user_scope:
            servers = self.read_servers(document)
            if servers is not None:
                sources.append(ImportSource("Claude(user)", servers))

        if project_root is None:
            return sources

        projects = document.get("projects")
        if opts.include_project_scope and isinstance(projects, dict):
            key = find_matching_project_key(projects, project_root)
            project = projects.get(key) if key is not None else None
            if isinstance(project, dict) and project.get(self.servers_key) is not None:
                sources.append(ImportSource(f"Claude(project:{key})", project[self.servers_key]))

        if opts.include_local_scope:
            local_path = Path(project_root) / LOCAL_CONFIG_NAME
            if local_path.is_file():
                local = files.read_document(local_path)
                servers = local.get(self.servers_key)
                if not isinstance(servers, dict) and looks_like_server_map(local):
                    servers = local
                if servers is not None:
                    sources.append(ImportSource(f"Claude(local:{local_path})", servers))
                else:
                    logger.debug(f"No servers found in {local_path}")

        return sources
