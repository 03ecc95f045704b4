# ABOUTME: File access for per-tool config files.
# ABOUTME: Pure path resolution plus tolerant reads and atomic writes.
import json
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Any, cast

from mcpswitch.models import Target

logger = logging.getLogger(__name__)


class PathKind(str, Enum):
    PRIMARY_DOCUMENT = "primary"
    MCP_DOCUMENT = "mcp"
    PROMPT_FILE = "prompt"


class ConfigFiles:
    """Resolves and reads/writes the config files of every target.

    ABOUTME: `home` defaults to the user's home directory; tests pass tmp_path
    ABOUTME: Missing files read as empty, unreadable ones raise; writes are atomic
    """

    def __init__(self, home: Path | None = None) -> None:
        self.home = Path(home) if home else Path.home()

    def config_dir(self, target: Target) -> Path:
        """Main config directory of a tool."""
        if target is Target.OPENCODE:
            return self.home / ".config" / "opencode"
        return self.home / f".{Target(target).value}"

    def resolve_config_path(self, target: Target, kind: PathKind) -> Path:
        """Return the path of one of a tool's files.

        ABOUTME: PRIMARY_DOCUMENT is the provider/auth file, MCP_DOCUMENT the
        ABOUTME: file holding server definitions, PROMPT_FILE the global prompt
        ABOUTME: (a directory for OpenCode)
        """
        target = Target(target)
        kind = PathKind(kind)
        base = self.config_dir(target)

        if kind is PathKind.MCP_DOCUMENT:
            if target is Target.CLAUDE:
                return self.home / ".claude.json"
            return base / {
                Target.CODEX: "config.toml",
                Target.GEMINI: "settings.json",
                Target.OPENCODE: "opencode.json",
            }[target]

        if kind is PathKind.PRIMARY_DOCUMENT:
            return base / {
                Target.CLAUDE: "settings.json",
                Target.CODEX: "auth.json",
                Target.GEMINI: ".env",
                Target.OPENCODE: "opencode.json",
            }[target]

        return base / {
            Target.CLAUDE: "CLAUDE.md",
            Target.CODEX: "AGENTS.md",
            Target.GEMINI: "GEMINI.md",
            Target.OPENCODE: "agents",
        }[target]

    def mcp_path(self, target: Target) -> Path:
        return self.resolve_config_path(target, PathKind.MCP_DOCUMENT)

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file, returning "" only if it does not exist.

        Raises:
            OSError: If the file exists but cannot be read or is not UTF-8
        """
        if not path.exists():
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise OSError(f"Failed to read {path}: not valid UTF-8 ({e})") from e

    def read_document(self, path: Path) -> dict[str, Any]:
        """Read a JSON object.

        ABOUTME: Returns {} if the file is absent, blank, invalid JSON or
        ABOUTME: not an object at the top level

        Raises:
            OSError: If the file exists but cannot be read
        """
        content = self.read_text(path)
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Expected a JSON object in {path}, got {type(data).__name__}")
            return {}
        return cast(dict[str, Any], data)

    def write_text(self, path: Path, content: str) -> None:
        """Atomically replace a file's content.

        ABOUTME: Writes a sibling .tmp file then renames it over the target;
        ABOUTME: if the rename fails, copies the temp file over the target

        Raises:
            OSError: If the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            try:
                os.replace(tmp_path, path)
            except OSError as e:
                logger.debug(f"Atomic rename to {path} failed ({e}), replacing in place")
                shutil.copyfile(tmp_path, path)
                tmp_path.unlink()
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {path}")

    def write_document(self, path: Path, data: dict[str, Any]) -> None:
        """Write a JSON object with 2-space indentation and a trailing newline."""
        self.write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
