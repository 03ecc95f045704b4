# ABOUTME: Tests for config file path resolution and file access
# ABOUTME: Covers tolerant reads and the atomic write with its copy fallback
import json
import os

import pytest

from mcpswitch.files import ConfigFiles, PathKind
from mcpswitch.models import Target


@pytest.fixture
def files(tmp_path):
    return ConfigFiles(home=tmp_path)


class TestResolveConfigPath:
    """Tests for resolve_config_path."""

    @pytest.mark.parametrize(
        "target, relative",
        [
            (Target.CLAUDE, ".claude.json"),
            (Target.CODEX, ".codex/config.toml"),
            (Target.GEMINI, ".gemini/settings.json"),
            (Target.OPENCODE, ".config/opencode/opencode.json"),
        ],
    )
    def test_mcp_document(self, files, tmp_path, target, relative):
        assert files.resolve_config_path(target, PathKind.MCP_DOCUMENT) == tmp_path / relative
        assert files.mcp_path(target) == tmp_path / relative

    @pytest.mark.parametrize(
        "target, relative",
        [
            (Target.CLAUDE, ".claude/settings.json"),
            (Target.CODEX, ".codex/auth.json"),
            (Target.GEMINI, ".gemini/.env"),
            (Target.OPENCODE, ".config/opencode/opencode.json"),
        ],
    )
    def test_primary_document(self, files, tmp_path, target, relative):
        assert files.resolve_config_path(target, PathKind.PRIMARY_DOCUMENT) == tmp_path / relative

    @pytest.mark.parametrize(
        "target, relative",
        [
            (Target.CLAUDE, ".claude/CLAUDE.md"),
            (Target.CODEX, ".codex/AGENTS.md"),
            (Target.GEMINI, ".gemini/GEMINI.md"),
            (Target.OPENCODE, ".config/opencode/agents"),
        ],
    )
    def test_prompt_file(self, files, tmp_path, target, relative):
        assert files.resolve_config_path(target, PathKind.PROMPT_FILE) == tmp_path / relative

    def test_accepts_string_values(self, files, tmp_path):
        assert files.resolve_config_path("gemini", "mcp") == tmp_path / ".gemini" / "settings.json"

    def test_does_not_touch_filesystem(self, files, tmp_path):
        files.resolve_config_path(Target.CODEX, PathKind.MCP_DOCUMENT)

        assert list(tmp_path.iterdir()) == []


class TestReads:
    """Tests for read_text and read_document."""

    def test_missing_file(self, files, tmp_path):
        assert files.read_text(tmp_path / "missing.json") == ""
        assert files.read_document(tmp_path / "missing.json") == {}

    @pytest.mark.parametrize("content", ["", "  \n", "{not json", "[1, 2]", '"text"'])
    def test_unusable_document_is_empty(self, files, tmp_path, content):
        path = tmp_path / "settings.json"
        path.write_text(content)

        assert files.read_document(path) == {}

    def test_reads_object(self, files, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"theme": "dark", "mcpServers": {}}')

        assert files.read_document(path) == {"theme": "dark", "mcpServers": {}}

    def test_directory_raises(self, files, tmp_path):
        with pytest.raises(OSError):
            files.read_text(tmp_path)

    def test_undecodable_file_raises(self, files, tmp_path):
        """Test a non-UTF-8 file is reported, not read as empty."""
        path = tmp_path / "config.toml"
        path.write_bytes(b'model = "caf\xe9"\n')

        with pytest.raises(OSError, match="not valid UTF-8"):
            files.read_text(path)
        with pytest.raises(OSError):
            files.read_document(path)


class TestWrites:
    """Tests for write_text and write_document."""

    def test_creates_parent_directories(self, files, tmp_path):
        path = tmp_path / "a" / "b" / "config.toml"

        files.write_text(path, "x = 1\n")

        assert path.read_text() == "x = 1\n"

    def test_replaces_content_and_leaves_no_temp_file(self, files, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("old")

        files.write_text(path, "new")

        assert path.read_text() == "new"
        assert not (tmp_path / "config.toml.tmp").exists()

    def test_falls_back_to_copy_when_rename_fails(self, files, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("old")

        def failing_replace(src, dst):
            raise OSError("cross-device link")

        monkeypatch.setattr(os, "replace", failing_replace)

        files.write_text(path, "new")

        assert path.read_text() == "new"
        assert not (tmp_path / "config.toml.tmp").exists()

    def test_write_failure_raises(self, files, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")

        with pytest.raises(OSError):
            files.write_text(blocker / "config.toml", "x")

    def test_write_document_format(self, files, tmp_path):
        path = tmp_path / "settings.json"

        files.write_document(path, {"name": "café", "list": [1]})

        content = path.read_text(encoding="utf-8")
        assert content.endswith("}\n")
        assert '  "name": "café"' in content
        assert json.loads(content) == {"name": "café", "list": [1]}
