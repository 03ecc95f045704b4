# Tests for Gemini CLI platform adapter
import json
from pathlib import Path

from mcpswitch.files import ConfigFiles
from mcpswitch.models import CanonicalServer, Target
from mcpswitch.platforms.gemini import GeminiAdapter


def test_gemini_adapter_properties(tmp_path: Path) -> None:
    adapter = GeminiAdapter()

    assert adapter.name == "Gemini CLI"
    assert adapter.target is Target.GEMINI
    assert adapter.config_path(ConfigFiles(tmp_path)) == tmp_path / ".gemini" / "settings.json"


def test_gemini_save_preserves_settings(tmp_path: Path) -> None:
    """Test that saving preserves selectedAuthType and theme."""
    files = ConfigFiles(tmp_path)
    settings = tmp_path / ".gemini" / "settings.json"
    settings.parent.mkdir()
    settings.write_text(json.dumps({"selectedAuthType": "oauth-personal", "theme": "Default"}))

    GeminiAdapter().save(files, [CanonicalServer.stdio("github", "npx", ["-y", "gh"], env={"TOKEN": "t"})])

    data = json.loads(settings.read_text())
    assert list(data) == ["selectedAuthType", "theme", "mcpServers"]
    assert data["mcpServers"] == {
        "github": {"command": "npx", "args": ["-y", "gh"], "env": {"TOKEN": "t"}}
    }


def test_gemini_save_overwrites_invalid_json(tmp_path: Path) -> None:
    files = ConfigFiles(tmp_path)
    settings = tmp_path / ".gemini" / "settings.json"
    settings.parent.mkdir()
    settings.write_text("{ broken")

    GeminiAdapter().save(files, [CanonicalServer.stdio("a", "echo")])

    assert json.loads(settings.read_text()) == {"mcpServers": {"a": {"command": "echo", "args": []}}}


def test_gemini_collect_and_parse(tmp_path: Path) -> None:
    files = ConfigFiles(tmp_path)
    settings = tmp_path / ".gemini" / "settings.json"
    settings.parent.mkdir()
    settings.write_text(json.dumps({"mcpServers": {"remote": {"url": "https://x.dev/mcp"}}}))
    adapter = GeminiAdapter()

    sources = adapter.collect(files)
    result = adapter.parse(sources[0].fragment, sources[0].label)

    assert [s.label for s in sources] == ["Gemini CLI"]
    assert result.candidates[0].source is Target.GEMINI
    assert result.candidates[0].transport.url == "https://x.dev/mcp"


def test_gemini_collect_without_servers(tmp_path: Path) -> None:
    assert GeminiAdapter().collect(ConfigFiles(tmp_path)) == []
