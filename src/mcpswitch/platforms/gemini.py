# Gemini CLI platform adapter
from mcpswitch.models import Target
from mcpswitch.platforms.base import JsonPlatformAdapter


class GeminiAdapter(JsonPlatformAdapter):
    """Adapter for Gemini CLI (~/.gemini/settings.json).

    ABOUTME: Same entry schema as Claude Code under `mcpServers`
    ABOUTME: Preserves other settings like selectedAuthType, theme
    """

    target = Target.GEMINI
    servers_key = "mcpServers"
