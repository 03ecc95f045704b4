# Platform adapter registry
from mcpswitch.models import PlatformAdapter, Target
from mcpswitch.platforms.claude import ClaudeAdapter
from mcpswitch.platforms.codex import CodexAdapter
from mcpswitch.platforms.gemini import GeminiAdapter
from mcpswitch.platforms.opencode import OpenCodeAdapter

# Registry of all available platform adapters, in Target order
ALL_PLATFORMS: list[type[PlatformAdapter]] = [
    ClaudeAdapter,
    CodexAdapter,
    GeminiAdapter,
    OpenCodeAdapter,
]

__all__ = [
    "PlatformAdapter",
    "ClaudeAdapter",
    "CodexAdapter",
    "GeminiAdapter",
    "OpenCodeAdapter",
    "ALL_PLATFORMS",
    "get_all_platforms",
    "get_adapter",
]


def get_all_platforms() -> list[PlatformAdapter]:
    """Instantiate and return all platform adapters.

    ABOUTME: Creates instances of all registered adapters
    ABOUTME: Returns list for easy iteration
    """
    return [platform_cls() for platform_cls in ALL_PLATFORMS]


def get_adapter(target: Target) -> PlatformAdapter:
    """Return the adapter instance for one target.

    Raises:
        KeyError: If no adapter is registered for the target
    """
    target = Target(target)
    for platform_cls in ALL_PLATFORMS:
        if platform_cls.target == target:
            return platform_cls()
    raise KeyError(f"No platform adapter registered for '{target.value}'")
