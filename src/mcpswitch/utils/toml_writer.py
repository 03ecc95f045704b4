# Minimal TOML writer for mcpswitch
import re
from typing import Any

# ABOUTME: Keys matching this pattern can be written without quotes
BARE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def escape_toml(value: str) -> str:
    """Escape backslashes and double quotes for a TOML basic string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_string(value: str) -> str:
    return f'"{escape_toml(value)}"'


def format_key(key: str) -> str:
    """Return key as a bare key when possible, else as a quoted key.

    Examples:
        >>> format_key("github")
        'github'
        >>> format_key("my server")
        '"my server"'
    """
    if BARE_KEY_PATTERN.match(key):
        return key
    return format_string(key)


def format_array(items: list[Any] | tuple[Any, ...]) -> str:
    """Format a sequence as a single-line TOML array.

    ABOUTME: Converts Python list to ["item1", "item2"] format
    ABOUTME: Handles strings with special characters
    """
    if not items:
        return "[]"

    formatted_items = []
    for item in items:
        if isinstance(item, str):
            formatted_items.append(format_string(item))
        else:
            formatted_items.append(str(item))

    return "[" + ", ".join(formatted_items) + "]"


def render_tables(prefix: str, tables: dict[str, dict[str, Any]]) -> str:
    """Render string-keyed tables, one `[prefix.<name>]` table per entry.

    ABOUTME: Handles only the subset we write: strings, string arrays and one
    ABOUTME: nested string table per entry, rendered as `[prefix.<name>.<key>]`
    ABOUTME: Nested tables are emitted last so they don't capture later keys

    Args:
        prefix: Table prefix, e.g. "mcp_servers"
        tables: Mapping of table name to its key/value pairs

    Returns:
        TOML text with a blank line after each table

    Example output:
        [mcp_servers.github]
        type = "stdio"
        command = "npx"
        args = ["-y", "@modelcontextprotocol/server-github"]
        [mcp_servers.github.env]
        GITHUB_TOKEN = "ghp_xxxx"
    """
    lines: list[str] = []

    for table_name, values in tables.items():
        header = f"{prefix}.{format_key(table_name)}"
        lines.append(f"[{header}]")

        nested: list[tuple[str, dict[str, str]]] = []
        for key, value in values.items():
            if isinstance(value, dict):
                if value:
                    nested.append((key, value))
            elif isinstance(value, (list, tuple)):
                lines.append(f"{format_key(key)} = {format_array(value)}")
            else:
                lines.append(f"{format_key(key)} = {format_string(str(value))}")

        for key, sub_values in nested:
            lines.append(f"[{header}.{format_key(key)}]")
            for sub_key in sorted(sub_values):
                lines.append(f"{format_key(sub_key)} = {format_string(str(sub_values[sub_key]))}")

        # Blank line between tables
        lines.append("")

    return "\n".join(lines) + ("\n" if lines else "")
