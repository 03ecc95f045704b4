# ABOUTME: Line-oriented reader for `[prefix.<name>]` server tables in TOML text.
# ABOUTME: Modelled as a small state machine so flush points are explicit.
import logging
import re
from dataclasses import dataclass, field
from enum import Enum

import tomli

logger = logging.getLogger(__name__)

# ABOUTME: First dotted segment of a table name (bare, "double" or 'single' quoted)
# ABOUTME: followed by an optional sub-table path
_TABLE_NAME_PATTERN = re.compile(
    r"""^(?P<name>"(?:[^"\\]|\\.)*"|'[^']*'|[A-Za-z0-9_-]+)\s*(?:\.\s*(?P<sub>.+))?$"""
)

ENV_SUBTABLE = "env"


class ParserState(Enum):
    OUTSIDE_SECTION = "outside"
    IN_SECTION = "section"
    IN_ENV_SUBSECTION = "env"
    # A sub-table of the current server other than env; its keys are ignored
    IN_OTHER_SUBSECTION = "other"


@dataclass
class TomlSection:
    """Raw values accumulated for one `[prefix.<name>]` table."""
    name: str
    type: str = "stdio"
    command: str | None = None
    url: str | None = None
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)


def unquote_key(key: str) -> str:
    """Strip TOML key quotes: '"a b"' -> 'a b', "'a'" -> 'a'."""
    key = key.strip()
    if len(key) >= 2 and key[0] == key[-1] == '"':
        return _unescape(key[1:-1])
    if len(key) >= 2 and key[0] == key[-1] == "'":
        return key[1:-1]
    return key


def split_table_name(header: str, prefix: str) -> tuple[str, str | None] | None:
    """Split a table header body into (server name, sub-table).

    Returns None when the header is not under `prefix`.

    Examples:
        >>> split_table_name("mcp_servers.github.env", "mcp_servers")
        ('github', 'env')
        >>> split_table_name('mcp_servers."my server"', "mcp_servers")
        ('my server', None)
        >>> split_table_name("model_providers.x", "mcp_servers") is None
        True
    """
    head, sep, rest = header.partition(".")
    if not sep or head.strip() != prefix:
        return None
    match = _TABLE_NAME_PATTERN.match(rest.strip())
    if not match:
        return None
    sub = match.group("sub")
    return unquote_key(match.group("name")), sub.strip() if sub else None


def parse_table_header(line: str) -> str | None:
    """Return the body of a `[table]` header line, or None for other lines.

    ABOUTME: Array-of-tables headers `[[x]]` are returned with brackets kept
    ABOUTME: so they never match a server prefix
    """
    stripped = line.strip()
    if not stripped.startswith("["):
        return None
    # Allow a trailing comment after the closing bracket
    if "#" in stripped and not stripped.endswith("]"):
        stripped = stripped[: stripped.rfind("#")].rstrip()
    if not stripped.endswith("]"):
        return None
    if stripped.startswith("[["):
        return stripped
    return stripped[1:-1].strip()


def parse_string(value: str) -> str:
    """Read a TOML string value, tolerating unquoted values.

    ABOUTME: Basic strings are unescaped for \\\\ and \\" (plus \\n, \\t);
    ABOUTME: literal strings are taken as-is; anything else is returned trimmed
    ABOUTME: with a trailing comment removed
    """
    value = value.strip()
    if value.startswith('"'):
        index = 1
        while index < len(value):
            char = value[index]
            if char == "\\":
                index += 2
                continue
            if char == '"':
                return _unescape(value[1:index])
            index += 1
        return _unescape(value[1:])
    if value.startswith("'"):
        end = value.find("'", 1)
        return value[1:end] if end > 0 else value[1:]
    if "#" in value:
        value = value[: value.find("#")]
    return value.strip()


def parse_array(value: str) -> list[str]:
    """Parse a single-line `["a", "b"]` array.

    ABOUTME: Splits on commas outside quotes and strips quotes from items
    ABOUTME: Empty items are dropped; non-array values give []
    """
    value = value.strip()
    if not value.startswith("["):
        return []
    if not value.endswith("]") and "#" in value:
        value = value[: value.rfind("#")].rstrip()
    if not value.endswith("]"):
        return []

    items: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False
    for char in value[1:-1]:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\" and quote == '"':
                escaped = True
            elif char == quote:
                quote = None
        elif char in "\"'":
            quote = char
            current.append(char)
        elif char == ",":
            items.append("".join(current))
            current = []
        else:
            current.append(char)
    items.append("".join(current))

    result = []
    for item in items:
        parsed = parse_string(item)
        if parsed:
            result.append(parsed)
    return result


def parse_inline_table(value: str) -> dict[str, str]:
    """Parse an inline table such as `{ KEY = "v" }` into a string dict."""
    try:
        data = tomli.loads(f"value = {value}")
    except tomli.TOMLDecodeError as e:
        logger.debug(f"Ignoring unparsable inline table {value!r}: {e}")
        return {}
    table = data.get("value")
    if not isinstance(table, dict):
        return {}
    return {str(k): str(v) for k, v in table.items() if not isinstance(v, (dict, list))}


def _unescape(value: str) -> str:
    replacements = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}
    out: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char == "\\" and index + 1 < len(value) and value[index + 1] in replacements:
            out.append(replacements[value[index + 1]])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


class SectionParser:
    """State machine collecting `[prefix.<name>]` tables from TOML text.

    ABOUTME: States: OUTSIDE_SECTION -> IN_SECTION <-> IN_ENV_SUBSECTION
    ABOUTME: A header for another server, any non-prefix header, or end of
    ABOUTME: input flushes the pending section into `sections`

    Example:
        >>> parser = SectionParser("mcp_servers")
        >>> [s.name for s in parser.parse('[mcp_servers.a]\\ncommand = "x"\\n')]
        ['a']
    """

    def __init__(self, prefix: str = "mcp_servers") -> None:
        self.prefix = prefix
        self.state = ParserState.OUTSIDE_SECTION
        self.current: TomlSection | None = None
        self.sections: list[TomlSection] = []

    def parse(self, content: str) -> list[TomlSection]:
        for raw_line in content.splitlines():
            self.feed(raw_line)
        return self.finish()

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            return

        header = parse_table_header(line)
        if header is not None:
            self._on_header(header)
            return

        if self.state is ParserState.OUTSIDE_SECTION or self.current is None:
            return

        key, sep, value = line.partition("=")
        if not sep:
            return
        key = unquote_key(key)

        if self.state is ParserState.IN_ENV_SUBSECTION:
            self.current.env[key] = parse_string(value)
        elif self.state is ParserState.IN_SECTION:
            self._on_section_key(key, value)

    def finish(self) -> list[TomlSection]:
        self._flush()
        self.state = ParserState.OUTSIDE_SECTION
        return self.sections

    def _on_header(self, header: str) -> None:
        split = split_table_name(header, self.prefix)
        if split is None:
            self._flush()
            self.state = ParserState.OUTSIDE_SECTION
            return

        name, sub = split
        if self.current is None or self.current.name != name:
            self._flush()
            self.current = TomlSection(name=name)

        if sub is None:
            self.state = ParserState.IN_SECTION
        elif sub == ENV_SUBTABLE:
            self.state = ParserState.IN_ENV_SUBSECTION
        else:
            self.state = ParserState.IN_OTHER_SUBSECTION

    def _on_section_key(self, key: str, value: str) -> None:
        if self.current is None:
            return
        if key == "type":
            self.current.type = parse_string(value)
        elif key == "command":
            self.current.command = parse_string(value)
        elif key == "url":
            self.current.url = parse_string(value)
        elif key == "args":
            self.current.args = parse_array(value)
        elif key == ENV_SUBTABLE and value.strip().startswith("{"):
            self.current.env.update(parse_inline_table(value.strip()))

    def _flush(self) -> None:
        if self.current is not None:
            self.sections.append(self.current)
        self.current = None


def remove_sections(content: str, prefix: str, names: list[str] | set[str]) -> str:
    """Drop `[prefix.<name>]` and `[prefix.<name>.env]` tables for the given names.

    ABOUTME: Matches bare, single- and double-quoted names
    ABOUTME: A dropped table extends up to the next table header
    ABOUTME: All other lines, including line endings, are kept as-is
    """
    wanted = set(names)
    if not content or not wanted:
        return content

    out: list[str] = []
    dropping = False
    for raw_line in content.splitlines(keepends=True):
        header = parse_table_header(raw_line)
        if header is not None:
            split = split_table_name(header, prefix)
            dropping = (
                split is not None
                and split[0] in wanted
                and split[1] in (None, ENV_SUBTABLE)
            )
        if not dropping:
            out.append(raw_line)
    return "".join(out)
