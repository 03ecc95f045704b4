# ABOUTME: Idempotent upsert/removal of a marker-delimited block in free-form text.
# ABOUTME: Everything outside the markers is left byte-for-byte untouched.
from dataclasses import dataclass


def _find_block(text: str, start_marker: str, end_marker: str) -> tuple[int, int] | None:
    """Return [start, end) of the block including one trailing newline, or None.

    ABOUTME: Pairs the first end marker after a start marker with the closest
    ABOUTME: start marker before it, so stray markers never swallow user text
    """
    start = text.find(start_marker)
    if start < 0:
        return None
    end = text.find(end_marker, start + len(start_marker))
    if end < 0:
        return None
    start = text.rfind(start_marker, start, end)
    end_exclusive = end + len(end_marker)
    if end_exclusive < len(text) and text[end_exclusive] == "\n":
        end_exclusive += 1
    return start, end_exclusive


def split_block(existing: str | None, start_marker: str, end_marker: str) -> tuple[str, str, str] | None:
    """Split text into (before, block, after), or None if no block is present."""
    text = existing or ""
    found = _find_block(text, start_marker, end_marker)
    if found is None:
        return None
    start, end = found
    return text[:start], text[start:end], text[end:]


def upsert_block(existing: str | None, block: str, start_marker: str, end_marker: str) -> str:
    """Insert or replace a managed block.

    ABOUTME: Replaces the existing block in place when both markers are found
    ABOUTME: Otherwise appends after a blank line (or returns block for blank text)

    Args:
        existing: Current file content (None treated as empty)
        block: Rendered block, normally starting/ending with the markers
        start_marker: Line marking the start of the block
        end_marker: Line marking the end of the block

    Returns:
        New file content

    Examples:
        >>> upsert_block("a = 1\\n", "# s\\nx\\n# e\\n", "# s", "# e")
        'a = 1\\n\\n# s\\nx\\n# e\\n'
    """
    text = existing or ""
    found = _find_block(text, start_marker, end_marker)
    if found is not None:
        start, end = found
        return text[:start] + block + text[end:]
    if not text.strip():
        return block
    separator = "\n" if text.endswith("\n") else "\n\n"
    return text + separator + block


def remove_block(existing: str | None, start_marker: str, end_marker: str) -> str:
    """Remove a managed block, leaving the rest of the text unchanged."""
    text = existing or ""
    found = _find_block(text, start_marker, end_marker)
    if found is None:
        return text
    start, end = found
    return text[:start] + text[end:]


@dataclass(frozen=True)
class ManagedBlock:
    """A named pair of markers bounding generated content."""
    start_marker: str
    end_marker: str

    def wrap(self, body: str) -> str:
        """Surround body with the markers, one per line."""
        if body and not body.endswith("\n"):
            body += "\n"
        return f"{self.start_marker}\n{body}{self.end_marker}\n"

    def upsert(self, existing: str | None, block: str) -> str:
        return upsert_block(existing, block, self.start_marker, self.end_marker)

    def remove(self, existing: str | None) -> str:
        return remove_block(existing, self.start_marker, self.end_marker)

    def split(self, existing: str | None) -> tuple[str, str, str] | None:
        return split_block(existing, self.start_marker, self.end_marker)
