# ABOUTME: Utility modules for mcpswitch
# ABOUTME: Exports managed-block patching, TOML helpers, backup and validation functions

from mcpswitch.utils.backup import cleanup_old_backups, create_backup
from mcpswitch.utils.managed_block import ManagedBlock, remove_block, upsert_block
from mcpswitch.utils.toml_sections import SectionParser, remove_sections
from mcpswitch.utils.toml_writer import escape_toml, render_tables
from mcpswitch.utils.validation import ValidationError, validate_server, validate_url

__all__ = [
    "ManagedBlock",
    "upsert_block",
    "remove_block",
    "SectionParser",
    "remove_sections",
    "escape_toml",
    "render_tables",
    "ValidationError",
    "validate_server",
    "validate_url",
    "create_backup",
    "cleanup_old_backups",
]
