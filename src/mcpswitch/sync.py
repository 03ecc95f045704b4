# Export orchestration for mcpswitch
import logging
from dataclasses import dataclass, field
from pathlib import Path

from mcpswitch.files import ConfigFiles
from mcpswitch.models import Target
from mcpswitch.platforms import get_adapter
from mcpswitch.store import ServerStore
from mcpswitch.utils.backup import create_backup

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Report from an export to all targets.

    ABOUTME: Tracks success/failure across platforms
    ABOUTME: Contains per-platform server counts and any errors
    """
    platforms_synced: int
    platforms_total: int
    servers_synced: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    failed_targets: list[Target] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_targets

    def add_platform_result(self, platform_name: str, count: int) -> None:
        """Record a successful write of `count` servers (0 is still a success)."""
        self.platforms_synced += 1
        self.servers_synced[platform_name] = count

    def add_error(self, target: Target, error: str) -> None:
        """Record a failed target.

        ABOUTME: Errors are non-fatal, the remaining targets are still exported
        """
        self.failed_targets.append(target)
        self.errors.append(error)


def export_to(
    store: ServerStore,
    target: Target,
    files: ConfigFiles | None = None,
    backup_dir: Path | None = None,
) -> int:
    """Write the eligible servers into one target's config file.

    ABOUTME: Eligible = enabled and flagged for the target
    ABOUTME: Unrelated content in the target file is preserved

    Args:
        store: Canonical server list
        target: Target to export to
        files: File access (defaults to the user's home)
        backup_dir: If set, back up the existing file before writing

    Returns:
        Number of servers written

    Raises:
        OSError: If the target file cannot be read or written
    """
    files = files or ConfigFiles()
    target = Target(target)
    adapter = get_adapter(target)
    servers = store.eligible_for(target)

    if backup_dir is not None:
        path = files.mcp_path(target)
        if path.exists():
            create_backup(path, backup_dir, target.value)

    path = adapter.save(files, servers)
    logger.info(f"Exported {len(servers)} server(s) to {adapter.name} ({path})")
    return len(servers)


def export_to_all(
    store: ServerStore,
    files: ConfigFiles | None = None,
    backup_dir: Path | None = None,
) -> SyncReport:
    """Export to every target in fixed order, best effort.

    ABOUTME: An I/O failure on one target is logged and recorded in the
    ABOUTME: report; the remaining targets are still attempted

    Examples:
        >>> report = export_to_all(store)
        >>> print(f"Synced {report.platforms_synced}/{report.platforms_total} platforms")
        Synced 4/4 platforms
    """
    files = files or ConfigFiles()
    targets = list(Target)
    report = SyncReport(platforms_synced=0, platforms_total=len(targets))

    for target in targets:
        try:
            count = export_to(store, target, files, backup_dir)
        except OSError as e:
            logger.warning(f"Failed to export MCP servers to {target.display_name}: {e}")
            report.add_error(target, f"{target.display_name}: {e}")
            continue
        report.add_platform_result(target.display_name, count)

    return report
