# ABOUTME: Library entry point tying the canonical store to export and import.
# ABOUTME: CRUD changes are pushed to every target right away (best effort).
import logging
from dataclasses import replace
from pathlib import Path

from mcpswitch.config import get_config_path
from mcpswitch.files import ConfigFiles
from mcpswitch.importer import ImportReport, import_all
from mcpswitch.models import CanonicalServer, ImportOptions, Target
from mcpswitch.store import ChangeListener, ServerStore
from mcpswitch.sync import SyncReport, export_to, export_to_all

logger = logging.getLogger(__name__)


class SyncEngine:
    """Manage MCP servers and keep the four tool configs in sync.

    ABOUTME: Single-threaded; every call runs to completion on the caller's thread
    ABOUTME: Per-target write failures during auto-sync are logged, not raised

    Args:
        store: Canonical list; defaults to ~/.mcpswitch/servers.json
        files: File access; defaults to the user's home directory
        backup_dir: If set, target files are backed up before each write
        auto_sync: Export to all targets after each CRUD change

    Examples:
        >>> engine = SyncEngine(store=ServerStore(), files=ConfigFiles(home=Path("/tmp/demo-home")))
        >>> engine.add_server(CanonicalServer.stdio("github", "npx", ["-y", "@modelcontextprotocol/server-github"])).name
        'github'
        >>> engine.import_all().touched_count  # already synced to every target
        0
    """

    def __init__(
        self,
        store: ServerStore | None = None,
        files: ConfigFiles | None = None,
        backup_dir: Path | None = None,
        auto_sync: bool = True,
    ) -> None:
        self.files = files or ConfigFiles()
        self.store = store if store is not None else ServerStore(get_config_path(), files=self.files)
        self.backup_dir = backup_dir
        self.auto_sync = auto_sync

    # --- Canonical list -------------------------------------------------

    def servers(self) -> list[CanonicalServer]:
        return self.store.servers()

    def get(self, server_id: str) -> CanonicalServer | None:
        return self.store.get(server_id)

    def find_by_name(self, name: str) -> CanonicalServer | None:
        return self.store.find_by_name(name)

    def add_server(self, server: CanonicalServer) -> CanonicalServer:
        added = self.store.add(server)
        self._sync_after_change()
        return added

    def update_server(self, server: CanonicalServer) -> CanonicalServer:
        updated = self.store.update(server)
        self._sync_after_change()
        return updated

    def remove_server(self, server_id: str) -> CanonicalServer:
        removed = self.store.remove(server_id)
        self._sync_after_change()
        return removed

    def set_enabled(self, server_id: str, enabled: bool) -> CanonicalServer:
        """Enable or disable a server everywhere."""
        server = self._require(server_id)
        return self.update_server(replace(server, enabled=enabled))

    def set_sync_target(self, server_id: str, target: Target, synced: bool) -> CanonicalServer:
        """Toggle whether a server is exported to one target."""
        return self.update_server(self._require(server_id).with_sync(target, synced))

    def add_change_listener(self, listener: ChangeListener) -> None:
        self.store.add_change_listener(listener)

    # --- Export / import ------------------------------------------------

    def export_to(self, target: Target) -> int:
        """Export to one target.

        Raises:
            OSError: If the target file cannot be read or written
        """
        return export_to(self.store, target, self.files, self.backup_dir)

    def export_to_all(self) -> SyncReport:
        """Export to every target; failures are reported, not raised."""
        return export_to_all(self.store, self.files, self.backup_dir)

    def import_all(
        self,
        project_root: Path | None = None,
        options: ImportOptions | None = None,
        export_after: bool = False,
    ) -> ImportReport:
        """Import from every target, optionally re-exporting a changed list.

        ABOUTME: export_after normalizes the imported servers into all targets
        """
        report = import_all(self.store, self.files, project_root, options)
        if export_after and report.changed:
            sync_report = self.export_to_all()
            report.warnings.extend(f"Export failed: {error}" for error in sync_report.errors)
        return report

    def _require(self, server_id: str) -> CanonicalServer:
        server = self.store.get(server_id)
        if server is None:
            raise KeyError(f"No server with id '{server_id}'")
        return server

    def _sync_after_change(self) -> None:
        if not self.auto_sync:
            return
        report = self.export_to_all()
        for error in report.errors:
            logger.warning(f"Failed to sync MCP configs after update: {error}")
