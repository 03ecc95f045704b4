# ABOUTME: Owner of the canonical server list.
# ABOUTME: Callers get value copies and submit whole-entity add/replace/remove.
import copy
import logging
from pathlib import Path
from typing import Callable

from mcpswitch.config import load_servers, save_servers
from mcpswitch.files import ConfigFiles
from mcpswitch.models import CanonicalServer, Target
from mcpswitch.utils.validation import raise_for_errors

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class ServerStore:
    """In-memory canonical list, optionally persisted to servers.json.

    ABOUTME: Not thread-safe; callers serialize access (e.g. one UI thread)
    ABOUTME: Listeners fire after every persisted change, never on no-ops

    Args:
        path: servers.json location, or None for a purely in-memory store
        servers: Initial servers (ignored when path exists and is loaded)
        files: File access used for the atomic write of servers.json
    """

    def __init__(
        self,
        path: Path | None = None,
        servers: list[CanonicalServer] | None = None,
        files: ConfigFiles | None = None,
    ) -> None:
        self.path = path
        self.files = files or ConfigFiles()
        self._listeners: list[ChangeListener] = []
        if path is not None and path.exists():
            self._servers = load_servers(path)
        else:
            self._servers = list(servers or [])
        self._check_unique_names(self._servers)

    @staticmethod
    def _check_unique_names(servers: list[CanonicalServer]) -> None:
        seen: set[str] = set()
        for server in servers:
            if server.name in seen:
                raise ValueError(f"Duplicate server name '{server.name}'")
            seen.add(server.name)

    def servers(self) -> list[CanonicalServer]:
        """Snapshot of the canonical list (deep copies)."""
        return copy.deepcopy(self._servers)

    def __len__(self) -> int:
        return len(self._servers)

    def get(self, server_id: str) -> CanonicalServer | None:
        for server in self._servers:
            if server.id == server_id:
                return copy.deepcopy(server)
        return None

    def find_by_name(self, name: str) -> CanonicalServer | None:
        for server in self._servers:
            if server.name == name:
                return copy.deepcopy(server)
        return None

    def eligible_for(self, target: Target) -> list[CanonicalServer]:
        """Servers to export to a target: enabled and flagged for it."""
        return [
            copy.deepcopy(server)
            for server in self._servers
            if server.enabled and server.is_synced_to(target)
        ]

    def add(self, server: CanonicalServer) -> CanonicalServer:
        """Append a new server.

        Raises:
            ValueError: If the server is invalid or its name or id is taken
        """
        self._validate(server)
        if any(s.name == server.name for s in self._servers):
            raise ValueError(f"A server named '{server.name}' already exists")
        if any(s.id == server.id for s in self._servers):
            raise ValueError(f"A server with id '{server.id}' already exists")
        self._servers.append(copy.deepcopy(server))
        self._commit()
        return copy.deepcopy(server)

    def update(self, server: CanonicalServer) -> CanonicalServer:
        """Replace the server with the same id.

        Raises:
            KeyError: If no server has that id
            ValueError: If invalid or renamed onto another server's name
        """
        self._validate(server)
        index = self._index_of(server.id)
        if any(s.name == server.name and s.id != server.id for s in self._servers):
            raise ValueError(f"A server named '{server.name}' already exists")
        self._servers[index] = copy.deepcopy(server)
        self._commit()
        return copy.deepcopy(server)

    def remove(self, server_id: str) -> CanonicalServer:
        """Delete a server by id and return it.

        Raises:
            KeyError: If no server has that id
        """
        removed = self._servers.pop(self._index_of(server_id))
        self._commit()
        return removed

    def replace_all(self, servers: list[CanonicalServer]) -> bool:
        """Swap in a whole new list; persist only if it differs.

        ABOUTME: Used by the reconciler, which has already applied the merge
        ABOUTME: policy, so entries are not re-validated here

        Returns:
            True if the list changed
        """
        self._check_unique_names(servers)
        if _serialize(servers) == _serialize(self._servers):
            return False
        self._servers = copy.deepcopy(servers)
        self._commit()
        return True

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _index_of(self, server_id: str) -> int:
        for index, server in enumerate(self._servers):
            if server.id == server_id:
                return index
        raise KeyError(f"No server with id '{server_id}'")

    def _validate(self, server: CanonicalServer) -> None:
        for warning in raise_for_errors(server):
            logger.warning(f"Server '{server.name}': {warning.message}")

    def _commit(self) -> None:
        if self.path is not None:
            save_servers(self.path, self._servers, self.files)
        for listener in list(self._listeners):
            listener()


def _serialize(servers: list[CanonicalServer]) -> list[dict]:
    return [server.to_dict() for server in servers]
