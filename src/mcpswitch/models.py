# Core data models for mcpswitch
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from mcpswitch.files import ConfigFiles

# ABOUTME: Substring that marks a streaming (SSE) endpoint in a server URL
SSE_URL_MARKER = "/sse"


class Target(str, Enum):
    """Supported AI CLI tools.

    ABOUTME: Declaration order is the fixed export/sync order
    """
    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    OPENCODE = "opencode"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def stores_network_kind(self) -> bool:
        """Whether the config file records SSE vs HTTP, not just the url."""
        return self is Target.CODEX


_DISPLAY_NAMES = {
    Target.CLAUDE: "Claude Code",
    Target.CODEX: "Codex",
    Target.GEMINI: "Gemini CLI",
    Target.OPENCODE: "OpenCode",
}


class NetworkKind(str, Enum):
    SSE = "sse"
    HTTP = "http"


def classify_url(url: str) -> NetworkKind:
    """Guess the network transport kind from a URL.

    ABOUTME: Coarse substring heuristic, an HTTP endpoint whose path
    ABOUTME: happens to contain "/sse" is reported as SSE
    """
    return NetworkKind.SSE if SSE_URL_MARKER in url else NetworkKind.HTTP


@dataclass(frozen=True)
class StdioTransport:
    """Local process launched with command + args."""
    command: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.command, str) or not self.command.strip():
            raise ValueError("stdio transport requires a non-empty command")
        # Lists are accepted for convenience and frozen into a tuple
        object.__setattr__(self, "args", tuple(str(a) for a in (self.args or ())))


@dataclass(frozen=True)
class NetworkTransport:
    """Remote server reached over SSE or streamable HTTP."""
    url: str
    kind: NetworkKind = NetworkKind.HTTP

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValueError("network transport requires a non-empty url")
        object.__setattr__(self, "kind", NetworkKind(self.kind))


Transport = Union[StdioTransport, NetworkTransport]


def normalize_sync_targets(
    sync_targets: Mapping[Any, bool] | None, default: bool = False
) -> dict[Target, bool]:
    """Return a mapping with exactly one entry per Target.

    ABOUTME: Unknown keys are dropped, missing targets get `default`
    """
    result = {target: default for target in Target}
    if sync_targets:
        for key, value in sync_targets.items():
            try:
                result[Target(key)] = bool(value)
            except ValueError:
                continue
    return result


@dataclass(frozen=True)
class CanonicalServer:
    """Single source of truth for one MCP server.

    ABOUTME: Frozen; edits produce new instances via with_* helpers
    ABOUTME: `id` identifies the entity for CRUD, `name` is the natural key
    ABOUTME: used to match definitions found in tool config files

    Attributes:
        name: Human-readable key, unique within the canonical list
        transport: Exactly one of StdioTransport / NetworkTransport
        env: Environment variables injected into the server
        enabled: Disabled servers are never exported
        sync_targets: Per-target export flags, one entry per Target
        id: Opaque identifier generated at creation
    """
    name: str
    transport: Transport
    env: dict[str, str] = field(default_factory=dict)
    enabled: bool = True
    sync_targets: dict[Target, bool] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("server name must be non-empty")
        if not isinstance(self.transport, (StdioTransport, NetworkTransport)):
            raise ValueError(f"Server '{self.name}' has no command or url")
        object.__setattr__(self, "env", {str(k): str(v) for k, v in (self.env or {}).items()})
        object.__setattr__(self, "sync_targets", normalize_sync_targets(self.sync_targets))

    @classmethod
    def stdio(
        cls,
        name: str,
        command: str,
        args: list[str] | tuple[str, ...] | None = None,
        env: dict[str, str] | None = None,
        sync_targets: Mapping[Any, bool] | None = None,
        enabled: bool = True,
    ) -> "CanonicalServer":
        """Create a stdio server, synced to every target unless told otherwise."""
        return cls(
            name=name,
            transport=StdioTransport(command, tuple(args or ())),
            env=dict(env or {}),
            enabled=enabled,
            sync_targets=_constructor_targets(sync_targets),
        )

    @classmethod
    def network(
        cls,
        name: str,
        url: str,
        kind: NetworkKind | str | None = None,
        env: dict[str, str] | None = None,
        sync_targets: Mapping[Any, bool] | None = None,
        enabled: bool = True,
    ) -> "CanonicalServer":
        """Create an SSE/HTTP server; `kind` defaults to the URL heuristic."""
        return cls(
            name=name,
            transport=NetworkTransport(url, NetworkKind(kind) if kind else classify_url(url)),
            env=dict(env or {}),
            enabled=enabled,
            sync_targets=_constructor_targets(sync_targets),
        )

    @property
    def is_stdio(self) -> bool:
        return isinstance(self.transport, StdioTransport)

    @property
    def command(self) -> str | None:
        return self.transport.command if isinstance(self.transport, StdioTransport) else None

    @property
    def args(self) -> tuple[str, ...]:
        return self.transport.args if isinstance(self.transport, StdioTransport) else ()

    @property
    def url(self) -> str | None:
        return self.transport.url if isinstance(self.transport, NetworkTransport) else None

    def signature(self, target: Target | None = None) -> tuple[Any, ...]:
        """Equality key over transport and env.

        ABOUTME: Two servers with equal signatures render identically for
        ABOUTME: `target` (every target if None); name, id, enabled and sync
        ABOUTME: flags are ignored, and so is the network kind for targets
        ABOUTME: that only store a url
        """
        include_kind = target is None or Target(target).stores_network_kind
        return transport_signature(self.transport, self.env, include_kind)

    def is_synced_to(self, target: Target) -> bool:
        return self.sync_targets.get(target, False) is True

    def with_sync(self, target: Target, synced: bool) -> "CanonicalServer":
        targets = dict(self.sync_targets)
        targets[Target(target)] = synced
        return replace(self, sync_targets=targets)

    def with_env(self, env: dict[str, str]) -> "CanonicalServer":
        return replace(self, env=dict(env))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the canonical list file."""
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if isinstance(self.transport, StdioTransport):
            data["transport"] = "stdio"
            data["command"] = self.transport.command
            data["args"] = list(self.transport.args)
        else:
            data["transport"] = self.transport.kind.value
            data["url"] = self.transport.url
        if self.env:
            data["env"] = dict(self.env)
        data["enabled"] = self.enabled
        data["syncTargets"] = {t.value: v for t, v in self.sync_targets.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanonicalServer":
        """Inverse of to_dict.

        Raises:
            ValueError: If the entry has no usable command or url
        """
        name = data.get("name") or ""
        transport_type = data.get("transport", "stdio")
        if transport_type == "stdio" and data.get("command"):
            transport: Transport = StdioTransport(data["command"], tuple(data.get("args") or ()))
        elif transport_type in ("sse", "http") and data.get("url"):
            transport = NetworkTransport(data["url"], NetworkKind(transport_type))
        else:
            raise ValueError(f"Server '{name}' missing command or url")

        kwargs: dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(
            name=name,
            transport=transport,
            env=dict(data.get("env") or {}),
            enabled=bool(data.get("enabled", True)),
            sync_targets=dict(data.get("syncTargets") or {}),
            **kwargs,
        )


def _constructor_targets(sync_targets: Mapping[Any, bool] | None) -> dict[Target, bool]:
    if sync_targets is None:
        return normalize_sync_targets(None, default=True)
    return normalize_sync_targets(sync_targets)


def transport_signature(
    transport: Transport,
    env: Mapping[str, str] | None,
    include_kind: bool = True,
) -> tuple[Any, ...]:
    """Signature shared by canonical and candidate servers."""
    env_items = tuple(sorted((env or {}).items()))
    if isinstance(transport, StdioTransport):
        return ("stdio", transport.command, tuple(transport.args or ()), env_items)
    if not include_kind:
        return ("network", transport.url, env_items)
    return (transport.kind.value, transport.url, env_items)


@dataclass(frozen=True)
class CandidateServer:
    """A server definition parsed out of one tool's config file.

    ABOUTME: Has no id yet; becomes canonical only through the reconciler
    """
    name: str
    transport: Transport
    source: Target
    source_label: str
    env: dict[str, str] = field(default_factory=dict)

    def signature(self) -> tuple[Any, ...]:
        """Signature as seen by the source target."""
        return transport_signature(self.transport, self.env, self.source.stores_network_kind)

    def to_canonical(self) -> CanonicalServer:
        """New canonical server synced to the source target only."""
        return CanonicalServer(
            name=self.name,
            transport=self.transport,
            env=dict(self.env),
            enabled=True,
            sync_targets={self.source: True},
        )


@dataclass(frozen=True)
class ParseWarning:
    """Recoverable problem with one entry of a source file."""
    source_label: str
    message: str
    name: str | None = None

    def __str__(self) -> str:
        if self.name:
            return f"{self.source_label}: '{self.name}': {self.message}"
        return f"{self.source_label}: {self.message}"


@dataclass
class ParseResult:
    """Output of an adapter parse: accepted candidates and rejected entries."""
    candidates: list[CandidateServer] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)

    def extend(self, other: "ParseResult") -> None:
        self.candidates.extend(other.candidates)
        self.warnings.extend(other.warnings)


@dataclass(frozen=True)
class ImportSource:
    """One raw fragment to scan during import (a scope of a target)."""
    label: str
    fragment: Any


@dataclass(frozen=True)
class ImportOptions:
    """Which Claude scopes to scan.

    ABOUTME: Project and local scopes also need a project root
    """
    include_user_scope: bool = True
    include_project_scope: bool = True
    include_local_scope: bool = True


@runtime_checkable
class PlatformAdapter(Protocol):
    """Protocol for per-target format adapters.

    ABOUTME: render/parse are pure; save/collect do the file I/O through
    ABOUTME: a ConfigFiles instance
    """

    @property
    def target(self) -> Target:
        ...

    @property
    def name(self) -> str:
        """Human-readable platform name."""
        ...

    def render(self, servers: list[CanonicalServer]) -> Any:
        """Render servers into the tool's native fragment."""
        ...

    def parse(self, raw: Any, source_label: str) -> ParseResult:
        """Parse a native fragment into candidates, never raising on bad entries."""
        ...

    def save(self, files: "ConfigFiles", servers: list[CanonicalServer]) -> Path:
        """Write servers into the target's config file, preserving other content."""
        ...

    def collect(
        self,
        files: "ConfigFiles",
        project_root: Path | None = None,
        options: ImportOptions | None = None,
    ) -> list[ImportSource]:
        """Read the fragments to scan on import, in scan order."""
        ...
