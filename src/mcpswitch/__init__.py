# mcpswitch - MCP server config sync & reconciliation across AI CLI tools
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and the engine facade
from mcpswitch.engine import SyncEngine
from mcpswitch.files import ConfigFiles, PathKind
from mcpswitch.importer import ImportReport, import_all
from mcpswitch.models import (
    CandidateServer,
    CanonicalServer,
    ImportOptions,
    NetworkKind,
    NetworkTransport,
    ParseWarning,
    PlatformAdapter,
    StdioTransport,
    Target,
)
from mcpswitch.store import ServerStore
from mcpswitch.sync import SyncReport, export_to, export_to_all

__all__ = [
    "__version__",
    "CandidateServer",
    "CanonicalServer",
    "ConfigFiles",
    "ImportOptions",
    "ImportReport",
    "NetworkKind",
    "NetworkTransport",
    "ParseWarning",
    "PathKind",
    "PlatformAdapter",
    "ServerStore",
    "StdioTransport",
    "SyncEngine",
    "SyncReport",
    "Target",
    "export_to",
    "export_to_all",
    "import_all",
]
