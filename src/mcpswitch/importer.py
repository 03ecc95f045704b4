# ABOUTME: Import of existing server definitions from every target's files.
# ABOUTME: Merges candidates into the canonical list without overwriting user data.
import logging
from dataclasses import dataclass, field
from pathlib import Path

from mcpswitch.files import ConfigFiles
from mcpswitch.models import CandidateServer, CanonicalServer, ImportOptions, ParseResult, Target
from mcpswitch.platforms import PlatformAdapter, get_adapter
from mcpswitch.store import ServerStore

logger = logging.getLogger(__name__)

# ABOUTME: Scan order; JSON targets first, the TOML target last
IMPORT_ORDER = (Target.CLAUDE, Target.GEMINI, Target.OPENCODE, Target.CODEX)


@dataclass
class ImportReport:
    """Counts and warnings from one import run.

    ABOUTME: skipped_invalid covers both unparsable entries and name conflicts
    """
    newly_imported: int = 0
    merged_existing: int = 0
    skipped_invalid: int = 0
    warnings: list[str] = field(default_factory=list)
    changed: bool = False

    @property
    def touched_count(self) -> int:
        return self.newly_imported + self.merged_existing


def merge_candidate(
    servers: list[CanonicalServer],
    candidate: CandidateServer,
    report: ImportReport,
) -> None:
    """Apply the merge policy for one candidate, mutating `servers` in place.

    ABOUTME: New name -> append, synced to the source target only
    ABOUTME: Same name + same signature -> only flip the source sync flag
    ABOUTME: Same name + different signature -> keep canonical, warn, skip
    """
    for index, existing in enumerate(servers):
        if existing.name != candidate.name:
            continue

        if existing.signature(candidate.source) == candidate.signature():
            if not existing.is_synced_to(candidate.source):
                servers[index] = existing.with_sync(candidate.source, True)
                report.merged_existing += 1
                logger.debug(f"Marked '{candidate.name}' as synced to {candidate.source.value}")
            return

        report.skipped_invalid += 1
        report.warnings.append(
            f"Skipped conflicting MCP server '{candidate.name}' (source: {candidate.source_label}): "
            f"a different definition with the same name already exists"
        )
        logger.warning(f"Import conflict for '{candidate.name}' from {candidate.source_label}")
        return

    servers.append(candidate.to_canonical())
    report.newly_imported += 1


def _merge_result(servers: list[CanonicalServer], result: ParseResult, report: ImportReport) -> None:
    for warning in result.warnings:
        report.skipped_invalid += 1
        report.warnings.append(f"Skipped invalid MCP server: {warning}")
    for candidate in result.candidates:
        merge_candidate(servers, candidate, report)


def import_from(
    adapter: PlatformAdapter,
    servers: list[CanonicalServer],
    report: ImportReport,
    files: ConfigFiles,
    project_root: Path | None = None,
    options: ImportOptions | None = None,
) -> None:
    """Scan one target's sources and merge them into `servers`.

    ABOUTME: Any failure reading this target becomes a warning
    """
    try:
        for source in adapter.collect(files, project_root, options):
            _merge_result(servers, adapter.parse(source.fragment, source.label), report)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to import MCP servers from {adapter.name}: {e}")
        report.warnings.append(f"{adapter.name} import failed: {e}")


def import_all(
    store: ServerStore,
    files: ConfigFiles | None = None,
    project_root: Path | None = None,
    options: ImportOptions | None = None,
) -> ImportReport:
    """Import server definitions from all targets into the canonical list.

    ABOUTME: Claude scopes first (user, project, local), then Gemini,
    ABOUTME: OpenCode and Codex, always in that order
    ABOUTME: Persists only if the list actually changed

    Args:
        store: Canonical server list to merge into
        files: File access (defaults to the user's home)
        project_root: Enables Claude project/local scopes when given
        options: Scope switches for Claude

    Returns:
        ImportReport with counts and human-readable warnings
    """
    files = files or ConfigFiles()
    servers = store.servers()
    report = ImportReport()

    for target in IMPORT_ORDER:
        adapter = get_adapter(target)
        import_from(adapter, servers, report, files, project_root, options)

    report.changed = store.replace_all(servers)
    logger.info(
        f"Import finished: {report.newly_imported} new, {report.merged_existing} merged, "
        f"{report.skipped_invalid} skipped"
    )
    return report
