# ABOUTME: Validation utilities for canonical MCP server definitions
# ABOUTME: Errors block CRUD operations, warnings are only logged
import os
import re
from dataclasses import dataclass
from urllib.parse import urlparse

from mcpswitch.models import CanonicalServer, NetworkTransport

# ABOUTME: ${VAR_NAME} placeholders some tools expand at launch time
ENV_PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    server_name: str
    message: str
    severity: str  # 'error' or 'warning'


def validate_url(url: str) -> ValidationError | None:
    """Validate that a URL is properly formatted.

    ABOUTME: Requires HTTP or HTTPS scheme and a host
    ABOUTME: Returns None if URL valid, ValidationError otherwise
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return ValidationError(
            server_name="",
            message=f"Invalid URL format '{url}': {e}",
            severity="error"
        )
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            server_name="",
            message=f"URL must use HTTP or HTTPS scheme: {url}",
            severity="error"
        )
    if not parsed.netloc:
        return ValidationError(
            server_name="",
            message=f"URL missing host/domain: {url}",
            severity="error"
        )
    return None


def validate_server(server: CanonicalServer) -> list[ValidationError]:
    """Validate a canonical server definition.

    ABOUTME: Checks name, URL format and env keys (errors)
    ABOUTME: Warns about ${VAR} placeholders whose variable is unset

    Args:
        server: CanonicalServer instance to validate

    Returns:
        List of ValidationError instances (empty if valid)

    Examples:
        >>> validate_server(CanonicalServer.stdio("test", "npx", ["-y", "server"]))
        []
    """
    errors: list[ValidationError] = []

    if any(char in server.name for char in "\r\n"):
        errors.append(ValidationError(server.name, "Server name must be a single line", "error"))

    if isinstance(server.transport, NetworkTransport):
        url_error = validate_url(server.transport.url)
        if url_error:
            errors.append(ValidationError(server.name, url_error.message, url_error.severity))

    for key in server.env:
        if not key.strip():
            errors.append(ValidationError(server.name, "Environment variable name is empty", "error"))

    # Check ${VAR} references in every string the tools will see
    fields: list[tuple[str, str]] = []
    if server.command:
        fields.append(("command", server.command))
    fields.extend(("args", arg) for arg in server.args)
    if server.url:
        fields.append(("url", server.url))
    fields.extend((f"env.{key}", value) for key, value in server.env.items())

    for where, value in fields:
        for match in ENV_PLACEHOLDER_PATTERN.finditer(value):
            var_name = match.group(1)
            if var_name not in os.environ:
                errors.append(ValidationError(
                    server_name=server.name,
                    message=f"Environment variable '${var_name}' not set (referenced in {where})",
                    severity="warning"
                ))

    return errors


def raise_for_errors(server: CanonicalServer) -> list[ValidationError]:
    """Raise ValueError if validation finds errors; return the warnings."""
    problems = validate_server(server)
    blocking = [p.message for p in problems if p.severity == "error"]
    if blocking:
        raise ValueError(f"Server '{server.name}' is invalid: " + "; ".join(blocking))
    return [p for p in problems if p.severity == "warning"]
