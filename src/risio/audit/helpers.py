"""Helper utilities for audit logging.

Run identifiers, timestamps, artifact fingerprints and environment info.
"""

import hashlib
import importlib.metadata
import platform
import secrets
import sys
from datetime import UTC, datetime
from pathlib import Path

__all__ = [
    "generate_run_id",
    "utc_timestamp",
    "file_sha256",
    "get_package_version",
    "get_environment_info",
]


def utc_timestamp() -> str:
    """Return the current UTC time as ISO8601 with a ``Z`` suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    return f"{utc_timestamp()}__{secrets.token_hex(4)}"


def file_sha256(path: Path) -> str:
    """Fingerprint a written artifact.

    Parameters
    ----------
    path : Path
        File to hash.

    Returns
    -------
    str
        Digest formatted as ``sha256:<hex>``.
    """
    with path.open("rb") as f:
        return "sha256:" + hashlib.file_digest(f, "sha256").hexdigest()


def get_package_version() -> str:
    """Get risio package version, or "unknown" when not installed."""
    try:
        return importlib.metadata.version("risio")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_environment_info() -> dict[str, str]:
    """Describe the execution environment.

    Returns
    -------
    dict[str, str]
        Python version, platform string (e.g., "Linux-6.8.0-x86_64") and
        package version.
    """
    return {
        "python_version": sys.version.split()[0],
        "platform": f"{platform.system()}-{platform.release()}-{platform.machine()}",
        "package_version": get_package_version(),
    }
