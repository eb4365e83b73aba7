"""
Version information for Shopify Bundle Orders.

Single source of truth: pyproject.toml
Runtime access via importlib.metadata with fallback.
"""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any

PACKAGE_NAME = "shopify-bundle-orders"

# Fallback version if package metadata unavailable (dev mode)
_FALLBACK_VERSION = "0.1.0"


def get_version() -> str:
    """Get the package version from metadata or fallback."""
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return _FALLBACK_VERSION


VERSION = get_version()


def version_info() -> dict[str, Any]:
    """
    Get version information, with build metadata injected by the deploy.

    Returns:
        dict with version, python_version, git commit and build info
    """
    commit = os.environ.get("GIT_COMMIT")

    return {
        "version": VERSION,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "git_commit": commit[:8] if commit else None,
        "build_date": os.environ.get("BUILD_DATE") or datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "build_number": os.environ.get("BUILD_NUMBER"),
    }


def version_string() -> str:
    """
    Get formatted version string for display.

    Returns:
        Formatted version string like "v0.1.0 (abc1234)"
    """
    info = version_info()
    parts = [f"v{info['version']}"]
    if info.get("git_commit"):
        parts.append(f"({info['git_commit']})")
    return " ".join(parts)
