"""Resolve the version to display for the current build."""

from __future__ import annotations

from typing import Optional, Tuple

from releaseforge.core.versioning.version import (
    ZERO_VERSION,
    SemanticVersion,
    find_version,
)


def resolve_current_version(
    build_version: Optional[str] = None,
    version_file_text: Optional[str] = None,
    nearest_tag: Optional[str] = None,
) -> Tuple[SemanticVersion, str]:
    """Pick the current version from the first source that holds one.

    Order: explicit build version, version file, nearest tag. A source
    that sanitizes to 0.0.0 falls through to the next one.

    Args:
        build_version: Value already exported by the pipeline (BUILD_VERSION).
        version_file_text: Contents of the version file.
        nearest_tag: Nearest matching tag name.

    Returns:
        (version, source) where source is "build", "file", "tag" or "default".
    """
    candidates = (
        ("build", build_version),
        ("file", version_file_text),
        ("tag", nearest_tag),
    )
    for source, text in candidates:
        version = find_version(text)
        if version is not None and version != ZERO_VERSION:
            return version, source
    return ZERO_VERSION, "default"
