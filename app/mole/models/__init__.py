"""Data models for mole scan results."""

from mole.models.scan import (
    AppType,
    ArtifactPattern,
    CategoryScope,
    CleanupCategory,
    DirEntry,
    FoundArtifact,
    InstalledApp,
    LeftoverFile,
    LeftoverType,
)

__all__ = [
    "AppType",
    "ArtifactPattern",
    "CategoryScope",
    "CleanupCategory",
    "DirEntry",
    "FoundArtifact",
    "InstalledApp",
    "LeftoverFile",
    "LeftoverType",
]
