"""Scan drivers for mole.

This module provides scanners that find reclaimable space: cache
directories, build artifacts, installed applications with their
leftovers, and per-directory disk usage.
"""

from mole.scanners.apps import AppScanner, find_leftovers
from mole.scanners.artifacts import ARTIFACT_PATTERNS, ArtifactScanner
from mole.scanners.caches import CacheScanner
from mole.scanners.disk import analyze_directory

__all__ = [
    "ARTIFACT_PATTERNS",
    "AppScanner",
    "ArtifactScanner",
    "CacheScanner",
    "analyze_directory",
    "find_leftovers",
]
