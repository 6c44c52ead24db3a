"""Build artifact scanner.

Walks project directories looking for regenerable build output such as
``node_modules`` or Rust ``target`` directories.
"""

import logging
import os
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from mole.models.scan import ArtifactPattern, FoundArtifact
from mole.safety.sizing import size_of

logger = logging.getLogger(__name__)

MAX_DEPTH = 4

SECONDS_PER_DAY = 86400

ARTIFACT_PATTERNS: tuple[ArtifactPattern, ...] = (
    ArtifactPattern("Node.js", "node_modules", ("package.json",)),
    ArtifactPattern("Rust", "target", ("Cargo.toml",)),
    ArtifactPattern("Python venv", "venv", ("requirements.txt", "setup.py", "pyproject.toml")),
    ArtifactPattern("Python venv", ".venv", ("requirements.txt", "setup.py", "pyproject.toml")),
    ArtifactPattern("Python cache", "__pycache__"),
    ArtifactPattern("Gradle", "build", ("build.gradle", "build.gradle.kts")),
    ArtifactPattern("Maven", "target", ("pom.xml",)),
    ArtifactPattern("Next.js", ".next", ("package.json",)),
    ArtifactPattern("Nuxt", ".nuxt", ("package.json",)),
)


class ArtifactScanner:
    """Scanner for build artifacts in project directories.

    Directories are walked up to ``max_depth`` levels below each root
    without following symlinks. Matched artifact directories are not
    descended into.

    Args:
        skip_recent_days: Artifacts modified within this many days are
            reported but not preselected.
        patterns: Artifact patterns to look for.
        max_depth: Maximum directory depth below each root.
        now: Clock used for age computation (seconds since the epoch).
    """

    def __init__(
        self,
        skip_recent_days: int = 7,
        *,
        patterns: tuple[ArtifactPattern, ...] = ARTIFACT_PATTERNS,
        max_depth: int = MAX_DEPTH,
        now: float | None = None,
    ) -> None:
        if skip_recent_days < 0:
            msg = f"skip_recent_days must be non-negative, got {skip_recent_days}"
            raise ValueError(msg)
        self._skip_recent_days = skip_recent_days
        self._patterns = patterns
        self._max_depth = max_depth
        self._now = now

    def scan(self, roots: Iterable[Path]) -> list[FoundArtifact]:
        """Scan project roots for artifacts.

        Args:
            roots: Directories to search. Missing roots are skipped.

        Returns:
            Found artifacts, largest first.
        """
        now = self._now if self._now is not None else time.time()
        artifacts: list[FoundArtifact] = []

        for root in roots:
            if not root.is_dir():
                logger.debug("Skipping missing project path %s", root)
                continue
            for directory, pattern in self._walk(root):
                artifacts.append(self._describe(directory, pattern, now))

        artifacts.sort(key=lambda a: a.size_bytes, reverse=True)
        return artifacts

    def _walk(self, root: Path) -> Iterator[tuple[Path, ArtifactPattern]]:
        """Yield artifact directories below a root with their pattern."""
        pending: list[tuple[Path, int]] = [(root, 0)]
        while pending:
            directory, depth = pending.pop()
            if depth >= self._max_depth:
                continue
            try:
                with os.scandir(directory) as entries:
                    children = [
                        Path(entry.path)
                        for entry in entries
                        if entry.is_dir(follow_symlinks=False)
                    ]
            except OSError as e:
                logger.debug("Cannot read %s: %s", directory, e)
                continue

            for child in sorted(children):
                pattern = self._match(child)
                if pattern is not None:
                    yield child, pattern
                else:
                    pending.append((child, depth + 1))

    def _match(self, directory: Path) -> ArtifactPattern | None:
        """Return the first pattern matching a directory."""
        for pattern in self._patterns:
            if pattern.matches(directory):
                return pattern
        return None

    def _describe(self, directory: Path, pattern: ArtifactPattern, now: float) -> FoundArtifact:
        """Build a FoundArtifact for a matched directory."""
        try:
            mtime = directory.lstat().st_mtime
        except OSError:
            mtime = now
        age_days = max(int((now - mtime) // SECONDS_PER_DAY), 0)

        return FoundArtifact(
            project_name=directory.parent.name or "unknown",
            artifact_type=pattern.name,
            path=directory,
            size_bytes=size_of(directory),
            age_days=age_days,
            selected=age_days > self._skip_recent_days,
        )
