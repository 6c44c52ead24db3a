"""Unit tests for the path validator.

Tests for classification order, protected prefixes, whitelist handling,
symlink detection and the privileged re-check.
"""

import os
from pathlib import Path

import pytest
from mole.safety.models import VerdictKind
from mole.safety.protected import ProtectedPathSet
from mole.safety.validator import (
    LARGE_DELETION_THRESHOLD,
    PathValidator,
    contains_dangerous_chars,
    normalize,
    resolve_link_target,
)
from mole.safety.whitelist import Whitelist


class TestInvalidPaths:
    """Tests for malformed input."""

    def test_empty_path_is_invalid(self, validator: PathValidator) -> None:
        """Empty string is rejected before anything else."""
        verdict = validator.validate("")
        assert verdict.kind == VerdictKind.INVALID
        assert verdict.reason == "empty path"

    @pytest.mark.parametrize("path", ["relative/path", "etc", "./foo", "~/file"])
    def test_relative_path_is_invalid(self, validator: PathValidator, path: str) -> None:
        """Relative paths are rejected."""
        verdict = validator.validate(path)
        assert verdict.is_invalid
        assert verdict.reason == "path must be absolute"

    @pytest.mark.parametrize(
        "path",
        ["/home/user/../../../etc/passwd", "/tmp/../etc", "/a/b/..", "/.."],
    )
    def test_traversal_is_invalid(self, validator: PathValidator, path: str) -> None:
        """Any '..' component is rejected, even if it would resolve harmlessly."""
        verdict = validator.validate(path)
        assert verdict.is_invalid
        assert verdict.reason == "path traversal detected"

    def test_dotdot_inside_name_is_not_traversal(
        self, validator: PathValidator, workdir: Path
    ) -> None:
        """Names that merely contain '..' are not traversal."""
        verdict = validator.validate(str(workdir / "file..bak"))
        assert verdict.is_safe

    def test_traversal_beats_blocked(self, validator: PathValidator) -> None:
        """Traversal is reported even when the text starts with a blocked prefix."""
        assert validator.validate("/etc/../tmp").is_invalid

    @pytest.mark.parametrize("path", ["/tmp/a\x00b", "/tmp/line\nbreak", "/tmp/\x1b[31m"])
    def test_control_characters_are_invalid(self, validator: PathValidator, path: str) -> None:
        """Paths with control characters are rejected."""
        verdict = validator.validate(path)
        assert verdict.is_invalid
        assert verdict.reason == "path contains control characters"

    def test_accepts_path_objects(self, validator: PathValidator) -> None:
        """Path objects are classified like strings."""
        assert validator.validate(Path("/etc")).is_blocked


class TestBlockedPaths:
    """Tests for protected system prefixes."""

    def test_root_is_blocked(self, validator: PathValidator) -> None:
        """The filesystem root is blocked."""
        verdict = validator.validate("/")
        assert verdict.is_blocked
        assert verdict.reason == "system path protected: /"

    def test_etc_is_blocked(self, validator: PathValidator) -> None:
        """/etc itself is blocked."""
        verdict = validator.validate("/etc")
        assert verdict.is_blocked
        assert verdict.reason == "system path protected: /etc"

    def test_descendant_is_blocked(self, validator: PathValidator) -> None:
        """Files under a blocked prefix are blocked."""
        assert validator.validate("/etc/passwd").is_blocked
        verdict = validator.validate("/usr/bin/ls")
        assert verdict.is_blocked
        assert verdict.reason == "system path protected: /usr"

    def test_root_only_matches_exactly(self, validator: PathValidator, workdir: Path) -> None:
        """The root entry does not block every absolute path."""
        assert validator.validate(str(workdir / "file")).is_safe

    def test_prefix_matching_respects_components(self, validator: PathValidator) -> None:
        """/etcetera is not under /etc."""
        verdict = validator.validate("/etcetera")
        assert not verdict.is_blocked

    @pytest.mark.parametrize("path", ["//etc", "/etc/./passwd", "/./usr//bin"])
    def test_normalization_cannot_dodge_prefixes(
        self, validator: PathValidator, path: str
    ) -> None:
        """Repeated separators and '.' components are normalized away."""
        assert validator.validate(path).is_blocked

    @pytest.mark.parametrize(
        "path",
        [
            "/var/cache/apt/archives",
            "/var/cache/apt/archives/foo.deb",
            "/var/cache/apt/pkgcache.bin",
            "/var/cache/pacman/pkg/foo.pkg.tar.zst",
        ],
    )
    def test_safe_cache_exceptions_are_not_blocked(
        self, validator: PathValidator, path: str
    ) -> None:
        """Known package caches under /var are deletable."""
        verdict = validator.validate(path)
        assert not verdict.is_blocked
        assert not verdict.is_invalid

    def test_other_var_cache_entries_are_blocked(self, validator: PathValidator) -> None:
        """Only the listed caches are carved out of /var."""
        verdict = validator.validate("/var/cache/apt/lists")
        assert verdict.is_blocked
        assert verdict.reason == "system path protected: /var"


class TestWhitelist:
    """Tests for user whitelist handling."""

    def test_whitelisted_path_is_blocked(self, workdir: Path) -> None:
        """Whitelisted entries are blocked with the whitelist reason."""
        validator = PathValidator(Whitelist((workdir / "keep",)))
        verdict = validator.validate(str(workdir / "keep"))
        assert verdict.is_blocked
        assert verdict.reason == "path is whitelisted by user"

    def test_whitelist_covers_descendants(self, workdir: Path) -> None:
        """Children of a whitelisted directory are blocked."""
        validator = PathValidator(Whitelist((workdir / "keep",)))
        assert validator.validate(str(workdir / "keep" / "a" / "b")).is_blocked

    def test_whitelist_does_not_match_siblings(self, workdir: Path) -> None:
        """A whitelist entry does not protect names sharing its prefix."""
        validator = PathValidator(Whitelist((workdir / "keep",)))
        assert validator.validate(str(workdir / "keeper")).is_safe

    def test_system_reason_wins_over_whitelist(self) -> None:
        """Blocked prefixes are checked before the whitelist."""
        validator = PathValidator(Whitelist((Path("/etc"),)))
        assert validator.validate("/etc").reason == "system path protected: /etc"

    def test_user_cache_is_safe(self, validator: PathValidator, isolated_home: Path) -> None:
        """A path under ~/.cache is safe with an empty whitelist."""
        assert validator.validate(str(isolated_home / ".cache" / "x")).is_safe


class TestSymlinksAndCaution:
    """Tests for symlink and caution verdicts."""

    def test_symlink_reports_raw_target(self, validator: PathValidator, workdir: Path) -> None:
        """Symlinks are reported with their unresolved target."""
        link = workdir / "link"
        link.symlink_to("/etc/passwd")
        verdict = validator.validate(str(link))
        assert verdict.is_symlink
        assert verdict.target == "/etc/passwd"

    def test_relative_symlink_target_is_kept_raw(
        self, validator: PathValidator, workdir: Path
    ) -> None:
        """Relative targets are not resolved by validate."""
        link = workdir / "link"
        link.symlink_to("../other")
        assert validator.validate(str(link)).target == "../other"

    def test_dangling_symlink_is_symlink(self, validator: PathValidator, workdir: Path) -> None:
        """Links to missing targets are still reported as symlinks."""
        link = workdir / "dangling"
        link.symlink_to(workdir / "missing")
        assert validator.validate(str(link)).is_symlink

    def test_trailing_slash_does_not_hide_symlink(
        self, validator: PathValidator, workdir: Path
    ) -> None:
        """A link to a directory is still a link when written with a trailing slash."""
        target = workdir / "target"
        target.mkdir()
        link = workdir / "link"
        link.symlink_to(target)

        verdict = validator.validate(f"{link}/")

        assert verdict.is_symlink
        assert verdict.target == str(target)

    @pytest.mark.parametrize("path", ["/opt", "/home", "/tmp"])
    def test_caution_paths(self, validator: PathValidator, path: str) -> None:
        """Caution entries match exactly and need confirmation."""
        verdict = validator.validate(path)
        assert verdict.is_caution
        assert verdict.reason == f"deleting {path} requires confirmation"

    def test_caution_is_exact_match(self, validator: PathValidator) -> None:
        """Children of caution entries are safe."""
        assert validator.validate("/opt/someapp/cache").is_safe

    @pytest.mark.parametrize("path", ["/var/cache", "/var/tmp"])
    def test_caution_entries_under_var_are_blocked(
        self, validator: PathValidator, path: str
    ) -> None:
        """Caution entries under /var are caught by the /var prefix first."""
        assert validator.validate(path).is_blocked


class TestPrivilegedValidation:
    """Tests for the privileged re-check against resolved paths."""

    def test_link_into_blocked_tree_is_blocked(
        self, validator: PathValidator, workdir: Path
    ) -> None:
        """A path whose parent links into /etc is blocked once resolved."""
        (workdir / "etc-link").symlink_to("/etc")
        path = workdir / "etc-link" / "passwd"

        assert validator.validate(str(path)).is_safe
        verdict = validator.validate_for_privileged_operation(str(path))
        assert verdict.is_blocked
        assert verdict.reason == f"symlink resolves to protected path: {os.path.realpath(path)}"

    def test_non_safe_verdicts_pass_through(self, validator: PathValidator) -> None:
        """Non-safe verdicts are returned unchanged."""
        assert validator.validate_for_privileged_operation("") == validator.validate("")
        assert validator.validate_for_privileged_operation("/tmp").is_caution

    def test_plain_safe_path_stays_safe(self, validator: PathValidator, workdir: Path) -> None:
        """Ordinary files stay safe under the privileged check."""
        target = workdir / "file"
        target.write_text("x")
        assert validator.validate_for_privileged_operation(str(target)).is_safe

    def test_validate_for_deletion_follows_privilege(self, workdir: Path) -> None:
        """Only elevated validators apply the resolved-path check."""
        (workdir / "etc-link").symlink_to("/etc")
        path = str(workdir / "etc-link" / "hosts")

        assert PathValidator(elevated=False).validate_for_deletion(path).is_safe
        assert PathValidator(elevated=True).validate_for_deletion(path).is_blocked


class TestLargeDeletion:
    """Tests for the large-deletion threshold."""

    def test_threshold_is_one_gib(self) -> None:
        """The default threshold is 1 GiB."""
        assert LARGE_DELETION_THRESHOLD == 1024**3

    def test_threshold_is_inclusive(self, validator: PathValidator) -> None:
        """Exactly 1 GiB counts as large; one byte less does not."""
        assert validator.is_large_deletion(1024**3)
        assert not validator.is_large_deletion(1024**3 - 1)
        assert not validator.is_large_deletion(0)

    def test_custom_threshold(self) -> None:
        """The threshold is configurable per validator."""
        validator = PathValidator(large_deletion_threshold=10)
        assert validator.is_large_deletion(10)
        assert validator.large_deletion_threshold == 10


class TestHelpers:
    """Tests for module-level helper functions."""

    def test_contains_dangerous_chars(self) -> None:
        """Control characters and DEL are dangerous; unicode is not."""
        assert contains_dangerous_chars("/tmp/\x00")
        assert contains_dangerous_chars("/tmp/\x7f")
        assert not contains_dangerous_chars("/tmp/héllo wörld")

    def test_normalize(self) -> None:
        """normalize collapses separators and dot components only."""
        assert normalize("//etc/./passwd") == "/etc/passwd"
        assert normalize("/") == "/"
        assert normalize("/a/b/") == "/a/b"

    def test_resolve_link_target(self) -> None:
        """Relative targets are joined onto the link's directory."""
        assert resolve_link_target("/data/x/link", "../../etc") == "/etc"
        assert resolve_link_target("/data/link", "sub/file") == "/data/sub/file"
        assert resolve_link_target("/data/link", "/abs") == "/abs"

    def test_validator_is_deterministic(self, validator: PathValidator) -> None:
        """Classifying the same path twice gives the same verdict."""
        assert validator.validate("/etc/passwd") == validator.validate("/etc/passwd")

    def test_custom_protected_set(self, workdir: Path) -> None:
        """A validator can use custom protection tables."""
        protected = ProtectedPathSet(blocked=(str(workdir),), caution=(), safe_cache_exceptions=())
        validator = PathValidator(protected=protected)
        assert validator.validate(str(workdir / "x")).is_blocked
