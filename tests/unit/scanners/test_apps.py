"""Unit tests for AppScanner and leftover detection.

Tests for dpkg, snap and flatpak parsing, source failure handling and
leftover matching.
"""

from pathlib import Path

import pytest
from mole.core.errors import CommandFailedError
from mole.models.scan import AppType, InstalledApp, LeftoverType
from mole.safety.validator import PathValidator
from mole.safety.whitelist import Whitelist
from mole.scanners.apps import (
    AppScanner,
    find_leftovers,
    leftover_locations,
    normalize_app_name,
    search_terms,
)
from mole.utils.shell import CommandResult


class FakeRunner:
    """Command runner returning canned results keyed by program name."""

    def __init__(self, outputs: dict[str, CommandResult]) -> None:
        self.outputs = outputs
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> CommandResult:
        self.calls.append(args)
        return self.outputs[args[0]]


def ok(stdout: str) -> CommandResult:
    """Successful command result."""
    return CommandResult(stdout=stdout, stderr="", returncode=0)


def failed(stderr: str = "boom") -> CommandResult:
    """Failed command result."""
    return CommandResult(stdout="", stderr=stderr, returncode=1)


class TestScanSources:
    """Tests for the per-source parsers."""

    def test_scan_dpkg(self, mock_dpkg_output: str) -> None:
        """dpkg-query output is parsed with sizes converted from KB."""
        scanner = AppScanner(runner=FakeRunner({"dpkg-query": ok(mock_dpkg_output)}))

        apps = scanner.scan_dpkg()

        assert [a.name for a in apps] == ["firefox", "neovim", "libgtk-3-0", "curl"]
        assert apps[0].app_type == AppType.DEB
        assert apps[0].version == "128.0"
        assert apps[0].size_bytes == 204800 * 1024

    def test_scan_dpkg_skips_malformed_lines(self) -> None:
        """Lines without a version column are skipped; bad sizes become None."""
        output = "broken\nvim\t9.1\t\n\t1.0\t5\n"
        scanner = AppScanner(runner=FakeRunner({"dpkg-query": ok(output)}))

        apps = scanner.scan_dpkg()

        assert [a.name for a in apps] == ["vim"]
        assert apps[0].size_bytes is None

    def test_scan_dpkg_failure(self) -> None:
        """A failing dpkg-query raises CommandFailedError."""
        scanner = AppScanner(runner=FakeRunner({"dpkg-query": failed("locked")}))

        with pytest.raises(CommandFailedError, match="locked"):
            scanner.scan_dpkg()

    def test_scan_snap_filters_runtimes(self, mock_snap_output: str) -> None:
        """Header, base and snapd entries are dropped."""
        scanner = AppScanner(runner=FakeRunner({"snap": ok(mock_snap_output)}))

        apps = scanner.scan_snap()

        assert [a.name for a in apps] == ["firefox", "spotify"]
        assert apps[1].version == "1.2.31"
        assert all(a.app_type == AppType.SNAP for a in apps)

    def test_scan_snap_filters_platform_snaps(self) -> None:
        """gnome-*-platform snaps are runtimes even without notes."""
        output = (
            "Name  Version  Rev  Tracking  Publisher  Notes\n"
            "gnome-42-2204-platform  0+git  176  latest/stable  canonical  -\n"
            "vlc  3.0.20  3777  latest/stable  videolan  -\n"
        )
        scanner = AppScanner(runner=FakeRunner({"snap": ok(output)}))

        assert [a.name for a in scanner.scan_snap()] == ["vlc"]

    def test_scan_flatpak(self, mock_flatpak_output: str) -> None:
        """Flatpak columns map to name, display name and version."""
        runner = FakeRunner({"flatpak": ok(mock_flatpak_output)})
        scanner = AppScanner(runner=runner)

        apps = scanner.scan_flatpak()

        assert apps[0].name == "com.spotify.Client"
        assert apps[0].label == "Spotify"
        assert apps[0].version == "1.2.31.1205"
        assert runner.calls[0] == [
            "flatpak",
            "list",
            "--app",
            "--columns=application,name,version",
        ]


class TestScan:
    """Tests for AppScanner.scan method."""

    def test_combines_available_sources(
        self, mock_dpkg_output: str, mock_snap_output: str, mock_flatpak_output: str
    ) -> None:
        """Every installed source is queried and results are sorted by label."""
        runner = FakeRunner(
            {
                "dpkg-query": ok(mock_dpkg_output),
                "snap": ok(mock_snap_output),
                "flatpak": ok(mock_flatpak_output),
            }
        )
        scanner = AppScanner(runner=runner, exists=lambda _: True)

        apps = scanner.scan()

        labels = [a.label for a in apps]
        assert labels == sorted(labels, key=str.lower)
        assert {a.app_type for a in apps} == {AppType.DEB, AppType.SNAP, AppType.FLATPAK}

    def test_skips_missing_sources(self, mock_dpkg_output: str) -> None:
        """Sources whose command is not installed are not run."""
        runner = FakeRunner({"dpkg-query": ok(mock_dpkg_output)})
        scanner = AppScanner(runner=runner, exists=lambda name: name == "dpkg-query")

        apps = scanner.scan()

        assert len(apps) == 4
        assert [call[0] for call in runner.calls] == ["dpkg-query"]

    def test_one_failing_source_is_tolerated(
        self, mock_flatpak_output: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing source is logged while the others still report."""
        runner = FakeRunner(
            {"snap": failed("snapd not running"), "flatpak": ok(mock_flatpak_output)}
        )
        scanner = AppScanner(runner=runner, exists=lambda name: name != "dpkg-query")

        apps = scanner.scan()

        assert len(apps) == 3
        assert "snapd not running" in caplog.text

    def test_all_sources_failing_raises(self) -> None:
        """If every attempted source fails, the first error propagates."""
        runner = FakeRunner({"dpkg-query": failed("first"), "snap": failed("second")})
        scanner = AppScanner(runner=runner, exists=lambda name: name != "flatpak")

        with pytest.raises(CommandFailedError, match="first"):
            scanner.scan()

    def test_no_sources_gives_empty_list(self) -> None:
        """Nothing installed is not an error."""
        assert AppScanner(runner=FakeRunner({}), exists=lambda _: False).scan() == []

    def test_find_by_name_or_label(self, mock_flatpak_output: str) -> None:
        """find matches the identifier or display name, case-insensitively."""
        runner = FakeRunner({"flatpak": ok(mock_flatpak_output)})
        scanner = AppScanner(runner=runner, exists=lambda name: name == "flatpak")

        by_label = scanner.find("calculator")
        by_id = scanner.find("ORG.MOZILLA.FIREFOX")

        assert by_label is not None
        assert by_label.name == "org.gnome.Calculator"
        assert by_id is not None
        assert by_id.label == "Firefox"
        assert scanner.find("missing") is None


class TestNameMatching:
    """Tests for name normalization and search terms."""

    def test_normalize_app_name(self) -> None:
        """Separators, case and the .desktop suffix are removed."""
        assert normalize_app_name("Google-Chrome.desktop") == "googlechrome"
        assert normalize_app_name("Visual Studio_Code") == "visualstudiocode"

    def test_flatpak_terms_include_last_component(self) -> None:
        """Flatpak IDs also search for their last component."""
        app = InstalledApp("org.mozilla.firefox", AppType.FLATPAK, display_name="Firefox")

        assert search_terms(app) == {"org.mozilla.firefox", "firefox"}

    def test_deb_terms(self) -> None:
        """Deb packages search for their normalized name."""
        assert search_terms(InstalledApp("google-chrome", AppType.DEB)) == {"googlechrome"}


class TestFindLeftovers:
    """Tests for find_leftovers function."""

    def test_locations_cover_user_and_system(self, isolated_home: Path) -> None:
        """User locations come first, then system locations."""
        locations = leftover_locations(isolated_home)

        assert locations[0] == (isolated_home / ".config", LeftoverType.CONFIG)
        assert (isolated_home / ".config" / "autostart", LeftoverType.AUTOSTART) in locations
        assert (Path("/etc"), LeftoverType.CONFIG) in locations

    def test_finds_matching_entries(self, validator: PathValidator, isolated_home: Path) -> None:
        """Matching entries in user locations are reported with their type."""
        config = isolated_home / ".config" / "spotify"
        config.mkdir(parents=True)
        (config / "prefs").write_bytes(b"x" * 30)
        cache = isolated_home / ".cache" / "spotify"
        cache.mkdir(parents=True)
        (cache / "data").write_bytes(b"x" * 100)
        (isolated_home / ".config" / "unrelated").mkdir()

        app = InstalledApp("spotify", AppType.SNAP)
        leftovers = find_leftovers(app, validator, home=isolated_home)

        assert [(lf.path, lf.leftover_type, lf.size_bytes) for lf in leftovers] == [
            (cache, LeftoverType.CACHE, 100),
            (config, LeftoverType.CONFIG, 30),
        ]

    def test_short_terms_need_exact_match(
        self, validator: PathValidator, isolated_home: Path
    ) -> None:
        """Terms under four characters do not match inside longer names."""
        (isolated_home / ".config" / "vim").mkdir(parents=True)
        (isolated_home / ".config" / "vimeo-downloader").mkdir()

        app = InstalledApp("vim", AppType.DEB)
        leftovers = find_leftovers(app, validator, home=isolated_home)

        assert [lf.path.name for lf in leftovers] == ["vim"]

    def test_substring_match_for_long_terms(
        self, validator: PathValidator, isolated_home: Path
    ) -> None:
        """Longer terms match names that contain them."""
        apps_dir = isolated_home / ".local" / "share" / "applications"
        apps_dir.mkdir(parents=True)
        (apps_dir / "com.spotify.Client.desktop").write_text("[Desktop Entry]")

        app = InstalledApp("com.spotify.Client", AppType.FLATPAK, display_name="Spotify")
        leftovers = find_leftovers(app, validator, home=isolated_home)

        assert leftovers[0].leftover_type == LeftoverType.DESKTOP

    def test_whitelisted_leftovers_are_excluded(self, isolated_home: Path) -> None:
        """Entries the validator refuses are never reported."""
        keep = isolated_home / ".config" / "spotify"
        keep.mkdir(parents=True)
        validator = PathValidator(Whitelist((keep,)))

        app = InstalledApp("spotify", AppType.SNAP)

        assert find_leftovers(app, validator, home=isolated_home) == []

    def test_missing_locations_are_ignored(
        self, validator: PathValidator, isolated_home: Path
    ) -> None:
        """A bare home directory yields no leftovers."""
        app = InstalledApp("some-unlikely-app-name", AppType.DEB)

        assert find_leftovers(app, validator, home=isolated_home) == []
