"""Unit tests for view resolution."""

import os
from pathlib import Path

import pytest

from viewcontext.resolver import find_view, is_readable_file, resolve_path


class TestResolvePath:
    """Tests for joining candidates onto the views directory."""

    def test_relative_joined(self) -> None:
        """Test relative candidates are joined onto views_path."""
        assert resolve_path("page.j2", "/srv/views") == os.path.join("/srv/views", "page.j2")

    def test_absolute_unchanged(self) -> None:
        """Test absolute candidates ignore views_path."""
        assert resolve_path("/abs/page.j2", "/srv/views") == "/abs/page.j2"

    def test_no_views_path(self) -> None:
        """Test an empty views_path leaves relative candidates as given."""
        assert resolve_path("page.j2", "") == "page.j2"
        assert resolve_path("page.j2", None) == "page.j2"

    def test_path_objects(self, tmp_path: Path) -> None:
        """Test os.PathLike candidates and base paths are accepted."""
        assert resolve_path(Path("page.j2"), str(tmp_path)) == str(tmp_path / "page.j2")


class TestIsReadableFile:
    """Tests for the readability check."""

    def test_existing_file(self, tmp_path: Path) -> None:
        """Test a regular file is readable."""
        path = tmp_path / "a.j2"
        path.write_text("x")

        assert is_readable_file(str(path)) is True

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is not readable."""
        assert is_readable_file(str(tmp_path / "missing.j2")) is False

    def test_directory(self, tmp_path: Path) -> None:
        """Test a directory is not a readable file."""
        assert is_readable_file(str(tmp_path)) is False


class TestFindView:
    """Tests for the candidate selection policy."""

    def test_single_candidate_returned_unchecked(self, tmp_path: Path) -> None:
        """Test a lone candidate is returned even though it does not exist."""
        result = find_view("foo.tpl", str(tmp_path))

        assert result == os.path.join(str(tmp_path), "foo.tpl")

    def test_single_candidate_in_list(self, tmp_path: Path) -> None:
        """Test a one-element list behaves like a single name."""
        result = find_view(["foo.tpl"], str(tmp_path))

        assert result == os.path.join(str(tmp_path), "foo.tpl")

    def test_first_readable_wins(self, tmp_path: Path) -> None:
        """Test unreadable candidates are skipped."""
        (tmp_path / "real.tpl").write_text("x")

        result = find_view(["missing.tpl", "real.tpl"], str(tmp_path))

        assert result == os.path.join(str(tmp_path), "real.tpl")

    def test_order_respected(self, tmp_path: Path) -> None:
        """Test the earliest readable candidate is chosen."""
        (tmp_path / "custom.tpl").write_text("x")
        (tmp_path / "default.tpl").write_text("x")

        result = find_view(["custom.tpl", "default.tpl"], str(tmp_path))

        assert result == os.path.join(str(tmp_path), "custom.tpl")

    def test_none_readable(self, tmp_path: Path) -> None:
        """Test no readable candidate among several yields None."""
        assert find_view(["a.tpl", "b.tpl"], str(tmp_path)) is None

    def test_empty_candidates(self) -> None:
        """Test an empty candidate list yields None."""
        assert find_view([], "/srv/views") is None

    def test_absolute_candidate_among_relative(self, tmp_path: Path) -> None:
        """Test absolute candidates are checked as-is."""
        other = tmp_path / "other"
        other.mkdir()
        target = other / "page.tpl"
        target.write_text("x")

        result = find_view(["missing.tpl", str(target)], str(tmp_path / "views"))

        assert result == str(target)

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_unreadable_file_skipped(self, tmp_path: Path) -> None:
        """Test a file without read permission is skipped."""
        locked = tmp_path / "locked.tpl"
        locked.write_text("x")
        locked.chmod(0)
        (tmp_path / "open.tpl").write_text("x")

        try:
            result = find_view(["locked.tpl", "open.tpl"], str(tmp_path))
        finally:
            locked.chmod(0o644)

        assert result == os.path.join(str(tmp_path), "open.tpl")
