from pathlib import Path
from unittest.mock import patch

from df_installer.host_app import claude_candidate_paths, detect_host_app


def test_macos_checks_applications_folder(tmp_path):
    assert claude_candidate_paths("Darwin", tmp_path) == [Path("/Applications/Claude.app")]


def test_windows_uses_local_appdata(tmp_path, monkeypatch):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))

    paths = claude_candidate_paths("Windows", tmp_path)

    assert paths[0] == tmp_path / "Local" / "Claude" / "Claude.exe"
    assert Path("C:/Program Files/Claude/Claude.exe") in paths


def test_windows_without_local_appdata(tmp_path, monkeypatch):
    monkeypatch.delenv("LOCALAPPDATA", raising=False)

    paths = claude_candidate_paths("Windows", tmp_path)

    assert paths[0] == tmp_path / "AppData" / "Local" / "Claude" / "Claude.exe"


def test_linux_includes_user_local_bin(tmp_path):
    assert tmp_path / ".local" / "bin" / "claude" in claude_candidate_paths("Linux", tmp_path)


class TestDetectHostApp:
    def test_returns_first_existing(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"
        second.touch()
        with patch("df_installer.host_app.claude_candidate_paths", return_value=[first, second]):
            assert detect_host_app("Linux", tmp_path) == second

    def test_none_when_missing(self, tmp_path):
        with patch(
            "df_installer.host_app.claude_candidate_paths",
            return_value=[tmp_path / "a", tmp_path / "b"],
        ):
            assert detect_host_app("Linux", tmp_path) is None
