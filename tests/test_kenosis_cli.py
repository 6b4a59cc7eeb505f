"""End-to-end tests for the kenosis command line."""

from __future__ import annotations

import pytest

import kenosis
from kenosis.project_scanner import ProjectScanner


@pytest.fixture
def workspace(make_tree, tmp_path):
    return make_tree(
        {
            "web/package.json": 0,
            "web/node_modules/react/index.js": 2048,
            "engine/Cargo.toml": 0,
            "engine/target/release/engine": 4096,
            "tools/Tools.csproj": 0,
            "tools/obj": None,
            "notes/todo.txt": 5,
        }
    )


def test_report_lists_projects_largest_first(workspace, capsys):
    assert kenosis.main([str(workspace)]) == 0
    out = capsys.readouterr().out

    assert out.index("[rust]") < out.index("[js]") < out.index("[dotnet]")
    assert "Total size: 6.0 KiB" in out
    assert (workspace / "web" / "node_modules").exists()


def test_language_filter(workspace, capsys):
    assert kenosis.main([str(workspace), "-l", "javascript"]) == 0
    out = capsys.readouterr().out

    assert "[js]" in out
    assert "[rust]" not in out
    assert "Total size: 2.0 KiB" in out


def test_min_size_hides_small_projects(workspace, capsys):
    assert kenosis.main([str(workspace), "--min-size", "3K"]) == 0
    out = capsys.readouterr().out

    assert "[rust]" in out
    assert "[js]" not in out


def test_delete_removes_only_listed_projects(workspace, capsys):
    assert kenosis.main([str(workspace), "--language", "rust", "--delete"]) == 0
    out = capsys.readouterr().out

    assert "Removing dependencies:" in out
    assert not (workspace / "engine" / "target").exists()
    assert (workspace / "engine" / "Cargo.toml").exists()
    assert (workspace / "web" / "node_modules").exists()


def test_delete_reports_empty_folders(workspace, capsys):
    assert kenosis.main([str(workspace), "-l", "dotnet", "-d"]) == 0
    out = capsys.readouterr().out

    assert out.count("Skipping empty:") == 2
    assert (workspace / "tools" / "obj").is_dir()


def test_defaults_to_current_directory(workspace, capsys, monkeypatch):
    monkeypatch.chdir(workspace / "web")
    assert kenosis.main([]) == 0
    out = capsys.readouterr().out

    assert "[js]" in out
    assert "[rust]" not in out


def test_not_a_directory_exits_non_zero(tmp_path, capsys):
    assert kenosis.main([str(tmp_path / "missing")]) == 1
    assert "Not a directory" in capsys.readouterr().out


def test_scan_error_exits_non_zero(workspace, capsys, monkeypatch):
    def explode(self, directory):
        raise PermissionError(13, "Permission denied", str(directory))

    monkeypatch.setattr(ProjectScanner, "_subdirectories", explode)
    assert kenosis.main([str(workspace)]) == 1
    assert "Scan failed" in capsys.readouterr().out


def test_unknown_language_is_rejected(workspace):
    with pytest.raises(SystemExit) as exc:
        kenosis.main([str(workspace), "-l", "cobol"])
    assert exc.value.code == 2


def test_empty_tree_reports_zero(tmp_path, capsys):
    assert kenosis.main([str(tmp_path)]) == 0
    assert "Total size: 0 B" in capsys.readouterr().out
