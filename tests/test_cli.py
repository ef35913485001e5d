"""Tests for the command-line entry point."""

import json

import pytest

from projscan import __version__
from projscan.cli import build_parser, main
from projscan.config import settings


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, tmp_path):
    """Run each command from a scratch directory with detached settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "_config_manager", None)
    for key, value in {
        "LOG_LEVEL": "WARNING",
        "LOG_FORMAT": "pretty",
        "LOG_COLORS": "false",
    }.items():
        monkeypatch.setenv(key, value)


def test_version(capsys):
    assert main(["version"]) == 0

    assert capsys.readouterr().out.strip() == f"projscan {__version__}"


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_error_result_exits_nonzero_and_is_saved(tmp_path, capsys):
    plain = tmp_path / "plain"
    plain.mkdir()

    assert main(["git", str(plain)]) == 1

    printed = json.loads(capsys.readouterr().out)
    assert printed["code"] == "invalid_repository"
    saved = json.loads((tmp_path / ".parsed" / "parser_git.json").read_text())
    assert saved == printed


def test_output_dir_flag(tmp_path, capsys):
    source = tmp_path / "src"
    source.mkdir()
    (source / "App.java").write_text("public class App {}\n")
    out = tmp_path / "results"

    assert main(["--output-dir", str(out), "java", str(source)]) == 0

    saved = json.loads((out / "parser_java.json").read_text())
    assert saved["java_files"][0]["class_name"] == "App"


def test_project_config_sets_output_dir(tmp_path):
    (tmp_path / ".projscan.json").write_text(json.dumps({"output_dir": "custom"}))
    (tmp_path / "readme.md").write_text("# Hi\n")

    assert main(["markdown", str(tmp_path)]) == 0

    assert (tmp_path / "custom" / "parser_markdown.json").exists()


def test_invalid_global_config_fails(temp_global_config_dir, tmp_path):
    (temp_global_config_dir / "config.json").write_text(
        json.dumps({"gitignore_mode": "fuzzy"})
    )

    assert main(["markdown", str(tmp_path)]) == 1


def test_environment_overrides_project_config(monkeypatch, tmp_path):
    (tmp_path / ".projscan.json").write_text(json.dumps({"output_dir": "custom"}))
    (tmp_path / "readme.md").write_text("# Hi\n")
    monkeypatch.setenv("PROJSCAN_OUTPUT_DIR", "from-env")

    assert main(["markdown", str(tmp_path)]) == 0

    assert (tmp_path / "from-env" / "parser_markdown.json").exists()
    assert not (tmp_path / "custom").exists()
