"""Tests for the ReleaseForge CLI.

GitRepository is replaced with the in-memory fake so no git executable
is needed. JSON results are read from --output files because log lines
go to stderr, which older CliRunner versions mix into stdout.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from releaseforge import __version__
from releaseforge.cli.main import app

runner = CliRunner()

_ENV_VARS = (
    "FORCE_MAJOR",
    "FORCE_MINOR",
    "FORCE_PATCH",
    "FORCE_RELEASE",
    "FORCE_BUILD",
    "RELEASEFORGE_FORCE_BUMP",
    "RELEASEFORGE_STRATEGY",
    "RELEASEFORGE_TAG_MODE",
    "RELEASEFORGE_DEFAULT_BUMP",
    "RELEASEFORGE_LOG_LEVEL",
    "BRANCH_NAME",
    "GIT_BRANCH",
    "BUILD_VERSION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def git(monkeypatch, fake_repo):
    """Route every GitRepository the CLI opens to fake_repo."""
    monkeypatch.setattr(
        "releaseforge.cli.options.GitRepository", lambda *args, **kwargs: fake_repo
    )
    return fake_repo


def _compute(workspace: Path, *extra: str):
    out = workspace.parent / "result.json"
    result = runner.invoke(
        app,
        ["version", "compute", "--root", str(workspace), "--output", str(out), *extra],
    )
    data = json.loads(out.read_text(encoding="utf-8")) if out.exists() else None
    return result, data


class TestMainApp:
    """Tests for global options."""

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "version" in result.output
        assert "release" in result.output


class TestVersionCompute:
    """Tests for 'version compute'."""

    def test_compute_minor(self, git, workspace: Path) -> None:
        git.tags = ["v1.2.3"]
        git.message = "feat: add X !minor"

        result, data = _compute(workspace)

        assert result.exit_code == 0, result.output
        assert data["version"] == "1.3.0"
        assert data["bump"] == "minor"
        assert data["baselineSource"] == "tag"
        assert (workspace / "version.txt").read_text().strip() == "1.3.0"

    def test_second_run_skipped(self, git, workspace: Path) -> None:
        git.tags = ["v1.2.3"]
        git.message = "!minor"

        _compute(workspace)
        result, data = _compute(workspace)

        assert result.exit_code == 0
        assert data["version"] == "1.3.0"
        assert data["bump"] == "none"
        assert data["skipped"] is True

    def test_force_flag(self, git, workspace: Path) -> None:
        git.tags = ["v1.2.3"]

        _, data = _compute(workspace, "--force-major")

        assert data["version"] == "2.0.0"
        assert data["forcedBump"] == "major"

    def test_force_env(self, git, workspace: Path, monkeypatch) -> None:
        git.tags = ["v1.2.3"]
        monkeypatch.setenv("FORCE_PATCH", "true")

        _, data = _compute(workspace)

        assert data["version"] == "1.2.4"

    def test_strategy_option(self, git, workspace: Path) -> None:
        git.tags = ["v5.0.0"]
        (workspace / "version.txt").write_text("1.0.0\n")

        _, data = _compute(workspace, "--strategy", "file", "--force-patch")

        assert data["version"] == "1.0.1"
        assert data["baselineSource"] == "file"

    def test_cumulative_option(self, git, workspace: Path) -> None:
        git.tags = ["v0.1.0"]
        git.commits_since = {"v0.1.0": 3}

        _, data = _compute(
            workspace, "--cumulative-patch", "--default-bump", "patch"
        )

        assert data["version"] == "0.1.3"
        assert data["commitsSinceTag"] == 3

    def test_invalid_strategy(self, git, workspace: Path) -> None:
        result, data = _compute(workspace, "--strategy", "branch")

        assert result.exit_code == 1
        assert data is None
        assert "RF-VAL-001" in result.output

    def test_not_a_repository(self, git, workspace: Path) -> None:
        git.unavailable = True

        result, _ = _compute(workspace)

        assert result.exit_code == 1
        assert "RF-GIT-002" in result.output

    def test_env_output(self, git, workspace: Path) -> None:
        git.tags = ["v1.0.0"]
        git.message = "!release"
        env_file = workspace.parent / "build.env"

        result = runner.invoke(
            app,
            ["version", "compute", "--root", str(workspace), "--env-output", str(env_file)],
        )

        assert result.exit_code == 0
        lines = env_file.read_text().splitlines()
        assert "BUILD_VERSION=1.0.0" in lines
        assert "IS_RELEASE=true" in lines

    def test_table_output(self, git, workspace: Path) -> None:
        git.tags = ["v1.0.0"]
        git.message = "!minor"

        result = runner.invoke(app, ["version", "compute", "--root", str(workspace)])

        assert result.exit_code == 0
        assert "1.1.0" in result.output

    def test_config_file_option(self, git, workspace: Path) -> None:
        git.tags = ["v1.0.0"]
        config_file = workspace.parent / "custom.yaml"
        config_file.write_text("versioning:\n  default_bump: patch\n")
        out = workspace.parent / "result.json"

        result = runner.invoke(
            app,
            [
                "--config",
                str(config_file),
                "version",
                "compute",
                "--root",
                str(workspace),
                "--output",
                str(out),
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["version"] == "1.0.1"


class TestVersionNext:
    def test_next_writes_nothing(self, git, workspace: Path) -> None:
        git.tags = ["v1.0.0"]
        git.message = "!major"
        out = workspace.parent / "next.json"

        result = runner.invoke(
            app, ["version", "next", "--root", str(workspace), "--output", str(out)]
        )

        assert result.exit_code == 0
        assert json.loads(out.read_text())["version"] == "2.0.0"
        assert list(workspace.iterdir()) == []


class TestVersionShow:
    def test_show_from_file(self, git, workspace: Path) -> None:
        (workspace / "version.txt").write_text("0.7.2\n")

        result = runner.invoke(
            app, ["version", "show", "--root", str(workspace), "--silent"]
        )

        assert result.exit_code == 0
        assert result.output.strip().splitlines()[-1] == "0.7.2"

    def test_show_build_version_first(self, git, workspace: Path, monkeypatch) -> None:
        monkeypatch.setenv("BUILD_VERSION", "v3.0.0")
        (workspace / "version.txt").write_text("0.7.2\n")

        result = runner.invoke(
            app, ["version", "show", "--root", str(workspace), "--silent"]
        )

        assert result.output.strip().splitlines()[-1] == "3.0.0"

    def test_show_from_tag(self, git, workspace: Path) -> None:
        git.tags = ["v1.4.0"]

        result = runner.invoke(app, ["version", "show", "--root", str(workspace)])

        assert result.exit_code == 0
        assert "1.4.0" in result.output
        assert "tag" in result.output


class TestVersionValidate:
    def test_valid(self) -> None:
        result = runner.invoke(app, ["version", "validate", "v1.2.3-rc.1"])

        assert result.exit_code == 0
        assert "1.2.3" in result.output

    def test_invalid(self) -> None:
        result = runner.invoke(app, ["version", "validate", "latest"])

        assert result.exit_code == 1
        assert "No version found" in result.output


class TestReleaseCommands:
    """Tests for 'release gate', 'release tag' and 'release should-build'."""

    def test_gate_json(self, workspace: Path) -> None:
        result = runner.invoke(
            app,
            [
                "release",
                "gate",
                "--root",
                str(workspace),
                "--message",
                "feat !release",
                "--branch",
                "main",
                "--json",
            ],
        )

        assert result.exit_code == 0
        assert '"shouldRelease": true' in result.output
        assert '"shouldTag": true' in result.output

    def test_gate_uses_repository(self, git, workspace: Path) -> None:
        git.message = "docs"
        git.branch = "feature/x"

        result = runner.invoke(
            app, ["release", "gate", "--root", str(workspace), "--json"]
        )

        assert result.exit_code == 0
        assert '"branch": "feature/x"' in result.output
        assert '"shouldTag": false' in result.output

    def test_tag_created(self, git, workspace: Path) -> None:
        git.message = "Update version !tag"

        result = runner.invoke(
            app, ["release", "tag", "1.3.0", "--root", str(workspace)]
        )

        assert result.exit_code == 0, result.output
        assert git.created_tags == ["v1.3.0"]
        assert git.pushed_tags == []

    def test_tag_push(self, git, workspace: Path) -> None:
        git.message = "!tag"

        result = runner.invoke(
            app, ["release", "tag", "1.3.0", "--root", str(workspace), "--push"]
        )

        assert result.exit_code == 0
        assert git.pushed_tags == ["origin/v1.3.0"]

    def test_tag_gate_closed(self, git, workspace: Path) -> None:
        git.message = "Regular commit"

        result = runner.invoke(
            app, ["release", "tag", "1.3.0", "--root", str(workspace)]
        )

        assert result.exit_code == 0
        assert git.created_tags == []
        assert "Not tagging" in result.output

    def test_tag_push_failure(self, git, workspace: Path) -> None:
        git.message = "!tag"
        git.push_error = True

        result = runner.invoke(
            app, ["release", "tag", "1.3.0", "--root", str(workspace), "--push"]
        )

        assert result.exit_code == 1
        assert "RF-TAG-000" in result.output

    def test_tag_invalid_version(self, git, workspace: Path) -> None:
        result = runner.invoke(
            app, ["release", "tag", "next", "--root", str(workspace)]
        )

        assert result.exit_code == 1

    @pytest.mark.parametrize(
        "args,exit_code",
        [
            (["--message", "Major !major !tag !release"], 0),
            (["--message", "Add feature !tag"], 1),
            (["--message", "Add feature !tag", "--any"], 0),
            (["--message", "Regular commit", "--force"], 0),
            (["--message", "ship !deploy", "--token", "!deploy"], 0),
        ],
    )
    def test_should_build(self, workspace: Path, args, exit_code: int) -> None:
        result = runner.invoke(
            app, ["release", "should-build", "--root", str(workspace), *args]
        )

        assert result.exit_code == exit_code

    def test_should_build_force_env(self, workspace: Path, monkeypatch) -> None:
        monkeypatch.setenv("FORCE_BUILD", "true")

        result = runner.invoke(
            app,
            ["release", "should-build", "--root", str(workspace), "--message", "x"],
        )

        assert result.exit_code == 0

    def test_should_build_reads_commit(self, git, workspace: Path) -> None:
        git.message = "Add feature !tag !release"

        result = runner.invoke(
            app, ["release", "should-build", "--root", str(workspace)]
        )

        assert result.exit_code == 0
