"""Tests for CLI commands via Typer CliRunner."""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from ulb.cli.main import app

runner = CliRunner()

PROGRESS_BACKEND = """
with open(sys.argv[0] + ".argv", "w") as f:
    json.dump(sys.argv[1:], f)
if "--json-output" in sys.argv:
    print(json.dumps({"stage": "extract", "progress": 0.25}), flush=True)
    print(json.dumps({"stage": "compress", "progress": 1.0}), flush=True)
else:
    print("plain backend output", flush=True)
sys.exit(int(__import__("os").environ.get("FAKE_EXIT", "0")))
"""


@pytest.fixture
def env(tmp_path):
    return {"ULB_HOME": str(tmp_path / "home")}


@pytest.fixture
def backend(fake_backend, env):
    path = fake_backend(PROGRESS_BACKEND)
    env["ULB_BACKEND"] = str(path)
    return path


def _flat(result):
    return " ".join(result.output.split())


def _argv(backend):
    impl = backend.parent / "backend_impl.py.argv"
    return json.loads(impl.read_text())


class TestInitCommand:
    def test_init_creates_project(self, tmp_path, env):
        target = tmp_path / "iso"
        result = runner.invoke(app, [
            "init", str(target),
            "--distro", "debian",
            "--image-name", "demo",
        ], env=env)

        assert result.exit_code == 0, result.output
        assert "Project initialized" in result.output
        config = (target / "Config.toml").read_text()
        assert 'distro = "debian"' in config
        assert 'image_name = "demo"' in config
        assert (target / "package-lists").exists()
        assert (target / "build" / ".cache").is_dir()

    def test_init_twice_fails(self, tmp_path, env):
        target = tmp_path / "iso"
        runner.invoke(app, ["init", str(target)], env=env)
        result = runner.invoke(app, ["init", str(target)], env=env)
        assert result.exit_code == 1
        assert "already exists" in _flat(result)

    def test_init_twice_long_path_message_unbroken(self, tmp_path, env):
        target = tmp_path / ("deeply_nested_project_directory_" * 4) / "iso"
        runner.invoke(app, ["init", str(target)], env=env)
        result = runner.invoke(app, ["init", str(target)], env=env)
        assert result.exit_code == 1
        assert f"{target / 'Config.toml'} already exists" in result.output

    def test_init_force(self, tmp_path, env):
        target = tmp_path / "iso"
        runner.invoke(app, ["init", str(target)], env=env)
        result = runner.invoke(app, ["init", str(target), "--force", "-n", "again"], env=env)
        assert result.exit_code == 0
        assert 'image_name = "again"' in (target / "Config.toml").read_text()

    def test_init_unknown_distro_warns(self, tmp_path, env):
        result = runner.invoke(app, ["init", str(tmp_path / "iso"), "--distro", "arch"], env=env)
        assert result.exit_code == 0
        assert "Warning" in result.output


class TestBuildCommand:
    def test_build_success(self, project_dir, backend, env):
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "build"], env=env)

        assert result.exit_code == 0, result.output
        assert "Build done" in result.output
        assert "compress" in result.output
        assert _argv(backend) == ["build", "--json-output", "Config.toml"]

    def test_build_release_flag(self, project_dir, backend, env):
        result = runner.invoke(
            app, ["-c", str(project_dir / "Config.toml"), "build", "--release"], env=env,
        )
        assert result.exit_code == 0, result.output
        assert _argv(backend) == ["build", "--release", "--json-output", "Config.toml"]

    def test_build_failure_propagates_exit_code(self, project_dir, backend, env):
        env["FAKE_EXIT"] = "3"
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "build"], env=env)

        assert result.exit_code == 3
        assert "Build failed" in result.output
        assert "Last stage: compress" in _flat(result)

    def test_build_no_progress(self, project_dir, backend, env):
        result = runner.invoke(
            app, ["-c", str(project_dir / "Config.toml"), "build", "--no-progress"], env=env,
        )
        assert result.exit_code == 0, result.output
        assert _argv(backend) == ["build", "Config.toml"]

    def test_build_missing_config(self, tmp_path, backend, env):
        result = runner.invoke(app, ["-c", str(tmp_path / "Config.toml"), "build"], env=env)
        assert result.exit_code == 1
        assert "Config file not found" in _flat(result)
        assert not (backend.parent / "backend_impl.py.argv").exists()

    def test_build_config_missing_field(self, tmp_path, backend, env):
        config = tmp_path / "Config.toml"
        config.write_text('distro = "fedora"\n')
        result = runner.invoke(app, ["-c", str(config), "build"], env=env)
        assert result.exit_code == 1
        assert "image_name is required" in _flat(result)
        assert not (backend.parent / "backend_impl.py.argv").exists()

    def test_build_missing_backend(self, project_dir, tmp_path, env):
        env["ULB_BACKEND"] = str(tmp_path / "missing-backend")
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "build"], env=env)
        assert result.exit_code == 1
        assert "Backend not found" in _flat(result)


class TestPassthroughCommands:
    def test_clean(self, project_dir, backend, env):
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "clean"], env=env)
        assert result.exit_code == 0, result.output
        assert "Clean done" in result.output
        assert _argv(backend) == ["clean", "Config.toml"]

    def test_status(self, project_dir, backend, env):
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "status"], env=env)
        assert result.exit_code == 0, result.output
        assert "Backend:" in result.output
        assert _argv(backend) == ["status", "Config.toml"]

    def test_clean_failure(self, project_dir, backend, env):
        env["FAKE_EXIT"] = "2"
        result = runner.invoke(app, ["-c", str(project_dir / "Config.toml"), "clean"], env=env)
        assert result.exit_code == 2
        assert "Clean failed" in _flat(result)


class TestDocsCommand:
    def test_docs_no_pager(self, env):
        result = runner.invoke(app, ["docs", "--no-pager"], env=env)
        assert result.exit_code == 0
        assert "Universal Live Builder" in result.output


class TestUpdateCommand:
    def test_update(self, tmp_path, env):
        resp = MagicMock()
        resp.headers = {"Content-Length": "4"}
        resp.read.side_effect = [b"\x7fELF", b""]
        urlopen = MagicMock()
        urlopen.return_value.__enter__.return_value = resp

        with patch("ulb.backend.update.urlopen", urlopen):
            result = runner.invoke(app, ["update", "--url", "https://example.org/b"], env=env)

        assert result.exit_code == 0, result.output
        assert "Backend updated" in result.output
        assert (tmp_path / "home" / "backend").read_bytes() == b"\x7fELF"

    def test_update_failure(self, env):
        from urllib.error import URLError

        with patch("ulb.backend.update.urlopen", MagicMock(side_effect=URLError("offline"))):
            result = runner.invoke(app, ["update"], env=env)

        assert result.exit_code == 1
        assert "Update failed" in _flat(result)


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert "build" in result.output
    assert "init" in result.output
