"""
Tests for the site build runner.
"""

import asyncio
import json
import subprocess
import threading
import time
from unittest.mock import patch

import pytest

from sitebuild.config import Settings
from sitebuild.envman import Link
from sitebuild.errors import BuildError, ConfigurationError
from sitebuild.limiter import BuildLimiter
from sitebuild.runner import BuildRequest, build_app


def run(coro):
    return asyncio.run(coro)


def settings(**kw):
    base = dict(app_name="shop", stage="test")
    base.update(kw)
    return Settings(**base)


class TestShortCircuit:
    """Skip and dev mode never touch the filesystem or spawn anything."""

    @pytest.mark.parametrize("flags", [{"skip": True}, {"dev": True}])
    def test_returns_site_path_untouched(self, tmp_path, flags):
        site = str(tmp_path / "does-not-exist")
        with patch("sitebuild.runner.subprocess.run") as mock_run, \
                patch("sitebuild.runner.resolve_build_command") as mock_resolve:
            result = run(build_app(BuildRequest(name="web", site_path=site), settings=settings(**flags)))
        assert result == site
        mock_run.assert_not_called()
        mock_resolve.assert_not_called()


class TestBuild:
    """Command execution, environment and failures."""

    def test_runs_resolved_command_in_site_dir(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"scripts": {"build": "next build"}}))
        (tmp_path / "pnpm-lock.yaml").write_text("")
        limiter = BuildLimiter(1)
        with patch("sitebuild.runner.subprocess.run") as mock_run:
            result = run(build_app(BuildRequest(name="web", site_path=str(tmp_path)), settings=settings(), limiter=limiter))

        assert result == str(tmp_path)
        args, kwargs = mock_run.call_args
        assert args[0] == "pnpm run build"
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["shell"] is True
        assert kwargs["check"] is True
        assert "stdout" not in kwargs and "stderr" not in kwargs

    def test_configuration_error_before_spawn(self, tmp_path):
        with patch("sitebuild.runner.subprocess.run") as mock_run:
            with pytest.raises(ConfigurationError):
                run(build_app(BuildRequest(name="web", site_path=str(tmp_path)), settings=settings(), limiter=BuildLimiter(1)))
        mock_run.assert_not_called()

    def test_environment_layers(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SST_AWS_ACCESS_KEY_ID", "AKIA123")
        monkeypatch.setenv("SST_AWS_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("SST_AWS_SESSION_TOKEN", "session")
        monkeypatch.setenv("SST_AWS_REGION", "us-east-2")
        monkeypatch.setenv("BASE_ONLY", "kept")
        request = BuildRequest(
            name="web",
            site_path=str(tmp_path),
            build_command="make",
            environment={"NODE_ENV": "production", "SST_RESOURCE_Db": "overridden"},
            links=[Link("Db", {"url": "postgres://db"})],
        )
        with patch("sitebuild.runner.subprocess.run") as mock_run:
            run(build_app(request, settings=settings(), limiter=BuildLimiter(1)))

        env = mock_run.call_args.kwargs["env"]
        assert env["BASE_ONLY"] == "kept"
        assert env["SST"] == "1"
        assert env["AWS_ACCESS_KEY_ID"] == "AKIA123"
        assert env["AWS_SECRET_ACCESS_KEY"] == "secret"
        assert env["AWS_SESSION_TOKEN"] == "session"
        assert env["AWS_REGION"] == "us-east-2"
        assert env["NODE_ENV"] == "production"
        assert json.loads(env["SST_RESOURCE_Db"]) == {"url": "postgres://db"}
        assert json.loads(env["SST_RESOURCE_App"]) == {"name": "shop", "stage": "test"}

    def test_async_link_resolver(self, tmp_path):
        async def resolver(refs):
            return [{"name": ref, "properties": {"arn": f"arn:{ref}"}} for ref in refs]

        request = BuildRequest(name="web", site_path=str(tmp_path), build_command="make", links=["Bucket"])
        with patch("sitebuild.runner.subprocess.run") as mock_run:
            run(build_app(request, settings=settings(), limiter=BuildLimiter(1), link_resolver=resolver))
        assert mock_run.call_args.kwargs["env"]["SST_RESOURCE_Bucket"] == '{"arn":"arn:Bucket"}'

    @pytest.mark.parametrize("error", [
        subprocess.CalledProcessError(1, "make"),
        FileNotFoundError("no shell"),
    ])
    def test_failure_names_site_and_releases_slot(self, tmp_path, error):
        limiter = BuildLimiter(1)
        request = BuildRequest(name="marketing", site_path=str(tmp_path), build_command="make")
        with patch("sitebuild.runner.subprocess.run", side_effect=error):
            with pytest.raises(BuildError) as exc:
                run(build_app(request, settings=settings(), limiter=limiter))
        assert str(exc.value) == 'There was a problem building "marketing".'
        assert exc.value.__cause__ is error
        assert limiter.active == 0

    def test_no_retry(self, tmp_path):
        request = BuildRequest(name="web", site_path=str(tmp_path), build_command="make")
        with patch("sitebuild.runner.subprocess.run", side_effect=subprocess.CalledProcessError(2, "make")) as mock_run:
            with pytest.raises(BuildError):
                run(build_app(request, settings=settings(), limiter=BuildLimiter(1)))
        assert mock_run.call_count == 1


def test_concurrent_builds_respect_capacity(tmp_path):
    limiter = BuildLimiter(2)
    lock = threading.Lock()
    state = {"running": 0, "max": 0, "calls": 0}

    def fake_run(cmd, **kwargs):
        with lock:
            state["running"] += 1
            state["calls"] += 1
            state["max"] = max(state["max"], state["running"])
        time.sleep(0.05)
        with lock:
            state["running"] -= 1
        if cmd == "fail":
            raise subprocess.CalledProcessError(1, cmd)

    async def build_all():
        requests = [
            BuildRequest(name=f"site-{i}", site_path=str(tmp_path), build_command="fail" if i % 3 == 0 else "ok")
            for i in range(7)
        ]
        return await asyncio.gather(
            *(build_app(r, settings=settings(), limiter=limiter) for r in requests),
            return_exceptions=True,
        )

    with patch("sitebuild.runner.subprocess.run", side_effect=fake_run):
        results = run(build_all())

    assert state["calls"] == 7
    assert state["max"] <= 2
    assert limiter.peak <= 2
    assert limiter.active == 0
    assert sum(isinstance(r, BuildError) for r in results) == 3
    assert sum(r == str(tmp_path) for r in results) == 4
