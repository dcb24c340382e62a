import asyncio
import json

import pytest

from sitebuild.envman import Link, build_env_layers, build_link_env, merge_env, redact_env, resolve_links


def test_link_env_includes_app_and_links():
    env = build_link_env([Link("Db", {"host": "db.local", "port": 5432})], "shop", "prod")
    assert json.loads(env["SST_RESOURCE_App"]) == {"name": "shop", "stage": "prod"}
    assert env["SST_RESOURCE_Db"] == '{"host":"db.local","port":5432}'


def test_link_env_without_links():
    assert list(build_link_env([], "shop", "dev")) == ["SST_RESOURCE_App"]


def test_resolve_links_accepts_mappings():
    links = asyncio.run(resolve_links([{"name": "Bucket", "properties": {"name": "b-1"}}, Link("Queue")]))
    assert links == [Link("Bucket", {"name": "b-1"}), Link("Queue", {})]


def test_resolve_links_awaits_async_resolver():
    async def resolver(refs):
        await asyncio.sleep(0)
        return [Link(ref, {"ref": ref}) for ref in refs]

    links = asyncio.run(resolve_links(["Api"], resolver))
    assert links == [Link("Api", {"ref": "Api"})]


def test_resolve_links_rejects_unknown_reference():
    with pytest.raises(TypeError):
        asyncio.run(resolve_links([42]))


class TestMergeEnv:
    """Layer precedence: base -> marker -> credentials -> overrides -> links."""

    def test_later_layers_win(self):
        assert merge_env([{"A": "1", "B": "1"}, {"B": "2"}, {"C": "3"}]) == {"A": "1", "B": "2", "C": "3"}

    def test_none_removes_key(self):
        assert merge_env([{"A": "1"}, {"A": None}]) == {}

    def test_full_precedence(self):
        base = {
            "PATH": "/usr/bin",
            "SST": "0",
            "AWS_REGION": "eu-west-1",
            "SST_AWS_ACCESS_KEY_ID": "AKIA",
            "SST_AWS_SECRET_ACCESS_KEY": "shh",
            "SST_AWS_SESSION_TOKEN": "tok",
        }
        overrides = {"NODE_ENV": "production", "SST_RESOURCE_Db": "caller"}
        links = {"SST_RESOURCE_Db": '{"a":1}'}
        env = merge_env(build_env_layers(base, overrides, links))

        assert env["PATH"] == "/usr/bin"
        assert env["SST"] == "1"
        assert env["AWS_ACCESS_KEY_ID"] == "AKIA"
        assert env["AWS_SECRET_ACCESS_KEY"] == "shh"
        assert env["AWS_SESSION_TOKEN"] == "tok"
        # SST_AWS_REGION unset, so the base AWS_REGION is hidden
        assert "AWS_REGION" not in env
        assert env["NODE_ENV"] == "production"
        assert env["SST_RESOURCE_Db"] == '{"a":1}'

    def test_overrides_beat_marker_and_credentials(self):
        base = {"SST_AWS_REGION": "us-east-1"}
        env = merge_env(build_env_layers(base, {"SST": "custom", "AWS_REGION": "ap-south-1"}, {}))
        assert env["SST"] == "custom"
        assert env["AWS_REGION"] == "ap-south-1"


def test_redact_env_hides_credentials():
    redacted = redact_env({"AWS_SECRET_ACCESS_KEY": "x", "NODE_ENV": "production", "HASH": "a" * 40})
    assert redacted == {"AWS_SECRET_ACCESS_KEY": "[REDACTED]", "NODE_ENV": "production", "HASH": "[REDACTED]"}
