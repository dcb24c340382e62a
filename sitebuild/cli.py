"""
Click CLI for building sites and inspecting their build output.
"""

import asyncio
import json
import sys
from typing import Optional

import click

from .config import Settings, configure_logging
from .content_type import get_content_type
from .errors import VisibleError
from .manifest import (
    DEFAULT_CACHE_POLICY_ALLOWED_HEADERS,
    load_build_metadata,
    load_open_next_output,
    normalize_build_command,
)
from .runner import BuildRequest, build_app


def _parse_env(pairs: tuple) -> dict:
    env = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected KEY=VALUE, got {pair!r}", param_hint="--env")
        key, value = pair.split("=", 1)
        env[key] = value
    return env


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to SITEBUILD_LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx, log_level: Optional[str]):
    """
    sitebuild - build SSR sites and describe their deployable output.
    """
    settings = Settings.from_env()
    configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command("build")
@click.argument("site_path", type=click.Path(file_okay=False))
@click.option("--name", help="Site name used in messages (defaults to the path)")
@click.option("--command", "build_command", help="Explicit build command")
@click.option("--env", "env_pairs", multiple=True, help="Extra env var KEY=VALUE (repeatable)")
@click.pass_context
def build_cmd(ctx, site_path: str, name: Optional[str], build_command: Optional[str], env_pairs: tuple):
    """
    Run the site's build with the injected environment.
    """
    request = BuildRequest(
        name=name or site_path,
        site_path=site_path,
        build_command=build_command,
        environment=_parse_env(env_pairs),
    )
    try:
        result = asyncio.run(build_app(request, settings=ctx.obj["settings"]))
    except VisibleError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    click.echo(result)


@main.command("manifest")
@click.argument("output_path", type=click.Path(exists=True, file_okay=False))
@click.option("--name", help="Site name used in messages (defaults to the path)")
def manifest_cmd(output_path: str, name: Optional[str]):
    """
    Print the normalized manifest, build metadata and cache policy headers as JSON.
    """
    try:
        manifest = load_open_next_output(output_path)
        metadata = load_build_metadata(output_path, name or output_path)
    except VisibleError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    print(json.dumps({
        "manifest": manifest.to_dict(),
        "metadata": metadata.model_dump(by_alias=True, exclude_none=True),
        "cachePolicy": {"allowedHeaders": DEFAULT_CACHE_POLICY_ALLOWED_HEADERS},
    }, indent=2))


@main.command("content-type")
@click.argument("filename")
@click.option("--encoding", default="utf-8", help='Text encoding, or "none" to omit the charset')
def content_type_cmd(filename: str, encoding: str):
    """
    Print the Content-Type header for a file name.
    """
    click.echo(get_content_type(filename, encoding))


@main.command("open-next-command")
@click.option("--command", "build_command", help="Explicit OpenNext build command")
@click.option("--version", "open_next_version", help="OpenNext version")
def open_next_command_cmd(build_command: Optional[str], open_next_version: Optional[str]):
    """
    Print the command used to run OpenNext.
    """
    click.echo(asyncio.run(normalize_build_command(build_command, open_next_version)))


if __name__ == "__main__":
    main()
