"""Click CLI for editing the bot's JSON config file."""

from __future__ import annotations

import json

import click

from src.botconfig.store import DEFAULT_CONFIG_PATH, ConfigError, ConfigStore, command_name


@click.group()
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_PATH,
    envvar="BOT_CONFIG_PATH",
    show_default=True,
    help="Path to the bot config JSON file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """Edit tokens, the default reply and command replies without touching code.

    \b
    Examples:
      botconfig list
      botconfig get VERIFY_TOKEN
      botconfig set VERIFY_TOKEN mytoken123
      botconfig set COMMAND_help "This is new help text"
      botconfig reset
    """
    ctx.ensure_object(dict)
    ctx.obj["store"] = ConfigStore(config_path)


@cli.command("set")
@click.argument("key", required=False)
@click.argument("value", nargs=-1)
@click.pass_context
def set_value(ctx: click.Context, key: str | None, value: tuple[str, ...]) -> None:
    """Set KEY to VALUE. COMMAND_<NAME> keys set a command reply."""
    text = " ".join(value)
    if not key or not text:
        raise click.UsageError("Usage: botconfig set <KEY> <VALUE>")
    store: ConfigStore = ctx.obj["store"]
    try:
        name = store.set(key, text)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    if name is not None:
        click.echo(f'Command reply updated: {name} -> "{text}"')
    else:
        click.echo(f'Config updated: {key} -> "{text}"')


@cli.command("get")
@click.argument("key", required=False)
@click.pass_context
def get_value(ctx: click.Context, key: str | None) -> None:
    """Print the value stored under KEY."""
    if not key:
        raise click.UsageError("Usage: botconfig get <KEY>")
    store: ConfigStore = ctx.obj["store"]
    try:
        value = store.get(key)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    name = command_name(key)
    label = f"COMMAND_{name.upper()}" if name is not None else key
    if value is None:
        raise click.ClickException(f"{label} is not set")
    if not isinstance(value, str):
        value = json.dumps(value, ensure_ascii=False)
    click.echo(f"{label}: {value}")


@cli.command("list")
@click.pass_context
def list_values(ctx: click.Context) -> None:
    """Print the whole configuration."""
    store: ConfigStore = ctx.obj["store"]
    try:
        data = store.load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@cli.command("reset")
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Restore the default configuration."""
    store: ConfigStore = ctx.obj["store"]
    try:
        store.reset()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo("Config reset to default.")
