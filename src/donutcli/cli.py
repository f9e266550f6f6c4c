"""Command line entry point for donut-cli."""

import asyncio
import logging
from typing import Optional, Tuple

import click
from rich.table import Table

from . import __version__
from .commands import AgentType, CommandAction, CommandDispatcher, create_default_registry
from .logging_config import configure_logging
from .paths import ensure_dirs
from .settings import ShellSettings, load_settings
from .shell import InteractiveShell
from .ui.display import Display, create_console
from .ui.menu import select
from .ui.menu_model import MenuItem, MenuOptions

logger = logging.getLogger(__name__)


def _settings(ctx: click.Context) -> ShellSettings:
    return ctx.find_root().obj["settings"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="donutcli")
@click.option("--log-level", default=None, help="Log level (override env)")
@click.option("--log-format", default=None, type=click.Choice(["json", "text"]))
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Path to YAML config")
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], log_format: Optional[str],
         config_path: Optional[str]) -> None:
    """donut-cli - interactive trading shell with slash commands."""
    settings = load_settings(config_path)
    configure_logging(
        log_level or settings.log_level,
        log_format or settings.log_format,
        settings.log_file,
    )
    if settings.log_file:
        try:
            ensure_dirs()
        except OSError as e:
            logger.warning(f"Could not create data directories: {e}")
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command("interactive")
@click.option("--no-banner", is_flag=True, help="Skip the welcome banner")
@click.option("--agent", "default_agent", default=None,
              type=click.Choice([a.value for a in AgentType], case_sensitive=False),
              help="Agent that receives free text")
@click.pass_context
def interactive(ctx: click.Context, no_banner: bool, default_agent: Optional[str]) -> None:
    """Start the interactive slash-command shell."""
    settings = _settings(ctx)
    updates = {}
    if no_banner:
        updates["show_banner"] = False
    if default_agent:
        updates["default_agent"] = default_agent.upper()
    if updates:
        settings = settings.model_copy(update=updates)

    shell = InteractiveShell(settings=settings)
    asyncio.run(shell.run())


@main.group("commands")
def commands_group() -> None:
    """Inspect and run slash commands without the shell."""


@commands_group.command("list")
@click.pass_context
def list_commands(ctx: click.Context) -> None:
    """List every registered slash command."""
    settings = _settings(ctx)
    console = create_console(color=settings.color)
    table = Table(title="Slash commands", title_style="text.bright")
    table.add_column("Command", style="info", no_wrap=True)
    table.add_column("Aliases", style="text.muted")
    table.add_column("Description")
    for descriptor in create_default_registry().list_unique():
        table.add_row(f"/{descriptor.name}", ", ".join(f"/{a}" for a in descriptor.aliases),
                      descriptor.description)
    console.print(table)


@commands_group.command("run")
@click.argument("name")
@click.argument("args", nargs=-1)
def run_command(name: str, args: Tuple[str, ...]) -> None:
    """Run one slash command and print the result it produces."""
    dispatcher = CommandDispatcher(create_default_registry())
    result = asyncio.run(dispatcher.execute(name, " ".join(args)))

    click.echo(f"action: {result.action.value}")
    if result.action == CommandAction.AGENT:
        click.echo(f"agent: {result.agent_type}")
        click.echo(f"prompt: {result.prompt}")
    elif result.message:
        click.echo(f"message: {result.message.strip()}")
    click.echo(f"continue: {str(result.continue_loop).lower()}")


@main.command("menu-demo")
@click.option("--title", default="Choose a command", help="Menu title")
@click.option("--max-visible", type=int, default=None, help="Rows drawn at once")
@click.pass_context
def menu_demo(ctx: click.Context, title: str, max_visible: Optional[int]) -> None:
    """Pick a slash command from an arrow-key menu."""
    settings = _settings(ctx)
    items = []
    for descriptor in create_default_registry().list_unique():
        if descriptor.name == "quit":
            items.append(MenuItem.separator_line())
        items.append(MenuItem(
            key=descriptor.name,
            label=f"/{descriptor.name}",
            description=descriptor.description,
            shortcut=descriptor.aliases[0] if descriptor.aliases and len(descriptor.aliases[0]) == 1 else None,
        ))
    options = MenuOptions(
        items=items,
        title=title,
        border=settings.menu_border,
        max_visible=max_visible or settings.menu_max_visible,
    )

    result = asyncio.run(select(options, color=settings.color))
    display = Display(create_console(color=settings.color), border=settings.menu_border)
    if result.cancelled:
        display.info("Cancelled.")
    else:
        display.success(f"Selected /{result.key}")


if __name__ == "__main__":
    main()
