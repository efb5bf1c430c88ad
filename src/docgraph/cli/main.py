"""docgraph CLI - docgraph command."""

import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from docgraph import __version__
from docgraph.application import Application
from docgraph.config.loader import load_config
from docgraph.config.models import LoggingConfig
from docgraph.core.errors import DocGraphError
from docgraph.core.logging import configure_logging, get_log_file_path, get_logger
from docgraph.models.kinds import ReflectionKind, kind_string
from docgraph.semantic.memory import load_program

log = get_logger("cli")


@click.group()
@click.version_option(version=__version__, prog_name="docgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """docgraph - build a documentation graph from a semantic program model."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


def _configure_run_logging(config: LoggingConfig, verbose: bool) -> None:
    """Apply the configured outputs, keeping stdout free for JSON.

    Console outputs go to stderr at the --verbose level. File outputs keep
    their own level.
    """
    console_level = "DEBUG" if verbose else "WARNING"
    outputs = [
        output.model_copy(update={"destination": "stderr", "level": console_level})
        if output.destination in ("stderr", "stdout")
        else output.model_copy(update={"level": output.level or config.level})
        for output in config.outputs
    ]
    level = "DEBUG" if verbose else config.level
    configure_logging(config=config.model_copy(update={"level": level, "outputs": outputs}))


@cli.command("convert")
@click.argument("program", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--out", type=click.Path(dir_okay=False, path_type=Path), help="Output JSON file")
@click.option("--name", help="Project name (default: the program's name)")
@click.option("--strip-internal", is_flag=True, help="Remove reflections tagged @internal")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: .docgraph/config.yaml next to the program)",
)
@click.pass_context
def convert_command(
    ctx: click.Context,
    program: Path,
    out: Path | None,
    name: str | None,
    strip_internal: bool,
    config_file: Path | None,
) -> None:
    """Convert PROGRAM, a YAML or JSON program description, to JSON.

    Writes to stdout unless --out is given.
    """
    overrides: dict = {}
    if name:
        overrides["name"] = name
    if strip_internal:
        overrides["strip_internal"] = True

    try:
        config = load_config(
            repo_root=program.resolve().parent,
            config_file=config_file,
            **({"converter": overrides} if overrides else {}),
        )
        _configure_run_logging(config.logging, ctx.obj.get("verbose", False))
        app = Application(config, configure_logs=False)
        model = load_program(program)
        project = asyncio.run(app.convert(model))
        if out is not None:
            app.write_json(project, out)
            Console(stderr=True).print(
                f"[green]✓[/green] Wrote {len(project.reflections)} reflections to {escape(str(out))}",
                soft_wrap=True,
            )
        else:
            click.echo(app.to_json(project))
    except DocGraphError as e:
        log.error("cli.convert_failed", program=str(program), **e.to_dict())
        message = str(e)
        if log_file := get_log_file_path():
            message += f". See {log_file} for details."
        raise click.ClickException(message) from e


@cli.command("kinds")
def kinds_command() -> None:
    """List reflection kinds with their bit values."""
    for kind in ReflectionKind:
        click.echo(f"{int(kind):#07x}  {kind_string(kind)}")


if __name__ == "__main__":
    cli()
