import json
import logging
import sys
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    GenerationError,
    OutputMode,
    PipelineGenerator,
    Severity,
)


def _echo_diagnostics(generator: PipelineGenerator) -> None:
    for diagnostic in generator.diagnostics:
        color = "red" if diagnostic.severity is Severity.ERROR else "yellow"
        click.secho(diagnostic.format(generator.source_name), fg=color, err=True)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.option("--check", is_flag=True, default=False, help="Exit with status 1 if OUTPUT is not up to date")
@click.option("--format", "format_tool", default=None, type=click.Choice(["black", "ruff"]), help="Format the output")
@click.option("--no-generation-comment", is_flag=True, default=False)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", type=click.Path(dir_okay=False, resolve_path=True))
def codable_codegen(config, force, check, format_tool, no_generation_comment, verbose, path, output):
    """Expand the @codable declarations of PATH into OUTPUT."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if force and check:
        raise click.UsageError("--force and --check are mutually exclusive")

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    if force:
        config.output.mode = OutputMode.FORCE
    elif check:
        config.output.mode = OutputMode.CHECK
    if format_tool is not None:
        config.formatter.enabled = True
        config.formatter.tool = format_tool
    if no_generation_comment:
        config.add_generation_comment = False

    source_path = Path(path)
    output_path = Path(output)
    generator = PipelineGenerator(
        source_path.read_text(encoding="utf-8"),
        config,
        source_name=source_path.name,
        command_line=reconstruct_command_line(codable_codegen),
    )

    try:
        out = generator.generate()
    except GenerationError:
        _echo_diagnostics(generator)
        sys.exit(1)
    except SyntaxError as e:
        click.secho(f"{source_path.name}:{e.lineno}: invalid Python source: {e.msg}", fg="red", err=True)
        sys.exit(1)
    _echo_diagnostics(generator)

    if config.output.mode is OutputMode.CHECK:
        current = output_path.read_text(encoding="utf-8") if output_path.exists() else None
        if current != out:
            click.secho(f"{output_path.name} is out of date with {source_path.name}", fg="red", err=True)
            sys.exit(1)
        click.echo(f"{output_path.name} is up to date")
        return

    writer = AtomicWriter()
    validate = config.output.validate_before_write
    try:
        if config.output.mode is OutputMode.FORCE:
            writer.write(output_path, out, validate)
        else:
            writer.write_if_not_exists(output_path, out, validate)
    except FileExistsError as e:
        raise click.ClickException(str(e)) from e

    if generator.errors:
        sys.exit(1)
