"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

COMMAND_NAME = "codable_codegen"

# Options that do not change the generated text
NON_GENERATING_PARAMS = {"force", "check", "verbose"}


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the generating command line from the current Click context.

    Output-mode and logging options are left out, so that ``--check`` reproduces
    the comment written by the original run.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return COMMAND_NAME

    cli_args = ctx.params
    arguments = []
    options = []

    for param in click_command.params:
        if param.name in NON_GENERATING_PARAMS or param.name not in cli_args:
            continue
        value = cli_args[param.name]
        if value is None or value is False:
            continue

        # Paths are shown by file name so the comment does not depend on the working directory
        if isinstance(param.type, click.Path):
            formatted_value = Path(str(value)).name
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, formatted_value])

    return " ".join([COMMAND_NAME, *arguments, *options])
