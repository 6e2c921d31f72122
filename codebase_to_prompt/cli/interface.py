# codebase_to_prompt/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict

import click
from click.core import ParameterSource
from click_option_group import optgroup
import structlog

from codebase_to_prompt import __version__ as app_version
from codebase_to_prompt.config.loader import build_bundle_config, load_and_merge_configs, select_settings
from codebase_to_prompt.config.settings import DEFAULT_MAX_FILE_SIZE, DEFAULT_OUTPUT_FORMAT, OutputFormat
from codebase_to_prompt.core.pipeline import BundleResult, run
from codebase_to_prompt.exceptions import CodebaseToPromptError
from codebase_to_prompt.logging_setup import configure_logging

log = structlog.get_logger(__name__)

# cli parameter name -> settings key, for options that may also come from toml.
CLI_PARAM_TO_SETTING: Dict[str, str] = {
    "include": "include",
    "exclude": "exclude",
    "ignore_patterns": "ignore_patterns",
    "ignore_hidden": "ignore_hidden",
    "respect_gitignore": "respect_gitignore",
    "output": "output",
    "output_format_str": "format",
    "line_numbers": "line_numbers",
    "append_date": "append_date",
    "append_git_hash": "append_git_hash",
    "max_file_size": "max_file_size",
    "color": "color",
}


def _print_cli_summary_output(result: BundleResult, verbose: bool):
    for warning in result.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)
    if result.output_path is not None:
        click.echo(f"Info: Output written to: {result.output_path}", err=True)
    if verbose:
        click.secho("--- execution summary ---", fg="cyan", err=True)
        click.echo(
            f"Files bundled: {len(result.files)} ({result.placeholders} as placeholders), "
            f"warnings: {len(result.warnings)}, bytes written: {result.bytes_written:,}",
            err=True,
        )


def _cli_settings(ctx: click.Context, cli_params: Dict[str, Any]) -> Dict[str, Any]:
    # only flags given on the command line override config-file values.
    settings: Dict[str, Any] = {}
    for param_name, setting_key in CLI_PARAM_TO_SETTING.items():
        if ctx.get_parameter_source(param_name) != ParameterSource.COMMANDLINE:
            continue
        value = cli_params[param_name]
        if isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, Path):
            value = str(value)
        settings[setting_key] = value
    return settings


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("directory", type=click.Path(path_type=Path), default=".")
@optgroup.group("Filtering Options", help="Control which files are bundled.")
@optgroup.option("-i", "--include", "include", multiple=True, metavar="EXT[,EXT...]", help="Only bundle files with these extensions. Use '.' for files without one.")
@optgroup.option("-e", "--exclude", "exclude", multiple=True, metavar="EXT[,EXT...]", help="Skip files with these extensions. Wins over --include.")
@optgroup.option("-x", "--ignore-pattern", "ignore_patterns", multiple=True, metavar="PATTERN", help="Extra gitignore-style pattern, applied at the root.")
@optgroup.option("--ignore-hidden/--include-hidden", "ignore_hidden", default=False, help="Skip files and directories whose name starts with '.'. Default: include them.")
@optgroup.option("--respect-gitignore/--no-respect-gitignore", "respect_gitignore", default=True, help="Apply .gitignore files found while walking. Default: on.")
@optgroup.group("Output Options", help="Where and how the document is written.")
@optgroup.option("-o", "--output", "output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to this file instead of stdout.")
@optgroup.option("-f", "--format", "output_format_str", type=click.Choice([f.value for f in OutputFormat]), default=DEFAULT_OUTPUT_FORMAT.value, help=f"Document format. Default: {DEFAULT_OUTPUT_FORMAT.value}.")
@optgroup.option("-n", "--line-numbers", "line_numbers", is_flag=True, default=False, help="Prefix every content line with its number.")
@optgroup.option("--append-date", "append_date", is_flag=True, default=False, help="Append _YYYYMMDD to the output file name.")
@optgroup.option("--append-git-hash", "append_git_hash", is_flag=True, default=False, help="Append the short HEAD commit hash to the output file name.")
@optgroup.option("--max-file-size", "max_file_size", type=int, default=DEFAULT_MAX_FILE_SIZE, help="Files larger than this many bytes are shown as a placeholder.")
@optgroup.option("--color/--no-color", "color", default=None, help="Colour console-format headers. Default: only when writing to a terminal.")
@optgroup.group("Application Behavior", help="Configuration profiles and logging.")
@optgroup.option("--config-profile", "config_profile", default=None, help="Apply a [profiles.NAME] table from the config file(s).")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--json-logs", "json_logs", is_flag=True, default=False, help="Emit logs as JSON.")
@click.version_option(version=app_version, prog_name="codebase-to-prompt", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, directory: Path, **cli_params: Any):
    """codebase-to-prompt: bundle the source files under DIRECTORY into one
    Markdown, plain-text or console document."""
    verbosity = cli_params.get("verbosity_level", 0)
    log_level = "warning"
    if verbosity == 1:
        log_level = "info"
    elif verbosity >= 2:
        log_level = "debug"
    configure_logging(log_level_str=log_level, json_logs=cli_params.get("json_logs", False))

    log.debug("cli_command_invoked", directory=str(directory), params=cli_params)

    try:
        raw_config = load_and_merge_configs(directory)
        settings = select_settings(raw_config, cli_params.get("config_profile"))
        settings.update(_cli_settings(ctx, cli_params))
        config = build_bundle_config(directory, settings)
        result = run(config, stdout=click.get_binary_stream("stdout"))
    except CodebaseToPromptError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    _print_cli_summary_output(result, verbose=verbosity > 0)
