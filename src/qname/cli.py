"""Command line interface for qname."""

from __future__ import annotations

import copy
import difflib
import random
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from qname.config import (
    ConfigError,
    ConfigManager,
    QnameConfig,
    assign_nested,
    resolve_with_precedence,
)
from qname.filename import (
    FilenameParseError,
    GenerateFilenameError,
    RequirementMismatch,
    SaltContainsDelimiter,
    UnexpectedTag,
    gen_salt,
    selection_to_filename,
)
from qname.logging import setup_logger
from qname.organization import RenameExecutor, RenamePlanner, read_filename
from qname.schema import Schema, SchemaError, read_schema_file, schema_to_mapping
from qname.state import State, StateError, UnknownTagError, state_with_tags

console = Console()

_SCHEMA_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _error_details(exc: Exception) -> dict[str, Any]:
    """Return structured details for the errors users can act on."""
    if isinstance(exc, RequirementMismatch):
        return {
            "category": exc.category.name,
            "expected": exc.expected.label,
            "got": exc.got,
        }
    if isinstance(exc, (UnexpectedTag, UnknownTagError)):
        return {"tag": exc.tag}
    if isinstance(exc, SaltContainsDelimiter):
        return {"salt": exc.salt, "delim": exc.delim}
    return {"exception": type(exc).__name__}


def _handle_qname_error(exc: Exception, *, json_output: bool) -> None:
    if isinstance(exc, ConfigError):
        code = "config_error"
    elif isinstance(exc, SchemaError):
        code = "schema_error"
    elif isinstance(exc, StateError):
        code = "selection_error"
    elif isinstance(exc, RequirementMismatch):
        code = "requirement_error"
    elif isinstance(exc, GenerateFilenameError):
        code = "filename_error"
    elif isinstance(exc, FilenameParseError):
        code = "filename_error"
    elif isinstance(exc, click.ClickException):
        code = "cli_error"
    elif isinstance(exc, OSError):
        code = "file_error"
    else:
        code = "internal_error"
    if isinstance(exc, click.ClickException):
        message, details = exc.format_message(), None
    else:
        message, details = str(exc), _error_details(exc)
    _handle_cli_error(
        message, code=code, json_output=json_output, details=details, original=exc
    )


def _emit_message(message: Any, *, quiet: bool) -> None:
    if not quiet:
        console.print(message)


def _load_config(ctx: click.Context) -> QnameConfig:
    """Load configuration once per invocation and configure logging."""
    root = ctx.find_root()
    if root.obj is None:
        root.obj = {}
    config = root.obj.get("config")
    if config is None:
        manager = ConfigManager()
        manager.ensure_exists()
        overrides = root.obj.get("overrides") or None
        config = manager.load(cli_overrides=overrides)
        setup_logger(config.logging)
        root.obj["config"] = config
    return config


def _output_modes(
    ctx: click.Context, config: QnameConfig, json_output: bool, quiet: bool
) -> tuple[bool, bool]:
    """Resolve JSON and quiet modes from flags, falling back to config defaults."""
    explicit_json = ctx.get_parameter_source("json_output") == ParameterSource.COMMANDLINE
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    json_enabled = json_output if explicit_json else config.cli.json_default
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    if json_enabled:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        quiet_enabled = False
    return json_enabled, quiet_enabled


def _make_rng(seed: Optional[int], config: QnameConfig) -> random.Random:
    return random.Random(seed if seed is not None else config.naming.seed)


def _selection_payload(state: State) -> dict[str, Any]:
    return {
        "salt": state.salt,
        "categories": {
            selection.name: selection.selected_ids() for selection in state.categories
        },
    }


def _selection_table(state: State) -> Table:
    table = Table(title=f"Selection (salt {state.salt})")
    table.add_column("Category")
    table.add_column("Selected")
    for selection in state.categories:
        table.add_row(selection.name, ", ".join(selection.selected_ids()) or "-")
    return table


def _schema_table(schema: Schema) -> Table:
    table = Table(title=f"Schema (delimiter {schema.delim!r})")
    table.add_column("Category")
    table.add_column("Requirement")
    table.add_column("Keywords")
    for category in schema.categories:
        keywords = ", ".join(
            keyword.id if keyword.id == keyword.name else f"{keyword.name}/{keyword.id}"
            for keyword in category.keywords
        )
        table.add_row(category.name, category.requirement.label, keywords)
    return table


def _resolve_schema_path(file: Path, schema_path: Optional[Path], config: QnameConfig) -> Path:
    if schema_path is not None:
        return schema_path
    candidate = file.parent / config.files.schema_filename
    if not candidate.exists():
        raise click.ClickException(
            f"No schema found at {candidate}. Pass --schema or add a "
            f"{config.files.schema_filename} file next to {file.name}."
        )
    return candidate


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="qname")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override the configured logging level.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """qname tags files against a schema and renames them from the selected tags."""
    ctx.ensure_object(dict)
    if log_level:
        ctx.obj["overrides"] = {"logging.level": log_level.upper()}


@cli.command()
@click.argument("schema_path", metavar="SCHEMA", type=_SCHEMA_PATH)
@click.option("--json", "json_output", is_flag=True, help="Emit the schema as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def check(ctx: click.Context, schema_path: Path, json_output: bool, quiet: bool) -> None:
    """Load and validate the schema file SCHEMA."""
    json_enabled = json_output
    try:
        config = _load_config(ctx)
        json_enabled, quiet_enabled = _output_modes(ctx, config, json_output, quiet)
        schema = read_schema_file(schema_path)

        if json_enabled:
            console.print_json(
                data={
                    "schema": schema_to_mapping(schema),
                    "counts": {"categories": len(schema.categories), "tags": len(schema.tags)},
                }
            )
            return

        _emit_message(_schema_table(schema), quiet=quiet_enabled)
        _emit_message(
            f"[green]{schema_path.name} is valid: {len(schema.categories)} categories, "
            f"{len(schema.tags)} tags.[/green]",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _handle_qname_error(exc, json_output=json_enabled)


@cli.command()
@click.argument("schema_path", metavar="SCHEMA", type=_SCHEMA_PATH)
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to select (id or name).")
@click.option("--salt", type=str, help="Use this salt instead of drawing one.")
@click.option("--seed", type=int, help="Seed for salt generation.")
@click.option("--json", "json_output", is_flag=True, help="Emit the filename as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def name(
    ctx: click.Context,
    schema_path: Path,
    tags: tuple[str, ...],
    salt: Optional[str],
    seed: Optional[int],
    json_output: bool,
    quiet: bool,
) -> None:
    """Print the filename that SCHEMA assigns to the selected tags."""
    json_enabled = json_output
    try:
        config = _load_config(ctx)
        json_enabled, quiet_enabled = _output_modes(ctx, config, json_output, quiet)
        schema = read_schema_file(schema_path)
        salt = salt if salt is not None else gen_salt(_make_rng(seed, config))
        state = state_with_tags(schema, tags, salt)
        filename = selection_to_filename(schema, state)

        if json_enabled:
            payload = _selection_payload(state)
            payload["filename"] = filename
            console.print_json(data=payload)
            return
        _emit_message(filename, quiet=quiet_enabled)
    except Exception as exc:
        _handle_qname_error(exc, json_output=json_enabled)


@cli.command("parse")
@click.argument("schema_path", metavar="SCHEMA", type=_SCHEMA_PATH)
@click.argument("filename")
@click.option("--json", "json_output", is_flag=True, help="Emit the selection as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def parse_command(
    ctx: click.Context,
    schema_path: Path,
    filename: str,
    json_output: bool,
    quiet: bool,
) -> None:
    """Show the tag selection encoded in FILENAME."""
    json_enabled = json_output
    try:
        config = _load_config(ctx)
        json_enabled, quiet_enabled = _output_modes(ctx, config, json_output, quiet)
        schema = read_schema_file(schema_path)
        state = read_filename(schema, filename, keep_extension=config.naming.keep_extension)

        if json_enabled:
            console.print_json(data=_selection_payload(state))
            return
        _emit_message(_selection_table(state), quiet=quiet_enabled)
    except Exception as exc:
        _handle_qname_error(exc, json_output=json_enabled)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to select (id or name).")
@click.option(
    "--schema",
    "schema_path",
    type=_SCHEMA_PATH,
    help="Schema file (defaults to the configured schema file beside FILE).",
)
@click.option("--salt", type=str, help="Use this salt instead of drawing one.")
@click.option("--seed", type=int, help="Seed for salt generation.")
@click.option("--dry-run", is_flag=True, help="Preview the rename without applying it.")
@click.option("--json", "json_output", is_flag=True, help="Emit the rename as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def rename(
    ctx: click.Context,
    file: Path,
    tags: tuple[str, ...],
    schema_path: Optional[Path],
    salt: Optional[str],
    seed: Optional[int],
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Rename FILE after the selected tags, keeping its extension."""
    json_enabled = json_output
    try:
        config = _load_config(ctx)
        json_enabled, quiet_enabled = _output_modes(ctx, config, json_output, quiet)
        file = file.expanduser().resolve()
        schema = read_schema_file(_resolve_schema_path(file, schema_path, config))

        rng = _make_rng(seed, config)
        planner = RenamePlanner(
            schema,
            rng=rng,
            keep_extension=config.naming.keep_extension,
            max_salt_attempts=config.naming.max_salt_attempts,
        )
        state = state_with_tags(schema, tags, salt if salt is not None else gen_salt(rng))
        operation = RenameExecutor().apply(planner.plan(file, state), dry_run=dry_run)

        if json_enabled:
            payload = operation.model_dump(mode="json")
            payload["dry_run"] = dry_run
            console.print_json(data=payload)
            return

        verb = "Would rename" if dry_run else "Renamed"
        _emit_message(
            f"[green]{verb} {operation.source.name} -> {operation.destination.name}[/green]",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _handle_qname_error(exc, json_output=json_enabled)


@cli.group()
def config() -> None:
    """Manage qname configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'naming.seed'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        original = copy.deepcopy(file_data)
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=QnameConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == original:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    diff = difflib.unified_diff(
        before,
        manager.read_text().splitlines(),
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
