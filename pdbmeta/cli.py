"""Click CLI for reading Palm database / MOBI metadata."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from pdbmeta.config import (
    OUTPUT_FORMATS,
    Config,
    get_config_path,
    load_config,
    save_config,
    set_option,
)
from pdbmeta.logs import setup_logging


class Context:
    """Holds the loaded config for subcommands."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path
        self._config: Config | None = None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


pass_ctx = click.make_pass_decorator(Context)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log parsing details to stderr")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of the default location",
)
@click.version_option(package_name="pdbmeta")
@click.pass_context
def cli(ctx, verbose: bool, config_path: Optional[Path]):
    """pdbmeta - read metadata from Palm databases and Mobipocket/Kindle books.

    Handles PDB/PRC databases, MOBI, AZW and AZW3 files. Files are only
    read, never modified.
    """
    setup_logging(verbose)
    ctx.obj = Context(config_path=config_path)


@cli.command()
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format (default from config: text)")
@click.option("--raw", "-n", is_flag=True,
              help="Show raw values instead of converted names")
@click.option("--unknown", "-u", is_flag=True,
              help="Also show EXTH entries with unknown ids")
@pass_ctx
def info(ctx: Context, files: tuple[Path, ...], output: Optional[str],
         raw: bool, unknown: bool):
    """Show metadata for one or more files."""
    from pdbmeta.export.csv_export import export_csv, format_value
    from pdbmeta.export.json_export import export_json
    from pdbmeta.pdb.errors import NotRecognized
    from pdbmeta.pdb.reader import PDBReader

    config = ctx.config
    output = output or config.output
    print_conv = config.print_conv and not raw
    unknown = unknown or config.unknown

    results = []
    failed = 0
    for path in files:
        try:
            result = PDBReader(path, print_conv=print_conv, unknown=unknown).parse()
        except NotRecognized:
            click.echo(f"{path}: not a recognized Palm database", err=True)
            failed += 1
            continue
        except OSError as e:
            click.echo(f"{path}: {e}", err=True)
            failed += 1
            continue
        results.append((str(path), result))

    if output == "json":
        click.echo(export_json(results))
    elif output == "csv":
        click.echo(export_csv(results), nl=False)
    else:
        for source, result in results:
            if len(files) > 1:
                click.echo(f"======== {source}")
            click.echo(f"{'File Type':<32}: {result.file_type}")
            for name, value in result.values.items():
                click.echo(f"{name:<32}: {format_value(value)}")
            for warning in result.warnings:
                click.echo(f"{'Warning':<32}: {warning}")

    if failed:
        sys.exit(1)


@cli.command()
@click.option("--table", "-t", "table_name", default=None,
              help="Only list this table (Palm, MOBI or EXTH)")
def tags(table_name: Optional[str]):
    """List the fields each header table knows about."""
    from pdbmeta.pdb.tables import TABLES

    if table_name is not None:
        matches = {k: v for k, v in TABLES.items() if k.lower() == table_name.lower()}
        if not matches:
            raise click.UsageError(
                f"Unknown table '{table_name}'. Tables: {', '.join(TABLES)}"
            )
    else:
        matches = TABLES

    for name, table in matches.items():
        key_label = "Tag ID" if table.tagged else "Index"
        click.echo(f"{name} ({table.group} group, default format {table.default_format.value})")
        click.echo(f"  {key_label:>6}  {'Name':<28}  {'Format':<10}  Notes")
        click.echo("  " + "-" * 60)
        for key, spec in table.fields.items():
            fmt = spec.resolve_format(table).value
            if spec.count:
                fmt = f"{fmt}[{spec.count}]"
            notes = []
            if spec.is_list:
                notes.append("list")
            if spec.print_conv is not None:
                notes.append("print conversion")
            click.echo(f"  {key:>6}  {spec.name:<28}  {fmt:<10}  {', '.join(notes)}")
        click.echo()


@cli.group("config")
def config_group():
    """Show or change default options."""


@config_group.command("show")
@pass_ctx
def config_show(ctx: Context):
    """Print the current settings."""
    path = ctx.config_path or get_config_path()
    config = ctx.config
    click.echo(f"Config file: {path}{'' if path.exists() else ' (not created yet)'}")
    click.echo(f"  output     = {config.output}")
    click.echo(f"  print_conv = {str(config.print_conv).lower()}")
    click.echo(f"  unknown    = {str(config.unknown).lower()}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@pass_ctx
def config_set(ctx: Context, key: str, value: str):
    """Set a default option, e.g. `pdbmeta config set output json`."""
    config = ctx.config
    set_option(config, key, value)
    saved = save_config(config, ctx.config_path)
    click.echo(f"Config saved to {saved}")


def main():
    cli()


if __name__ == "__main__":
    main()
