"""User settings stored in a TOML config file."""
from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path

import click

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

OUTPUT_FORMATS = ("text", "json", "csv")


@dataclass
class Config:
    output: str = "text"        # text, json or csv
    print_conv: bool = True     # False: show raw numbers instead of names
    unknown: bool = False       # also report EXTH tags missing from the table


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir("pdbmeta")) / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Read TOML config. Returns default Config if file missing.

    Raises click.UsageError for unreadable files or bad values.
    """
    path = path or get_config_path()
    if not path.exists():
        return Config()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise click.UsageError(f"Invalid config file {path}: {e}") from e

    config = Config()
    for f in fields(Config):
        if f.name in data:
            set_option(config, f.name, data[f.name])
    return config


def set_option(config: Config, key: str, value) -> None:
    """Set one option, converting strings from the command line."""
    known = {f.name: f for f in fields(Config)}
    if key not in known:
        raise click.UsageError(f"Unknown option '{key}'. Options: {', '.join(known)}")

    if key == "output":
        value = str(value).lower()
        if value not in OUTPUT_FORMATS:
            raise click.UsageError(
                f"Invalid output '{value}'. Choose from: {', '.join(OUTPUT_FORMATS)}"
            )
    elif isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            value = True
        elif lowered in ("0", "false", "no", "off"):
            value = False
        else:
            raise click.UsageError(f"Option '{key}' expects true or false, got '{value}'")
    elif not isinstance(value, bool):
        raise click.UsageError(f"Option '{key}' expects true or false, got {value!r}")
    setattr(config, key, value)


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write config to TOML."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = [
        f"output = \"{config.output}\"",
        f"print_conv = {'true' if config.print_conv else 'false'}",
        f"unknown = {'true' if config.unknown else 'false'}",
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
