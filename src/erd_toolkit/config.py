"""Generation defaults read from ``erd-toolkit.toml``.

Example::

    [generation]
    dialect = "MySQL"
    include_drop_statements = true

    [generation.dialect_options]
    charset = "utf8mb4"
    collation = "utf8mb4_unicode_ci"
"""

from logging import getLogger
from pathlib import Path
from tomllib import TOMLDecodeError, load
from typing import Any

from erd_toolkit.ddl.dialects import (
    IDENTIFIER_QUOTES,
    Dialect,
    DialectOptions,
    GenerationOptions,
    parse_dialect,
)

logger = getLogger(__name__)

DEFAULT_CONFIG_FILE = "erd-toolkit.toml"

FLAGS = (
    "include_drop_statements",
    "include_comments",
    "include_schema_prefix",
    "sort_by_dependency",
)
TEXT_OPTIONS = ("version", "charset", "collation", "schema")


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


def default_options() -> GenerationOptions:
    """Options used when no configuration file is present."""
    return {
        "dialect": Dialect.POSTGRESQL,
        "dialect_options": {},
        "include_drop_statements": False,
        "include_comments": True,
        "include_schema_prefix": False,
        "sort_by_dependency": False,
    }


def _dialect_options(raw: object) -> DialectOptions:
    if not isinstance(raw, dict):
        msg = "[generation.dialect_options] must be a table"
        raise ConfigError(msg)

    options = DialectOptions(
        **{key: str(raw[key]) for key in TEXT_OPTIONS if key in raw},
    )

    if "identifier_quotes" in raw:
        quotes = raw["identifier_quotes"]
        if quotes not in IDENTIFIER_QUOTES:
            msg = (
                f"Unknown identifier_quotes {quotes!r}, "
                f"expected one of: {', '.join(IDENTIFIER_QUOTES)}"
            )
            raise ConfigError(msg)
        options["identifier_quotes"] = quotes

    return options


def parse_config(raw: dict[str, Any]) -> GenerationOptions:
    """Merge a parsed TOML document over the default options."""
    options = default_options()
    generation = raw.get("generation", {})
    if not isinstance(generation, dict):
        msg = "[generation] must be a table"
        raise ConfigError(msg)

    if "dialect" in generation:
        try:
            options["dialect"] = parse_dialect(str(generation["dialect"]))
        except ValueError as err:
            raise ConfigError(str(err)) from err

    flags = {flag: generation[flag] for flag in FLAGS if flag in generation}
    for flag, value in flags.items():
        if not isinstance(value, bool):
            msg = f"{flag} must be true or false, got {value!r}"
            raise ConfigError(msg)
    options.update(GenerationOptions(**flags))

    if "dialect_options" in generation:
        options["dialect_options"] = _dialect_options(generation["dialect_options"])

    return options


def load_config(path: Path | None = None) -> GenerationOptions:
    """Load generation options from a TOML file.

    Without a path, ``erd-toolkit.toml`` in the working directory is used when
    present and defaults otherwise.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILE
        if not path.exists():
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
            return default_options()
    elif not path.exists():
        msg = f"Configuration file does not exist: {path}"
        raise ConfigError(msg)

    try:
        with path.open("rb") as f:
            raw = load(f)
    except TOMLDecodeError as err:
        msg = f"Invalid configuration file {path}: {err}"
        raise ConfigError(msg) from err

    logger.debug("Loaded configuration from %s", path)
    return parse_config(raw)
