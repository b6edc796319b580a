"""Tests for loading generation options from TOML."""

from pathlib import Path

import pytest

from erd_toolkit.config import ConfigError, default_options, load_config
from erd_toolkit.ddl import Dialect


def test_missing_default_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that defaults apply without a configuration file."""
    monkeypatch.chdir(tmp_path)

    options = load_config()

    assert options == default_options()
    assert options["dialect"] == Dialect.POSTGRESQL
    assert options["include_comments"] is True


def test_default_file_in_working_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that erd-toolkit.toml in the working directory is picked up."""
    (tmp_path / "erd-toolkit.toml").write_text('[generation]\ndialect = "sqlite"\n')
    monkeypatch.chdir(tmp_path)

    assert load_config()["dialect"] == Dialect.SQLITE


def test_load_config(tmp_path: Path) -> None:
    """Test that generation options and dialect options are read."""
    path = tmp_path / "settings.toml"
    path.write_text(
        "[generation]\n"
        'dialect = "MySQL"\n'
        "include_drop_statements = true\n"
        "include_comments = false\n"
        "\n"
        "[generation.dialect_options]\n"
        'charset = "utf8mb4"\n'
        'identifier_quotes = "double"\n',
    )

    options = load_config(path)

    assert options["dialect"] == Dialect.MYSQL
    assert options["include_drop_statements"] is True
    assert options["include_comments"] is False
    assert options["sort_by_dependency"] is False
    assert options["dialect_options"] == {
        "charset": "utf8mb4",
        "identifier_quotes": "double",
    }


def test_missing_explicit_file(tmp_path: Path) -> None:
    """Test that a named configuration file must exist."""
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "missing.toml")


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("[generation\n", "Invalid configuration file"),
        ('[generation]\ndialect = "db2"\n', "Unknown dialect"),
        ('[generation]\ninclude_comments = "yes"\n', "must be true or false"),
        (
            '[generation.dialect_options]\nidentifier_quotes = "angle"\n',
            "Unknown identifier_quotes",
        ),
        ('generation = "mysql"\n', "must be a table"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str, message: str) -> None:
    """Test that unusable configuration raises a configuration error."""
    path = tmp_path / "erd-toolkit.toml"
    path.write_text(content)

    with pytest.raises(ConfigError, match=message):
        load_config(path)
