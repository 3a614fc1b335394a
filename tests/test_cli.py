"""CLI tests for schema checking, naming, parsing, and renaming."""

import json
import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from qname.cli import cli
from qname.config import ConfigManager

SCHEMA_SOURCE = """\
# animals and the people with them
schema "-" "_"
  [ category "Animals" (exactly 1) ["cat", "dog"]
  , category "People" (at_least 0) ["chris", "nathan"/"nate"]
  ]
"""


def _env_with_home(tmp_path: Path, **extra: str) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("QNAME__")}
    env["HOME"] = str(tmp_path)
    env.update(extra)
    return env


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    photos = tmp_path / "photos"
    photos.mkdir()
    (photos / "schema.q").write_text(SCHEMA_SOURCE, encoding="utf-8")
    return photos


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "qname tags files against a schema" in result.output
    for command in ("check", "name", "parse", "rename", "config"):
        assert command in result.output


def test_check_reports_valid_schema(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["check", str(workspace / "schema.q")], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert "Animals" in result.output
    assert "exactly 1" in result.output
    assert "schema.q is valid: 2 categories, 4 tags." in result.output


def test_check_json_output(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["check", str(workspace / "schema.q"), "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["counts"] == {"categories": 2, "tags": 4}
    assert payload["schema"]["delim"] == "-"
    assert payload["schema"]["categories"][1]["keywords"][1] == {"name": "nathan", "id": "nate"}


def test_check_json_default_from_environment(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path, QNAME__CLI__JSON_DEFAULT="true")

    result = runner.invoke(cli, ["check", str(workspace / "schema.q")], env=env)

    assert result.exit_code == 0
    assert json.loads(result.stdout)["counts"]["tags"] == 4


def test_check_rejects_invalid_schema(tmp_path: Path) -> None:
    schema = tmp_path / "bad.q"
    schema.write_text(
        'schema "-" "" [category "A" (exactly 1) ["a"], category "B" (exactly 1) ["a"]]',
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["check", str(schema), "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    error = json.loads(result.stdout)["error"]
    assert error["code"] == "schema_error"
    assert "already used" in error["message"]


def test_check_syntax_error_without_json(tmp_path: Path) -> None:
    schema = tmp_path / "bad.q"
    schema.write_text("schema [", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["check", str(schema)], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "Unexpected input at line 1" in result.output


def test_name_prints_filename(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["name", str(workspace / "schema.q"), "-t", "nathan", "-t", "dog", "--salt", "ZQYC5T"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert result.output.strip() == "ZQYC5T-dog-nate"


def test_name_with_seed_is_repeatable(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    args = ["name", str(workspace / "schema.q"), "-t", "cat", "--seed", "11", "--json"]

    first = json.loads(runner.invoke(cli, args, env=env).stdout)
    second = json.loads(runner.invoke(cli, args, env=env).stdout)

    assert first == second
    assert first["filename"] == f"{first['salt']}-cat-_"
    assert first["categories"] == {"Animals": ["cat"], "People": []}


def test_name_requirement_error_details(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["name", str(workspace / "schema.q"), "-t", "cat", "-t", "dog", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    error = json.loads(result.stdout)["error"]
    assert error["code"] == "requirement_error"
    assert error["details"] == {"category": "Animals", "expected": "exactly 1", "got": 2}


def test_name_unknown_tag(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["name", str(workspace / "schema.q"), "-t", "parrot"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "Unknown tag: 'parrot'" in result.output


def test_parse_shows_selection(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["parse", str(workspace / "schema.q"), "ZQYC5T-cat-chris-nate.jpg", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "salt": "ZQYC5T",
        "categories": {"Animals": ["cat"], "People": ["chris", "nate"]},
    }


def test_parse_rejects_foreign_filename(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["parse", str(workspace / "schema.q"), "IMG-0001.jpg", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    error = json.loads(result.stdout)["error"]
    assert error["code"] == "filename_error"
    assert error["details"] == {"tag": "0001"}


def test_name_rejects_salt_containing_delimiter(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["name", str(workspace / "schema.q"), "-t", "cat", "--salt", "AB-C", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    error = json.loads(result.stdout)["error"]
    assert error["code"] == "filename_error"
    assert error["details"] == {"salt": "AB-C", "delim": "-"}


def test_parse_extensionless_name_with_dotted_delimiter(tmp_path: Path) -> None:
    schema = tmp_path / "dotted.q"
    schema.write_text(
        'schema "." "_" [category "Animals" (at_least 0) ["cat", "dog"]]', encoding="utf-8"
    )
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    bare = runner.invoke(cli, ["parse", str(schema), "ZQYC5T.cat.dog", "--json"], env=env)
    with_extension = runner.invoke(
        cli, ["parse", str(schema), "ZQYC5T.cat.dog.png", "--json"], env=env
    )

    assert bare.exit_code == 0
    assert json.loads(bare.stdout)["categories"] == {"Animals": ["cat", "dog"]}
    assert json.loads(with_extension.stdout) == json.loads(bare.stdout)


def test_rename_uses_schema_next_to_file(tmp_path: Path, workspace: Path) -> None:
    source = workspace / "IMG_0001.jpg"
    source.write_bytes(b"jpeg")
    runner = CliRunner()
    args = ["rename", str(source), "-t", "dog", "-t", "chris", "--salt", "ABCDEF"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "Renamed IMG_0001.jpg -> ABCDEF-dog-chris.jpg" in result.output
    assert not source.exists()
    assert (workspace / "ABCDEF-dog-chris.jpg").read_bytes() == b"jpeg"


def test_rename_dry_run_json(tmp_path: Path, workspace: Path) -> None:
    source = workspace / "IMG_0001.jpg"
    source.write_bytes(b"jpeg")
    runner = CliRunner()
    args = ["rename", str(source), "-t", "cat", "--salt", "ABCDEF", "--dry-run", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["dry_run"] is True
    assert Path(payload["destination"]).name == "ABCDEF-cat-_.jpg"
    assert payload["tags"] == ["cat"]
    assert source.exists()


def test_rename_retries_taken_salt(tmp_path: Path, workspace: Path) -> None:
    source = workspace / "IMG_0001.jpg"
    source.write_bytes(b"new")
    (workspace / "ABCDEF-cat-_.jpg").write_bytes(b"old")
    runner = CliRunner()
    args = ["rename", str(source), "-t", "cat", "--salt", "ABCDEF", "--seed", "5", "--json"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["salt_retries"] == 1
    assert (workspace / "ABCDEF-cat-_.jpg").read_bytes() == b"old"
    assert Path(payload["destination"]).read_bytes() == b"new"


def test_rename_without_schema_fails(tmp_path: Path) -> None:
    source = tmp_path / "IMG_0001.jpg"
    source.write_bytes(b"jpeg")
    runner = CliRunner()

    result = runner.invoke(cli, ["rename", str(source), "-t", "cat"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "No schema found" in result.output
    assert source.exists()


def test_rename_quiet_suppresses_output(tmp_path: Path, workspace: Path) -> None:
    source = workspace / "IMG_0001.jpg"
    source.write_bytes(b"jpeg")
    runner = CliRunner()
    args = ["rename", str(source), "-t", "cat", "--quiet"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert result.output == ""
    assert not source.exists()


def test_json_and_quiet_conflict(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    args = ["check", str(workspace / "schema.q"), "--json", "--quiet"]

    result = runner.invoke(cli, args, env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert json.loads(result.stdout)["error"]["code"] == "cli_error"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "schema_filename" in result.output
    assert (tmp_path / ".qname" / "config.yaml").exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "naming.seed", "--value", "42"], env=env)

    assert result.exit_code == 0
    assert "Updated naming.seed." in result.output

    manager = ConfigManager(config_path=tmp_path / ".qname" / "config.yaml", env={})
    assert manager.load(include_env=False).naming.seed == 42

    again = runner.invoke(cli, ["config", "set", "naming.seed", "--value", "42"], env=env)
    assert again.exit_code == 0
    assert "No changes applied" in again.output


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "naming.max_salt_attempts", "--value", "0"], env=env
    )

    assert result.exit_code == 1
    assert "Invalid configuration values" in result.output


def test_configured_seed_drives_salt(tmp_path: Path, workspace: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path, QNAME__NAMING__SEED="3")
    args = ["name", str(workspace / "schema.q"), "-t", "cat"]

    first = runner.invoke(cli, args, env=env)
    second = runner.invoke(cli, [*args, "--seed", "3"], env=_env_with_home(tmp_path))

    assert first.exit_code == 0
    assert first.output == second.output
