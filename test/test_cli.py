"""
Tests for the td-cmd command line interface, configuration and display.
"""
import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from click.testing import CliRunner
from rich.console import Console

from td_cmd.cli import RunConfig, main, run
from td_cmd.client import ENDPOINT
from td_cmd.display import display_databases, display_job_status
from td_cmd.errors import APIError, ConfigError
from td_cmd.models import Database, JobStatus, TDTime, decode_tables
from td_cmd.utils import load_config
from test.config import API_KEY, JOB_STATUS_SUCCESS, TABLE_LIST


DATABASES = [Database(name="db1", count=5, created_at=TDTime.from_json("2020-01-02 03:04:05 UTC"))]


@pytest.fixture
def cli_env(tmp_path):
    """Patch the client class and keep the user's config file out of the way."""
    with patch("td_cmd.cli.TreasureDataClient") as client_cls, \
            patch("td_cmd.cli.get_default_config_file", return_value=str(tmp_path / "missing.conf")), \
            patch("td_cmd.cli.display_databases") as display, \
            patch("td_cmd.cli.handle_query") as handler:
        client_cls.return_value.list_databases.return_value = DATABASES
        yield {
            "client_cls": client_cls,
            "client": client_cls.return_value,
            "display": display,
            "handle_query": handler,
        }


def invoke(args, apikey=API_KEY):
    runner = CliRunner()
    return runner.invoke(main, args, env={"TREASURE_DATA_API_KEY": apikey})


def test_missing_apikey(cli_env):
    result = invoke(["-i"], apikey=None)

    assert result.exit_code == 1
    assert "set $TREASURE_DATA_API_KEY" in result.output
    cli_env["client_cls"].assert_not_called()


def test_info_lists_databases(cli_env):
    result = invoke(["-i"])

    assert result.exit_code == 0
    cli_env["client_cls"].assert_called_once_with(API_KEY, endpoint=ENDPOINT, debug=False)
    cli_env["display"].assert_called_once_with(cli_env["client"], DATABASES)
    cli_env["handle_query"].assert_not_called()
    cli_env["client"].close.assert_called_once()


def test_missing_query_falls_back_to_listing(cli_env):
    result = invoke(["-d", "db1"])

    assert result.exit_code == 0
    cli_env["display"].assert_called_once()
    cli_env["handle_query"].assert_not_called()


def test_query(cli_env):
    result = invoke(["-d", "db1", "-q", "SELECT 1", "--format", "csv", "--priority", "2", "--no-wait"])

    assert result.exit_code == 0
    cli_env["client"].list_databases.assert_called_once()
    cli_env["display"].assert_not_called()
    cli_env["handle_query"].assert_called_once_with(
        cli_env["client"],
        "db1",
        "SELECT 1",
        result_format="csv",
        priority=2,
        wait=False,
        poll_interval=1.0,
        output_file=None,
    )


@pytest.mark.parametrize("value", ["-1", "0"])
def test_poll_interval_must_be_positive(cli_env, value):
    result = invoke(["-d", "db1", "-q", "SELECT 1", "--poll-interval", value])

    assert result.exit_code == 2
    assert "--poll-interval" in result.output
    cli_env["client_cls"].assert_not_called()
    cli_env["handle_query"].assert_not_called()


def test_poll_interval_flag_beats_config_file(cli_env, tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text("[account]\npoll_interval = 5\n")

    result = invoke(["--config", str(config_file), "-d", "db1", "-q", "SELECT 1", "--poll-interval", "0.25"])

    assert result.exit_code == 0
    _, kwargs = cli_env["handle_query"].call_args
    assert kwargs["poll_interval"] == 0.25


def test_client_error_exits_nonzero(cli_env):
    cli_env["client"].list_databases.side_effect = APIError(401, "Authentication failed")

    result = invoke(["-i"])

    assert result.exit_code == 1
    assert "Error: HTTP 401: Authentication failed" in result.output


def test_config_file(cli_env, tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text(
        "[account]\n"
        "apikey = from-file\n"
        "endpoint = https://api.example.com\n"
        "format = json\n"
        "poll_interval = 2.5\n"
    )

    result = invoke(["--config", str(config_file), "-d", "db1", "-q", "SELECT 1"], apikey=None)

    assert result.exit_code == 0
    cli_env["client_cls"].assert_called_once_with("from-file", endpoint="https://api.example.com", debug=False)
    _, kwargs = cli_env["handle_query"].call_args
    assert kwargs["result_format"] == "json"
    assert kwargs["poll_interval"] == 2.5
    assert kwargs["wait"] is True


def test_command_line_beats_config_file(cli_env, tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text("[account]\napikey = from-file\n")

    result = invoke(["--config", str(config_file), "--apikey", "from-flag", "--debug", "-i"])

    assert result.exit_code == 0
    cli_env["client_cls"].assert_called_once_with("from-flag", endpoint=ENDPOINT, debug=True)


def test_invalid_config_file(cli_env, tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text("[account]\npoll_interval = -1\n")

    result = invoke(["--config", str(config_file), "-i"])

    assert result.exit_code == 1
    assert "poll_interval must be greater than 0" in result.output


def test_run_with_given_client(capsys):
    client = MagicMock()
    client.list_databases.side_effect = requests.exceptions.ConnectionError("unreachable")

    code = run(RunConfig(apikey=API_KEY, info=True), client=client)

    assert code == 1
    assert "Error: unreachable" in capsys.readouterr().err
    client.close.assert_not_called()


def test_run_config_wants_listing():
    assert RunConfig(apikey=API_KEY).wants_listing
    assert RunConfig(apikey=API_KEY, database="db1", query="SELECT 1", info=True).wants_listing
    assert not RunConfig(apikey=API_KEY, database="db1", query="SELECT 1").wants_listing


def test_load_config_missing_file(tmp_path, capsys):
    assert load_config(str(tmp_path / "nope.conf")) == {}
    assert "Config file not found" in capsys.readouterr().out


def test_load_config_without_section(tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text("[other]\napikey = x\n")
    assert load_config(str(config_file)) == {}


def test_load_config_bad_number(tmp_path):
    config_file = tmp_path / "td.conf"
    config_file.write_text("[account]\npoll_interval = soon\n")
    with pytest.raises(ConfigError):
        load_config(str(config_file))


def test_display_databases():
    client = MagicMock()
    client.list_tables.return_value = decode_tables(TABLE_LIST)
    output = io.StringIO()
    console = Console(file=output, width=200, color_system=None)

    display_databases(client, DATABASES, console=console)

    text = output.getvalue()
    client.list_tables.assert_called_once_with("db1")
    assert "DATABASE: db1" in text
    assert "Record Count: 5" in text
    assert "Created At: 2020-01-02 03:04:05 UTC" in text
    assert "www_access" in text
    assert "uid:string, cnt:int" in text
    assert "broken" in text


def test_display_database_without_tables():
    client = MagicMock()
    client.list_tables.return_value = []
    output = io.StringIO()

    display_databases(client, DATABASES, console=Console(file=output, width=200, color_system=None))

    assert "(no tables)" in output.getvalue()


def test_display_job_status():
    output = io.StringIO()

    display_job_status(JobStatus.from_dict(JOB_STATUS_SUCCESS),
                       console=Console(file=output, width=200, color_system=None))

    text = output.getvalue()
    assert "Status: success" in text
    assert "Ended At: 2020-01-02 03:05:00 UTC" in text
