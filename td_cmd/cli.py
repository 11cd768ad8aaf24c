#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Command line interface for Treasure Data.
"""
import os
import sys
from dataclasses import dataclass

import click
import requests

from td_cmd.client import ENDPOINT, TreasureDataClient
from td_cmd.display import display_databases
from td_cmd.errors import ConfigError, TDError
from td_cmd.query_handler import handle_query
from td_cmd.utils import configure_logging, get_default_config_file, load_config


APIKEY_ENV = "TREASURE_DATA_API_KEY"


@dataclass
class RunConfig:
    """Settings for one invocation of td-cmd."""

    apikey: str
    database: str = None
    query: str = None
    info: bool = False
    endpoint: str = ENDPOINT
    result_format: str = "tsv"
    priority: int = None
    output: str = None
    wait: bool = True
    poll_interval: float = 1.0
    debug: bool = False

    @property
    def wants_listing(self):
        return self.info or not self.database or not self.query


def run(config, client=None):
    """Run td-cmd with the given settings.

    Databases are always listed first. The listing is displayed when
    config.info is set or no database and query were given; otherwise the
    query is run and its result printed.

    Args:
        config (RunConfig): Resolved settings
        client (TreasureDataClient, optional): Client to use instead of
                                               building one from config

    Returns:
        int: Process exit code
    """
    owns_client = client is None
    if owns_client:
        client = TreasureDataClient(config.apikey, endpoint=config.endpoint, debug=config.debug)

    try:
        databases = client.list_databases()

        if config.wants_listing:
            display_databases(client, databases)
        else:
            handle_query(
                client,
                config.database,
                config.query,
                result_format=config.result_format,
                priority=config.priority,
                wait=config.wait,
                poll_interval=config.poll_interval,
                output_file=config.output,
            )
    except (TDError, requests.exceptions.RequestException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled by user.", file=sys.stderr)
        return 130
    finally:
        if owns_client:
            client.close()
    return 0


@click.command()
@click.option("--info", "-i", is_flag=True, help="Show information about databases and tables")
@click.option("--database", "-d", default=None, help="Database to run the query against")
@click.option("--query", "-q", default=None, help="Hive query string")
@click.option("--apikey", envvar=APIKEY_ENV, default=None, help=f"API key (default: ${APIKEY_ENV})")
@click.option("--endpoint", default=None, help="API endpoint URL")
@click.option("--config", help="Path to configuration file")
@click.option("--format", "result_format", default=None, help="Result format: tsv, csv, json (default: tsv)")
@click.option("--priority", type=int, default=None, help="Job priority")
@click.option("--output", "-o", help="Write the query result to a file")
@click.option("--no-wait", is_flag=True, help="Fetch the result without waiting for the job to finish")
@click.option("--poll-interval", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds between job status checks")
@click.option("--debug", is_flag=True, help="Copy raw API responses to stderr")
@click.option("--verbose", "-v", is_flag=True, help="Log HTTP requests")
def main(info, database, query, apikey, endpoint, config, result_format, priority, output,
         no_wait, poll_interval, debug, verbose):
    """Treasure Data command line interface."""
    configure_logging(verbose)

    if config is None and os.path.exists(get_default_config_file()):
        config = get_default_config_file()

    # Load config file if specified
    config_params = {}
    if config:
        try:
            config_params = load_config(config)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    # Apply values with precedence: command line > config file > defaults
    apikey = apikey or config_params.get('apikey')
    if not apikey:
        print(f"td-cmd: set ${APIKEY_ENV}", file=sys.stderr)
        sys.exit(1)

    run_config = RunConfig(
        apikey=apikey,
        database=database,
        query=query,
        info=info,
        endpoint=endpoint or config_params.get('endpoint', ENDPOINT),
        result_format=result_format or config_params.get('format', "tsv"),
        priority=priority,
        output=output,
        wait=not no_wait,
        poll_interval=poll_interval if poll_interval is not None else config_params.get('poll_interval', 1.0),
        debug=debug,
    )
    sys.exit(run(run_config))


if __name__ == "__main__":
    main()
