#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Display utilities for td-cmd.
"""
from rich.console import Console
from rich.markup import escape
from rich.table import Table


def display_databases(client, databases, console=None):
    """Display databases with their tables and columns using rich.

    The tables of each database are fetched through the client.

    Args:
        client (TreasureDataClient): API client
        databases (list): Database records to display
        console (rich.console.Console, optional): Console to print to
    """
    console = console or Console()

    for database in databases:
        console.print(f"[bold]DATABASE:[/bold] {escape(database.name)}")
        console.print(f"  Record Count: {database.count}")
        console.print(f"  Created At: {database.created_at}")

        tables = client.list_tables(database.name)
        if not tables:
            console.print("  (no tables)\n")
            continue

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID")
        table.add_column("Table")
        table.add_column("Type")
        table.add_column("Records", justify="right")
        table.add_column("Columns")

        for td_table in tables:
            columns = ", ".join(f"{col.name}:{col.type}" for col in td_table.columns())
            table.add_row(
                str(td_table.id),
                escape(td_table.name),
                escape(td_table.type),
                str(td_table.count),
                escape(columns),
            )

        console.print(table)
        console.print()


def display_job_status(status, console=None):
    """Display the status of a job.

    Args:
        status (JobStatus): Job status to display
        console (rich.console.Console, optional): Console to print to
    """
    console = console or Console()

    console.print(f"Job ID: {status.job_id}")
    console.print(f"Status: {status.status}")
    console.print(f"Created At: {status.created_at}")
    if not status.start_at.is_zero():
        console.print(f"Started At: {status.start_at}")
    if status.end_at is not None:
        console.print(f"Ended At: {status.end_at}")
