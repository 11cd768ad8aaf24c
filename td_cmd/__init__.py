#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
td-cmd - A client library and command line tool for the Treasure Data REST API.

Features:
- List databases and tables with their column schemas
- Issue Hive queries and wait for the job to finish
- Stream job results line by line to stdout or a file
- Debug mode that mirrors raw API responses
"""

__version__ = "0.1.0"

__all__ = [
    "TreasureDataClient",
    "Database",
    "Table",
    "Column",
    "Job",
    "JobStatus",
    "TDTime",
    "TDSchema",
    "TDError",
    "APIError",
    "DecodeError",
    "JobFailedError",
    "JobProgressTracker",
    "main",
    "run",
    "RunConfig",
    "display_databases",
    "handle_query",
    "export_job_result",
]

from td_cmd.client import TreasureDataClient
from td_cmd.models import Database, Table, Column, Job, JobStatus, TDTime, TDSchema
from td_cmd.errors import TDError, APIError, DecodeError, JobFailedError
from td_cmd.progress import JobProgressTracker
from td_cmd.cli import main, run, RunConfig
from td_cmd.display import display_databases
from td_cmd.query_handler import handle_query
from td_cmd.export import export_job_result
