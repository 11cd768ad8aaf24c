#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Query handling utilities for td-cmd.
"""
from td_cmd.display import display_job_status
from td_cmd.errors import JobFailedError
from td_cmd.export import export_job_result
from td_cmd.progress import JobProgressTracker


def handle_query(client, database, query, result_format="tsv", priority=None,
                 wait=True, poll_interval=1.0, output_file=None, silent=False):
    """Run a Hive query and deliver its result.

    The query is issued, the job is awaited, and the result is streamed to
    stdout or into output_file.

    Args:
        client (TreasureDataClient): API client
        database (str): Database to run the query against
        query (str): Hive query text
        result_format (str): Result format requested from the API
        priority (int, optional): Job priority override
        wait (bool): Poll the job status until the job finishes before
                     fetching the result
        poll_interval (float): Seconds between status checks
        output_file (str, optional): Write result lines to this file
                                     instead of stdout
        silent (bool): Suppress progress output

    Returns:
        tuple: (job, status, line_count). status is None when wait is False.

    Raises:
        JobFailedError: If the job finished without succeeding
    """
    job = client.issue_hive_query(database, query, priority=priority)
    if not silent:
        print(f"Job {job.job_id} issued on database {database}")

    status = None
    if wait:
        tracker = JobProgressTracker(client, job.job_id, poll_interval=poll_interval, silent=silent)
        status = tracker.wait()
        if not status.succeeded:
            raise JobFailedError(job.job_id, status.status)
        if not silent:
            display_job_status(status)
            print(f"Job Time: {tracker.get_total_runtime():.2f}s")

    if output_file:
        line_count = export_job_result(client, job.job_id, result_format, output_file)
        if not silent:
            print(f"Job result exported to: {output_file} ({line_count} lines)")
        return job, status, line_count

    line_count = 0

    def print_line(line):
        nonlocal line_count
        print(line)
        line_count += 1

    client.stream_job_result(job.job_id, result_format, print_line)
    return job, status, line_count
