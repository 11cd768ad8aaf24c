#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Export utilities for td-cmd.
"""


def export_job_result(client, job_id, result_format, output_file, append=False):
    """Write the result of a job to a file, one line at a time.

    The result is streamed, so large results never sit in memory.

    Args:
        client (TreasureDataClient): API client
        job_id (str): Job whose result is exported
        result_format (str): Result format, e.g. "tsv" or "csv"
        output_file (str): Path to the output file
        append (bool): Whether to append to an existing file

    Returns:
        int: Number of lines written
    """
    mode = 'a' if append else 'w'
    written = 0

    with open(output_file, mode, encoding='utf-8', newline='') as f:
        def write_line(line):
            nonlocal written
            f.write(line)
            f.write('\n')
            written += 1

        client.stream_job_result(job_id, result_format, write_line)

    return written
