#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
HTTP client for the Treasure Data REST API.
"""
import codecs
import json
import logging
import sys
from urllib.parse import quote

import requests

from td_cmd.errors import APIError, DecodeError
from td_cmd.models import Job, JobStatus, decode_databases, decode_tables


ENDPOINT = "https://api.treasure-data.com"
CHUNK_SIZE = 8192

log = logging.getLogger(__name__)


def escape(value):
    """Percent-escape a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def split_lines(chunks):
    """Rebuild lines from a stream of byte chunks.

    Lines end with a newline, and an optional carriage return before it is
    dropped too. A final line without a newline is still yielded.

    Args:
        chunks (iterable): Byte strings in stream order

    Yields:
        bytes: Each line without its line terminator
    """
    # Fragments of the current line, joined once its newline arrives
    fragments = []
    for chunk in chunks:
        if not chunk:
            continue
        parts = chunk.split(b"\n")
        if len(parts) == 1:
            fragments.append(chunk)
            continue
        fragments.append(parts[0])
        yield _strip_cr(b"".join(fragments))
        for line in parts[1:-1]:
            yield _strip_cr(line)
        fragments = [parts[-1]] if parts[-1] else []
    pending = b"".join(fragments)
    if pending:
        yield _strip_cr(pending)


def _strip_cr(line):
    if line.endswith(b"\r"):
        return line[:-1]
    return line


class TreasureDataClient:
    """Client for the Treasure Data ``/v3`` API."""

    def __init__(self, apikey, session=None, endpoint=ENDPOINT, debug=False,
                 debug_stream=None, timeout=None):
        """Initialize a client.

        Args:
            apikey (str): API key sent with every request
            session (requests.Session, optional): Transport to use. A new
                session is created and owned by the client when omitted.
            endpoint (str): Base URL of the API
            debug (bool): Copy every response body to debug_stream as it is read
            debug_stream (file, optional): Text stream for debug output,
                stderr when omitted
            timeout (float, optional): Per-request timeout in seconds
        """
        self.apikey = apikey
        self.endpoint = endpoint.rstrip("/")
        self.debug = debug
        self.debug_stream = debug_stream
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the HTTP session if the client created it."""
        if self._owns_session:
            self.session.close()

    def list_databases(self):
        """List the databases visible to the API key.

        Returns:
            list: Database records in the order the API returned them
        """
        payload = self._get_json("GET", "/v3/database/list")
        return decode_databases(payload)

    def list_tables(self, database):
        """List the tables of a database.

        Args:
            database (str): Database name

        Returns:
            list: Table records
        """
        payload = self._get_json("GET", "/v3/table/list/" + escape(database))
        return decode_tables(payload)

    def issue_hive_query(self, database, query, priority=None):
        """Submit a Hive query job.

        Args:
            database (str): Database to run the query against
            query (str): Hive query text
            priority (int, optional): Job priority override

        Returns:
            Job: The submitted job
        """
        form = {"query": query}
        if priority is not None:
            form["priority"] = str(int(priority))
        payload = self._get_json("POST", "/v3/job/issue/hive/" + escape(database), data=form)
        return Job.from_dict(payload)

    def get_job_status(self, job_id):
        """Fetch the status of a job.

        Args:
            job_id (str): Job identifier

        Returns:
            JobStatus: Current status of the job
        """
        payload = self._get_json("GET", "/v3/job/status/" + escape(job_id))
        return JobStatus.from_dict(payload)

    def stream_job_result(self, job_id, result_format, callback):
        """Stream the result of a job line by line.

        The callback receives each line as text without its newline.
        Returning False from the callback stops reading; this is a normal
        return, not an error.

        Args:
            job_id (str): Job identifier
            result_format (str): Result format, e.g. "tsv", "csv" or "json"
            callback (callable): Called with each line
        """
        lines = self.iter_job_result(job_id, result_format)
        try:
            for line in lines:
                if callback(line) is False:
                    log.debug("Result stream for job %s stopped by callback", job_id)
                    break
        finally:
            lines.close()

    def iter_job_result(self, job_id, result_format):
        """Iterate over the result lines of a job.

        The request is sent on the first iteration. The response is
        released when the iterator is exhausted or closed.

        Args:
            job_id (str): Job identifier
            result_format (str): Result format, e.g. "tsv", "csv" or "json"

        Yields:
            str: Each line without its newline
        """
        path = "/v3/job/result/" + escape(job_id)
        response = self._request("GET", path, params={"format": result_format})
        body = self._iter_body(response)
        try:
            if not _is_success(response):
                self._raise_for_status(response, path, b"".join(body))
            for line in split_lines(body):
                yield line.decode("utf-8", errors="replace")
        finally:
            body.close()
            response.close()

    def _request(self, method, path, params=None, data=None):
        log.debug("%s %s", method, path)
        response = self.session.request(
            method,
            self.endpoint + path,
            headers={"Authorization": "TD1 " + self.apikey},
            params=params,
            data=data,
            stream=True,
            timeout=self.timeout,
        )
        log.debug("%s %s -> HTTP %s", method, path, response.status_code)
        return response

    def _get_json(self, method, path, data=None):
        response = self._request(method, path, data=data)
        try:
            body = b"".join(self._iter_body(response))
        finally:
            response.close()

        if not _is_success(response):
            self._raise_for_status(response, path, body)
        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as e:
            raise DecodeError("Invalid JSON response from {}: {}".format(path, e)) from e

    def _iter_body(self, response):
        chunks = response.iter_content(chunk_size=CHUNK_SIZE)
        if not self.debug:
            return chunks
        return self._tee(chunks)

    def _tee(self, chunks):
        stream = self.debug_stream or sys.stderr
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            for chunk in chunks:
                stream.write(decoder.decode(chunk))
                yield chunk
        finally:
            stream.write(decoder.decode(b"", final=True))
            stream.flush()

    @staticmethod
    def _raise_for_status(response, path, body):
        message = body.decode("utf-8", errors="replace").strip()
        try:
            payload = json.loads(message)
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error") or message
        if len(message) > 200:
            message = message[:197] + "..."
        raise APIError(response.status_code, message or response.reason or "", path=path)


def _is_success(response):
    return 200 <= response.status_code < 300
