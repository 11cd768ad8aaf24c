#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Exceptions raised by td-cmd.
"""


class TDError(Exception):
    """Base class for td-cmd errors."""


class APIError(TDError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code, message, path=None):
        self.status_code = status_code
        self.message = message
        self.path = path
        if path:
            text = "HTTP {} from {}: {}".format(status_code, path, message)
        else:
            text = "HTTP {}: {}".format(status_code, message)
        super().__init__(text)


class DecodeError(TDError, ValueError):
    """A response body could not be decoded."""


class JobFailedError(TDError):
    """A job finished with a status other than success."""

    def __init__(self, job_id, status):
        self.job_id = job_id
        self.status = status
        super().__init__("Job {} finished with status: {}".format(job_id, status))


class ConfigError(TDError, ValueError):
    """Configuration is missing or invalid."""
