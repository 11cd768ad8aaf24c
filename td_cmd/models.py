#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Records decoded from Treasure Data API responses.

Every record is built from a decoded JSON object through its ``from_dict``
classmethod and is read-only afterwards. Missing or null fields take the
zero value of their type; fields of the wrong type raise DecodeError.
"""
import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from td_cmd.errors import DecodeError


# Tried in order, first match wins
TIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S UTC",
    "%Y-%m-%dT%H:%M:%SZ",
)

_FRACTION = re.compile(r"(:\d{2})\.(\d+)(?=(?: UTC|Z)$)")

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

FINISHED_STATUSES = ("success", "error", "killed")


@dataclass(frozen=True)
class TDTime:
    """A point in time as reported by the API, always in UTC."""

    value: datetime = ZERO_TIME

    @classmethod
    def from_json(cls, raw):
        """Decode a timestamp from its JSON value.

        Args:
            raw: The decoded JSON value, a string or None

        Returns:
            TDTime: The parsed time, or the zero time for "" and null

        Raises:
            DecodeError: If the value is not a string in a known format
        """
        if raw is None or raw == "":
            return cls()
        if not isinstance(raw, str):
            raise DecodeError("Timestamp must be a string, got {!r}".format(raw))

        text, microsecond = _split_fraction(raw)
        for time_format in TIME_FORMATS:
            try:
                parsed = datetime.strptime(text, time_format)
            except ValueError:
                continue
            return cls(parsed.replace(microsecond=microsecond, tzinfo=timezone.utc))
        raise DecodeError("Unrecognized timestamp: {!r}".format(raw))

    def to_datetime(self):
        return self.value

    def is_zero(self):
        return self.value == ZERO_TIME

    def __str__(self):
        # strftime does not zero-pad years below 1000 on every platform
        v = self.value
        return "{:04d}-{:02d}-{:02d} {:02d}:{:02d}:{:02d} UTC".format(
            v.year, v.month, v.day, v.hour, v.minute, v.second
        )


def _split_fraction(raw):
    """Remove fractional seconds, which both formats accept after the seconds field.

    Returns:
        tuple: (text without the fraction, microseconds)
    """
    match = _FRACTION.search(raw)
    if not match:
        return raw, 0
    digits = match.group(2)
    # Sub-microsecond digits are truncated
    microsecond = int(digits[:6].ljust(6, "0"))
    return raw[:match.start()] + match.group(1) + raw[match.end():], microsecond


@dataclass(frozen=True)
class Column:
    name: str
    type: str


class TDSchema(str):
    """A table schema as delivered by the API: a string holding a JSON array.

    The string looks like ``[["uid","string"],["cnt","int"]]`` and is only
    decoded when ``columns()`` is called.
    """

    def columns(self):
        """Decode the schema into its columns.

        Returns:
            list: Column records in declaration order, or an empty list
                  if the schema is malformed
        """
        try:
            cells = json.loads(self)
        except ValueError:
            return []
        if not isinstance(cells, list):
            return []

        columns = []
        for cell in cells:
            if (not isinstance(cell, list) or len(cell) < 2
                    or not all(isinstance(c, str) for c in cell)):
                return []
            columns.append(Column(cell[0], cell[1]))
        return columns


def _ensure_object(data, what):
    if not isinstance(data, dict):
        raise DecodeError("Expected a JSON object for {}, got {}".format(what, type(data).__name__))
    return data


def _get_str(data, key):
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError("Field '{}' must be a string, got {!r}".format(key, value))
    return value


def _get_int(data, key):
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError("Field '{}' must be an integer, got {!r}".format(key, value))
    return value


def _get_time(data, key):
    return TDTime.from_json(data.get(key))


def _get_list(data, key):
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError("Field '{}' must be an array, got {!r}".format(key, value))
    return value


@dataclass(frozen=True)
class Database:
    name: str
    count: int
    created_at: TDTime

    @classmethod
    def from_dict(cls, data):
        _ensure_object(data, "database")
        return cls(
            name=_get_str(data, "name"),
            count=_get_int(data, "count"),
            created_at=_get_time(data, "created_at"),
        )


@dataclass(frozen=True)
class Table:
    id: int
    name: str
    schema: TDSchema
    estimated_storage_size: int
    counter_updated_at: TDTime
    type: str
    count: int
    created_at: TDTime
    updated_at: TDTime

    @classmethod
    def from_dict(cls, data):
        _ensure_object(data, "table")
        return cls(
            id=_get_int(data, "id"),
            name=_get_str(data, "name"),
            schema=TDSchema(_get_str(data, "schema")),
            estimated_storage_size=_get_int(data, "estimated_storage_size"),
            counter_updated_at=_get_time(data, "counter_updated_at"),
            type=_get_str(data, "type"),
            count=_get_int(data, "count"),
            created_at=_get_time(data, "created_at"),
            updated_at=_get_time(data, "updated_at"),
        )

    def columns(self):
        return self.schema.columns()


@dataclass(frozen=True)
class Job:
    job_id: str
    database: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data):
        _ensure_object(data, "job")
        return cls(
            job_id=_get_str(data, "job_id"),
            database=_get_str(data, "database"),
            type=_get_str(data, "type"),
        )


@dataclass(frozen=True)
class JobStatus:
    job_id: str
    status: str
    created_at: TDTime
    updated_at: TDTime
    start_at: TDTime
    end_at: TDTime = None

    @classmethod
    def from_dict(cls, data):
        _ensure_object(data, "job status")
        end_at = data.get("end_at")
        return cls(
            job_id=_get_str(data, "job_id"),
            status=_get_str(data, "status"),
            created_at=_get_time(data, "created_at"),
            updated_at=_get_time(data, "updated_at"),
            start_at=_get_time(data, "start_at"),
            end_at=None if end_at is None else TDTime.from_json(end_at),
        )

    @property
    def finished(self):
        return self.status in FINISHED_STATUSES

    @property
    def succeeded(self):
        return self.status == "success"


def decode_databases(payload):
    """Decode the body of ``/v3/database/list``."""
    _ensure_object(payload, "database list")
    return [Database.from_dict(item) for item in _get_list(payload, "databases")]


def decode_tables(payload):
    """Decode the body of ``/v3/table/list``."""
    _ensure_object(payload, "table list")
    return [Table.from_dict(item) for item in _get_list(payload, "tables")]
